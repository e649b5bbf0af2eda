from datetime import datetime, timezone

import pytest

from journal_brain.memory.retrieval.results import (
    Confidence,
    EmptyResult,
    Provenance,
    RankedItem,
    RetrieveResult,
    ScoreComponents,
    SimilarityStats,
    build_result_preview,
    is_retrieve_payload,
    median,
)

def ranked(item_id: str, day: int, text: str = "text", similarity: float | None = None) -> RankedItem:
    return RankedItem(
        id=item_id,
        date=datetime(2025, 3, day, tzinfo=timezone.utc),
        text=text,
        score=0.123456,
        components=ScoreComponents(similarity=similarity, recency_decay=0.98765),
        provenance=Provenance(source="chunks", entry_id="e", chunk_id=item_id),
    )

def test_item_json_rounds_scores_to_three_decimals():
    payload = ranked("c1", 1, similarity=0.55555).to_json()
    assert payload["score"] == 0.123
    assert payload["scoreComponents"] == {"similarity": 0.556, "recencyDecay": 0.988}

def test_build_derives_metadata():
    result = RetrieveResult.build([ranked("c1", 1, similarity=0.5), ranked("c2", 11, similarity=0.7)])
    metadata = result.to_json()["metadata"]
    assert metadata["count"] == 2
    assert metadata["dateRange"] == {"start": "2025-03-01T00:00:00Z", "end": "2025-03-11T00:00:00Z", "spanDays": 10}
    assert metadata["similarityStats"]["median"] == pytest.approx(0.6)
    assert metadata["similarityStats"]["iqr"] == [0.0, 0.0]

def test_similarity_stats_quartiles_by_index():
    stats = SimilarityStats.from_similarities([0.9, 0.1, 0.5, 0.3, 0.7, 0.2, 0.8, 0.4])
    assert stats.iqr == (0.3, 0.8)
    assert stats.min == 0.1 and stats.max == 0.9
    assert SimilarityStats.from_similarities([]) is None

def test_median():
    assert median([3.0, 1.0, 2.0]) == 2.0
    assert median([4.0, 1.0, 3.0, 2.0]) == 2.5

@pytest.mark.parametrize(
    "count, median_similarity, span_days, expected",
    [
        (60, 0.7, 30, Confidence.HIGH),
        (60, 0.7, 0, Confidence.MEDIUM),
        (60, None, 30, Confidence.LOW),
        (10, 0.4, None, Confidence.MEDIUM),
        (9, 0.9, 30, Confidence.LOW),
    ],
)
def test_confidence(count, median_similarity, span_days, expected):
    assert Confidence.compute(count, median_similarity, span_days) == expected

def test_payload_detection():
    assert is_retrieve_payload({"items": [], "metadata": {}})
    assert not is_retrieve_payload(EmptyResult(reason="none").to_json())
    assert not is_retrieve_payload({"items": []})
    assert not is_retrieve_payload(["items", "metadata"])

def test_preview_keeps_two_items_and_truncates_text():
    long_text = "x" * 400
    payload = RetrieveResult.build([ranked("c1", 1, long_text), ranked("c2", 2, "short"), ranked("c3", 3)]).to_json()
    preview = build_result_preview("retrieve_7", payload)

    assert preview["resultId"] == "retrieve_7"
    assert preview["count"] == 3
    assert preview["metadata"] == payload["metadata"]
    assert preview["summary"] == "Retrieved 3 items from Mar 1, 2025 to Mar 3, 2025"
    assert len(preview["preview"]) == 2
    assert preview["preview"][0]["textPreview"] == "x" * 150 + "..."
    assert preview["preview"][1]["textPreview"] == "short"
    assert "retrieve_7" in preview["note"]

def test_preview_of_empty_payload():
    preview = build_result_preview("retrieve_1", RetrieveResult.build([]).to_json())
    assert preview["summary"] == "Retrieved 0 items"
    assert preview["preview"] == []
