# ranked items + retrieve results, and their JSON shapes as seen by the model
# NOTE: JSON keys are camelCase and every score is rounded to 3 decimals

from datetime import datetime
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from journal_brain.common.utils.time_utils import ensure_utc, isoformat

PREVIEW_ITEM_COUNT = 2
PREVIEW_MAX_CHARS = 150

def _round(value: float) -> float:
    return round(value * 1000) / 1000

def _human_date(value: datetime) -> str:
    value = ensure_utc(value)
    return f"{value:%b} {value.day}, {value.year}"

class ScoreComponents(BaseModel):
    """Per-component scores, each in [0, 1]. A component is None when it didn't apply."""
    model_config = ConfigDict(frozen=True)

    similarity: Optional[float] = None
    recency_decay: Optional[float] = None
    keyword_match: Optional[float] = None
    magnitude: Optional[float] = None

    def to_json(self) -> dict[str, float]:
        json: dict[str, float] = {}
        if self.similarity is not None:
            json["similarity"] = _round(self.similarity)
        if self.recency_decay is not None:
            json["recencyDecay"] = _round(self.recency_decay)
        if self.keyword_match is not None:
            json["keywordMatch"] = _round(self.keyword_match)
        if self.magnitude is not None:
            json["magnitude"] = _round(self.magnitude)
        return json

class Provenance(BaseModel):
    model_config = ConfigDict(frozen=True)

    source: str # "chunks", "analytics", "summaries", "memory"
    entry_id: Optional[str] = None
    chunk_id: Optional[str] = None
    analytics_id: Optional[str] = None
    memory_id: Optional[str] = None
    summary_id: Optional[str] = None

    def to_json(self) -> dict[str, str]:
        json = {"source": self.source}
        for key, value in (
            ("entryId", self.entry_id),
            ("chunkId", self.chunk_id),
            ("analyticsId", self.analytics_id),
            ("memoryId", self.memory_id),
            ("summaryId", self.summary_id),
        ):
            if value is not None:
                json[key] = value
        return json

class RankedItem(BaseModel):
    """
    A scored search result with provenance.
    - `values` carries scalar payloads (e.g. metric stats) for items without text.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    date: datetime
    text: Optional[str] = None
    score: float
    components: ScoreComponents = Field(default_factory=ScoreComponents)
    provenance: Provenance
    values: Optional[dict[str, float]] = None

    def to_json(self) -> dict[str, Any]:
        json: dict[str, Any] = {
            "id": self.id,
            "date": isoformat(self.date),
            "score": _round(self.score),
        }
        if self.text is not None:
            json["text"] = self.text
        json["scoreComponents"] = self.components.to_json()
        json["provenance"] = self.provenance.to_json()
        if self.values:
            json["values"] = {key: _round(value) for key, value in self.values.items()}
        return json

# =====================================================================
# Metadata
# =====================================================================

class Confidence(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def compute(cls, count: int, median_similarity: Optional[float], span_days: Optional[int]) -> "Confidence":
        """
        - high: >= 50 items, median similarity >= 0.6, and results span more than a day
        - medium: >= 10 items and median similarity >= 0.4 (missing similarity counts as 0)
        - low: everything else
        """
        if count >= 50 and median_similarity is not None and median_similarity >= 0.6 and span_days is not None and span_days > 0:
            return cls.HIGH
        if count >= 10 and (median_similarity or 0.0) >= 0.4:
            return cls.MEDIUM
        return cls.LOW

class DateRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime
    span_days: int

    @classmethod
    def from_dates(cls, dates: list[datetime]) -> Optional["DateRange"]:
        if not dates:
            return None
        start, end = min(dates), max(dates)
        return cls(start=start, end=end, span_days=int((end - start).total_seconds() // 86400))

    def to_json(self) -> dict[str, Any]:
        return {"start": isoformat(self.start), "end": isoformat(self.end), "spanDays": self.span_days}

def median(values: list[float]) -> float:
    ordered = sorted(values)
    mid = len(ordered) // 2
    if len(ordered) % 2 == 0:
        return (ordered[mid - 1] + ordered[mid]) / 2
    return ordered[mid]

class SimilarityStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    median: float
    iqr: tuple[float, float]
    min: float
    max: float

    @classmethod
    def from_similarities(cls, similarities: list[float]) -> Optional["SimilarityStats"]:
        if not similarities:
            return None
        ordered = sorted(similarities)
        # quartiles by index, only meaningful with more than 3 samples
        if len(ordered) > 3:
            iqr = (ordered[len(ordered) // 4], ordered[(len(ordered) * 3) // 4])
        else:
            iqr = (0.0, 0.0)
        return cls(median=median(ordered), iqr=iqr, min=ordered[0], max=ordered[-1])

    def to_json(self) -> dict[str, Any]:
        return {
            "median": _round(self.median),
            "iqr": [_round(self.iqr[0]), _round(self.iqr[1])],
            "min": _round(self.min),
            "max": _round(self.max),
        }

class DataGap(BaseModel):
    """A period with no entries."""
    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime
    reason: str = "No entries in this period"

    @property
    def span_days(self) -> int:
        return int((self.end - self.start).total_seconds() // 86400)

    def to_json(self) -> dict[str, Any]:
        return {"start": isoformat(self.start), "end": isoformat(self.end), "reason": self.reason, "spanDays": self.span_days}

class RetrieveMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    count: int
    date_range: Optional[DateRange] = None
    similarity_stats: Optional[SimilarityStats] = None
    confidence: Confidence = Confidence.LOW
    gaps: list[DataGap] = Field(default_factory=list)

    def to_json(self) -> dict[str, Any]:
        json: dict[str, Any] = {"count": self.count, "confidence": self.confidence.value}
        if self.date_range is not None:
            json["dateRange"] = self.date_range.to_json()
        if self.similarity_stats is not None:
            json["similarityStats"] = self.similarity_stats.to_json()
        if self.gaps:
            json["gaps"] = [gap.to_json() for gap in self.gaps]
        return json

# =====================================================================
# Results
# =====================================================================

class RetrieveResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    items: list[RankedItem]
    metadata: RetrieveMetadata

    @classmethod
    def build(cls, items: list[RankedItem], gaps: Optional[list[DataGap]] = None) -> "RetrieveResult":
        """Builds a result and derives its metadata (date range, similarity stats, confidence)."""
        date_range = DateRange.from_dates([item.date for item in items])
        similarity_stats = SimilarityStats.from_similarities(
            [item.components.similarity for item in items if item.components.similarity is not None]
        )
        confidence = Confidence.compute(
            count=len(items),
            median_similarity=similarity_stats.median if similarity_stats else None,
            span_days=date_range.span_days if date_range else None,
        )
        metadata = RetrieveMetadata(
            count=len(items),
            date_range=date_range,
            similarity_stats=similarity_stats,
            confidence=confidence,
            gaps=list(gaps or []),
        )
        return cls(items=items, metadata=metadata)

    def to_json(self) -> dict[str, Any]:
        return {
            "items": [item.to_json() for item in self.items],
            "metadata": self.metadata.to_json(),
        }

    def to_summary_json(self, result_id: str) -> dict[str, Any]:
        return build_result_preview(result_id, self.to_json())

class EmptyResult(BaseModel):
    """Explicit no-data outcome, always carries a reason the model can act on."""
    model_config = ConfigDict(frozen=True)

    reason: str = "No results found"

    def to_json(self) -> dict[str, Any]:
        return {"empty": True, "reason": self.reason}

RetrieveOutcome = Union[RetrieveResult, EmptyResult]

def is_retrieve_payload(payload: Any) -> bool:
    """True for a serialized RetrieveResult (a dict carrying both items and metadata)."""
    return isinstance(payload, dict) and "items" in payload and "metadata" in payload

def build_result_preview(result_id: str, payload: dict[str, Any]) -> dict[str, Any]:
    """
    Lightweight stand-in for a cached retrieve payload, folded into the conversation instead
    of the full item list: count + metadata, a one-line summary, and the first 2 items with
    their text cut to 150 chars.
    """
    items = payload.get("items") or []
    metadata = payload.get("metadata") or {}
    count = metadata.get("count", len(items))

    preview: dict[str, Any] = {"resultId": result_id, "count": count, "metadata": metadata}

    date_range = metadata.get("dateRange")
    if date_range:
        start = datetime.fromisoformat(date_range["start"].replace("Z", "+00:00"))
        end = datetime.fromisoformat(date_range["end"].replace("Z", "+00:00"))
        preview["summary"] = f"Retrieved {count} items from {_human_date(start)} to {_human_date(end)}"
    else:
        preview["summary"] = f"Retrieved {count} items"

    preview_items = []
    for item in items[:PREVIEW_ITEM_COUNT]:
        entry: dict[str, Any] = {"id": item.get("id"), "date": item.get("date"), "score": item.get("score")}
        text = item.get("text")
        if text is not None:
            entry["textPreview"] = text[:PREVIEW_MAX_CHARS] + ("..." if len(text) > PREVIEW_MAX_CHARS else "")
        preview_items.append(entry)
    preview["preview"] = preview_items

    preview["note"] = f"Full data available via resultId '{result_id}'. Pass to analyze() to generate insights."
    return preview
