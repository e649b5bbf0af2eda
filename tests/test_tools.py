import pytest

from journal_brain.agent_service.common.types.llm_outputs.analysis_outputs import (
    ActionSynthesisOutput,
    SuggestedAction,
    LifelongPatternsOutput,
    LifelongPattern,
)
from journal_brain.agent_service.tools.analyze_tool import AnalyzeTool
from journal_brain.agent_service.tools.context_bundle_tool import ContextBundleTool, determine_trend, shift_month
from journal_brain.agent_service.tools.memory_write_tool import MemoryWriteTool
from journal_brain.agent_service.tools.retrieve_tool import RetrieveTool
from journal_brain.common.errors import InvalidQuery, InvalidToolArguments, ResultNotFound
from journal_brain.memory.storage.records import MemoryConfidence, MemoryKind
from tests.fakes import NOW, ScriptedLLMClient

def fixed_clock():
    return NOW

# =====================================================================
# retrieve
# =====================================================================

@pytest.mark.asyncio
async def test_retrieve_tool_returns_serialized_result(retrieval_service):
    tool = RetrieveTool(retrieval_service, clock=fixed_clock)
    payload = await tool.execute({"scope": "chunks", "sort": "date_desc", "limit": 1})
    assert payload["metadata"]["count"] == 1
    assert payload["items"][0]["id"] == "c6"

@pytest.mark.asyncio
async def test_retrieve_tool_returns_empty_payload(retrieval_service):
    tool = RetrieveTool(retrieval_service, clock=fixed_clock)
    payload = await tool.execute({"scope": "chunks", "filter": {"entities": ["nobody"]}})
    assert payload["empty"] is True
    assert payload["reason"]

@pytest.mark.asyncio
async def test_retrieve_tool_rejects_bad_arguments(retrieval_service):
    tool = RetrieveTool(retrieval_service, clock=fixed_clock)
    with pytest.raises(InvalidQuery):
        await tool.execute({"scope": "chunks", "limit": 201})

# =====================================================================
# memory_write
# =====================================================================

@pytest.mark.asyncio
async def test_memory_write_saves_and_confirms(store):
    tool = MemoryWriteTool(store, clock=fixed_clock)
    payload = await tool.execute({
        "kind": "rule",
        "content": "Sleep before midnight on work nights.",
        "tags": ["health", "sleep"],
        "relatedIds": ["c5"],
    })
    assert payload["success"] is True
    assert payload["kind"] == "rule"
    assert payload["confidence"] == "medium"
    assert payload["createdAt"] == "2025-06-15T12:00:00Z"
    assert payload["message"] == "Memory saved successfully. This rule will be available in future conversations."

    saved = await store.get_memory(payload["memoryId"])
    assert saved.kind == MemoryKind.RULE
    assert saved.related_ids == ["c5"]
    assert saved.confidence == MemoryConfidence.MEDIUM

@pytest.mark.asyncio
@pytest.mark.parametrize(
    "arguments",
    [
        {"kind": "rule"},
        {"kind": "rule", "content": "   "},
        {"kind": "wish", "content": "something"},
        {"content": "something"},
        {"kind": "insight", "content": "something", "tags": "health"},
    ],
)
async def test_memory_write_rejects_invalid_arguments(store, arguments):
    with pytest.raises(InvalidToolArguments):
        await MemoryWriteTool(store, clock=fixed_clock).execute(arguments)

# =====================================================================
# analyze
# =====================================================================

def action_output() -> ActionSynthesisOutput:
    return ActionSynthesisOutput(actions=[
        SuggestedAction(
            action="Block two evenings without work",
            category="work",
            first_step="Put the blocks in the calendar",
            why_it_matters="Late nights at work keep showing up before low days",
            estimated_minutes=20,
            impact="high",
            urgency="medium",
        ),
    ])

@pytest.mark.asyncio
async def test_analyze_resolves_cached_results(retrieval_service, result_cache):
    payload = await RetrieveTool(retrieval_service, clock=fixed_clock).execute({"scope": "chunks", "limit": 50})
    result_id = result_cache.store(payload)
    llm = ScriptedLLMClient(structured=[action_output()])
    tool = AnalyzeTool(llm, result_cache, model="fake-model")

    result = await tool.execute({"op": "action_synthesis", "inputs": [result_id], "config": {"maxItems": 3}})

    assert result["op"] == "action_synthesis"
    assert result["results"][0]["action"] == "Block two evenings without work"
    assert result["results"][0]["firstStep"] == "Put the blocks in the calendar"
    assert result["metadata"]["model"] == "fake-model"
    assert result["metadata"]["confidence"] == "medium"
    assert result["metadata"]["executionTime"].endswith("s")
    # the journal text reached the model
    assert "quarterly report" in llm.create_calls[0]["user_prompt"]
    assert llm.create_calls[0]["response_model"] is ActionSynthesisOutput

@pytest.mark.asyncio
async def test_analyze_accepts_inline_payloads(result_cache):
    pattern = LifelongPattern(
        pattern="Work stress before deadlines",
        first_seen="2023-01-10",
        last_seen="2025-06-12",
        occurrences=6,
        span_months=29,
        confidence="medium",
        supporting_evidence_count=8,
    )
    llm = ScriptedLLMClient(structured=[LifelongPatternsOutput(patterns=[pattern])])
    inline = {"items": [{"id": "c1", "date": "2023-01-10T00:00:00Z", "text": "deadline again"}], "metadata": {"count": 1}}

    result = await AnalyzeTool(llm, result_cache).execute({"op": "lifelong_patterns", "inputs": [inline]})

    assert result["results"][0]["firstSeen"] == "2023-01-10"
    assert result["results"][0]["spanMonths"] == 29
    assert result["metadata"]["confidence"] == "low"

@pytest.mark.asyncio
async def test_analyze_unknown_result_id(result_cache):
    tool = AnalyzeTool(ScriptedLLMClient(), result_cache)
    with pytest.raises(ResultNotFound) as exc_info:
        await tool.execute({"op": "decision_matrix", "inputs": ["retrieve_99"]})
    assert exc_info.value.result_id == "retrieve_99"

@pytest.mark.asyncio
async def test_analyze_unknown_operation(result_cache):
    tool = AnalyzeTool(ScriptedLLMClient(), result_cache)
    with pytest.raises(InvalidToolArguments) as exc_info:
        await tool.execute({"op": "horoscope", "inputs": []})
    assert "Unknown operation: 'horoscope'. Available: lifelong_patterns, decision_matrix, action_synthesis" in str(exc_info.value)

@pytest.mark.asyncio
async def test_analyze_invalid_config(result_cache):
    tool = AnalyzeTool(ScriptedLLMClient(), result_cache)
    with pytest.raises(InvalidToolArguments):
        await tool.execute({"op": "action_synthesis", "inputs": [], "config": {"maxItems": 50}})

# =====================================================================
# context_bundle
# =====================================================================

def test_trend_threshold():
    assert determine_trend(50.0, 56.0) == "increasing"
    assert determine_trend(50.0, 44.0) == "decreasing"
    assert determine_trend(50.0, 54.0) == "stable"
    assert determine_trend(None, 54.0) == "unknown"

def test_shift_month_crosses_years():
    assert shift_month(2025, 6, 0) == (2025, 6)
    assert shift_month(2025, 6, 6) == (2024, 12)
    assert shift_month(2025, 1, 13) == (2023, 12)

@pytest.mark.asyncio
async def test_context_bundle_shape(retrieval_service, store):
    bundle = await ContextBundleTool(retrieval_service, clock=fixed_clock).execute({})

    timeline = bundle["recentTimeline"]
    assert timeline["days"] == 60
    assert timeline["dateRange"] == ["2025-04-16T12:00:00Z", "2025-06-15T12:00:00Z"]
    assert timeline["entryCount"] == 5
    assert timeline["analytics"]["happiness"] == {"avg": 63.0, "trend": "increasing"}
    assert timeline["analytics"]["stress"] == {"avg": 73.4, "trend": "stable"}
    assert timeline["analytics"]["energy"]["trend"] == "increasing"

    months = [summary["month"] for summary in bundle["historicalSummaries"]]
    assert months == ["2025-06", "2025-05", "2024-01"]
    assert bundle["historicalSummaries"][0]["narrative"].endswith("...")
    assert len(bundle["historicalSummaries"][0]["narrative"]) == 203

    assert [memory["id"] for memory in bundle["savedMemories"]] == ["mem-3", "mem-2", "mem-1"]
    assert (await store.get_memory("mem-3")).access_count == 1

    assert bundle["metadata"] == {
        "totalAnalytics": 5,
        "totalSummaries": 3,
        "totalMemories": 3,
        "loadedAt": "2025-06-15T12:00:00Z",
    }

@pytest.mark.asyncio
async def test_context_bundle_options(retrieval_service, store):
    bundle = await ContextBundleTool(retrieval_service, clock=fixed_clock).execute(
        {"recentDays": 7, "historyMonths": 1, "includeMemory": False}
    )
    assert bundle["recentTimeline"]["entryCount"] == 2
    assert [s["month"] for s in bundle["historicalSummaries"]] == ["2025-06"]
    assert bundle["savedMemories"] == []
    assert (await store.get_memory("mem-3")).access_count == 0

@pytest.mark.asyncio
async def test_context_bundle_without_analytics(retrieval_service):
    bundle = await ContextBundleTool(retrieval_service, clock=fixed_clock).execute({"recentDays": 1})
    assert bundle["recentTimeline"]["entryCount"] == 0
    assert bundle["recentTimeline"]["analytics"]["happiness"] == {"avg": 0, "trend": "unknown"}

@pytest.mark.asyncio
@pytest.mark.parametrize(
    "arguments",
    [
        {"recentDays": 0},
        {"recentDays": 2.5},
        {"recentDays": float("inf")},
        {"historyMonths": float("nan")},
        {"historyMonths": "many"},
        {"recentDays": True},
        {"includeMemory": "yes"},
    ],
)
async def test_context_bundle_rejects_invalid_arguments(retrieval_service, arguments):
    with pytest.raises(InvalidToolArguments):
        await ContextBundleTool(retrieval_service, clock=fixed_clock).execute(arguments)
