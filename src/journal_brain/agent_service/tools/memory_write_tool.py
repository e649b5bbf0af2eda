# memory_write tool: persists an agent note for future conversations

from datetime import datetime
from typing import Any, Callable

from journal_brain.agent_service.tools.base import AgentTool
from journal_brain.agent_service.common.tool_calling_declarations.memory_write import memory_write_declaration
from journal_brain.common.errors import InvalidToolArguments
from journal_brain.common.utils.time_utils import utc_now, isoformat
from journal_brain.memory.storage.protocols import CorpusStore
from journal_brain.memory.storage.records import AgentMemoryRecord, MemoryKind, MemoryConfidence

def _string_list(arguments: dict[str, Any], key: str) -> list[str]:
    value = arguments.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise InvalidToolArguments(f"'{key}' must be an array of strings")
    return value

class MemoryWriteTool(AgentTool):
    declaration = memory_write_declaration

    def __init__(self, store: CorpusStore, clock: Callable[[], datetime] = utc_now):
        self.store = store
        self.clock = clock

    async def execute(self, arguments: dict[str, Any]) -> Any:
        try:
            kind = MemoryKind(arguments.get("kind"))
        except ValueError:
            raise InvalidToolArguments("Invalid or missing 'kind' parameter")

        content = arguments.get("content")
        if not isinstance(content, str) or not content.strip():
            raise InvalidToolArguments("Missing or empty 'content' parameter")

        try:
            confidence = MemoryConfidence(arguments.get("confidence") or MemoryConfidence.MEDIUM.value)
        except ValueError:
            confidence = MemoryConfidence.MEDIUM

        memory = AgentMemoryRecord(
            kind=kind,
            content=content,
            tags=_string_list(arguments, "tags"),
            related_ids=_string_list(arguments, "relatedIds"),
            confidence=confidence,
            created_at=self.clock(),
        )
        await self.store.save_memory(memory)

        return {
            "success": True,
            "memoryId": memory.id,
            "kind": kind.value,
            "content": content,
            "tags": memory.tags,
            "confidence": confidence.value,
            "createdAt": isoformat(memory.created_at),
            "message": f"Memory saved successfully. This {kind.value} will be available in future conversations.",
        }
