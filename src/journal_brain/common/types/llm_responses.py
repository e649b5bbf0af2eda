# normalized output of a tool-calling LLM turn, provider independent

from typing import Any, Optional

from pydantic import BaseModel, Field

class ToolCallRequest(BaseModel):
    id: str
    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)

class LLMToolResponse(BaseModel):
    """
    One model turn: optional text and zero or more tool calls, in the order requested.
    """
    text: Optional[str] = None
    tool_calls: list[ToolCallRequest] = Field(default_factory=list)

    @property
    def has_tool_calls(self) -> bool:
        return len(self.tool_calls) > 0
