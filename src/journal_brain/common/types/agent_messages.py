# conversation history entries exchanged between the agent kernel and the LLM client
# NOTE: messages are immutable once appended, history is append-only for a run

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

class UserMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["user"] = "user"
    content: str

class AssistantMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["assistant"] = "assistant"
    content: str

class ToolCallMessage(BaseModel):
    """The model asked for a tool to be run."""
    model_config = ConfigDict(frozen=True)

    type: Literal["tool_call"] = "tool_call"
    call_id: str
    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)

class ToolResultMessage(BaseModel):
    """Result of a tool call, content is a JSON-serialized string."""
    model_config = ConfigDict(frozen=True)

    type: Literal["tool_result"] = "tool_result"
    call_id: str
    name: str
    content: str

AgentMessage = Annotated[
    Union[UserMessage, AssistantMessage, ToolCallMessage, ToolResultMessage],
    Field(discriminator="type"),
]
