# protocols for LLM clients

from typing import Any, Protocol, Sequence, TypeVar, Type, runtime_checkable
from pydantic import BaseModel
from enum import Enum

from journal_brain.common.types.agent_messages import AgentMessage
from journal_brain.common.types.llm_responses import LLMToolResponse

PydanticModel = TypeVar("PydanticModel", bound=BaseModel)

# structured (JSON) output, used by the analyzers
class TypedLLMProtocol(Protocol):
    async def acreate(
        self,
        response_model: Type[PydanticModel],
        system_prompt: str,
        user_prompt: str,
        **kwargs
    ) -> PydanticModel: ...

# one tool-calling turn over the full conversation history, used by the agent kernel
class ToolCallingLLMProtocol(Protocol):
    async def acomplete(
        self,
        system_prompt: str,
        messages: Sequence[AgentMessage],
        tools: list[dict[str, Any]],
        **kwargs
    ) -> LLMToolResponse: ...

class RateLimitProvider(str, Enum):
    """Enumeration of supported rate limit providers."""
    GOOGLE = "google"

@runtime_checkable
class ProvidesProviderInfo(Protocol):
    """Optional protocol for exposing provider/model metadata for reporting."""
    provider: RateLimitProvider
    model: str
