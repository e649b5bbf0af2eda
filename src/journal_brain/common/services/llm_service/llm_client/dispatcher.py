# dispatcher for LLM clients, currently only Google Gemini, but scalable to other LLM providers

from enum import Enum, auto
from typing import Any, Sequence, Type, TypeVar
from pydantic import BaseModel
from .protocols import TypedLLMProtocol, ToolCallingLLMProtocol
from journal_brain.common.types.agent_messages import AgentMessage
from journal_brain.common.types.llm_responses import LLMToolResponse

PydanticModel = TypeVar("PydanticModel", bound=BaseModel)

# NOTE: to be expanded with more services if desired
class LLMProvider(Enum):
    GOOGLE_GENAI = auto() # just need a unique identifier

class TypedLLMClient:
    def __init__(self, provider: LLMProvider, client: TypedLLMProtocol | ToolCallingLLMProtocol):
        self.provider = provider
        self.client = client

    @property
    def model(self) -> str:
        return getattr(self.client, "model", "unknown")

    async def acreate(
        self,
        response_model: Type[PydanticModel],
        system_prompt: str,
        user_prompt: str,
        **kwargs
    ) -> PydanticModel:
        return await self.client.acreate( # type: ignore[union-attr]
            response_model=response_model,
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            **kwargs
        )

    async def acomplete(
        self,
        system_prompt: str,
        messages: Sequence[AgentMessage],
        tools: list[dict[str, Any]],
        **kwargs
    ) -> LLMToolResponse:
        return await self.client.acomplete( # type: ignore[union-attr]
            system_prompt=system_prompt,
            messages=messages,
            tools=tools,
            **kwargs
        )
