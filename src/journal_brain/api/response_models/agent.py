# agent response models

from typing import Any

from pydantic import BaseModel, Field

from journal_brain.common.types.agent_messages import AgentMessage

class AgentChatResponse(BaseModel):
    """
    Final answer for a user turn plus run metadata, and the updated history to send back next turn.
    """
    text: str
    tools_used: list[str]
    metadata: dict[str, Any]
    history: list[AgentMessage] = Field(default_factory=list)
