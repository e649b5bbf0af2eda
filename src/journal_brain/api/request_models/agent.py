# agent request bodies

from pydantic import BaseModel, Field

from journal_brain.common.types.agent_messages import AgentMessage

class AgentChatRequest(BaseModel):
    """
    One user turn. `history` is the message list returned by a previous turn, omitted for a new conversation.
    """
    message: str = Field(min_length=1)
    history: list[AgentMessage] = Field(default_factory=list)
