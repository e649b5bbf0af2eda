# final output of an agent run

from typing import Any

from pydantic import BaseModel, Field

from journal_brain.common.types.agent_messages import AgentMessage

class TokenUsage(BaseModel):
    """Char-based estimates (1 token ~ 4 chars), reporting only."""
    prompt: int = 0
    completion: int = 0
    total: int = 0

class ResponseMetadata(BaseModel):
    iterations: int
    duration_seconds: float
    model: str
    estimated_tokens: TokenUsage = Field(default_factory=TokenUsage)
    hit_max_iterations: bool = False

class AgentResponse(BaseModel):
    """
    Answer text plus run metadata.
    `messages` is the full conversation after the run (prior history included), for callers that persist it.
    """
    text: str
    tools_used: list[str] = Field(default_factory=list)
    metadata: ResponseMetadata
    messages: list[AgentMessage] = Field(default_factory=list)

    def to_json(self) -> dict[str, Any]:
        return {
            "text": self.text,
            "toolsUsed": self.tools_used,
            "metadata": {
                "iterations": self.metadata.iterations,
                "durationSeconds": round(self.metadata.duration_seconds, 3),
                "model": self.metadata.model,
                "estimatedTokens": self.metadata.estimated_tokens.model_dump(),
                "hitMaxIterations": self.metadata.hit_max_iterations,
            },
        }
