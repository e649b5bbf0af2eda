# protocols for text embedding clients

from typing import Optional, Protocol, runtime_checkable
from enum import Enum

# Ensures that all text embedding clients implement this protocol
class TypedTextEmbeddingProtocol(Protocol):
    async def aembed_text(
        self,
        text: list[str],
        task_type: Optional[str] = None,
    ) -> list[list[float]]: ...

class RateLimitProvider(str, Enum):
    """Enumeration of supported rate limit providers."""
    GOOGLE = "google"

@runtime_checkable
class ProvidesProviderInfo(Protocol):
    """Optional protocol for exposing provider/model metadata for reporting."""
    provider: RateLimitProvider
    model: str
