# dispatcher for text embedding clients, currently only Google Gemini, but scalable to other providers

from enum import Enum, auto
from typing import Optional
from journal_brain.common.services.embedding_service.text_embedding.protocols import TypedTextEmbeddingProtocol

# NOTE: to be expanded with more services if desired
class TextEmbeddingProvider(Enum):
    GOOGLE_GENAI = auto() # just need a unique identifier

class TypedTextEmbeddingClient:
    def __init__(self, provider: TextEmbeddingProvider, client: TypedTextEmbeddingProtocol):
        self.provider = provider
        self.client = client

    async def aembed_text(
        self,
        text: list[str],
        task_type: Optional[str] = None,
    ) -> list[list[float]]:
        return await self.client.aembed_text(
            text=text,
            task_type=task_type,
        )
