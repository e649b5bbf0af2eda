# gemini offers text embedding API

from journal_brain.common.services.embedding_service.text_embedding.dispatcher import TypedTextEmbeddingClient, TextEmbeddingProvider
from journal_brain.common.services.embedding_service.text_embedding.protocols import TypedTextEmbeddingProtocol

# NOTE: only supports the generic wrappers here
__all__ = ["TypedTextEmbeddingClient", "TextEmbeddingProvider", "TypedTextEmbeddingProtocol"]
