# Gemini text embeddings for journal chunks (documents) and retrieve queries
from google import genai
from google.genai import types

from typing import Optional
from pydantic import ValidationError
# use tenacity to retry when desired
from tenacity import AsyncRetrying, stop_after_attempt, wait_fixed, retry_if_exception_type

from journal_brain.common.services.embedding_service.text_embedding.protocols import TypedTextEmbeddingProtocol, ProvidesProviderInfo
from journal_brain.common.services.embedding_service.text_embedding.protocols import RateLimitProvider
from journal_brain.common.types.text_embedding_task_types import VALID_GEMINI_TASK_TYPES
from journal_brain.common.logging.logger import logger

# embed_content rejects requests with more than 100 inputs
GEMINI_MAX_BATCH_SIZE = 100

class AsyncGenAITextEmbeddingClient(TypedTextEmbeddingProtocol, ProvidesProviderInfo):
    """
    Google GenAI embedding client.
    - Inputs are sent in batches of at most `max_batch_size`, outputs keep input order.
    - Returns exactly one vector per input text, a short response is an error (and retried).
    """
    def __init__(
        self,
        model_name: str = "gemini-embedding-001",
        content_type: str = "RETRIEVAL_DOCUMENT", # chunks are indexed as documents, queries override per call
        embedding_size: int = 768,
        *,
        api_key: str | None = None,
        max_batch_size: int = GEMINI_MAX_BATCH_SIZE,
        retry_attempts: int = 2,
        retry_wait: float = 0.1,
        retry_on: tuple[type[Exception], ...] = (ValidationError, ValueError),
    ):
        self.client = genai.Client(api_key=api_key)
        self.content_type = content_type
        self.embedding_size = embedding_size
        self.max_batch_size = max(1, min(max_batch_size, GEMINI_MAX_BATCH_SIZE))
        # provider metadata for reporting
        self.provider = RateLimitProvider.GOOGLE
        self.model = model_name
        self.retryer = AsyncRetrying(
            stop=stop_after_attempt(retry_attempts),
            wait=wait_fixed(retry_wait),
            retry=retry_if_exception_type(retry_on),
            reraise=True,
        )

    async def aembed_text(self, text: list[str], task_type: Optional[str] = None) -> list[list[float]]:
        """
        Embeds each text, one vector per input in input order.

        Args:
            text: texts to embed
            task_type: Gemini task type override (RETRIEVAL_QUERY for search queries),
                unknown values fall back to the instance's content_type
        """
        if not text:
            return []
        resolved_task_type = task_type if task_type in VALID_GEMINI_TASK_TYPES else self.content_type

        vectors: list[list[float]] = []
        for start in range(0, len(text), self.max_batch_size):
            batch = text[start:start + self.max_batch_size]
            vectors.extend(await self._embed_batch(batch, resolved_task_type))
        if len(text) > self.max_batch_size:
            logger.debug(f"Embedded {len(text)} texts in {-(-len(text) // self.max_batch_size)} batches")
        return vectors

    async def _embed_batch(self, batch: list[str], task_type: str) -> list[list[float]]:
        async for attempt in self.retryer:
            with attempt:
                result = await self.client.aio.models.embed_content(
                    model=self.model,
                    contents=batch, # type: ignore[arg-type] # GenAI SDK accepts list[str] at runtime
                    config=types.EmbedContentConfig(task_type=task_type, output_dimensionality=self.embedding_size),
                )
                embeddings = (result.embeddings if result else None) or []
                vectors = [e.values for e in embeddings if e is not None and e.values is not None]
                if len(vectors) != len(batch):
                    # raised inside the attempt so tenacity retries it
                    raise ValueError(f"Expected {len(batch)} embeddings, got {len(vectors)}")
                return vectors

        raise RuntimeError("_embed_batch() reached unexpected fallthrough")
