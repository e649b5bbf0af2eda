from contextlib import asynccontextmanager, AsyncExitStack
from fastapi import FastAPI
from journal_brain.config.app_config import get_service_settings
from journal_brain.common.logging.logger import logger
from journal_brain.common.db.session import create_db_engine_context
from journal_brain.common.services.llm_service.llm_client import TypedLLMClient, LLMProvider
from journal_brain.common.services.llm_service.llm_client.google_genai_client import AsyncGenAITypedClient
from journal_brain.common.services.embedding_service.text_embedding import TypedTextEmbeddingClient, TextEmbeddingProvider
from journal_brain.common.services.embedding_service.text_embedding.gemini_embedding_client import AsyncGenAITextEmbeddingClient
from journal_brain.memory.storage.sql_store import SQLCorpusStore
from journal_brain.memory.ranking.hybrid_ranker import HybridRanker
from journal_brain.memory.retrieval.retrieval_service import RetrievalService
from journal_brain.memory.result_cache import ResultCache
from journal_brain.memory.token_budget import TokenBudgetManager
from journal_brain.agent_service.tools.registry import build_standard_registry
from journal_brain.agent_service.orchestrator.agent_kernel import AgentKernel

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manages the service's startup and shutdown events.
    Uses the AsyncExitStack to clean up resources.
    Register resources to the app state to be used as dependencies.

    NOTE:
    - Use stack.enter_async_context when the resource has __aenter__ and __aexit__ support
    - the result cache and tool registry are process-wide singletons, built once here and injected
    """
    # default start up message
    logger.info(f"Starting Journal-Brain service!")

    # initialize resources during start up
    logger.info("Initializing service resources...")
    settings = get_service_settings()

    async with AsyncExitStack() as stack:

        # Main db engine (creates tables + FTS index when configured)
        app.state.main_db_engine = await stack.enter_async_context(
            create_db_engine_context(
                db_url=settings.MAIN_DB_URL,
                echo=settings.MAIN_DB_ECHO,
                create_tables=settings.MAIN_DB_CREATE_TABLES,
            )
        )
        logger.info("Main database engine initialized.")

        # LLM + embedding clients (no need for resource clean up)
        google_llm_client = AsyncGenAITypedClient(
            model_name=settings.GOOGLE_GENAI_CHAT_MODEL,
            api_key=settings.GOOGLE_GENAI_API_KEY,
        )
        # wrap around GenAI client for management
        typed_llm_client = TypedLLMClient(provider=LLMProvider.GOOGLE_GENAI, client=google_llm_client)
        app.state.llm_client = typed_llm_client
        logger.info(f"LLM client (GOOGLE GENAI) initialized.")

        google_embedding_client = AsyncGenAITextEmbeddingClient(
            model_name=settings.GOOGLE_GENAI_EMBEDDING_MODEL,
            embedding_size=settings.GOOGLE_GENAI_EMBEDDING_SIZE,
            api_key=settings.GOOGLE_GENAI_API_KEY,
        )
        typed_embedding_client = TypedTextEmbeddingClient(provider=TextEmbeddingProvider.GOOGLE_GENAI, client=google_embedding_client)
        app.state.text_embedding_client = typed_embedding_client
        logger.info(f"Text embedding client (GOOGLE GENAI) initialized.")

        # corpus store + retrieval
        corpus_store = SQLCorpusStore(main_db_engine=app.state.main_db_engine)
        app.state.corpus_store = corpus_store
        ranker = HybridRanker(
            embedding_client=typed_embedding_client,
            store=corpus_store,
            keyword_search_limit=settings.KEYWORD_SEARCH_LIMIT,
        )
        app.state.retrieval_service = RetrievalService(store=corpus_store, ranker=ranker)

        # process-wide result cache + tool registry
        app.state.result_cache = ResultCache(max_entries=settings.RESULT_CACHE_MAX_ENTRIES)
        app.state.tool_registry = build_standard_registry(
            retrieval_service=app.state.retrieval_service,
            result_cache=app.state.result_cache,
            llm_client=typed_llm_client,
            token_budget=TokenBudgetManager(max_tokens_per_request=settings.AGENT_MAX_TOKENS_PER_REQUEST),
            model=typed_llm_client.model,
        )

        # agent kernel
        app.state.agent_kernel = AgentKernel(
            llm_client=typed_llm_client,
            tool_registry=app.state.tool_registry,
            result_cache=app.state.result_cache,
            max_iterations=settings.AGENT_MAX_ITERATIONS,
            model=typed_llm_client.model,
        )
        logger.info(f"Agent kernel initialized with tools: {app.state.tool_registry.tool_names}")

        try:
            # lets FastAPI process requests during yield
            yield
        finally:
            logger.info("Shutting down service resources...")

        # The AsyncExitStack will automatically call the __aexit__ or registered cleanup
        # methods for all resources entered or pushed to it, in reverse order.
        logger.info("All global resources have been gracefully closed.")
