# mixin settings for external services like db, llm, agent loop and retrieval
from typing import Optional
from pydantic import BaseModel, Field

class MainDBSettingsMixin(BaseModel):
    """
    Model for the main corpus database (SQLAlchemy async engine).
    NOTE: defaults to a local SQLite file, the journal corpus is single-user.
    """
    MAIN_DB_URL: str = Field(default="sqlite+aiosqlite:///./journal_brain.db", description="SQLAlchemy async database URL.")
    MAIN_DB_ECHO: bool = Field(default=False, description="Echo emitted SQL, for debugging only.")
    MAIN_DB_CREATE_TABLES: bool = Field(default=True, description="Create missing tables (and the FTS index) on startup.")

class GoogleGenAISettingsMixin(BaseModel):
    """
    Model for Google GenAI LLM + embedding client settings.
    """
    GOOGLE_GENAI_API_KEY: str
    GOOGLE_GENAI_CHAT_MODEL: str = "gemini-2.5-flash"
    GOOGLE_GENAI_EMBEDDING_MODEL: str = "gemini-embedding-001"
    GOOGLE_GENAI_EMBEDDING_SIZE: int = 768

class AgentSettingsMixin(BaseModel):
    """
    Model for the ReAct agent loop settings.
    """
    AGENT_MAX_ITERATIONS: int = Field(default=10, ge=1, description="Max reason/act iterations per user turn.")
    AGENT_MAX_TOKENS_PER_REQUEST: int = Field(default=30000, ge=1000, description="Token budget base for analysis operations.")

class RetrievalSettingsMixin(BaseModel):
    """
    Model for retrieval settings shared across tools.
    """
    RESULT_CACHE_MAX_ENTRIES: Optional[int] = Field(default=None, ge=1, description="Bound on cached retrieve results, None keeps every result for the process lifetime.")
    KEYWORD_SEARCH_LIMIT: int = Field(default=200, ge=1, description="Max hits requested from the keyword index per ranking call.")
