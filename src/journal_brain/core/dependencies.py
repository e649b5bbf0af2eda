from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine

from journal_brain.agent_service.orchestrator.agent_kernel import AgentKernel
from journal_brain.memory.result_cache import ResultCache
from journal_brain.memory.retrieval.retrieval_service import RetrievalService

# This is the location to conveniently return any app lifetime dependencies to be used in routes
def get_main_db_engine(request: Request) -> AsyncEngine:
    """
    FastAPI dependency to get the shared main DB engine from the application state.
    """
    return request.app.state.main_db_engine

def get_agent_kernel(request: Request) -> AgentKernel:
    return request.app.state.agent_kernel

def get_result_cache(request: Request) -> ResultCache:
    return request.app.state.result_cache

def get_retrieval_service(request: Request) -> RetrievalService:
    return request.app.state.retrieval_service
