# retrieve tool: the single entry point for corpus reads
# parses raw arguments into a RetrieveQuery at the edge, then runs it through the RetrievalService

from datetime import datetime
from typing import Any, Callable

from journal_brain.agent_service.tools.base import AgentTool
from journal_brain.agent_service.common.tool_calling_declarations.retrieve import retrieve_declaration
from journal_brain.memory.retrieval.query import RetrieveQuery
from journal_brain.memory.retrieval.retrieval_service import RetrievalService
from journal_brain.common.utils.time_utils import utc_now

class RetrieveTool(AgentTool):
    """
    Returns a serialized RetrieveResult ({items, metadata}) or EmptyResult ({empty, reason}).
    Invalid arguments raise InvalidQuery before the store is touched.
    """
    declaration = retrieve_declaration

    def __init__(self, retrieval_service: RetrievalService, clock: Callable[[], datetime] = utc_now):
        self.retrieval_service = retrieval_service
        self.clock = clock

    async def execute(self, arguments: dict[str, Any]) -> Any:
        query = RetrieveQuery.from_arguments(arguments)
        outcome = await self.retrieval_service.retrieve(query, now=self.clock())
        return outcome.to_json()
