# name -> tool registry used by the agent kernel
# populated once in the app lifespan, read-only afterwards

from datetime import datetime
from typing import Any, Callable, Optional

from journal_brain.agent_service.tools.base import AgentTool
from journal_brain.agent_service.tools.retrieve_tool import RetrieveTool
from journal_brain.agent_service.tools.analyze_tool import AnalyzeTool
from journal_brain.agent_service.tools.memory_write_tool import MemoryWriteTool
from journal_brain.agent_service.tools.context_bundle_tool import ContextBundleTool
from journal_brain.common.errors import ToolNotFound, ToolExecutionFailed
from journal_brain.common.services.llm_service.llm_client.protocols import TypedLLMProtocol
from journal_brain.memory.result_cache import ResultCache
from journal_brain.memory.retrieval.retrieval_service import RetrievalService
from journal_brain.memory.token_budget import TokenBudgetManager
from journal_brain.common.utils.time_utils import utc_now
from journal_brain.common.logging.logger import logger

class ToolRegistry():
    """
    Holds the tools available to the agent and executes them by name.
    - register() is last-write-wins, replacing an existing tool logs a warning.
    - execute() raises ToolNotFound for unknown names and wraps every tool failure in ToolExecutionFailed.
    """

    def __init__(self, tools: Optional[list[AgentTool]] = None):
        self._tools: dict[str, AgentTool] = {}
        for tool in tools or []:
            self.register(tool)

    def register(self, tool: AgentTool) -> None:
        if tool.name in self._tools:
            logger.warning(f"Tool '{tool.name}' is already registered, replacing it")
        self._tools[tool.name] = tool
        logger.info(f"Registered tool: {tool.name}")

    def unregister(self, name: str) -> bool:
        removed = self._tools.pop(name, None)
        return removed is not None

    def get(self, name: str) -> Optional[AgentTool]:
        return self._tools.get(name)

    def has(self, name: str) -> bool:
        return name in self._tools

    @property
    def tool_names(self) -> list[str]:
        return list(self._tools.keys())

    def schemas(self) -> list[dict[str, Any]]:
        """Declarations for every registered tool, in registration order."""
        return [tool.to_schema() for tool in self._tools.values()]

    async def execute(self, name: str, arguments: dict[str, Any]) -> Any:
        tool = self._tools.get(name)
        if tool is None:
            raise ToolNotFound(name, self.tool_names)

        logger.info(f"Executing tool '{name}' with arguments: {arguments}")
        try:
            return await tool.execute(arguments or {})
        except Exception as e:
            logger.error(f"Tool '{name}' failed: {e}")
            raise ToolExecutionFailed(name, e) from e

    def __len__(self) -> int:
        return len(self._tools)

def build_standard_registry(
    retrieval_service: RetrievalService,
    result_cache: ResultCache,
    llm_client: TypedLLMProtocol,
    token_budget: Optional[TokenBudgetManager] = None,
    model: str = "unknown",
    clock: Callable[[], datetime] = utc_now,
) -> ToolRegistry:
    """
    Registry with the four standard tools: retrieve, analyze, memory_write, context_bundle.
    """
    registry = ToolRegistry()
    registry.register(RetrieveTool(retrieval_service, clock=clock))
    registry.register(AnalyzeTool(llm_client, result_cache, token_budget=token_budget, model=model))
    registry.register(MemoryWriteTool(retrieval_service.store, clock=clock))
    registry.register(ContextBundleTool(retrieval_service, clock=clock))
    logger.info(f"Standard tool registry built: {registry.tool_names}")
    return registry
