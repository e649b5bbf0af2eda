# analyze tool: routes cached retrieve results to an LLM-backed analyzer

from typing import Any, Optional

from journal_brain.agent_service.tools.base import AgentTool
from journal_brain.agent_service.common.tool_calling_declarations.analyze import analyze_declaration
from journal_brain.agent_service.analysis.base_analyzer import BaseAnalyzer
from journal_brain.agent_service.analysis.lifelong_patterns import LifelongPatternsAnalyzer
from journal_brain.agent_service.analysis.decision_matrix import DecisionMatrixAnalyzer
from journal_brain.agent_service.analysis.action_synthesis import ActionSynthesisAnalyzer
from journal_brain.common.errors import InvalidToolArguments, ResultNotFound
from journal_brain.common.services.llm_service.llm_client.protocols import TypedLLMProtocol
from journal_brain.memory.result_cache import ResultCache
from journal_brain.memory.token_budget import TokenBudgetManager
from journal_brain.common.logging.logger import logger

class AnalyzeTool(AgentTool):
    """
    Resolves `inputs` to full retrieve payloads and hands them to the analyzer for `op`.
    - string inputs are result ids ("retrieve_N") looked up in the ResultCache
    - dict inputs are used as-is
    """
    declaration = analyze_declaration

    def __init__(
        self,
        llm_client: TypedLLMProtocol,
        result_cache: ResultCache,
        token_budget: Optional[TokenBudgetManager] = None,
        model: str = "unknown",
    ):
        self.result_cache = result_cache
        token_budget = token_budget or TokenBudgetManager()
        self.analyzers: dict[str, BaseAnalyzer] = {
            analyzer.operation: analyzer
            for analyzer in (
                LifelongPatternsAnalyzer(llm_client, token_budget, model=model),
                DecisionMatrixAnalyzer(llm_client, token_budget, model=model),
                ActionSynthesisAnalyzer(llm_client, token_budget, model=model),
            )
        }

    async def execute(self, arguments: dict[str, Any]) -> Any:
        op = arguments.get("op")
        if not isinstance(op, str) or not op:
            raise InvalidToolArguments("Missing 'op' parameter")

        analyzer = self.analyzers.get(op)
        if analyzer is None:
            raise InvalidToolArguments(f"Unknown operation: '{op}'. Available: {', '.join(self.analyzers)}")

        raw_inputs = arguments.get("inputs")
        if not isinstance(raw_inputs, list):
            raise InvalidToolArguments("'inputs' must be an array of result IDs")
        inputs = self.resolve_inputs(raw_inputs)

        config = arguments.get("config") or {}
        if not isinstance(config, dict):
            raise InvalidToolArguments("'config' must be an object")

        logger.info(f"[analyze] op={op} inputs={len(inputs)}")
        result = await analyzer.analyze(inputs, config)
        return result.to_json()

    def resolve_inputs(self, raw_inputs: list[Any]) -> list[dict[str, Any]]:
        resolved: list[dict[str, Any]] = []
        for raw in raw_inputs:
            if isinstance(raw, str):
                payload = self.result_cache.get(raw)
                if payload is None:
                    raise ResultNotFound(raw)
                resolved.append(payload)
            elif isinstance(raw, dict):
                resolved.append(raw)
            else:
                raise InvalidToolArguments(f"inputs must be result IDs or objects, got {type(raw).__name__}")
        return resolved
