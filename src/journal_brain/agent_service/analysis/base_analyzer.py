# shared plumbing for analysis operations: config parsing, token-budgeted context, result shape

import time
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from journal_brain.common.errors import InvalidToolArguments
from journal_brain.common.services.llm_service.llm_client.protocols import TypedLLMProtocol
from journal_brain.memory.token_budget import TokenBudgetManager
from journal_brain.common.logging.logger import logger

PydanticModel = TypeVar("PydanticModel", bound=BaseModel)

class AnalysisConfidence(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

class AnalysisConfig(BaseModel):
    """Base for per-op config, accepts the camelCase keys the model sends."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

class AnalysisResult(BaseModel):
    operation: str
    results: list[dict[str, Any]] = Field(default_factory=list)
    execution_time_seconds: float
    model: str
    confidence: AnalysisConfidence

    def to_json(self) -> dict[str, Any]:
        return {
            "op": self.operation,
            "results": self.results,
            "metadata": {
                "executionTime": f"{self.execution_time_seconds:.2f}s",
                "model": self.model,
                "confidence": self.confidence.value,
            },
        }

class AnalysisContext(BaseModel):
    """
    Token-budgeted view of the analyze inputs.
    - journal_lines: "[date] text" for each selected item with text
    - magnitudes: (date, normalized metric) for each selected item with a magnitude component
    """
    journal_lines: list[str] = Field(default_factory=list)
    magnitudes: list[tuple[str, float]] = Field(default_factory=list)
    total_items: int = 0
    estimated_tokens: int = 0

    @property
    def journal_summary(self) -> str:
        return "\n\n".join(self.journal_lines) if self.journal_lines else "No journal text provided"

    @property
    def average_wellbeing(self) -> float | None:
        """Mean magnitude on a 0-100 scale, None without metric data."""
        if not self.magnitudes:
            return None
        return sum(value for _, value in self.magnitudes) / len(self.magnitudes) * 100

class BaseAnalyzer(ABC):
    """
    An analysis op: budgeted context in, structured LLM output (via acreate) out.
    Subclasses set `operation` and `reserved_tokens` (system prompt + expected response).
    """
    operation: str = ""
    reserved_tokens: int = 2000

    def __init__(self, llm_client: TypedLLMProtocol, token_budget: TokenBudgetManager, model: str = "unknown"):
        self.llm_client = llm_client
        self.token_budget = token_budget
        self.model = model

    @abstractmethod
    async def analyze(self, inputs: list[dict[str, Any]], config: dict[str, Any]) -> AnalysisResult: ...

    @staticmethod
    def parse_config(config_model: Type[PydanticModel], config: dict[str, Any]) -> PydanticModel:
        try:
            return config_model.model_validate(config or {})
        except ValidationError as e:
            raise InvalidToolArguments(f"invalid config: {e.errors()[0].get('msg', str(e))}") from e

    def prepare_context(self, inputs: list[dict[str, Any]]) -> AnalysisContext:
        """
        Collects items from every retrieve payload in `inputs` (ranked order preserved) and keeps
        as many as fit this op's recommended budget.
        """
        items: list[dict[str, Any]] = []
        for payload in inputs:
            payload_items = payload.get("items")
            if isinstance(payload_items, list):
                items.extend(item for item in payload_items if isinstance(item, dict))

        budget = self.token_budget.recommended_budget(self.operation)
        selected, estimated_tokens = self.token_budget.select_entries(items, budget, reserved_tokens=self.reserved_tokens)
        self.token_budget.log_budget_info(self.operation, len(items), len(selected), estimated_tokens, budget)

        context = AnalysisContext(total_items=len(items), estimated_tokens=estimated_tokens)
        for item in selected:
            date = item.get("date") or "unknown"
            text = item.get("text")
            if isinstance(text, str) and text:
                context.journal_lines.append(f"[{date}] {text}")
            magnitude = (item.get("scoreComponents") or {}).get("magnitude")
            if isinstance(magnitude, (int, float)) and not isinstance(magnitude, bool):
                context.magnitudes.append((date, float(magnitude)))
        return context

    async def run_llm(self, response_model: Type[PydanticModel], system_prompt: str, user_prompt: str) -> PydanticModel:
        try:
            return await self.llm_client.acreate(
                response_model=response_model,
                system_prompt=system_prompt,
                user_prompt=user_prompt,
            )
        except Exception as e:
            logger.error(f"[{self.operation}] LLM call failed: {e}")
            raise

    @staticmethod
    def started_at() -> float:
        return time.perf_counter()

    @staticmethod
    def elapsed_since(start: float) -> float:
        return time.perf_counter() - start
