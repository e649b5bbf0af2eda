# action_synthesis: concrete todos for the coming week from recent entries + wellbeing

from collections import Counter
from typing import Any

from pydantic import Field

from journal_brain.agent_service.analysis.base_analyzer import (
    BaseAnalyzer,
    AnalysisConfig,
    AnalysisContext,
    AnalysisResult,
    AnalysisConfidence,
)
from journal_brain.agent_service.common.types.llm_outputs.analysis_outputs import ActionSynthesisOutput
from journal_brain.agent_service.common.system_prompts.analysis_prompts import AnalysisPrompts
from journal_brain.common.logging.logger import logger

DEFAULT_BALANCE = ["health", "work", "relationships"]
EMOTIONAL_KEYWORDS = (
    "stress", "anxious", "tired", "happy", "grateful",
    "frustrated", "overwhelmed", "lonely", "excited", "worried",
)

class ActionSynthesisConfig(AnalysisConfig):
    max_items: int = Field(default=7, ge=1, le=20)
    balance: list[str] = Field(default_factory=lambda: list(DEFAULT_BALANCE))
    include_first_step: bool = True

def summarize_themes(context: AnalysisContext, top_n: int = 5) -> str:
    """Most frequent emotional keywords across the selected entries."""
    counts: Counter[str] = Counter()
    for line in context.journal_lines:
        lowered = line.lower()
        for keyword in EMOTIONAL_KEYWORDS:
            if keyword in lowered:
                counts[keyword] += 1
    if not counts:
        return "No clear themes identified"
    return ", ".join(f"{keyword} (mentioned {count} times)" for keyword, count in counts.most_common(top_n))

class ActionSynthesisAnalyzer(BaseAnalyzer):
    operation = "action_synthesis"
    reserved_tokens = 800

    async def analyze(self, inputs: list[dict[str, Any]], config: dict[str, Any]) -> AnalysisResult:
        start = self.started_at()
        cfg = self.parse_config(ActionSynthesisConfig, config)
        context = self.prepare_context(inputs)

        wellbeing = context.average_wellbeing
        metrics_summary = f"Average wellbeing: {wellbeing:.1f}/100" if wellbeing is not None else "No wellbeing metrics available"
        output = await self.run_llm(
            ActionSynthesisOutput,
            system_prompt=AnalysisPrompts.action_synthesis_system_prompt.format(
                max_items=cfg.max_items,
                balance=", ".join(cfg.balance),
                first_step_rule="- include a first step that takes no more than 30 minutes" if cfg.include_first_step else "",
            ),
            user_prompt=AnalysisPrompts.action_synthesis_user_prompt.format(
                themes_summary=summarize_themes(context),
                metrics_summary=metrics_summary,
                journal_summary=context.journal_summary if context.journal_lines else "No recent journal entries",
            ),
        )

        results = [
            action.model_dump(by_alias=True, exclude_none=True)
            for action in output.actions[:cfg.max_items]
        ]
        if not cfg.include_first_step:
            for item in results:
                item.pop("firstStep", None)

        data_points = len(context.journal_lines)
        if data_points >= 20 and wellbeing is not None:
            confidence = AnalysisConfidence.HIGH
        elif data_points >= 5:
            confidence = AnalysisConfidence.MEDIUM
        else:
            confidence = AnalysisConfidence.LOW

        logger.info(f"[action_synthesis] {len(results)} actions from {data_points} entries")
        return AnalysisResult(
            operation=self.operation,
            results=results,
            execution_time_seconds=self.elapsed_since(start),
            model=self.model,
            confidence=confidence,
        )
