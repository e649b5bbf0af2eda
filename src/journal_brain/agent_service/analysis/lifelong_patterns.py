# lifelong_patterns: recurring themes across the whole journal history

from typing import Any

from journal_brain.agent_service.analysis.base_analyzer import (
    BaseAnalyzer,
    AnalysisConfig,
    AnalysisResult,
    AnalysisConfidence,
)
from journal_brain.agent_service.common.types.llm_outputs.analysis_outputs import LifelongPatternsOutput
from journal_brain.agent_service.common.system_prompts.analysis_prompts import AnalysisPrompts
from journal_brain.common.logging.logger import logger

class LifelongPatternsConfig(AnalysisConfig):
    min_occurrences: int = 4
    min_span_months: int = 12
    require_recurring: bool = True

class LifelongPatternsAnalyzer(BaseAnalyzer):
    operation = "lifelong_patterns"
    reserved_tokens = 1500

    async def analyze(self, inputs: list[dict[str, Any]], config: dict[str, Any]) -> AnalysisResult:
        start = self.started_at()
        cfg = self.parse_config(LifelongPatternsConfig, config)
        context = self.prepare_context(inputs)

        recurrence_rule = (
            "Show true recurring behavior (not just one extended period)"
            if cfg.require_recurring
            else "Can be either recurring episodes or extended periods"
        )
        analytics_summary = (
            f"Total data points: {len(context.magnitudes)}" if context.magnitudes else "No analytics data provided"
        )
        output = await self.run_llm(
            LifelongPatternsOutput,
            system_prompt=AnalysisPrompts.lifelong_patterns_system_prompt.format(
                min_occurrences=cfg.min_occurrences,
                min_span_months=cfg.min_span_months,
                recurrence_rule=recurrence_rule,
            ),
            user_prompt=AnalysisPrompts.lifelong_patterns_user_prompt.format(
                journal_summary=context.journal_summary,
                analytics_summary=analytics_summary,
            ),
        )

        results = [pattern.model_dump(by_alias=True) for pattern in output.patterns]
        data_points = len(context.journal_lines) + len(context.magnitudes)
        if len(results) >= 3 and data_points >= 50:
            confidence = AnalysisConfidence.HIGH
        elif len(results) >= 1 and data_points >= 20:
            confidence = AnalysisConfidence.MEDIUM
        else:
            confidence = AnalysisConfidence.LOW

        logger.info(f"[lifelong_patterns] {len(results)} patterns from {data_points} data points")
        return AnalysisResult(
            operation=self.operation,
            results=results,
            execution_time_seconds=self.elapsed_since(start),
            model=self.model,
            confidence=confidence,
        )
