# decision_matrix: scores options against criteria using journal evidence

from typing import Any

from pydantic import Field

from journal_brain.agent_service.analysis.base_analyzer import (
    BaseAnalyzer,
    AnalysisConfig,
    AnalysisResult,
    AnalysisConfidence,
)
from journal_brain.agent_service.common.types.llm_outputs.analysis_outputs import DecisionMatrixOutput
from journal_brain.agent_service.common.system_prompts.analysis_prompts import AnalysisPrompts
from journal_brain.common.logging.logger import logger

DEFAULT_CRITERIA = ["wellbeing", "growth", "financial", "values", "risk"]

class DecisionMatrixConfig(AnalysisConfig):
    criteria: list[str] = Field(default_factory=lambda: list(DEFAULT_CRITERIA))
    options: list[str] = Field(default_factory=list)
    include_counterfactuals: bool = False

class DecisionMatrixAnalyzer(BaseAnalyzer):
    operation = "decision_matrix"
    reserved_tokens = 1200

    async def analyze(self, inputs: list[dict[str, Any]], config: dict[str, Any]) -> AnalysisResult:
        start = self.started_at()
        cfg = self.parse_config(DecisionMatrixConfig, config)
        context = self.prepare_context(inputs)

        wellbeing = context.average_wellbeing
        analytics_summary = (
            f"Average wellbeing: {wellbeing:.1f}/100 across {len(context.magnitudes)} data points"
            if wellbeing is not None
            else "No wellbeing metrics available"
        )
        output = await self.run_llm(
            DecisionMatrixOutput,
            system_prompt=AnalysisPrompts.decision_matrix_system_prompt.format(
                options=", ".join(cfg.options) or "the options discussed in the journal",
                criteria=", ".join(cfg.criteria),
                counterfactual_rule=AnalysisPrompts.decision_matrix_counterfactual_rule if cfg.include_counterfactuals else "",
            ),
            user_prompt=AnalysisPrompts.decision_matrix_user_prompt.format(
                journal_summary=context.journal_summary,
                analytics_summary=analytics_summary,
            ),
        )

        # one result per option, the counterfactual (if any) is attached to each
        results = []
        for option in output.options:
            item = option.model_dump(by_alias=True)
            if output.counterfactual_analysis:
                item["counterfactualAnalysis"] = output.counterfactual_analysis
            results.append(item)

        data_points = len(context.journal_lines)
        if data_points >= 30:
            confidence = AnalysisConfidence.HIGH
        elif data_points >= 10:
            confidence = AnalysisConfidence.MEDIUM
        else:
            confidence = AnalysisConfidence.LOW

        logger.info(f"[decision_matrix] evaluated {len(results)} options from {data_points} entries")
        return AnalysisResult(
            operation=self.operation,
            results=results,
            execution_time_seconds=self.elapsed_since(start),
            model=self.model,
            confidence=confidence,
        )
