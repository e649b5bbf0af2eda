# structured output types for the analysis operations (lifelong_patterns, decision_matrix, action_synthesis)
# NOTE: fields are exposed to the model in camelCase, the same keys the analyze tool returns

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

# =====================================================================
# Lifelong patterns
# =====================================================================

class FlareUpWindow(_CamelModel):
    start: str = Field(description="Start date of the active period (YYYY-MM-DD).")
    end: str = Field(description="End date of the active period (YYYY-MM-DD).")

class LifelongPattern(_CamelModel):
    pattern: str = Field(description="Clear description of the recurring theme.")
    first_seen: str = Field(description="Earliest date the pattern appeared (YYYY-MM-DD).")
    last_seen: str = Field(description="Most recent date the pattern appeared (YYYY-MM-DD).")
    occurrences: int = Field(description="Number of distinct episodes of this pattern.")
    span_months: int = Field(description="Months from first to last seen.")
    flare_up_windows: list[FlareUpWindow] = Field(default_factory=list, description="Periods when the pattern was active.")
    triggers: list[str] = Field(default_factory=list, description="What tends to precede the pattern.")
    protective_factors: list[str] = Field(default_factory=list, description="What helps prevent or resolve the pattern.")
    confidence: Literal["high", "medium", "low"] = Field(description="Confidence in this pattern.")
    supporting_evidence_count: int = Field(description="Number of journal entries supporting the pattern.")

class LifelongPatternsOutput(_CamelModel):
    patterns: list[LifelongPattern] = Field(default_factory=list)

# =====================================================================
# Decision matrix
# =====================================================================

class CriterionScore(_CamelModel):
    criterion: str
    score: float = Field(description="Score for this criterion on a 0-10 scale.")
    reasoning: str
    evidence: str = Field(description="Journal evidence (quote with date) behind the score.")

class DecisionOption(_CamelModel):
    option: str
    overall_score: float = Field(description="Weighted average of the criteria scores (0-10).")
    criteria_scores: list[CriterionScore] = Field(default_factory=list)
    pros: list[str] = Field(default_factory=list)
    cons: list[str] = Field(default_factory=list)
    risks: list[str] = Field(default_factory=list)

class DecisionMatrixOutput(_CamelModel):
    options: list[DecisionOption] = Field(default_factory=list)
    counterfactual_analysis: Optional[str] = Field(default=None, description="Similar past decisions and their outcomes, when requested.")

# =====================================================================
# Action synthesis
# =====================================================================

class SuggestedAction(_CamelModel):
    action: str
    category: Literal["health", "work", "relationships", "personal_growth", "leisure"]
    first_step: Optional[str] = Field(default=None, description="Concrete first step taking no more than 30 minutes.")
    why_it_matters: str = Field(description="Why this action matters, based on journal evidence.")
    estimated_minutes: int
    impact: Literal["high", "medium", "low"]
    urgency: Literal["high", "medium", "low"]
    supporting_evidence: Optional[str] = None

class ActionSynthesisOutput(_CamelModel):
    actions: list[SuggestedAction] = Field(default_factory=list)
