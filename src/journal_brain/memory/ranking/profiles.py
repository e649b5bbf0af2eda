# named ranking weight profiles + selection by query shape

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, model_validator

if TYPE_CHECKING:
    from journal_brain.memory.retrieval.query import RetrieveQuery

class RankingWeights(BaseModel):
    """
    Weights of the four score components plus the recency half-life (days).
    Weights are non-negative and sum to 1, so a final score stays in [0, 1].
    """
    model_config = ConfigDict(frozen=True)

    name: str
    similarity: float
    recency: float
    keyword: float
    magnitude: float
    recency_half_life: float

    @model_validator(mode="after")
    def _check_weights(self) -> "RankingWeights":
        weights = (self.similarity, self.recency, self.keyword, self.magnitude)
        if any(w < 0 for w in weights):
            raise ValueError(f"profile '{self.name}' has a negative weight")
        if abs(sum(weights) - 1.0) > 1e-6:
            raise ValueError(f"profile '{self.name}' weights sum to {sum(weights)}, expected 1")
        if self.recency_half_life <= 0:
            raise ValueError(f"profile '{self.name}' needs a positive recency half-life")
        return self

DEFAULT = RankingWeights(name="default", similarity=0.4, recency=0.3, keyword=0.2, magnitude=0.1, recency_half_life=30)
LATEST = RankingWeights(name="latest", similarity=0.0, recency=0.8, keyword=0.2, magnitude=0.0, recency_half_life=21)
LIFELONG = RankingWeights(name="lifelong", similarity=0.5, recency=0.0, keyword=0.3, magnitude=0.2, recency_half_life=9999)
SEMANTIC = RankingWeights(name="semantic", similarity=0.6, recency=0.2, keyword=0.1, magnitude=0.1, recency_half_life=60)
# pinned by callers that want the user's current state (context bundle), never auto-selected
CURRENT_STATE = RankingWeights(name="current_state", similarity=0.2, recency=0.5, keyword=0.1, magnitude=0.2, recency_half_life=30)

PROFILES: dict[str, RankingWeights] = {
    profile.name: profile
    for profile in (DEFAULT, LATEST, LIFELONG, SEMANTIC, CURRENT_STATE)
}

LIFELONG_HALF_LIFE_THRESHOLD = 1000
LATEST_HALF_LIFE_THRESHOLD = 25

def get_profile(name: str) -> RankingWeights:
    try:
        return PROFILES[name]
    except KeyError:
        raise KeyError(f"Unknown ranking profile '{name}'. Available: {', '.join(PROFILES)}") from None

def select_profile(query: "RetrieveQuery") -> RankingWeights:
    """
    Picks the profile for a query, first match wins:
    1. recency half-life > 1000 days -> lifelong
    2. recency half-life < 25 days -> latest
    3. date-based sort -> latest
    4. similar_to without keyword -> semantic
    5. otherwise default
    """
    half_life = query.filter.recency_half_life
    if half_life > LIFELONG_HALF_LIFE_THRESHOLD:
        return LIFELONG
    if half_life < LATEST_HALF_LIFE_THRESHOLD:
        return LATEST
    if query.sort.is_date_based:
        return LATEST
    if query.filter.similar_to and not query.filter.keyword:
        return SEMANTIC
    return DEFAULT
