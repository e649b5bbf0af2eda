# canonical read-only snapshots of corpus rows, shared by every CorpusStore implementation
# NOTE: these are DTOs, the ORM models in common/db/models map onto them 1:1.

from datetime import datetime
from enum import Enum
from typing import Annotated, Optional
import uuid

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

from journal_brain.common.utils.time_utils import ensure_utc, isoformat

# naive datetimes are read as UTC, aware ones converted
UTCDatetime = Annotated[datetime, AfterValidator(ensure_utc)]

def _new_id() -> str:
    return str(uuid.uuid4())

class ChunkRecord(BaseModel):
    """
    A bounded segment of a journal entry, indexed independently with its own embedding.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=_new_id)
    entry_id: str
    text: str
    embedding: Optional[list[float]] = None
    date: UTCDatetime
    start_char: int = 0
    end_char: int = 0
    token_count: int = 0

class EmotionScores(BaseModel):
    """Emotional profile of an entry, every value in [0, 1]."""
    model_config = ConfigDict(frozen=True)

    joy: float = 0.5
    sadness: float = 0.5
    anger: float = 0.5
    anxiety: float = 0.5
    gratitude: float = 0.5

class EntryAnalyticsRecord(BaseModel):
    """
    Scalar analytics computed for a single journal entry.
    - happiness_score: 0-100
    - valence: -1 (negative) to 1 (positive)
    - arousal: 0 (calm) to 1 (excited)
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=_new_id)
    entry_id: str
    date: UTCDatetime
    happiness_score: float
    valence: float
    arousal: float
    emotions: EmotionScores = Field(default_factory=EmotionScores)
    confidence: float = 1.0

class MonthSummaryRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=_new_id)
    year: int
    month: int
    summary_text: str
    key_topics: list[str] = Field(default_factory=list)
    happiness_avg: float
    drivers_positive: list[str] = Field(default_factory=list)
    drivers_negative: list[str] = Field(default_factory=list)
    embedding: Optional[list[float]] = None

class YearSummaryRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=_new_id)
    year: int
    summary_text: str
    happiness_avg: float
    embedding: Optional[list[float]] = None

class MemoryKind(str, Enum):
    """Kinds of notes the agent can save for future conversations."""
    INSIGHT = "insight"
    DECISION = "decision"
    TODO = "todo"
    RULE = "rule"
    VALUE = "value"
    COMMITMENT = "commitment"

class MemoryConfidence(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

class AgentMemoryRecord(BaseModel):
    """
    A saved agent note (insight, decision, rule, ...) with access bookkeeping.
    """
    id: str = Field(default_factory=_new_id)
    kind: MemoryKind
    content: str
    tags: list[str] = Field(default_factory=list)
    related_ids: list[str] = Field(default_factory=list)
    confidence: MemoryConfidence = MemoryConfidence.MEDIUM
    created_at: UTCDatetime
    last_accessed: Optional[UTCDatetime] = None
    access_count: int = 0

    def to_json(self) -> dict:
        data: dict = {
            "id": self.id,
            "kind": self.kind.value,
            "content": self.content,
            "confidence": self.confidence.value,
            "createdAt": isoformat(self.created_at),
            "accessCount": self.access_count,
        }
        if self.tags:
            data["tags"] = list(self.tags)
        if self.related_ids:
            data["relatedIds"] = list(self.related_ids)
        if self.last_accessed is not None:
            data["lastAccessed"] = isoformat(self.last_accessed)
        return data
