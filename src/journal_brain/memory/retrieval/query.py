# typed retrieve query, parsed once at the tool edge from the model's untyped arguments

import math
import re
from datetime import datetime, time, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from journal_brain.common.errors import InvalidQuery, InvalidDate, UnsupportedGranularity
from journal_brain.common.utils.time_utils import ensure_utc

MIN_LIMIT = 1
MAX_LIMIT = 200
DEFAULT_LIMIT = 10
DEFAULT_MIN_SIMILARITY = 0.4
DEFAULT_RECENCY_HALF_LIFE = 30.0

_DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")

class Scope(str, Enum):
    CHUNKS = "chunks"
    ENTRIES = "entries"
    MEMORY = "memory"
    ANALYTICS = "analytics"
    SUMMARIES = "summaries"

class SortOrder(str, Enum):
    DATE_DESC = "date_desc"
    DATE_ASC = "date_asc"
    SIMILARITY_DESC = "similarity_desc"
    MAGNITUDE_DESC = "magnitude_desc"
    HYBRID = "hybrid"

    @property
    def is_date_based(self) -> bool:
        return self in (SortOrder.DATE_DESC, SortOrder.DATE_ASC)

class ResultView(str, Enum):
    RAW = "raw"
    TIMELINE = "timeline"
    STATS = "stats"
    HISTOGRAM = "histogram"

class Sentiment(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"

class Metric(str, Enum):
    HAPPINESS = "happiness"
    STRESS = "stress"
    ENERGY = "energy"

class TimeGranularity(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"

class RetrieveFilter(BaseModel):
    model_config = ConfigDict(frozen=True)

    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    ids: Optional[list[str]] = None
    entities: Optional[list[str]] = None
    topics: Optional[list[str]] = None
    sentiment: Optional[Sentiment] = None
    metric: Optional[Metric] = None
    similar_to: Optional[str] = None
    keyword: Optional[str] = None
    min_similarity: float = Field(default=DEFAULT_MIN_SIMILARITY, ge=0.0, le=1.0)
    time_granularity: Optional[TimeGranularity] = None
    recency_half_life: float = Field(default=DEFAULT_RECENCY_HALF_LIFE, gt=0)

    @field_validator("date_from", "date_to")
    @classmethod
    def _as_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(value) if value is not None else None

    @property
    def has_explicit_half_life(self) -> bool:
        """True when the caller supplied recencyHalfLife rather than relying on the default."""
        return "recency_half_life" in self.model_fields_set

class RetrieveQuery(BaseModel):
    """
    Validated retrieve request.
    - Construct through `from_arguments` when the input is raw tool arguments (camelCase keys).
    - Invalid combinations are rejected at construction, never corrected.
    """
    model_config = ConfigDict(frozen=True)

    scope: Scope
    filter: RetrieveFilter = Field(default_factory=RetrieveFilter)
    sort: SortOrder = SortOrder.HYBRID
    limit: int = Field(default=DEFAULT_LIMIT, ge=MIN_LIMIT, le=MAX_LIMIT)
    view: ResultView = ResultView.RAW

    @model_validator(mode="after")
    def _check_combinations(self) -> "RetrieveQuery":
        f = self.filter
        if f.date_from is not None and f.date_to is not None and f.date_from > f.date_to:
            raise InvalidQuery(f"dateFrom ({f.date_from.isoformat()}) is after dateTo ({f.date_to.isoformat()})")
        if self.scope == Scope.SUMMARIES and f.time_granularity not in (TimeGranularity.MONTH, TimeGranularity.YEAR):
            raise UnsupportedGranularity(f.time_granularity.value if f.time_granularity else None)
        return self

    @classmethod
    def from_arguments(cls, arguments: Any) -> "RetrieveQuery":
        """
        Parses raw retrieve arguments, e.g.
        {"scope": "chunks", "filter": {"dateFrom": "2025-01-01", "keyword": "work"}, "limit": 20}

        Raises:
            InvalidQuery (or its subclasses InvalidDate / UnsupportedGranularity)
        """
        if not isinstance(arguments, dict):
            raise InvalidQuery("arguments must be a JSON object")

        raw_scope = arguments.get("scope")
        if raw_scope is None:
            raise InvalidQuery("scope is required")
        scope = _parse_enum(Scope, raw_scope, "scope")

        raw_filter = arguments.get("filter")
        if raw_filter is None:
            raw_filter = {}
        if not isinstance(raw_filter, dict):
            raise InvalidQuery("filter must be a JSON object")

        values: dict[str, Any] = {"scope": scope, "filter": _parse_filter(raw_filter)}
        if arguments.get("sort") is not None:
            values["sort"] = _parse_enum(SortOrder, arguments["sort"], "sort")
        if arguments.get("view") is not None:
            values["view"] = _parse_enum(ResultView, arguments["view"], "view")
        if arguments.get("limit") is not None:
            values["limit"] = _parse_limit(arguments["limit"])

        try:
            return cls(**values)
        except ValidationError as e:
            # model validators raise InvalidQuery directly, pydantic wraps anything else
            raise InvalidQuery(_describe_validation_error(e)) from e

# =====================================================================
# Argument parsing helpers
# =====================================================================

def _parse_filter(raw: dict[str, Any]) -> RetrieveFilter:
    values: dict[str, Any] = {}

    if raw.get("dateFrom") is not None:
        values["date_from"] = parse_iso_date("dateFrom", raw["dateFrom"])
    if raw.get("dateTo") is not None:
        values["date_to"] = parse_iso_date("dateTo", raw["dateTo"], end_of_day=True)

    for key, field_name in (("ids", "ids"), ("entities", "entities"), ("topics", "topics")):
        if raw.get(key) is not None:
            values[field_name] = _parse_string_list(raw[key], key)

    if raw.get("sentiment") is not None:
        values["sentiment"] = _parse_enum(Sentiment, raw["sentiment"], "sentiment")
    if raw.get("metric") is not None:
        values["metric"] = _parse_enum(Metric, raw["metric"], "metric")
    if raw.get("timeGranularity") is not None:
        values["time_granularity"] = _parse_enum(TimeGranularity, raw["timeGranularity"], "timeGranularity")

    for key, field_name in (("similarTo", "similar_to"), ("keyword", "keyword")):
        value = raw.get(key)
        if value is None:
            continue
        if not isinstance(value, str):
            raise InvalidQuery(f"{key} must be a string")
        if value.strip():
            values[field_name] = value.strip()

    if raw.get("minSimilarity") is not None:
        min_similarity = _parse_number(raw["minSimilarity"], "minSimilarity")
        if not 0.0 <= min_similarity <= 1.0:
            raise InvalidQuery(f"minSimilarity must be between 0 and 1, got {min_similarity}")
        values["min_similarity"] = min_similarity
    if raw.get("recencyHalfLife") is not None:
        half_life = _parse_number(raw["recencyHalfLife"], "recencyHalfLife")
        if half_life <= 0:
            raise InvalidQuery(f"recencyHalfLife must be positive, got {half_life}")
        values["recency_half_life"] = half_life

    try:
        return RetrieveFilter(**values)
    except ValidationError as e:
        raise InvalidQuery(_describe_validation_error(e)) from e

def parse_iso_date(field: str, value: Any, end_of_day: bool = False) -> datetime:
    """
    Parses an ISO-8601 date or datetime into an aware UTC datetime.
    - Date-only strings mean start of day, or end of day when `end_of_day` is set.
    - Naive timestamps are interpreted as UTC.
    """
    if isinstance(value, datetime):
        return ensure_utc(value)
    if not isinstance(value, str) or not value.strip():
        raise InvalidDate(field, value)
    text = value.strip()
    try:
        if _DATE_ONLY.match(text):
            day = datetime.fromisoformat(text).date()
            return datetime.combine(day, time.max if end_of_day else time.min, tzinfo=timezone.utc)
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        return ensure_utc(datetime.fromisoformat(text))
    except ValueError:
        raise InvalidDate(field, value) from None

def _parse_enum(enum_cls: type[Enum], value: Any, field: str):
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        try:
            return enum_cls(value)
        except ValueError:
            pass
    allowed = ", ".join(member.value for member in enum_cls)
    raise InvalidQuery(f"{field} must be one of [{allowed}], got {value!r}")

def _parse_limit(value: Any) -> int:
    # JSON numbers may arrive as floats (e.g. 10.0), only integral values are accepted
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidQuery(f"limit must be an integer, got {value!r}")
    if isinstance(value, float) and not (math.isfinite(value) and value.is_integer()):
        raise InvalidQuery(f"limit must be an integer, got {value!r}")
    limit = int(value)
    if not MIN_LIMIT <= limit <= MAX_LIMIT:
        raise InvalidQuery(f"limit must be between {MIN_LIMIT} and {MAX_LIMIT}, got {limit}")
    return limit

def _parse_number(value: Any, field: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise InvalidQuery(f"{field} must be a number, got {value!r}")
    return float(value)

def _parse_string_list(value: Any, field: str) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise InvalidQuery(f"{field} must be a list of strings")
    return list(value)

def _describe_validation_error(error: ValidationError) -> str:
    parts = []
    for detail in error.errors():
        location = ".".join(str(p) for p in detail.get("loc", ()))
        parts.append(f"{location}: {detail.get('msg')}" if location else str(detail.get("msg")))
    return "; ".join(parts) or str(error)
