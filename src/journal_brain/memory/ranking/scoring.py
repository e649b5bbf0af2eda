# scoring primitives for the hybrid ranker
# every component lands in [0, 1], never NaN/inf

import math
from datetime import datetime
from typing import Optional, Sequence

import numpy as np

from journal_brain.common.utils.time_utils import ensure_utc

# bm25 magnitude that maps to a full keyword score
KEYWORD_SCORE_SCALE = 20.0
SECONDS_PER_DAY = 86400.0

def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))

def cosine_similarity(a: Optional[Sequence[float]], b: Optional[Sequence[float]]) -> float:
    """
    Cosine similarity between two embedding vectors, clamped into [0, 1].
    Missing, empty, zero-norm or mismatched-length vectors score 0.
    """
    if a is None or b is None:
        return 0.0
    v1 = np.asarray(a, dtype=float)
    v2 = np.asarray(b, dtype=float)
    if v1.size == 0 or v1.shape != v2.shape:
        return 0.0
    norm = np.linalg.norm(v1) * np.linalg.norm(v2)
    if norm == 0 or not np.isfinite(norm):
        return 0.0
    similarity = float(np.dot(v1, v2) / norm)
    if not math.isfinite(similarity):
        return 0.0
    return clamp(similarity, 0.0, 1.0)

def age_in_days(date: datetime, now: datetime) -> float:
    """Age of `date` relative to `now`, clamped at 0 for future-dated items."""
    seconds = (ensure_utc(now) - ensure_utc(date)).total_seconds()
    return max(0.0, seconds / SECONDS_PER_DAY)

def recency_decay(age_days: float, half_life_days: float) -> float:
    """
    Exponential half-life decay: 1.0 at age 0, 0.5 at one half-life.
    """
    if half_life_days <= 0:
        raise ValueError(f"half_life_days must be positive, got {half_life_days}")
    return math.exp(-math.log(2) * max(0.0, age_days) / half_life_days)

def normalize_keyword_score(raw_score: float) -> float:
    """
    Maps an FTS5-style bm25 score (negative, lower is better) into [0, 1].
    """
    if not math.isfinite(raw_score):
        return 0.0
    return clamp(-raw_score / KEYWORD_SCORE_SCALE, 0.0, 1.0)

def derive_stress(anxiety: float, sadness: float, anger: float) -> float:
    """Stress on a 0-100 scale from the entry's emotion profile."""
    return clamp(50 + anxiety * 20 + sadness * 15 + anger * 10, 0, 100)

def derive_energy(arousal: float, joy: float) -> float:
    """Energy on a 0-100 scale from arousal and joy."""
    return clamp(50 + arousal * 30 + joy * 15, 0, 100)
