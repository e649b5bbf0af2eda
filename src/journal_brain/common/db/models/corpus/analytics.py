# ORM model for per-entry emotional analytics
from journal_brain.common.db.models.base import MainDB_Base
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, DateTime, Float, Index
from datetime import datetime

class EntryAnalytics(MainDB_Base):
    """
    Scalar analytics for one journal entry (happiness, valence/arousal and the emotion profile).
    Stress and energy are not stored, they're derived from the emotion columns at query time.
    """
    __tablename__ = "entry_analytics"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    entry_id: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    date: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    happiness_score: Mapped[float] = mapped_column(Float, nullable=False)
    valence: Mapped[float] = mapped_column(Float, nullable=False)
    arousal: Mapped[float] = mapped_column(Float, nullable=False)

    joy: Mapped[float] = mapped_column(Float, nullable=False, default=0.5)
    sadness: Mapped[float] = mapped_column(Float, nullable=False, default=0.5)
    anger: Mapped[float] = mapped_column(Float, nullable=False, default=0.5)
    anxiety: Mapped[float] = mapped_column(Float, nullable=False, default=0.5)
    gratitude: Mapped[float] = mapped_column(Float, nullable=False, default=0.5)

    confidence: Mapped[float] = mapped_column(Float, nullable=False, default=1.0)

    __table_args__ = (
        Index("idx_entry_analytics_date", "date"),
    )
