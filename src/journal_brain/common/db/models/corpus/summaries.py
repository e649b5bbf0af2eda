# ORM models for generated month + year summaries
from journal_brain.common.db.models.base import MainDB_Base
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Text, Integer, Float, JSON, UniqueConstraint
from typing import Optional

class MonthSummary(MainDB_Base):
    __tablename__ = "month_summaries"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    summary_text: Mapped[str] = mapped_column(Text, nullable=False)
    key_topics: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    happiness_avg: Mapped[float] = mapped_column(Float, nullable=False)
    drivers_positive: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    drivers_negative: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    embedding: Mapped[Optional[list[float]]] = mapped_column(JSON, nullable=True)

    __table_args__ = (
        UniqueConstraint("year", "month", name="uq_month_summaries_year_month"),
    )

class YearSummary(MainDB_Base):
    __tablename__ = "year_summaries"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    year: Mapped[int] = mapped_column(Integer, nullable=False, unique=True)
    summary_text: Mapped[str] = mapped_column(Text, nullable=False)
    happiness_avg: Mapped[float] = mapped_column(Float, nullable=False)
    embedding: Mapped[Optional[list[float]]] = mapped_column(JSON, nullable=True)
