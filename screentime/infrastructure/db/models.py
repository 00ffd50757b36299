"""
SQLAlchemy ORM models: adjustment types, adjustments and time entries
"""
from datetime import datetime
from sqlalchemy import String, Integer, TIMESTAMP, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from screentime.infrastructure.db.session import Base


class AdjustmentType(Base):
    """
    Reusable rule: a chore or behaviour mapped to a signed minute delta
    (positive = reward, negative = penalty)
    """
    __tablename__ = "adjustment_type"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    description: Mapped[str] = mapped_column(String(255), nullable=False)
    adjustment: Mapped[int] = mapped_column(Integer, nullable=False)


class Adjustment(Base):
    """
    One application of an AdjustmentType.

    The minutes are not stored here; they are read from the referenced type.
    """
    __tablename__ = "adjustment"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    adjustment_type_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("adjustment_type.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    description: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False)

    adjustment_type: Mapped[AdjustmentType] = relationship(lazy="joined")

    __table_args__ = (
        Index("ix_adjustment_created_at_id", "created_at", "id"),
    )

    @property
    def minutes(self) -> int:
        """Effective minutes of this adjustment (denormalized from its type)"""
        return self.adjustment_type.adjustment


class TimeEntry(Base):
    """
    Minutes actually spent on screen time
    """
    __tablename__ = "time_entry"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    time: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False)

    __table_args__ = (
        Index("ix_time_entry_created_at_id", "created_at", "id"),
    )
