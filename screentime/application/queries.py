"""
Record query service - filtered, most-recent-first listings for audit.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.orm import Session

from screentime.application.errors import ValidationError
from screentime.infrastructure.db.models import Adjustment, AdjustmentType, TimeEntry
from screentime.infrastructure.records.repository import INTEGER_MAX, RecordRepository

MAX_ROWS = INTEGER_MAX


@dataclass(frozen=True)
class TimeEntryFilter:
    """
    Listing filter; omitted fields impose no constraint.

    since: inclusive lower bound on created_at
    limit: maximum number of results, None for unbounded, 0 for none at all
    """
    since: datetime | None = None
    limit: int | None = None

    def __post_init__(self):
        if self.limit is not None and self.limit < 0:
            raise ValidationError("limit must be >= 0")
        if self.limit is not None and self.limit > MAX_ROWS:
            # Larger than any table can hold: same as unbounded
            object.__setattr__(self, "limit", MAX_ROWS)


@dataclass(frozen=True)
class AdjustmentFilter(TimeEntryFilter):
    type: int | None = None  # adjustment type id, exact match


class RecordQueryService:
    def __init__(self, db: Session):
        self.repo = RecordRepository(db)

    def list_adjustments(self, filters: AdjustmentFilter | None = None) -> list[Adjustment]:
        """
        Adjustments ordered created_at DESC, id DESC.

        An unknown type id yields an empty list, not an error.
        """
        filters = filters or AdjustmentFilter()
        if filters.limit == 0:
            return []
        return self.repo.query_adjustments(
            type_id=filters.type,
            since=filters.since,
            limit=filters.limit,
        )

    def list_time_entries(self, filters: TimeEntryFilter | None = None) -> list[TimeEntry]:
        filters = filters or TimeEntryFilter()
        if filters.limit == 0:
            return []
        return self.repo.query_time_entries(since=filters.since, limit=filters.limit)

    def list_adjustment_types(self) -> list[AdjustmentType]:
        return self.repo.all_adjustment_types()

    def get_adjustment_type(self, type_id: int) -> AdjustmentType:
        return self.repo.get_adjustment_type(type_id)

    def get_adjustment(self, adjustment_id: int) -> Adjustment:
        return self.repo.get_adjustment(adjustment_id)

    def get_time_entry(self, entry_id: int) -> TimeEntry:
        return self.repo.get_time_entry(entry_id)
