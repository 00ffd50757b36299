"""
Record repository - persistence of adjustment types, adjustments and time entries.

All input validation happens here; the balance and query services above
trust what this layer returns. Driver failures are logged and re-raised as
StorageError.
"""
import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Callable, Iterator, List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from screentime.application.errors import (
    ConflictError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from screentime.infrastructure.db.models import Adjustment, AdjustmentType, TimeEntry
from screentime.utils.timestamps import as_utc, utcnow

logger = logging.getLogger(__name__)

DESCRIPTION_MAX_LENGTH = 255
# Columns (ids and minutes) are 32-bit INTEGER
INTEGER_MAX = 2**31 - 1


def _require_int(value, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field} must be an integer")
    if abs(value) > INTEGER_MAX:
        raise ValidationError(f"{field} is out of range")
    return value


def _storable_id(record_id: int) -> bool:
    """Ids outside the INTEGER range cannot exist in any table"""
    return -INTEGER_MAX - 1 <= record_id <= INTEGER_MAX


class RecordRepository:
    """
    Repository for the three record kinds.

    Writes commit immediately; ids and created_at are always assigned here,
    never by the caller. ``clock`` supplies created_at values.
    """

    def __init__(self, db: Session, clock: Callable[[], datetime] = utcnow):
        self.db = db
        self.clock = clock

    @contextmanager
    def _storage_errors(self, action: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Storage failure while %s", action)
            raise StorageError(f"Storage failure while {action}") from exc

    def _next_created_at(self, model) -> datetime:
        """
        Clock reading, never earlier than the newest created_at in the table.

        Keeps created_at non-decreasing in insertion order when the wall
        clock steps back.
        """
        now = as_utc(self.clock())
        latest = self.db.scalar(select(func.max(model.created_at)))
        if latest is not None and as_utc(latest) > now:
            return as_utc(latest)
        return now

    # ------------------------------------------------------------------
    # Adjustment types
    # ------------------------------------------------------------------

    def create_adjustment_type(self, description: str, adjustment: int) -> AdjustmentType:
        """
        Create an adjustment type

        Raises:
            ValidationError: empty/too long description or non-integer adjustment
        """
        if not isinstance(description, str) or not description.strip():
            raise ValidationError("description must not be empty")
        description = description.strip()
        if len(description) > DESCRIPTION_MAX_LENGTH:
            raise ValidationError(
                f"description must be at most {DESCRIPTION_MAX_LENGTH} characters"
            )
        adjustment = _require_int(adjustment, "adjustment")

        adjustment_type = AdjustmentType(description=description, adjustment=adjustment)
        with self._storage_errors("creating adjustment type"):
            self.db.add(adjustment_type)
            self.db.commit()
            self.db.refresh(adjustment_type)

        logger.info(
            "Created adjustment type id=%d adjustment=%d",
            adjustment_type.id, adjustment_type.adjustment,
        )
        return adjustment_type

    def get_adjustment_type(self, type_id: int) -> AdjustmentType:
        if not _storable_id(type_id):
            raise NotFoundError("Adjustment type", type_id)
        with self._storage_errors("loading adjustment type"):
            adjustment_type = self.db.get(AdjustmentType, type_id)
        if adjustment_type is None:
            raise NotFoundError("Adjustment type", type_id)
        return adjustment_type

    def all_adjustment_types(self) -> List[AdjustmentType]:
        """All adjustment types in creation order"""
        with self._storage_errors("listing adjustment types"):
            return list(
                self.db.scalars(select(AdjustmentType).order_by(AdjustmentType.id.asc()))
            )

    def delete_adjustment_type(self, type_id: int) -> None:
        """
        Delete an unused adjustment type

        Raises:
            NotFoundError: no such type
            ConflictError: adjustments still reference the type
        """
        adjustment_type = self.get_adjustment_type(type_id)

        with self._storage_errors("deleting adjustment type"):
            references = self.db.scalar(
                select(func.count(Adjustment.id)).where(
                    Adjustment.adjustment_type_id == type_id
                )
            )
            if references:
                raise ConflictError(
                    f"There are still {references} adjustment(s) referencing "
                    f"adjustment type {type_id}"
                )
            self.db.delete(adjustment_type)
            try:
                self.db.commit()
            except IntegrityError as exc:
                # An adjustment was inserted between the check and the delete
                self.db.rollback()
                raise ConflictError(
                    f"There are still adjustments referencing adjustment type {type_id}"
                ) from exc

        logger.info("Deleted adjustment type id=%d", type_id)

    # ------------------------------------------------------------------
    # Adjustments
    # ------------------------------------------------------------------

    def create_adjustment(self, type_id: int, description: Optional[str] = None) -> Adjustment:
        """
        Apply an adjustment type once

        Raises:
            NotFoundError: type_id does not reference an adjustment type
            ValidationError: description too long
        """
        adjustment_type = self.get_adjustment_type(type_id)

        if description is not None:
            if not isinstance(description, str):
                raise ValidationError("description must be a string")
            description = description.strip() or None
        if description is not None and len(description) > DESCRIPTION_MAX_LENGTH:
            raise ValidationError(
                f"description must be at most {DESCRIPTION_MAX_LENGTH} characters"
            )

        with self._storage_errors("creating adjustment"):
            adjustment = Adjustment(
                adjustment_type_id=adjustment_type.id,
                description=description,
                created_at=self._next_created_at(Adjustment),
            )
            self.db.add(adjustment)
            try:
                self.db.commit()
            except IntegrityError as exc:
                # The type was deleted between the lookup and the insert
                self.db.rollback()
                raise NotFoundError("Adjustment type", type_id) from exc
            self.db.refresh(adjustment)

        logger.info(
            "Created adjustment id=%d type=%d minutes=%d",
            adjustment.id, type_id, adjustment_type.adjustment,
        )
        return adjustment

    def get_adjustment(self, adjustment_id: int) -> Adjustment:
        if not _storable_id(adjustment_id):
            raise NotFoundError("Adjustment", adjustment_id)
        with self._storage_errors("loading adjustment"):
            adjustment = self.db.get(Adjustment, adjustment_id)
        if adjustment is None:
            raise NotFoundError("Adjustment", adjustment_id)
        return adjustment

    def delete_adjustment(self, adjustment_id: int) -> None:
        adjustment = self.get_adjustment(adjustment_id)
        with self._storage_errors("deleting adjustment"):
            self.db.delete(adjustment)
            self.db.commit()
        logger.info("Deleted adjustment id=%d", adjustment_id)

    def query_adjustments(
        self,
        type_id: Optional[int] = None,
        since: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[Adjustment]:
        """
        Adjustments, most recent first (created_at DESC, id DESC)

        Args:
            type_id: only adjustments of this type
            since: inclusive lower bound on created_at
            limit: maximum number of rows (None = unbounded)
        """
        if type_id is not None and not _storable_id(type_id):
            return []

        query = select(Adjustment)
        if type_id is not None:
            query = query.where(Adjustment.adjustment_type_id == type_id)
        if since is not None:
            query = query.where(Adjustment.created_at >= as_utc(since))
        query = query.order_by(Adjustment.created_at.desc(), Adjustment.id.desc())
        if limit is not None:
            query = query.limit(limit)

        with self._storage_errors("listing adjustments"):
            return list(self.db.scalars(query).unique())

    # ------------------------------------------------------------------
    # Time entries
    # ------------------------------------------------------------------

    def create_time_entry(self, minutes: int) -> TimeEntry:
        """
        Record minutes spent

        Raises:
            ValidationError: minutes is negative or not an integer
        """
        minutes = _require_int(minutes, "time")
        if minutes < 0:
            raise ValidationError("time must not be negative")

        with self._storage_errors("creating time entry"):
            time_entry = TimeEntry(time=minutes, created_at=self._next_created_at(TimeEntry))
            self.db.add(time_entry)
            self.db.commit()
            self.db.refresh(time_entry)

        logger.info("Created time entry id=%d time=%d", time_entry.id, time_entry.time)
        return time_entry

    def get_time_entry(self, entry_id: int) -> TimeEntry:
        if not _storable_id(entry_id):
            raise NotFoundError("Time entry", entry_id)
        with self._storage_errors("loading time entry"):
            time_entry = self.db.get(TimeEntry, entry_id)
        if time_entry is None:
            raise NotFoundError("Time entry", entry_id)
        return time_entry

    def delete_time_entry(self, entry_id: int) -> None:
        time_entry = self.get_time_entry(entry_id)
        with self._storage_errors("deleting time entry"):
            self.db.delete(time_entry)
            self.db.commit()
        logger.info("Deleted time entry id=%d", entry_id)

    def query_time_entries(
        self,
        since: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[TimeEntry]:
        """Time entries, most recent first (created_at DESC, id DESC)"""
        query = select(TimeEntry)
        if since is not None:
            query = query.where(TimeEntry.created_at >= as_utc(since))
        query = query.order_by(TimeEntry.created_at.desc(), TimeEntry.id.desc())
        if limit is not None:
            query = query.limit(limit)

        with self._storage_errors("listing time entries"):
            return list(self.db.scalars(query))

    # ------------------------------------------------------------------
    # Aggregates
    # ------------------------------------------------------------------

    def sum_balance(self, as_of: Optional[datetime] = None) -> Tuple[int, int]:
        """
        Return (earned, spent) minutes.

        Both sums come from one SELECT so they see the same snapshot
        whatever the isolation level.

        Args:
            as_of: only count records created at or before this instant
        """
        earned = (
            select(func.coalesce(func.sum(AdjustmentType.adjustment), 0))
            .select_from(Adjustment)
            .join(AdjustmentType, Adjustment.adjustment_type_id == AdjustmentType.id)
        )
        spent = select(func.coalesce(func.sum(TimeEntry.time), 0))
        if as_of is not None:
            bound = as_utc(as_of)
            earned = earned.where(Adjustment.created_at <= bound)
            spent = spent.where(TimeEntry.created_at <= bound)

        query = select(
            earned.scalar_subquery().label("earned"),
            spent.scalar_subquery().label("spent"),
        )
        with self._storage_errors("computing balance"):
            row = self.db.execute(query).one()
        return int(row.earned), int(row.spent)
