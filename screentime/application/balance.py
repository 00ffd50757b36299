"""
Balance service - the currently available screen time.

The balance is derived on every call from the full record history and is
never stored:

    balance = sum(adjustment type minutes over adjustments) - sum(time entry minutes)

It may be negative when more time was spent than earned.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.orm import Session

from screentime.infrastructure.records.repository import RecordRepository
from screentime.utils.minutes import format_minutes


@dataclass(frozen=True)
class BalanceSummary:
    earned: int  # signed sum over adjustments
    spent: int   # sum over time entries

    @property
    def time(self) -> int:
        return self.earned - self.spent

    @property
    def formatted_time(self) -> str:
        return format_minutes(self.time)


class BalanceService:
    def __init__(self, db: Session):
        self.repo = RecordRepository(db)

    def current_balance(self, as_of: datetime | None = None) -> int:
        """
        Available minutes now, or at *as_of* when given.

        Storage failures propagate as StorageError.
        """
        return self.balance_summary(as_of).time

    def balance_summary(self, as_of: datetime | None = None) -> BalanceSummary:
        """Balance together with the earned and spent totals it is made of."""
        earned, spent = self.repo.sum_balance(as_of)
        return BalanceSummary(earned=earned, spent=spent)
