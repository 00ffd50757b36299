"""
Balance API endpoint
"""
from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from screentime.api.deps import get_db
from screentime.application.balance import BalanceService


router = APIRouter(tags=["balance"])


class BalanceResponse(BaseModel):
    time: int  # available minutes, negative when overspent
    formatted_time: str
    earned: int
    spent: int


@router.get("/time", response_model=BalanceResponse)
def get_available_time(db: Session = Depends(get_db), as_of: datetime | None = None):
    """Currently available screen time (or as of the given instant)"""
    summary = BalanceService(db).balance_summary(as_of)
    return BalanceResponse(
        time=summary.time,
        formatted_time=summary.formatted_time,
        earned=summary.earned,
        spent=summary.spent,
    )
