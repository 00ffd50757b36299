"""
Time entry API endpoints
"""
from datetime import datetime

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from screentime.api.deps import get_db
from screentime.application.queries import RecordQueryService, TimeEntryFilter
from screentime.infrastructure.db.models import TimeEntry
from screentime.infrastructure.records.repository import RecordRepository
from screentime.utils.minutes import format_minutes


router = APIRouter(prefix="/time-entries", tags=["time-entries"])


# === Request/Response models ===

class CreateTimeEntryRequest(BaseModel):
    time: int  # minutes spent


class TimeEntryResponse(BaseModel):
    id: int
    time: int
    time_formatted: str  # "h:mm"
    created_at: datetime


def _to_response(entry: TimeEntry) -> TimeEntryResponse:
    return TimeEntryResponse(
        id=entry.id,
        time=entry.time,
        time_formatted=format_minutes(entry.time),
        created_at=entry.created_at,
    )


# === Endpoints ===

@router.get("", response_model=list[TimeEntryResponse])
def list_time_entries(
    db: Session = Depends(get_db),
    since: datetime | None = None,
    limit: int | None = None,
):
    """Time entries, most recent first"""
    entries = RecordQueryService(db).list_time_entries(
        TimeEntryFilter(since=since, limit=limit)
    )
    return [_to_response(e) for e in entries]


@router.post("", response_model=TimeEntryResponse, status_code=status.HTTP_201_CREATED)
def create_time_entry(req: CreateTimeEntryRequest, db: Session = Depends(get_db)):
    return _to_response(RecordRepository(db).create_time_entry(req.time))


@router.get("/{entry_id}", response_model=TimeEntryResponse)
def get_time_entry(entry_id: int, db: Session = Depends(get_db)):
    return _to_response(RecordQueryService(db).get_time_entry(entry_id))


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_time_entry(entry_id: int, db: Session = Depends(get_db)):
    RecordRepository(db).delete_time_entry(entry_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
