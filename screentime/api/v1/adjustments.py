"""
Adjustment API endpoints
"""
from datetime import datetime

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from screentime.api.deps import get_db
from screentime.application.queries import AdjustmentFilter, RecordQueryService
from screentime.infrastructure.db.models import Adjustment
from screentime.infrastructure.records.repository import RecordRepository


router = APIRouter(prefix="/adjustments", tags=["adjustments"])


# === Request/Response models ===

class CreateAdjustmentRequest(BaseModel):
    type: int  # adjustment type id
    description: str | None = None


class AdjustmentResponse(BaseModel):
    id: int
    type: int
    description: str | None = None
    adjustment: int  # effective minutes, taken from the type
    created_at: datetime


def _to_response(adjustment: Adjustment) -> AdjustmentResponse:
    return AdjustmentResponse(
        id=adjustment.id,
        type=adjustment.adjustment_type_id,
        description=adjustment.description,
        adjustment=adjustment.minutes,
        created_at=adjustment.created_at,
    )


# === Endpoints ===

@router.get("", response_model=list[AdjustmentResponse])
def list_adjustments(
    db: Session = Depends(get_db),
    type_id: int | None = Query(None, alias="type"),
    since: datetime | None = None,
    limit: int | None = None,
):
    """Adjustments, most recent first"""
    filters = AdjustmentFilter(type=type_id, since=since, limit=limit)
    adjustments = RecordQueryService(db).list_adjustments(filters)
    return [_to_response(a) for a in adjustments]


@router.post("", response_model=AdjustmentResponse, status_code=status.HTTP_201_CREATED)
def create_adjustment(req: CreateAdjustmentRequest, db: Session = Depends(get_db)):
    """Apply an adjustment type; 404 if the type does not exist"""
    adjustment = RecordRepository(db).create_adjustment(
        type_id=req.type,
        description=req.description,
    )
    return _to_response(adjustment)


@router.get("/{adjustment_id}", response_model=AdjustmentResponse)
def get_adjustment(adjustment_id: int, db: Session = Depends(get_db)):
    return _to_response(RecordQueryService(db).get_adjustment(adjustment_id))


@router.delete("/{adjustment_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_adjustment(adjustment_id: int, db: Session = Depends(get_db)):
    RecordRepository(db).delete_adjustment(adjustment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
