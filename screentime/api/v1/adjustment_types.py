"""
Adjustment type API endpoints
"""
from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, ConfigDict
from sqlalchemy.orm import Session

from screentime.api.deps import get_db
from screentime.application.queries import RecordQueryService
from screentime.infrastructure.records.repository import RecordRepository


router = APIRouter(prefix="/adjustment-types", tags=["adjustment-types"])


# === Request/Response models ===

class CreateAdjustmentTypeRequest(BaseModel):
    description: str
    adjustment: int  # minutes per use, negative for penalties


class AdjustmentTypeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    description: str
    adjustment: int


# === Endpoints ===

@router.get("", response_model=list[AdjustmentTypeResponse])
def list_adjustment_types(db: Session = Depends(get_db)):
    """All adjustment types in creation order"""
    types = RecordQueryService(db).list_adjustment_types()
    return [AdjustmentTypeResponse.model_validate(t) for t in types]


@router.post("", response_model=AdjustmentTypeResponse, status_code=status.HTTP_201_CREATED)
def create_adjustment_type(req: CreateAdjustmentTypeRequest, db: Session = Depends(get_db)):
    adjustment_type = RecordRepository(db).create_adjustment_type(
        description=req.description,
        adjustment=req.adjustment,
    )
    return AdjustmentTypeResponse.model_validate(adjustment_type)


@router.get("/{type_id}", response_model=AdjustmentTypeResponse)
def get_adjustment_type(type_id: int, db: Session = Depends(get_db)):
    adjustment_type = RecordQueryService(db).get_adjustment_type(type_id)
    return AdjustmentTypeResponse.model_validate(adjustment_type)


@router.delete("/{type_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_adjustment_type(type_id: int, db: Session = Depends(get_db)):
    """Delete an adjustment type; 409 while adjustments still reference it"""
    RecordRepository(db).delete_adjustment_type(type_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
