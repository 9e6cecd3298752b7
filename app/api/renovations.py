"""
Renovation tracking API endpoints.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.api.properties import get_property_or_404
from app.calculations.renovation import RenovationLine, RenovationStatus, summarize_budget
from app.calculations.validation import require_non_negative, require_positive
from app.db.database import get_db
from app.db.models import Property, RenovationItem

router = APIRouter()


class RenovationCreate(BaseModel):
    """Schema for creating a renovation item."""

    category: str
    description: str
    estimated_cost: float
    actual_cost: Optional[float] = None
    contractor: Optional[str] = None
    status: RenovationStatus = RenovationStatus.pending
    notes: Optional[str] = None


class RenovationUpdate(BaseModel):
    category: Optional[str] = None
    description: Optional[str] = None
    estimated_cost: Optional[float] = None
    actual_cost: Optional[float] = None
    contractor: Optional[str] = None
    status: Optional[RenovationStatus] = None
    notes: Optional[str] = None


class RenovationResponse(BaseModel):
    id: str
    property_id: str
    category: str
    description: str
    estimated_cost: float
    actual_cost: Optional[float]
    contractor: Optional[str]
    status: RenovationStatus
    notes: Optional[str]

    class Config:
        from_attributes = True


class RenovationListResponse(BaseModel):
    renovations: List[RenovationResponse]
    total: int


def _validate_costs(estimated_cost: Optional[float], actual_cost: Optional[float]) -> None:
    if estimated_cost is not None:
        require_positive("estimated_cost", estimated_cost)
    if actual_cost is not None:
        require_non_negative("actual_cost", actual_cost)


def budget_for_property(db_property: Property) -> dict:
    """Summarize the live renovation items of a property."""
    items = db_property.renovations.filter_by(is_deleted=False).all()
    return summarize_budget(
        RenovationLine(
            category=item.category,
            estimated_cost=item.estimated_cost,
            status=item.status,
            actual_cost=item.actual_cost,
        )
        for item in items
    )


def get_renovation_or_404(db: Session, property_id: str, renovation_id: str) -> RenovationItem:
    item = (
        db.query(RenovationItem)
        .filter(
            RenovationItem.id == renovation_id,
            RenovationItem.property_id == property_id,
            RenovationItem.is_deleted == False,
        )
        .first()
    )
    if not item:
        raise HTTPException(status_code=404, detail="Renovation not found")
    return item


@router.get("/{property_id}/renovations", response_model=RenovationListResponse)
async def list_renovations(
    property_id: str,
    status: Optional[RenovationStatus] = None,
    db: Session = Depends(get_db),
):
    """List renovation items for a property."""
    db_property = get_property_or_404(db, property_id)

    query = db_property.renovations.filter_by(is_deleted=False)
    if status:
        query = query.filter(RenovationItem.status == status)
    items = query.order_by(RenovationItem.created_at.desc()).all()

    return RenovationListResponse(
        renovations=[RenovationResponse.model_validate(i) for i in items],
        total=len(items),
    )


@router.post(
    "/{property_id}/renovations", response_model=RenovationResponse, status_code=201
)
async def create_renovation(
    property_id: str,
    renovation_data: RenovationCreate,
    db: Session = Depends(get_db),
):
    """Add a renovation item to a property."""
    get_property_or_404(db, property_id)
    _validate_costs(renovation_data.estimated_cost, renovation_data.actual_cost)

    item = RenovationItem(property_id=property_id, **renovation_data.model_dump())
    db.add(item)
    db.commit()
    db.refresh(item)

    return RenovationResponse.model_validate(item)


@router.put(
    "/{property_id}/renovations/{renovation_id}", response_model=RenovationResponse
)
async def update_renovation(
    property_id: str,
    renovation_id: str,
    renovation_data: RenovationUpdate,
    db: Session = Depends(get_db),
):
    """Update a renovation item."""
    item = get_renovation_or_404(db, property_id, renovation_id)

    update_data = renovation_data.model_dump(exclude_unset=True)
    _validate_costs(update_data.get("estimated_cost"), update_data.get("actual_cost"))
    for field, value in update_data.items():
        setattr(item, field, value)

    db.commit()
    db.refresh(item)

    return RenovationResponse.model_validate(item)


@router.delete("/{property_id}/renovations/{renovation_id}")
async def delete_renovation(
    property_id: str,
    renovation_id: str,
    db: Session = Depends(get_db),
):
    """Soft delete a renovation item."""
    item = get_renovation_or_404(db, property_id, renovation_id)

    item.is_deleted = True
    db.commit()

    return {"deleted": True, "id": renovation_id}


@router.get("/{property_id}/renovations/summary")
async def renovation_summary(property_id: str, db: Session = Depends(get_db)):
    """Budget totals for a property's renovation items."""
    summary = budget_for_property(get_property_or_404(db, property_id))
    summary["property_id"] = property_id
    return summary
