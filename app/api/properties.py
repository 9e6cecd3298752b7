"""
Property management API endpoints.
"""

from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel
from typing import Optional, List
from sqlalchemy.orm import Session

from app.calculations.models import ExitStrategy, PropertyStatus
from app.db.database import get_db
from app.db.models import Property

router = APIRouter()


class PropertyCreate(BaseModel):
    """Schema for creating a property."""

    name: str
    address_street: Optional[str] = None
    address_city: Optional[str] = None
    address_state: Optional[str] = None
    address_zip: Optional[str] = None
    property_type: ExitStrategy = ExitStrategy.rent
    status: PropertyStatus = PropertyStatus.lead
    sqft: Optional[float] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[float] = None
    year_built: Optional[int] = None
    lot_size: Optional[float] = None
    purchase_price: Optional[float] = None
    current_value: Optional[float] = None
    arv: Optional[float] = None


class PropertyUpdate(BaseModel):
    """Schema for updating a property."""

    name: Optional[str] = None
    address_street: Optional[str] = None
    address_city: Optional[str] = None
    address_state: Optional[str] = None
    address_zip: Optional[str] = None
    property_type: Optional[ExitStrategy] = None
    status: Optional[PropertyStatus] = None
    sqft: Optional[float] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[float] = None
    year_built: Optional[int] = None
    lot_size: Optional[float] = None
    purchase_price: Optional[float] = None
    current_value: Optional[float] = None
    arv: Optional[float] = None


class PropertyResponse(BaseModel):
    """Schema for property response."""

    id: str
    name: str
    address_street: Optional[str]
    address_city: Optional[str]
    address_state: Optional[str]
    address_zip: Optional[str]
    property_type: ExitStrategy
    status: PropertyStatus
    sqft: Optional[float]
    bedrooms: Optional[int]
    bathrooms: Optional[float]
    year_built: Optional[int]
    lot_size: Optional[float]
    purchase_price: Optional[float]
    current_value: Optional[float]
    arv: Optional[float]
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    class Config:
        from_attributes = True


class PropertyListResponse(BaseModel):
    """Response for listing properties."""

    properties: List[PropertyResponse]
    total: int


def property_to_response(prop: Property) -> PropertyResponse:
    """Convert Property model to response schema."""
    return PropertyResponse(
        id=prop.id,
        name=prop.name,
        address_street=prop.address_street,
        address_city=prop.address_city,
        address_state=prop.address_state,
        address_zip=prop.address_zip,
        property_type=prop.property_type or ExitStrategy.rent,
        status=prop.status or PropertyStatus.lead,
        sqft=prop.sqft,
        bedrooms=prop.bedrooms,
        bathrooms=prop.bathrooms,
        year_built=prop.year_built,
        lot_size=prop.lot_size,
        purchase_price=prop.purchase_price,
        current_value=prop.current_value,
        arv=prop.arv,
        created_at=prop.created_at.isoformat() if prop.created_at else None,
        updated_at=prop.updated_at.isoformat() if prop.updated_at else None,
    )


def get_property_or_404(db: Session, property_id: str) -> Property:
    """Fetch a live property row or raise 404."""
    db_property = (
        db.query(Property)
        .filter(Property.id == property_id, Property.is_deleted == False)
        .first()
    )

    if not db_property:
        raise HTTPException(status_code=404, detail="Property not found")

    return db_property


@router.get("/", response_model=PropertyListResponse)
async def list_properties(
    skip: int = 0,
    limit: int = 100,
    property_type: Optional[ExitStrategy] = None,
    status: Optional[PropertyStatus] = None,
    db: Session = Depends(get_db),
):
    """List all properties with optional filtering."""
    query = db.query(Property).filter(Property.is_deleted == False)

    if property_type:
        query = query.filter(Property.property_type == property_type)
    if status:
        query = query.filter(Property.status == status)

    total = query.count()
    properties = query.order_by(Property.created_at).offset(skip).limit(limit).all()

    return PropertyListResponse(
        properties=[property_to_response(p) for p in properties],
        total=total,
    )


@router.post("/", response_model=PropertyResponse, status_code=201)
async def create_property(
    property_data: PropertyCreate,
    db: Session = Depends(get_db),
):
    """Create a new property."""
    db_property = Property(**property_data.model_dump())

    db.add(db_property)
    db.commit()
    db.refresh(db_property)

    return property_to_response(db_property)


@router.get("/{property_id}", response_model=PropertyResponse)
async def get_property(
    property_id: str,
    db: Session = Depends(get_db),
):
    """Get a property by ID."""
    return property_to_response(get_property_or_404(db, property_id))


@router.put("/{property_id}", response_model=PropertyResponse)
async def update_property(
    property_id: str,
    property_data: PropertyUpdate,
    db: Session = Depends(get_db),
):
    """Update a property."""
    db_property = get_property_or_404(db, property_id)

    # Update only provided fields
    update_data = property_data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(db_property, field, value)

    db.commit()
    db.refresh(db_property)

    return property_to_response(db_property)


@router.delete("/{property_id}")
async def delete_property(
    property_id: str,
    db: Session = Depends(get_db),
):
    """Soft delete a property."""
    db_property = get_property_or_404(db, property_id)

    # Soft delete
    db_property.is_deleted = True
    db.commit()

    return {"deleted": True, "id": property_id}


@router.get("/{property_id}/scenarios")
async def list_property_scenarios(
    property_id: str,
    db: Session = Depends(get_db),
):
    """List all scenarios for a property with their stored metrics."""
    db_property = get_property_or_404(db, property_id)

    scenarios = db_property.scenarios.filter_by(is_deleted=False).all()

    return {
        "property_id": property_id,
        "scenarios": [
            {
                "id": s.id,
                "name": s.name,
                "exit_strategy": s.exit_strategy,
                "cap_rate": s.cap_rate,
                "cash_on_cash": s.cash_on_cash,
                "roi": s.roi,
                "monthly_noi": s.monthly_noi,
                "total_profit": s.total_profit,
                "irr": s.irr,
                "npv": s.npv,
            }
            for s in scenarios
        ],
        "total": len(scenarios),
    }
