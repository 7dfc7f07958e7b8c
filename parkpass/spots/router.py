from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from parkpass.auth.dependencies import require_owner
from parkpass.bookings.pricing import PriceType
from parkpass.database import get_db
from parkpass.exceptions import NotFoundError
from parkpass.models import SpotStatus
from parkpass.schemas import build_pagination
from parkpass.spots.schemas import Spot, SpotCreate, SpotUpdate, SpotSearch, SpotSearchResult, SpotWithDistance
from parkpass.spots.service import SpotService

router = APIRouter()

@router.get("/", response_model=SpotSearchResult)
def search_spots(
    search: Optional[str] = Query(None, description="Match name, address or description"),
    lat: Optional[float] = Query(None, ge=-90, le=90, description="Latitude for location-based search"),
    lng: Optional[float] = Query(None, ge=-180, le=180, description="Longitude for location-based search"),
    radius: float = Query(10.0, gt=0, description="Search radius in kilometers"),
    min_price: Optional[float] = Query(None, gt=0),
    max_price: Optional[float] = Query(None, gt=0),
    price_type: Optional[PriceType] = Query(None),
    sort_by: str = Query("distance", pattern="^(distance|price|created)$"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db)
):
    """Bookable spots with optional text, price and distance filters"""
    filters = SpotSearch(
        search=search,
        lat=lat,
        lng=lng,
        radius_km=radius,
        min_price=min_price,
        max_price=max_price,
        price_type=price_type,
        sort_by=sort_by
    )
    results, total = SpotService.search_spots(db, filters, page=page, limit=limit)

    spots = []
    for spot, distance in results:
        item = SpotWithDistance.from_orm(spot)
        item.distance_km = distance
        spots.append(item)

    return {"spots": spots, "pagination": build_pagination(page, limit, total)}

@router.get("/owner/my-spots")
def get_my_spots(
    spot_status: Optional[SpotStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    current_user = Depends(require_owner),
    db: Session = Depends(get_db)
):
    """Spots listed by the calling owner"""
    spots, total = SpotService.get_owner_spots(db, current_user.id, spot_status, page, limit)
    return {
        "spots": [Spot.from_orm(spot) for spot in spots],
        "pagination": build_pagination(page, limit, total)
    }

@router.get("/{spot_id}", response_model=Spot)
def get_spot(spot_id: int, db: Session = Depends(get_db)):
    """Get spot details by ID"""
    spot = SpotService.get_spot_by_id(db, spot_id)
    if not spot:
        raise NotFoundError("Parking spot not found")
    return spot

@router.post("/", response_model=Spot, status_code=status.HTTP_201_CREATED)
def create_spot(
    spot: SpotCreate,
    current_user = Depends(require_owner),
    db: Session = Depends(get_db)
):
    """List a new parking spot"""
    return SpotService.create_spot(db, current_user, spot)

@router.put("/{spot_id}", response_model=Spot)
def update_spot(
    spot_id: int,
    spot_update: SpotUpdate,
    current_user = Depends(require_owner),
    db: Session = Depends(get_db)
):
    """Edit a listing; changing total slots adjusts available slots"""
    return SpotService.update_spot(db, spot_id, current_user, spot_update)
