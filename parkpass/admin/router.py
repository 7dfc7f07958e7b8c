from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy import func
from sqlalchemy.orm import Session
from typing import Optional

from parkpass.auth.dependencies import require_admin
from parkpass.bookings.booking_service import BookingService
from parkpass.bookings.schemas import OwnerBookingListResponse
from parkpass.database import get_db
from parkpass.models import Booking, BookingStatus, ParkingSpot, SpotStatus
from parkpass.schemas import build_pagination

router = APIRouter()

@router.get("/overview")
def get_overview(admin_user = Depends(require_admin), db: Session = Depends(get_db)):
    """Booking counts per status and current slot occupancy"""
    status_counts = dict(
        db.query(Booking.status, func.count(Booking.id)).group_by(Booking.status).all()
    )
    total_slots, available_slots = db.query(
        func.coalesce(func.sum(ParkingSpot.total_slots), 0),
        func.coalesce(func.sum(ParkingSpot.available_slots), 0)
    ).filter(ParkingSpot.status == SpotStatus.ACTIVE).one()

    return {
        "bookings": {s.value: status_counts.get(s, 0) for s in BookingStatus},
        "slots": {
            "total": int(total_slots),
            "available": int(available_slots),
            "occupied": int(total_slots) - int(available_slots)
        }
    }

@router.get("/bookings", response_model=OwnerBookingListResponse)
def get_all_bookings(
    booking_status: Optional[BookingStatus] = Query(None, alias="status"),
    spot_id: Optional[int] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    admin_user = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Every booking across all spots"""
    bookings, total = BookingService(db).list_owner_bookings(
        admin_user, status=booking_status, spot_id=spot_id, page=page, limit=limit
    )
    return {"bookings": bookings, "pagination": build_pagination(page, limit, total)}

@router.post("/sweeps/{sweep_name}/run")
def run_sweep(sweep_name: str, request: Request, admin_user = Depends(require_admin)):
    """Run one of the background sweeps immediately"""
    scheduler = request.app.state.scheduler
    if sweep_name not in scheduler.job_names:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown sweep. Available: {', '.join(scheduler.job_names)}"
        )
    processed = scheduler.run_now(sweep_name)
    return {"sweep": sweep_name, "processed": processed or 0}
