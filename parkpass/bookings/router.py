from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional
from datetime import date

from parkpass.auth.dependencies import get_current_user, require_owner
from parkpass.database import get_db
from parkpass.bookings.booking_service import BookingService
from parkpass.bookings.codes import generate_qr_code_image
from parkpass.bookings.schemas import (
    BookingCreateRequest, BookingCreateResponse, BookingDetail, BookingListResponse,
    OwnerBookingListResponse, BookingExtensionResponse, EntryValidationRequest,
    EntryValidationResponse, EntryBookingSummary, ExitResponse, QRCodeResponse,
    VehicleSummary
)
from parkpass.models import BookingStatus
from parkpass.schemas import MessageResponse, build_pagination

router = APIRouter()

# Customer Endpoints
@router.post("/", response_model=BookingCreateResponse, status_code=status.HTTP_201_CREATED)
def create_booking(
    request: BookingCreateRequest,
    current_user = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Reserve a slot at a parking spot"""
    booking = BookingService(db).create_booking(current_user, request)
    return {"message": "Booking created successfully", "booking": booking}

@router.get("/my-bookings", response_model=BookingListResponse)
def get_my_bookings(
    booking_status: Optional[BookingStatus] = Query(None, alias="status", description="Filter by booking status"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    current_user = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Current customer's bookings, newest first"""
    bookings, total = BookingService(db).list_user_bookings(current_user.id, booking_status, page, limit)
    return {"bookings": bookings, "pagination": build_pagination(page, limit, total)}

# Owner Endpoints
@router.get("/owner/bookings", response_model=OwnerBookingListResponse)
def get_owner_bookings(
    booking_status: Optional[BookingStatus] = Query(None, alias="status", description="Filter by booking status"),
    spot_id: Optional[int] = Query(None, description="Filter by spot"),
    start_date: Optional[date] = Query(None, description="Bookings starting on or after"),
    end_date: Optional[date] = Query(None, description="Bookings starting on or before"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    current_user = Depends(require_owner),
    db: Session = Depends(get_db)
):
    """Bookings on the spots the caller owns"""
    bookings, total = BookingService(db).list_owner_bookings(
        current_user,
        status=booking_status,
        spot_id=spot_id,
        start_date=start_date,
        end_date=end_date,
        page=page,
        limit=limit
    )
    return {"bookings": bookings, "pagination": build_pagination(page, limit, total)}

@router.post("/validate-entry", response_model=EntryValidationResponse)
def validate_entry(
    request: EntryValidationRequest,
    current_user = Depends(require_owner),
    db: Session = Depends(get_db)
):
    """Validate a QR token or PIN at the gate"""
    booking = BookingService(db).validate_entry(request.code, current_user)
    summary = EntryBookingSummary(
        id=booking.id,
        spot_name=booking.spot.name,
        start_time=booking.start_time,
        end_time=booking.end_time,
        reserved_end_time=booking.reserved_end_time,
        total_cost=booking.total_cost,
        status=booking.status,
        is_extended=booking.is_extended,
        vehicle=VehicleSummary.from_orm(booking.vehicle),
        customer_name=booking.user.name,
        customer_phone=booking.user.phone
    )
    return {"success": True, "message": "Entry validated successfully", "booking": summary}

@router.get("/{booking_id}", response_model=BookingDetail)
def get_booking(
    booking_id: int,
    current_user = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get booking details by ID"""
    return BookingService(db).get_booking(booking_id, current_user)

@router.get("/{booking_id}/qr", response_model=QRCodeResponse)
def get_booking_qr(
    booking_id: int,
    current_user = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Entry codes for a booking with the QR token rendered as an image"""
    booking = BookingService(db).get_booking(booking_id, current_user)
    return QRCodeResponse(
        booking_id=booking.id,
        qr_code=booking.qr_code,
        pin=booking.pin,
        image=generate_qr_code_image(booking.qr_code)
    )

@router.post("/{booking_id}/extend", response_model=BookingExtensionResponse)
def extend_booking(
    booking_id: int,
    current_user = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Extend an active booking by one hour"""
    booking, extension_cost = BookingService(db).extend_booking(booking_id, current_user)
    return {"message": "Booking extended successfully", "booking": booking, "extension_cost": extension_cost}

@router.post("/{booking_id}/cancel", response_model=MessageResponse)
def cancel_booking(
    booking_id: int,
    current_user = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Cancel a pending booking"""
    BookingService(db).cancel_booking(booking_id, current_user)
    return {"message": "Booking cancelled successfully"}

@router.post("/{booking_id}/exit", response_model=ExitResponse)
def process_exit(
    booking_id: int,
    current_user = Depends(require_owner),
    db: Session = Depends(get_db)
):
    """Record the vehicle leaving and release its slot"""
    actual_end_time = BookingService(db).process_exit(booking_id, current_user)
    return {"message": "Exit processed successfully", "actual_end_time": actual_end_time}
