from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from parkpass.auth.dependencies import get_current_user
from parkpass.database import get_db
from parkpass.payments.schemas import PaymentProcessRequest, PaymentProcessResponse, PaymentHistoryResponse
from parkpass.payments.service import PaymentService
from parkpass.schemas import build_pagination

router = APIRouter()

@router.post("/process", response_model=PaymentProcessResponse)
def process_payment(
    request: PaymentProcessRequest,
    current_user = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Mark a booking's pending payments as completed"""
    payments = PaymentService(db).process_payment(
        request.booking_id,
        current_user.id,
        request.method,
        transaction_id=request.transaction_id
    )
    return {"message": "Payment processed successfully", "payments": payments}

@router.get("/history", response_model=PaymentHistoryResponse)
def payment_history(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    current_user = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    payments, total = PaymentService(db).get_payment_history(current_user.id, page, limit)
    return {"payments": payments, "pagination": build_pagination(page, limit, total)}
