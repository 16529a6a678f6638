"""
Payment API Routes
CRUD for payment records. A payment belongs to one player and one match and
is removed together with either of them.
"""

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, ConfigDict, field_validator
from sqlmodel import Session, select

from clubhouse.config import utc_now
from clubhouse.database import get_session
from clubhouse.models.match import Match
from clubhouse.models.payment import Payment
from clubhouse.models.player import Player
from clubhouse.services.notifier import MatchNotifier, get_notifier
from clubhouse.utils.statuses import PAYMENT_PAID, PAYMENT_PENDING, normalize_payment_status

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================================================
# Request/Response Models
# ============================================================================


def _validate_amount(v: int) -> int:
    if v < 0:
        raise ValueError("amount must be a non-negative number")
    return v


class PaymentCreateRequest(BaseModel):
    player_id: int
    match_id: int
    amount: int
    status: str = PAYMENT_PENDING
    method: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, v):
        return _validate_amount(v)

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        return normalize_payment_status(v)


class PaymentUpdateRequest(BaseModel):
    player_id: Optional[int] = None
    match_id: Optional[int] = None
    amount: Optional[int] = None
    status: Optional[str] = None
    method: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, v):
        return None if v is None else _validate_amount(v)

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        return None if v is None else normalize_payment_status(v)


class PaymentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    player_id: int
    match_id: int
    amount: int
    status: str
    method: Optional[str] = None
    notes: Optional[str] = None
    paid_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


REQUIRED_PAYMENT_FIELDS = ("player_id", "match_id", "amount", "status")


def _check_references(session: Session, player_id: int, match_id: int) -> None:
    if not session.get(Player, player_id):
        raise HTTPException(status_code=404, detail="Player not found.")
    if not session.get(Match, match_id):
        raise HTTPException(status_code=404, detail="Match not found.")


def apply_paid_at(payment: Payment, previous_status: Optional[str]) -> None:
    """Stamp paid_at on the transition into PAID; clear it when leaving PAID."""
    if payment.status == PAYMENT_PAID:
        if previous_status != PAYMENT_PAID or payment.paid_at is None:
            payment.paid_at = utc_now()
    else:
        payment.paid_at = None


# ============================================================================
# Payment CRUD Endpoints
# ============================================================================


@router.get("/payments", response_model=List[PaymentResponse])
def list_payments(
    player_id: Optional[int] = Query(None),
    match_id: Optional[int] = Query(None),
    status: Optional[str] = Query(None),
    session: Session = Depends(get_session),
):
    """List payments, newest first"""
    query = select(Payment)
    if player_id is not None:
        query = query.where(Payment.player_id == player_id)
    if match_id is not None:
        query = query.where(Payment.match_id == match_id)
    if status:
        try:
            query = query.where(Payment.status == normalize_payment_status(status))
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
    return session.exec(query.order_by(Payment.created_at.desc(), Payment.id.desc())).all()


@router.get("/payments/{payment_id}", response_model=PaymentResponse)
def get_payment(payment_id: int, session: Session = Depends(get_session)):
    """Get a payment by ID"""
    payment = session.get(Payment, payment_id)
    if not payment:
        raise HTTPException(status_code=404, detail="Payment not found.")
    return payment


@router.post("/payments", response_model=PaymentResponse, status_code=201)
def create_payment(
    request: PaymentCreateRequest,
    session: Session = Depends(get_session),
    notifier: MatchNotifier = Depends(get_notifier),
):
    """Record a payment; paid_at is set when it is created as PAID"""
    _check_references(session, request.player_id, request.match_id)

    payment = Payment(**request.model_dump())
    apply_paid_at(payment, previous_status=None)

    try:
        session.add(payment)
        session.commit()
        session.refresh(payment)
    except Exception:
        session.rollback()
        logger.exception("Failed to create payment for player %s", request.player_id)
        raise HTTPException(status_code=500, detail="Failed to create payment.")

    notifier.publish("payment_created", payment.match_id)
    return payment


@router.put("/payments/{payment_id}", response_model=PaymentResponse)
def update_payment(
    payment_id: int,
    request: PaymentUpdateRequest,
    session: Session = Depends(get_session),
    notifier: MatchNotifier = Depends(get_notifier),
):
    """Update only the supplied payment fields"""
    payment = session.get(Payment, payment_id)
    if not payment:
        raise HTTPException(status_code=404, detail="Payment not found.")

    update_data = request.model_dump(exclude_unset=True)
    cleared = [f for f in REQUIRED_PAYMENT_FIELDS if f in update_data and update_data[f] is None]
    if cleared:
        raise HTTPException(status_code=400, detail=f"{', '.join(cleared)} cannot be empty")

    if "player_id" in update_data or "match_id" in update_data:
        _check_references(
            session,
            update_data.get("player_id", payment.player_id),
            update_data.get("match_id", payment.match_id),
        )

    previous_status = payment.status
    for field, value in update_data.items():
        setattr(payment, field, value)
    apply_paid_at(payment, previous_status)
    payment.updated_at = utc_now()

    try:
        session.add(payment)
        session.commit()
        session.refresh(payment)
    except Exception:
        session.rollback()
        logger.exception("Failed to update payment %s", payment_id)
        raise HTTPException(status_code=500, detail="Failed to update payment.")

    notifier.publish("payment_updated", payment.match_id)
    return payment


@router.delete("/payments/{payment_id}", status_code=204)
def delete_payment(
    payment_id: int,
    session: Session = Depends(get_session),
    notifier: MatchNotifier = Depends(get_notifier),
):
    """Delete a payment"""
    payment = session.get(Payment, payment_id)
    if not payment:
        raise HTTPException(status_code=404, detail="Payment not found.")

    match_id = payment.match_id
    session.delete(payment)
    session.commit()

    notifier.publish("payment_deleted", match_id)
    return None
