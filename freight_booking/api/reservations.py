from fastapi import APIRouter, Depends, Body
from sqlalchemy.orm import Session
from typing import Any

from freight_booking.infrastructure.db import get_db
from freight_booking.application.listing import ListParams
from freight_booking.application.reservation_service import ReservationService
from freight_booking.application.schemas import (
    ReservationCreate,
    ReservationRead,
    ReservationPage,
    ReservationDeleted,
    ReservationsDeleted,
    CountRead,
)
from .dependencies import list_params

router = APIRouter(prefix="/api/reservations", tags=["reservations"])

@router.get("/count", response_model=CountRead)
def count_reservations(db: Session = Depends(get_db)):
    return {"count": ReservationService(db).count()}

@router.get("", response_model=ReservationPage)
def list_reservations(params: ListParams = Depends(list_params), db: Session = Depends(get_db)):
    """Paginated list, searchable on names, email and destination."""
    return ReservationService(db).list(params)

@router.get("/{reservation_id}", response_model=ReservationRead)
def get_reservation(reservation_id: int, db: Session = Depends(get_db)):
    return ReservationService(db).get(reservation_id)

@router.post("", response_model=ReservationRead, status_code=201)
def create_reservation(payload: ReservationCreate, db: Session = Depends(get_db)):
    return ReservationService(db).create(payload)

@router.put("/{reservation_id}", response_model=ReservationRead)
def replace_reservation(reservation_id: int, payload: ReservationCreate, db: Session = Depends(get_db)):
    return ReservationService(db).replace(reservation_id, payload)

@router.patch("/{reservation_id}", response_model=ReservationRead)
def update_reservation(reservation_id: int, payload: Any = Body(None), db: Session = Depends(get_db)):
    """Update only the supplied fields; unknown keys are ignored."""
    return ReservationService(db).update(reservation_id, payload)

@router.delete("/{reservation_id}", response_model=ReservationDeleted)
def delete_reservation(reservation_id: int, db: Session = Depends(get_db)):
    return ReservationService(db).delete(reservation_id)

@router.delete("", response_model=ReservationsDeleted)
def delete_reservations(payload: Any = Body(None), db: Session = Depends(get_db)):
    """Bulk delete from ``{"ids": [...]}``; non-integer ids are skipped."""
    ids = payload.get("ids") if isinstance(payload, dict) else None
    return ReservationService(db).delete_many(ids)
