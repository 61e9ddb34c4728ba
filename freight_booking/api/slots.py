from fastapi import APIRouter, Depends, Body
from sqlalchemy.orm import Session
from typing import Any

from freight_booking.infrastructure.db import get_db
from freight_booking.application.listing import ListParams
from freight_booking.application.slot_service import SlotService
from freight_booking.application.schemas import SlotCreate, SlotRead, SlotPage, SlotDeleted, CountRead
from .dependencies import list_params

router = APIRouter(prefix="/api/creneaux", tags=["creneaux"])

@router.get("/count", response_model=CountRead)
def count_slots(db: Session = Depends(get_db)):
    return {"count": SlotService(db).count()}

@router.get("", response_model=SlotPage)
def list_slots(params: ListParams = Depends(list_params), db: Session = Depends(get_db)):
    """Paginated list with current package count and remaining places per slot."""
    return SlotService(db).list(params)

@router.get("/{slot_id}", response_model=SlotRead)
def get_slot(slot_id: int, db: Session = Depends(get_db)):
    return SlotService(db).get(slot_id)

@router.post("", response_model=SlotRead, status_code=201)
def create_slot(payload: SlotCreate, db: Session = Depends(get_db)):
    return SlotService(db).create(payload)

@router.put("/{slot_id}", response_model=SlotRead)
def replace_slot(slot_id: int, payload: SlotCreate, db: Session = Depends(get_db)):
    return SlotService(db).replace(slot_id, payload)

@router.patch("/{slot_id}", response_model=SlotRead)
def update_slot(slot_id: int, payload: Any = Body(None), db: Session = Depends(get_db)):
    return SlotService(db).update(slot_id, payload)

@router.delete("/{slot_id}", response_model=SlotDeleted)
def delete_slot(slot_id: int, db: Session = Depends(get_db)):
    """Refused with 409 while packages are assigned to the slot."""
    return SlotService(db).delete(slot_id)
