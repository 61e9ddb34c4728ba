from sqlalchemy import select, delete
from sqlalchemy.orm import Session
from fastapi import HTTPException
from typing import Any

from shared.core import get_logger
from freight_booking.domain.models import Reservation
from .schemas import ReservationCreate, ReservationPatch, ReservationRead
from .listing import ListParams, fetch_page, search_clause, count_rows
from .validation import parse_patch, coerce_ids

logger = get_logger(__name__)

SORTABLE_COLUMNS = {
    "id": Reservation.id,
    "nom": Reservation.nom,
    "prenom": Reservation.prenom,
    "email": Reservation.email,
    "destination": Reservation.destination,
    "date_depart": Reservation.date_depart,
    "created_at": Reservation.created_at,
}
SEARCH_COLUMNS = (Reservation.nom, Reservation.prenom, Reservation.email, Reservation.destination)

NOT_FOUND = "Réservation non trouvée"


class ReservationService:
    def __init__(self, db: Session):
        self.db = db

    def count(self) -> int:
        return count_rows(self.db, Reservation)

    def list(self, params: ListParams) -> dict:
        rows, pagination = fetch_page(
            self.db,
            select(Reservation),
            Reservation,
            params,
            SORTABLE_COLUMNS,
            search_clause(SEARCH_COLUMNS, params.search),
        )
        return {"data": [ReservationRead.model_validate(row[0]) for row in rows], "pagination": pagination}

    def get(self, reservation_id: int) -> Reservation:
        reservation = self.db.get(Reservation, reservation_id)
        if not reservation:
            raise HTTPException(status_code=404, detail=NOT_FOUND)
        return reservation

    def create(self, data: ReservationCreate) -> Reservation:
        obj = Reservation(**data.model_dump())
        self.db.add(obj)
        self.db.commit()
        self.db.refresh(obj)
        logger.info(f"Reservation {obj.id} created for {obj.destination}")
        return obj

    def replace(self, reservation_id: int, data: ReservationCreate) -> Reservation:
        reservation = self.get(reservation_id)
        for key, value in data.model_dump().items():
            setattr(reservation, key, value)
        self.db.commit()
        self.db.refresh(reservation)
        return reservation

    def update(self, reservation_id: int, payload: Any) -> Reservation:
        # Validation runs before the lookup so a bad payload never reaches the row
        changes = parse_patch(ReservationPatch, payload)
        reservation = self.get(reservation_id)
        for key, value in changes.items():
            setattr(reservation, key, value)
        self.db.commit()
        self.db.refresh(reservation)
        return reservation

    def delete(self, reservation_id: int) -> dict:
        reservation = self.get(reservation_id)
        deleted = ReservationRead.model_validate(reservation)
        self.db.delete(reservation)
        self.db.commit()
        logger.info(f"Reservation {reservation_id} deleted")
        return {"message": "Réservation supprimée", "deletedReservation": deleted}

    def delete_many(self, raw_ids: Any) -> dict:
        if not raw_ids or not isinstance(raw_ids, list):
            raise HTTPException(status_code=400, detail="Liste d'IDs requise")
        ids = coerce_ids(raw_ids)
        if not ids:
            raise HTTPException(status_code=400, detail="Aucun ID valide fourni")

        result = self.db.execute(
            delete(Reservation).where(Reservation.id.in_(ids)).returning(Reservation)
        )
        deleted = [ReservationRead.model_validate(row) for row in result.scalars().all()]
        self.db.commit()
        logger.info(f"{len(deleted)} reservation(s) deleted in bulk")
        return {
            "message": f"{len(deleted)} réservation(s) supprimée(s)",
            "count": len(deleted),
            "deletedReservations": deleted,
        }
