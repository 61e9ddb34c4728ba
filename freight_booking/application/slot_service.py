from sqlalchemy import select, func
from sqlalchemy.orm import Session
from fastapi import HTTPException
from typing import Any

from shared.core import get_logger
from freight_booking.domain.models import Slot, Package
from .schemas import SlotCreate, SlotPatch, SlotRead
from .listing import ListParams, fetch_page, search_clause, count_rows
from .validation import parse_patch

logger = get_logger(__name__)

SORTABLE_COLUMNS = {
    "id": Slot.id,
    "lieu_depart": Slot.lieu_depart,
    "destination": Slot.destination,
    "date_expedition": Slot.date_expedition,
    "heure_depart": Slot.heure_depart,
    "date_creation": Slot.date_creation,
}
SEARCH_COLUMNS = (Slot.lieu_depart, Slot.destination)

NOT_FOUND = "Créneau non trouvé"


def occupancy_query():
    """Slots joined to their package count; slots without packages count 0."""
    package_count = func.count(Package.id)
    return (
        select(
            Slot,
            package_count.label("nombre_colis_actuels"),
            (Slot.capacite_max - package_count).label("places_restantes"),
        )
        .outerjoin(Package, Package.creneau_id == Slot.id)
        .group_by(Slot.id)
    )


def to_read(row) -> SlotRead:
    slot, current, remaining = row
    return SlotRead.model_validate(slot).model_copy(
        update={"nombre_colis_actuels": current, "places_restantes": remaining}
    )


class SlotService:
    def __init__(self, db: Session):
        self.db = db

    def count(self) -> int:
        return count_rows(self.db, Slot)

    def list(self, params: ListParams) -> dict:
        rows, pagination = fetch_page(
            self.db,
            occupancy_query(),
            Slot,
            params,
            SORTABLE_COLUMNS,
            search_clause(SEARCH_COLUMNS, params.search),
        )
        return {"data": [to_read(row) for row in rows], "pagination": pagination}

    def get(self, slot_id: int) -> SlotRead:
        row = self.db.execute(occupancy_query().where(Slot.id == slot_id)).first()
        if row is None:
            raise HTTPException(status_code=404, detail=NOT_FOUND)
        return to_read(row)

    def _get_row(self, slot_id: int) -> Slot:
        slot = self.db.get(Slot, slot_id)
        if not slot:
            raise HTTPException(status_code=404, detail=NOT_FOUND)
        return slot

    def create(self, data: SlotCreate) -> SlotRead:
        obj = Slot(**data.model_dump())
        self.db.add(obj)
        self.db.commit()
        logger.info(f"Slot {obj.id} created: {obj.lieu_depart} -> {obj.destination}, capacity {obj.capacite_max}")
        return self.get(obj.id)

    def replace(self, slot_id: int, data: SlotCreate) -> SlotRead:
        slot = self._get_row(slot_id)
        for key, value in data.model_dump().items():
            setattr(slot, key, value)
        self.db.commit()
        return self.get(slot_id)

    def update(self, slot_id: int, payload: Any) -> SlotRead:
        changes = parse_patch(SlotPatch, payload)
        slot = self._get_row(slot_id)
        for key, value in changes.items():
            setattr(slot, key, value)
        self.db.commit()
        return self.get(slot_id)

    def delete(self, slot_id: int) -> dict:
        """Delete a slot that no package references.

        Raises 409 while packages are still assigned to it. The slot row stays
        locked until commit so no package can be attached in between.
        """
        slot = self.db.execute(
            select(Slot).where(Slot.id == slot_id).with_for_update()
        ).scalar_one_or_none()
        if slot is None:
            self.db.rollback()
            raise HTTPException(status_code=404, detail=NOT_FOUND)
        packages = count_rows(self.db, Package, Package.creneau_id == slot_id)
        if packages > 0:
            self.db.rollback()
            logger.warning(f"Refused to delete slot {slot_id}: {packages} package(s) assigned")
            raise HTTPException(
                status_code=409,
                detail="Impossible de supprimer le créneau: des colis y sont associés",
            )
        deleted = SlotRead.model_validate(slot).model_copy(
            update={"nombre_colis_actuels": 0, "places_restantes": slot.capacite_max}
        )
        self.db.delete(slot)
        self.db.commit()
        logger.info(f"Slot {slot_id} deleted")
        return {"message": "Créneau supprimé", "deletedCreneau": deleted}
