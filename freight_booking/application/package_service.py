from sqlalchemy import select
from sqlalchemy.orm import Session
from fastapi import HTTPException
from typing import Any, Optional
import secrets
import string
import time

from shared.core import get_logger
from freight_booking.domain.models import Package, Slot
from freight_booking.domain.enums import PackageStatus
from .schemas import PackageCreate, PackageReplace, PackagePatch, PackageRead
from .listing import ListParams, fetch_page, search_clause, count_rows
from .validation import parse_patch

logger = get_logger(__name__)

SORTABLE_COLUMNS = {
    "id": Package.id,
    "nom_expediteur": Package.nom_expediteur,
    "nom_destinataire": Package.nom_destinataire,
    "date_creation": Package.date_creation,
    "statut": Package.statut,
    "poids": Package.poids,
}
SEARCH_COLUMNS = (Package.nom_expediteur, Package.nom_destinataire, Package.numero_suivi)

TRACKING_PREFIX = "COL"
TRACKING_SUFFIX_LENGTH = 9
TRACKING_ALPHABET = string.ascii_uppercase + string.digits

NOT_FOUND = "Colis non trouvé"
SLOT_NOT_FOUND = "Créneau spécifié introuvable"
SLOT_FULL = "Le créneau a atteint sa capacité maximale"


def generate_tracking_number() -> str:
    """Build a tracking code: prefix, epoch milliseconds, random suffix.

    Uniqueness rests on the timestamp plus 36**9 suffixes; the store's unique
    index is the backstop.
    """
    millis = time.time_ns() // 1_000_000
    suffix = "".join(secrets.choice(TRACKING_ALPHABET) for _ in range(TRACKING_SUFFIX_LENGTH))
    return f"{TRACKING_PREFIX}{millis}{suffix}"


def detail_query():
    """Packages with the departure details of their slot (left join)."""
    return select(
        Package,
        Slot.lieu_depart,
        Slot.destination,
        Slot.heure_depart,
        Slot.date_expedition,
    ).outerjoin(Slot, Package.creneau_id == Slot.id)


def to_read(row) -> PackageRead:
    package, lieu_depart, destination, heure_depart, date_expedition = row
    return PackageRead.model_validate(package).model_copy(
        update={
            "lieu_depart": lieu_depart,
            "destination": destination,
            "heure_depart": heure_depart,
            "date_expedition": date_expedition,
        }
    )


def status_filter(statut: Optional[str]):
    # Unknown status values are ignored rather than rejected
    if statut in {status.value for status in PackageStatus}:
        return Package.statut == statut
    return None


class PackageService:
    def __init__(self, db: Session):
        self.db = db

    def count(self) -> int:
        return count_rows(self.db, Package)

    def list(self, params: ListParams, statut: Optional[str] = None) -> dict:
        rows, pagination = fetch_page(
            self.db,
            detail_query(),
            Package,
            params,
            SORTABLE_COLUMNS,
            search_clause(SEARCH_COLUMNS, params.search),
            status_filter(statut),
        )
        return {"data": [to_read(row) for row in rows], "pagination": pagination}

    def get(self, package_id: int) -> PackageRead:
        row = self.db.execute(detail_query().where(Package.id == package_id)).first()
        if row is None:
            raise HTTPException(status_code=404, detail=NOT_FOUND)
        return to_read(row)

    def get_by_tracking_number(self, numero_suivi: str) -> PackageRead:
        row = self.db.execute(detail_query().where(Package.numero_suivi == numero_suivi)).first()
        if row is None:
            raise HTTPException(status_code=404, detail=NOT_FOUND)
        return to_read(row)

    def _get_row(self, package_id: int) -> Package:
        package = self.db.get(Package, package_id)
        if not package:
            raise HTTPException(status_code=404, detail=NOT_FOUND)
        return package

    def _reserve_slot(self, slot_id: int) -> Slot:
        """Lock the slot row and make sure one more package fits.

        The lock is held until the caller commits, so concurrent creations
        against the same slot are serialized and cannot overshoot capacity.
        """
        slot = self.db.execute(
            select(Slot).where(Slot.id == slot_id).with_for_update()
        ).scalar_one_or_none()
        if slot is None:
            self.db.rollback()
            raise HTTPException(status_code=400, detail=SLOT_NOT_FOUND)

        used = count_rows(self.db, Package, Package.creneau_id == slot_id)
        if used >= slot.capacite_max:
            self.db.rollback()
            logger.warning(f"Slot {slot_id} is full ({used}/{slot.capacite_max}), package rejected")
            raise HTTPException(status_code=400, detail=SLOT_FULL)
        return slot

    def _ensure_slot_exists(self, slot_id: Optional[int]) -> None:
        # Reassignment on update checks existence only, never capacity
        if slot_id is not None and self.db.get(Slot, slot_id) is None:
            raise HTTPException(status_code=400, detail=SLOT_NOT_FOUND)

    def create(self, data: PackageCreate) -> PackageRead:
        payload = data.model_dump()
        if payload.get("creneau_id") is not None:
            self._reserve_slot(payload["creneau_id"])

        obj = Package(**payload, numero_suivi=generate_tracking_number(), statut=PackageStatus.PENDING.value)
        self.db.add(obj)
        self.db.commit()
        logger.info(f"Package {obj.id} created with tracking number {obj.numero_suivi}")
        return self.get(obj.id)

    def replace(self, package_id: int, data: PackageReplace) -> PackageRead:
        package = self._get_row(package_id)
        payload = data.model_dump()
        self._ensure_slot_exists(payload.get("creneau_id"))
        for key, value in payload.items():
            setattr(package, key, value)
        self.db.commit()
        return self.get(package_id)

    def update(self, package_id: int, payload: Any) -> PackageRead:
        changes = parse_patch(PackagePatch, payload)
        package = self._get_row(package_id)
        if "creneau_id" in changes:
            self._ensure_slot_exists(changes["creneau_id"])
        for key, value in changes.items():
            setattr(package, key, value)
        self.db.commit()
        return self.get(package_id)

    def delete(self, package_id: int) -> dict:
        deleted = self.get(package_id)
        package = self._get_row(package_id)
        self.db.delete(package)
        self.db.commit()
        logger.info(f"Package {package_id} deleted")
        return {"message": "Colis supprimé", "deletedColis": deleted}
