from fastapi import APIRouter, Depends, Body, Query
from sqlalchemy.orm import Session
from typing import Any, Optional

from freight_booking.infrastructure.db import get_db
from freight_booking.application.listing import ListParams
from freight_booking.application.package_service import PackageService
from freight_booking.application.schemas import (
    PackageCreate,
    PackageReplace,
    PackageRead,
    PackagePage,
    PackageDeleted,
    CountRead,
)
from .dependencies import list_params

router = APIRouter(prefix="/api/colis", tags=["colis"])

@router.get("/count", response_model=CountRead)
def count_packages(db: Session = Depends(get_db)):
    return {"count": PackageService(db).count()}

@router.get("", response_model=PackagePage)
def list_packages(
    params: ListParams = Depends(list_params),
    statut: Optional[str] = Query(None, description="en_attente, en_transit or livre; other values are ignored"),
    db: Session = Depends(get_db),
):
    return PackageService(db).list(params, statut)

@router.get("/suivi/{numero_suivi}", response_model=PackageRead)
def track_package(numero_suivi: str, db: Session = Depends(get_db)):
    """Exact, case-sensitive lookup by tracking number."""
    return PackageService(db).get_by_tracking_number(numero_suivi)

@router.get("/{package_id}", response_model=PackageRead)
def get_package(package_id: int, db: Session = Depends(get_db)):
    return PackageService(db).get(package_id)

@router.post("", response_model=PackageRead, status_code=201)
def create_package(payload: PackageCreate, db: Session = Depends(get_db)):
    """Create a package; a referenced slot must exist and have a free place."""
    return PackageService(db).create(payload)

@router.put("/{package_id}", response_model=PackageRead)
def replace_package(package_id: int, payload: PackageReplace, db: Session = Depends(get_db)):
    return PackageService(db).replace(package_id, payload)

@router.patch("/{package_id}", response_model=PackageRead)
def update_package(package_id: int, payload: Any = Body(None), db: Session = Depends(get_db)):
    return PackageService(db).update(package_id, payload)

@router.delete("/{package_id}", response_model=PackageDeleted)
def delete_package(package_id: int, db: Session = Depends(get_db)):
    return PackageService(db).delete(package_id)
