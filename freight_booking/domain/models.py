from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy import String, Numeric, Boolean, Text, Date, Time, DateTime, ForeignKey, Integer, CheckConstraint, func
from typing import Optional
import datetime

from .enums import TransportType, PackageType, PaymentMethod, PackageStatus

class Base(DeclarativeBase):
    pass

class Reservation(Base):
    __tablename__ = "reservations"
    __table_args__ = (
        CheckConstraint("nombre_passagers > 0", name="ck_reservations_nombre_passagers_positive"),
    )
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    destination: Mapped[str] = mapped_column(String(200))
    nom: Mapped[str] = mapped_column(String(100))
    prenom: Mapped[str] = mapped_column(String(100))
    email: Mapped[str] = mapped_column(String(255))
    telephone: Mapped[str] = mapped_column(String(50))
    lieu_depart: Mapped[str] = mapped_column(String(200))
    date_depart: Mapped[datetime.date] = mapped_column(Date)
    date_retour: Mapped[Optional[datetime.date]] = mapped_column(Date, nullable=True)
    nombre_passagers: Mapped[int] = mapped_column(Integer)
    classe: Mapped[str] = mapped_column(String(30))
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, server_default=func.now())

class Slot(Base):
    """Scheduled departure; package occupancy is derived from ``colis`` rows."""
    __tablename__ = "creneaux_expedition"
    __table_args__ = (
        CheckConstraint("capacite_max > 0", name="ck_creneaux_capacite_max_positive"),
    )
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    heure_depart: Mapped[datetime.time] = mapped_column(Time)
    lieu_depart: Mapped[str] = mapped_column(String(200))
    destination: Mapped[str] = mapped_column(String(200))
    capacite_max: Mapped[int] = mapped_column(Integer)
    frais_par_kg: Mapped[float] = mapped_column(Numeric(10, 2))
    poids_max_colis: Mapped[float] = mapped_column(Numeric(10, 2))
    type_transport: Mapped[str] = mapped_column(String(30), default=TransportType.STANDARD.value)
    date_expedition: Mapped[datetime.date] = mapped_column(Date)
    date_creation: Mapped[datetime.datetime] = mapped_column(DateTime, server_default=func.now())
    packages: Mapped[list["Package"]] = relationship("Package", back_populates="slot", passive_deletes="all")

class Package(Base):
    __tablename__ = "colis"
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    # Nullable: a package may be registered before it is assigned to a departure
    creneau_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("creneaux_expedition.id", ondelete="RESTRICT"), nullable=True, index=True
    )
    numero_suivi: Mapped[str] = mapped_column(String(50), unique=True, index=True)
    nom_expediteur: Mapped[str] = mapped_column(String(200))
    telephone_expediteur: Mapped[str] = mapped_column(String(50))
    adresse_expediteur: Mapped[str] = mapped_column(String(500))
    nom_destinataire: Mapped[str] = mapped_column(String(200))
    telephone_destinataire: Mapped[str] = mapped_column(String(50))
    adresse_destinataire: Mapped[str] = mapped_column(String(500))
    type_colis: Mapped[str] = mapped_column(String(30), default=PackageType.DOCUMENT.value)
    poids: Mapped[float] = mapped_column(Numeric(10, 2))
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    valeur_declaree: Mapped[float] = mapped_column(Numeric(12, 2), default=0)
    assurance: Mapped[bool] = mapped_column(Boolean, default=False)
    methode_paiement: Mapped[str] = mapped_column(String(30), default=PaymentMethod.CASH.value)
    statut: Mapped[str] = mapped_column(String(30), default=PackageStatus.PENDING.value)
    date_creation: Mapped[datetime.datetime] = mapped_column(DateTime, server_default=func.now())
    slot: Mapped[Optional[Slot]] = relationship("Slot", back_populates="packages")
