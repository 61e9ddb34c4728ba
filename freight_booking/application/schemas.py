from pydantic import BaseModel, Field, Strict, StringConstraints, model_validator
from typing import Optional, ClassVar, Annotated
from datetime import date, datetime, time

from freight_booking.domain.enums import TravelClass, TransportType, PackageType, PaymentMethod, PackageStatus

# Upper bounds follow the column types: INTEGER, NUMERIC(10,2) and NUMERIC(12,2)
MAX_INTEGER = 2_147_483_647
MAX_AMOUNT = 10**8
MAX_DECLARED_VALUE = 10**10

# Blank strings count as missing, like absent keys and nulls
RequiredText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
# Strict so JSON booleans are not read as 0/1
Identifier = Annotated[int, Strict()]
PositiveInt = Annotated[int, Strict(), Field(gt=0, le=MAX_INTEGER)]
# Two decimal places are stored, anything below a cent would round to 0
PositiveAmount = Annotated[float, Strict(), Field(ge=0.01, lt=MAX_AMOUNT)]
NonNegativeAmount = Annotated[float, Strict(), Field(ge=0, lt=MAX_DECLARED_VALUE)]


class PatchModel(BaseModel):
    """Base for partial updates: every member is optional and presence-checked.

    Unknown keys are ignored; a present key set to null is rejected unless the
    column is nullable.
    """
    NULLABLE_FIELDS: ClassVar[frozenset] = frozenset()

    class Config:
        use_enum_values = True

    @model_validator(mode="after")
    def reject_null_for_required_columns(self):
        for name in self.model_fields_set:
            if getattr(self, name) is None and name not in self.NULLABLE_FIELDS:
                raise ValueError(f"Le champ {name} ne peut pas être vide")
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


# Reservations

class ReservationCreate(BaseModel):
    destination: RequiredText
    nom: RequiredText
    prenom: RequiredText
    email: RequiredText
    telephone: RequiredText
    lieu_depart: RequiredText
    date_depart: date
    date_retour: Optional[date] = None
    nombre_passagers: PositiveInt
    classe: TravelClass

    class Config:
        use_enum_values = True

class ReservationPatch(PatchModel):
    NULLABLE_FIELDS: ClassVar[frozenset] = frozenset({"date_retour"})

    destination: Optional[RequiredText] = None
    nom: Optional[RequiredText] = None
    prenom: Optional[RequiredText] = None
    email: Optional[RequiredText] = None
    telephone: Optional[RequiredText] = None
    lieu_depart: Optional[RequiredText] = None
    date_depart: Optional[date] = None
    date_retour: Optional[date] = None
    nombre_passagers: Optional[PositiveInt] = None
    classe: Optional[TravelClass] = None

class ReservationRead(BaseModel):
    id: int
    destination: str
    nom: str
    prenom: str
    email: str
    telephone: str
    lieu_depart: str
    date_depart: date
    date_retour: Optional[date] = None
    nombre_passagers: int
    classe: TravelClass
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# Shipment slots

class SlotCreate(BaseModel):
    heure_depart: time
    lieu_depart: RequiredText
    destination: RequiredText
    capacite_max: PositiveInt
    frais_par_kg: PositiveAmount
    poids_max_colis: PositiveAmount
    type_transport: TransportType = TransportType.STANDARD
    date_expedition: date

    class Config:
        use_enum_values = True

    @model_validator(mode="before")
    @classmethod
    def default_transport_type(cls, data):
        if isinstance(data, dict) and data.get("type_transport") is None:
            data = {k: v for k, v in data.items() if k != "type_transport"}
        return data

class SlotPatch(PatchModel):
    heure_depart: Optional[time] = None
    lieu_depart: Optional[RequiredText] = None
    destination: Optional[RequiredText] = None
    capacite_max: Optional[PositiveInt] = None
    frais_par_kg: Optional[PositiveAmount] = None
    poids_max_colis: Optional[PositiveAmount] = None
    type_transport: Optional[TransportType] = None
    date_expedition: Optional[date] = None

class SlotRead(BaseModel):
    id: int
    heure_depart: time
    lieu_depart: str
    destination: str
    capacite_max: int
    frais_par_kg: float
    poids_max_colis: float
    type_transport: TransportType
    date_expedition: date
    date_creation: Optional[datetime] = None
    # Derived from the packages referencing the slot, never stored
    nombre_colis_actuels: int = 0
    places_restantes: int = 0

    class Config:
        from_attributes = True


# Packages

class PackageCreate(BaseModel):
    DEFAULTED_FIELDS: ClassVar[frozenset] = frozenset(
        {"type_colis", "valeur_declaree", "assurance", "methode_paiement"}
    )

    creneau_id: Optional[Identifier] = None
    nom_expediteur: RequiredText
    telephone_expediteur: RequiredText
    adresse_expediteur: RequiredText
    nom_destinataire: RequiredText
    telephone_destinataire: RequiredText
    adresse_destinataire: RequiredText
    type_colis: PackageType = PackageType.DOCUMENT
    poids: PositiveAmount
    description: Optional[str] = None
    valeur_declaree: NonNegativeAmount = 0
    assurance: bool = False
    methode_paiement: PaymentMethod = PaymentMethod.CASH

    class Config:
        use_enum_values = True

    @model_validator(mode="before")
    @classmethod
    def defaults_for_nulls(cls, data):
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if not (v is None and k in cls.DEFAULTED_FIELDS)}
        return data

class PackageReplace(PackageCreate):
    DEFAULTED_FIELDS: ClassVar[frozenset] = PackageCreate.DEFAULTED_FIELDS | {"statut"}

    statut: PackageStatus = PackageStatus.PENDING

class PackagePatch(PatchModel):
    NULLABLE_FIELDS: ClassVar[frozenset] = frozenset({"creneau_id", "description"})

    creneau_id: Optional[Identifier] = None
    nom_expediteur: Optional[RequiredText] = None
    telephone_expediteur: Optional[RequiredText] = None
    adresse_expediteur: Optional[RequiredText] = None
    nom_destinataire: Optional[RequiredText] = None
    telephone_destinataire: Optional[RequiredText] = None
    adresse_destinataire: Optional[RequiredText] = None
    type_colis: Optional[PackageType] = None
    poids: Optional[PositiveAmount] = None
    description: Optional[str] = None
    valeur_declaree: Optional[NonNegativeAmount] = None
    assurance: Optional[bool] = None
    methode_paiement: Optional[PaymentMethod] = None
    statut: Optional[PackageStatus] = None

class PackageRead(BaseModel):
    id: int
    creneau_id: Optional[int] = None
    numero_suivi: str
    nom_expediteur: str
    telephone_expediteur: str
    adresse_expediteur: str
    nom_destinataire: str
    telephone_destinataire: str
    adresse_destinataire: str
    type_colis: PackageType
    poids: float
    description: Optional[str] = None
    valeur_declaree: float
    assurance: bool
    methode_paiement: PaymentMethod
    statut: PackageStatus
    date_creation: Optional[datetime] = None
    # Departure details of the assigned slot, null when unassigned
    lieu_depart: Optional[str] = None
    destination: Optional[str] = None
    heure_depart: Optional[time] = None
    date_expedition: Optional[date] = None

    class Config:
        from_attributes = True


# Shared envelopes

class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    totalPages: int
    hasNext: bool
    hasPrev: bool

class ReservationPage(BaseModel):
    data: list[ReservationRead]
    pagination: Pagination

class SlotPage(BaseModel):
    data: list[SlotRead]
    pagination: Pagination

class PackagePage(BaseModel):
    data: list[PackageRead]
    pagination: Pagination

class CountRead(BaseModel):
    count: int

class ReservationDeleted(BaseModel):
    message: str
    deletedReservation: ReservationRead

class ReservationsDeleted(BaseModel):
    message: str
    count: int
    deletedReservations: list[ReservationRead]

class SlotDeleted(BaseModel):
    message: str
    deletedCreneau: SlotRead

class PackageDeleted(BaseModel):
    message: str
    deletedColis: PackageRead
