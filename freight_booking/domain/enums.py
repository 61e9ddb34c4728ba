"""Closed value sets stored in the booking tables.

Member names are English, values are the identifiers persisted in the store
and exchanged on the wire.
"""

from enum import Enum

class TravelClass(str, Enum):
    ECONOMY = "Economique"
    BUSINESS = "Affaires"
    FIRST = "Premiere"

class TransportType(str, Enum):
    STANDARD = "standard"
    EXPRESS = "express"
    PRIORITY = "prioritaire"

class PackageType(str, Enum):
    DOCUMENT = "document"
    CLOTHING = "vetements"
    ELECTRONICS = "electronique"
    FOOD = "nourriture"
    OTHER = "autre"

class PaymentMethod(str, Enum):
    CASH = "especes"
    CARD = "carte"
    TRANSFER = "virement"
    MOBILE = "mobile"

class PackageStatus(str, Enum):
    """Lifecycle is pending -> in_transit -> delivered; order is not enforced."""
    PENDING = "en_attente"
    IN_TRANSIT = "en_transit"
    DELIVERED = "livre"
