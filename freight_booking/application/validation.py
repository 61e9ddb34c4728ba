"""Translation of validation failures into client-facing messages.

Both FastAPI request validation and the services' own pydantic validation
(partial updates) go through ``describe_error`` so every 400 response carries
the same wording.
"""

from typing import Any, Iterable, Optional
from fastapi import HTTPException
from pydantic import BaseModel, ValidationError

INVALID_ID = "ID invalide"
NOTHING_TO_UPDATE = "Aucun champ à modifier"
NO_VALID_FIELD = "Aucun champ valide à modifier"

ENUM_MESSAGES = {
    "classe": "Classe invalide. Doit être: Economique, Affaires ou Premiere",
    "type_transport": "Type de transport invalide. Doit être: standard, express ou prioritaire",
    "type_colis": "Type de colis invalide",
    "methode_paiement": "Méthode de paiement invalide",
    "statut": "Statut invalide",
}

POSITIVE_MESSAGES = {
    "nombre_passagers": "Le nombre de passagers doit être supérieur à 0",
    "capacite_max": "La capacité, les frais et le poids maximum doivent être supérieurs à 0",
    "frais_par_kg": "La capacité, les frais et le poids maximum doivent être supérieurs à 0",
    "poids_max_colis": "La capacité, les frais et le poids maximum doivent être supérieurs à 0",
    "poids": "Le poids doit être supérieur à 0",
    "valeur_declaree": "La valeur déclarée ne peut pas être négative",
}

MISSING_TYPES = {"missing", "string_too_short"}
BOUND_TYPES = {"greater_than", "greater_than_equal"}
LIMIT_TYPES = {"less_than", "less_than_equal"}


def _field_name(loc: Iterable[Any]) -> Optional[str]:
    for part in loc:
        if isinstance(part, str) and part not in ("body", "query", "path"):
            return part
    return None


def describe_error(error: dict) -> str:
    """Render one pydantic error entry as a natural-language message."""
    loc = tuple(error.get("loc") or ())
    kind = error.get("type", "")
    field = _field_name(loc)

    if loc[:1] == ("path",):
        return INVALID_ID
    if loc[:1] == ("query",):
        return f"Paramètre invalide: {field}"
    if kind == "value_error" and error.get("ctx", {}).get("error") is not None:
        return str(error["ctx"]["error"])
    if field is None:
        return "Corps de requête invalide"
    if kind in MISSING_TYPES or ("input" in error and error["input"] is None):
        return f"Champ obligatoire manquant: {field}"
    if kind == "enum" or field in ENUM_MESSAGES:
        return ENUM_MESSAGES.get(field, f"Valeur invalide pour le champ {field}")
    if kind in BOUND_TYPES:
        return POSITIVE_MESSAGES.get(field, f"Le champ {field} doit être supérieur à 0")
    if kind in LIMIT_TYPES:
        return f"Valeur trop grande pour le champ {field}"
    return f"Valeur invalide pour le champ {field}"


def validate_payload(model: type[BaseModel], payload: Any) -> BaseModel:
    """Validate a raw body against ``model``, raising 400 with the first error."""
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=describe_error(exc.errors()[0]))


def parse_patch(model: type[BaseModel], payload: Any) -> dict:
    """Validate a partial update and return only the recognized, present fields."""
    if not payload:
        raise HTTPException(status_code=400, detail=NOTHING_TO_UPDATE)
    if not isinstance(payload, dict):
        raise HTTPException(status_code=400, detail="Corps de requête invalide")
    patch = validate_payload(model, payload)
    changes = patch.changes()
    if not changes:
        raise HTTPException(status_code=400, detail=NO_VALID_FIELD)
    return changes


def coerce_ids(values: Any) -> list[int]:
    """Keep the entries that read as integers, silently dropping the rest."""
    ids = []
    for value in values:
        if isinstance(value, bool):
            continue
        if isinstance(value, int):
            ids.append(value)
            continue
        if isinstance(value, str):
            try:
                ids.append(int(value.strip()))
            except ValueError:
                continue
    return ids
