from sqlalchemy.exc import OperationalError

from freight_booking.application.reservation_service import ReservationService
from freight_booking.application.validation import describe_error, coerce_ids
from freight_booking.core_settings import get_settings


def _store_down(self):
    raise OperationalError("SELECT count(*) FROM reservations", {}, Exception("connection refused"))


def test_store_failure_returns_generic_error(client, monkeypatch):
    monkeypatch.setattr(ReservationService, "count", _store_down)
    resp = client.get("/api/reservations/count")
    assert resp.status_code == 500
    assert resp.json() == {"error": "Erreur interne du serveur"}


def test_store_failure_detail_in_development(client, monkeypatch):
    monkeypatch.setattr(ReservationService, "count", _store_down)
    monkeypatch.setattr(get_settings(), "ENVIRONMENT", "development")
    resp = client.get("/api/reservations/count")
    assert resp.status_code == 500
    body = resp.json()
    assert body["error"] == "Erreur interne du serveur"
    assert "connection refused" in body["detail"]


def test_malformed_json_body(client):
    resp = client.post(
        "/api/reservations",
        content="{not json",
        headers={"Content-Type": "application/json"},
    )
    assert resp.status_code == 400
    assert resp.json() == {"error": "Corps de requête invalide"}


def test_unknown_route_uses_error_body(client):
    resp = client.get("/api/inconnu")
    assert resp.status_code == 404
    assert "error" in resp.json()


def test_describe_error_messages():
    assert describe_error({"type": "missing", "loc": ("body", "nom")}) == "Champ obligatoire manquant: nom"
    assert describe_error({"type": "int_type", "loc": ("body", "poids"), "input": None}) == \
        "Champ obligatoire manquant: poids"
    assert describe_error({"type": "enum", "loc": ("body", "statut")}) == "Statut invalide"
    assert describe_error({"type": "greater_than", "loc": ("body", "poids")}) == "Le poids doit être supérieur à 0"
    assert describe_error({"type": "int_parsing", "loc": ("path", "id")}) == "ID invalide"
    assert describe_error({"type": "int_parsing", "loc": ("query", "limit")}) == "Paramètre invalide: limit"
    assert describe_error({"type": "date_from_datetime_parsing", "loc": ("body", "date_depart"), "input": "hier"}) == \
        "Valeur invalide pour le champ date_depart"


def test_coerce_ids():
    assert coerce_ids([1, "2", " 3 ", "abc", None, 4.5, True, {"id": 5}]) == [1, 2, 3]


def test_routing_errors_are_translated(client):
    resp = client.get("/api/inconnu")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Route non trouvée"}

    resp = client.put("/api/reservations")
    assert resp.status_code == 405
    assert resp.json() == {"error": "Méthode non autorisée"}
