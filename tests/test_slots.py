import datetime

import pytest
from sqlalchemy import event
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import IntegrityError

from freight_booking.domain.models import Slot


def test_create_slot_defaults_to_standard_transport(client, slot_payload):
    resp = client.post("/api/creneaux", json=slot_payload())
    assert resp.status_code == 201
    body = resp.json()
    assert body["type_transport"] == "standard"
    assert body["heure_depart"] == "08:30:00"
    assert body["nombre_colis_actuels"] == 0
    assert body["places_restantes"] == 3


def test_create_slot_invalid_transport_type(client, slot_payload):
    resp = client.post("/api/creneaux", json=slot_payload(type_transport="fusee"))
    assert resp.status_code == 400
    assert resp.json()["error"] == "Type de transport invalide. Doit être: standard, express ou prioritaire"


def test_create_slot_requires_positive_numbers(client, slot_payload):
    for field in ("capacite_max", "frais_par_kg", "poids_max_colis"):
        resp = client.post("/api/creneaux", json=slot_payload(**{field: 0}))
        assert resp.status_code == 400, field
        assert resp.json()["error"] == "La capacité, les frais et le poids maximum doivent être supérieurs à 0"
    assert client.get("/api/creneaux/count").json() == {"count": 0}


def test_create_slot_missing_field(client, slot_payload):
    payload = slot_payload()
    del payload["date_expedition"]
    resp = client.post("/api/creneaux", json=payload)
    assert resp.status_code == 400
    assert resp.json() == {"error": "Champ obligatoire manquant: date_expedition"}


def test_get_slot_not_found(client):
    resp = client.get("/api/creneaux/12")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Créneau non trouvé"}


def test_remaining_capacity_is_derived_from_packages(client, create_slot, create_package):
    full = create_slot(capacite_max=2)
    partial = create_slot(capacite_max=5, destination="Conakry")
    empty = create_slot(capacite_max=4, destination="Nouakchott")
    create_package(creneau_id=full["id"])
    create_package(creneau_id=full["id"])
    create_package(creneau_id=partial["id"])
    create_package()

    expected = {full["id"]: 2, partial["id"]: 1, empty["id"]: 0}
    listed = client.get("/api/creneaux").json()["data"]
    assert {slot["id"] for slot in listed} == set(expected)
    for slot in listed:
        assert slot["nombre_colis_actuels"] == expected[slot["id"]]
        assert slot["places_restantes"] == slot["capacite_max"] - expected[slot["id"]]

    single = client.get(f"/api/creneaux/{partial['id']}").json()
    assert single["nombre_colis_actuels"] == 1
    assert single["places_restantes"] == 4


def test_remaining_capacity_follows_package_moves(client, create_slot, create_package):
    origin = create_slot(capacite_max=2)
    target = create_slot(capacite_max=2)
    package = create_package(creneau_id=origin["id"])

    client.patch(f"/api/colis/{package['id']}", json={"creneau_id": target["id"]})

    assert client.get(f"/api/creneaux/{origin['id']}").json()["places_restantes"] == 2
    assert client.get(f"/api/creneaux/{target['id']}").json()["places_restantes"] == 1


def test_delete_slot_with_packages_conflicts(client, create_slot, create_package):
    slot = create_slot()
    package = create_package(creneau_id=slot["id"])

    resp = client.delete(f"/api/creneaux/{slot['id']}")
    assert resp.status_code == 409
    assert resp.json() == {"error": "Impossible de supprimer le créneau: des colis y sont associés"}
    assert client.get(f"/api/creneaux/{slot['id']}").status_code == 200
    assert client.get(f"/api/colis/{package['id']}").status_code == 200


def test_delete_empty_slot(client, create_slot):
    slot = create_slot()
    resp = client.delete(f"/api/creneaux/{slot['id']}")
    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Créneau supprimé"
    assert body["deletedCreneau"]["id"] == slot["id"]
    assert client.get(f"/api/creneaux/{slot['id']}").status_code == 404


def test_delete_slot_not_found(client):
    assert client.delete("/api/creneaux/31").status_code == 404


def test_replace_slot(client, create_slot, slot_payload):
    slot = create_slot(type_transport="express")
    resp = client.put(
        f"/api/creneaux/{slot['id']}",
        json=slot_payload(destination="Accra", capacite_max=10),
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["destination"] == "Accra"
    assert body["capacite_max"] == 10
    assert body["places_restantes"] == 10
    # Omitted transport type falls back to the default on a full replace
    assert body["type_transport"] == "standard"


def test_patch_slot_validates_present_fields_only(client, create_slot):
    slot = create_slot()
    resp = client.patch(f"/api/creneaux/{slot['id']}", json={"frais_par_kg": -1})
    assert resp.status_code == 400
    assert client.get(f"/api/creneaux/{slot['id']}").json()["frais_par_kg"] == 2500

    resp = client.patch(f"/api/creneaux/{slot['id']}", json={"type_transport": "prioritaire"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["type_transport"] == "prioritaire"
    assert body["capacite_max"] == slot["capacite_max"]


def test_patch_slot_empty_payload(client, create_slot):
    slot = create_slot()
    resp = client.patch(f"/api/creneaux/{slot['id']}", json={})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Aucun champ à modifier"}


def test_list_slots_search(client, create_slot):
    create_slot(lieu_depart="Dakar", destination="Bamako")
    create_slot(lieu_depart="Thies", destination="Saint-Louis")

    resp = client.get("/api/creneaux", params={"search": "SAINT"})
    body = resp.json()
    assert [slot["destination"] for slot in body["data"]] == ["Saint-Louis"]
    assert body["pagination"]["total"] == 1


def test_create_slot_rejects_booleans_and_out_of_range_numbers(client, slot_payload):
    cases = [
        ({"capacite_max": True}, "Valeur invalide pour le champ capacite_max"),
        ({"capacite_max": 10**20}, "Valeur trop grande pour le champ capacite_max"),
        ({"frais_par_kg": 10**9}, "Valeur trop grande pour le champ frais_par_kg"),
        ({"frais_par_kg": 0.004}, "La capacité, les frais et le poids maximum doivent être supérieurs à 0"),
    ]
    for overrides, message in cases:
        resp = client.post("/api/creneaux", json=slot_payload(**overrides))
        assert resp.status_code == 400, overrides
        assert resp.json() == {"error": message}
    assert client.get("/api/creneaux/count").json() == {"count": 0}


def test_delete_slot_locks_the_row_before_counting(client, session_factory, create_slot):
    slot = create_slot()
    statements = []

    @event.listens_for(session_factory, "do_orm_execute")
    def record(orm_execute_state):
        statements.append(str(orm_execute_state.statement.compile(dialect=postgresql.dialect())))

    try:
        assert client.delete(f"/api/creneaux/{slot['id']}").status_code == 200
    finally:
        event.remove(session_factory, "do_orm_execute", record)

    locked = [sql for sql in statements if "FOR UPDATE" in sql]
    assert locked and "creneaux_expedition" in locked[0]
    assert statements.index(locked[0]) == 0


def test_slot_capacity_check_constraint(session_factory):
    db = session_factory()
    try:
        db.add(Slot(
            heure_depart=datetime.time(8, 30),
            lieu_depart="Dakar",
            destination="Bamako",
            capacite_max=0,
            frais_par_kg=2500,
            poids_max_colis=30,
            date_expedition=datetime.date(2025, 7, 1),
        ))
        with pytest.raises(IntegrityError):
            db.commit()
    finally:
        db.rollback()
        db.close()
