import os

# Must be set before the application (and its cached settings) is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("RUN_MIGRATIONS", "false")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from freight_booking.main import app
from freight_booking.infrastructure.db import get_db
from freight_booking.domain.models import Base


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        dbapi_connection.execute("PRAGMA foreign_keys=ON")

    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def reservation_payload():
    def build(**overrides):
        payload = {
            "destination": "Paris",
            "nom": "Diallo",
            "prenom": "Awa",
            "email": "awa.diallo@example.com",
            "telephone": "+221770000000",
            "lieu_depart": "Dakar",
            "date_depart": "2025-07-01",
            "date_retour": "2025-07-15",
            "nombre_passagers": 2,
            "classe": "Economique",
        }
        payload.update(overrides)
        return payload
    return build


@pytest.fixture
def slot_payload():
    def build(**overrides):
        payload = {
            "heure_depart": "08:30",
            "lieu_depart": "Dakar",
            "destination": "Bamako",
            "capacite_max": 3,
            "frais_par_kg": 2500,
            "poids_max_colis": 30,
            "date_expedition": "2025-07-01",
        }
        payload.update(overrides)
        return payload
    return build


@pytest.fixture
def package_payload():
    def build(**overrides):
        payload = {
            "nom_expediteur": "Moussa Ndiaye",
            "telephone_expediteur": "+221771111111",
            "adresse_expediteur": "12 rue Carnot, Dakar",
            "nom_destinataire": "Fatou Traore",
            "telephone_destinataire": "+22370000000",
            "adresse_destinataire": "Hamdallaye ACI, Bamako",
            "poids": 4.5,
            "description": "Documents administratifs",
        }
        payload.update(overrides)
        return payload
    return build


@pytest.fixture
def create_slot(client, slot_payload):
    def create(**overrides):
        resp = client.post("/api/creneaux", json=slot_payload(**overrides))
        assert resp.status_code == 201, resp.text
        return resp.json()
    return create


@pytest.fixture
def create_package(client, package_payload):
    def create(**overrides):
        resp = client.post("/api/colis", json=package_payload(**overrides))
        assert resp.status_code == 201, resp.text
        return resp.json()
    return create
