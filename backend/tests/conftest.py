"""
Configuration partagée pour tous les tests.

- client : BDD mockée (MagicMock), aucune connexion réelle
- db_session / api : base SQLite en mémoire, pour les tests de requêtes
  (pagination, recherche, statistiques)
"""

import os

# Avant tout import de l'application : pas de PostgreSQL ni de stockage réel en test
os.environ.setdefault("DATABASE_URL", "sqlite://")

import uuid
from datetime import date
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app.main import app
from app.models.registration import Registration
from app.rate_limit import registration_limiter


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    """Chaque test démarre avec des compteurs vides."""
    registration_limiter.reset()
    yield
    registration_limiter.reset()


@pytest.fixture
def client():
    """Client HTTP de test avec la BDD mockée."""
    mock_db = MagicMock()
    app.dependency_overrides[get_db] = lambda: mock_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def db_session():
    """Session sur une base SQLite en mémoire, partagée entre threads (StaticPool)."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def api(db_session):
    """Client HTTP de test branché sur la base SQLite en mémoire."""
    app.dependency_overrides[get_db] = lambda: db_session
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def make_registration(db_session):
    """Fabrique d'inscriptions persistées dans la base SQLite."""

    def _make(**kwargs) -> Registration:
        registration = Registration(
            id=kwargs.get("id", uuid.uuid4()),
            student_name=kwargs.get("student_name", f"Student {uuid.uuid4().hex[:8]}"),
            school_name=kwargs.get("school_name", "Delhi Public School Guwahati"),
            class_name=kwargs.get("class_name", "IX"),
            dob=kwargs.get("dob", date(2011, 4, 2)),
            email=kwargs.get("email", None),
            mobile_number=kwargs.get("mobile_number", "+91 9876543210"),
            alt_mobile_number=kwargs.get("alt_mobile_number", None),
            id_card_url=kwargs.get("id_card_url", "https://files.example.org/id-cards/card.png"),
            is_attended=kwargs.get("is_attended", False),
            certificate_issued=kwargs.get("certificate_issued", False),
        )
        db_session.add(registration)
        db_session.commit()
        return registration

    return _make
