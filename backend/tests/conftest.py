"""
Configuration partagée pour tous les tests.

- `client` : BDD mockée (MagicMock), appelant authentifié comme administrateur.
- `db` : session SQLite en mémoire avec le schéma complet.
- `api_client` : client HTTP branché sur cette base SQLite, appelant administrateur.
- `anon_client` : même base, sans authentification simulée (jetons réels).
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from unittest.mock import MagicMock

import college.models  # noqa: F401
from college.database import Base, get_db
from college.main import app
from college.models.enums import Role
from college.schemas.account import CurrentUser
from college.security import get_current_user


def make_current_user(role: Role = Role.ADMIN, user_name: str = "admin") -> CurrentUser:
    return CurrentUser(user_name=user_name, email=f"{user_name}@college.test", roles=[role.value])


@pytest.fixture
def db():
    """Session SQLite en mémoire, partagée entre threads (TestClient)."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    yield session
    session.close()
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def client():
    """Client HTTP de test avec la BDD mockée."""
    mock_db = MagicMock()
    app.dependency_overrides[get_db] = lambda: mock_db
    app.dependency_overrides[get_current_user] = lambda: make_current_user()
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def api_client(db):
    """Client HTTP de test sur la base SQLite, appelant administrateur."""
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_current_user] = lambda: make_current_user()
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def anon_client(db):
    """Client HTTP de test sur la base SQLite ; l'authentification passe par de vrais jetons."""
    app.dependency_overrides[get_db] = lambda: db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
