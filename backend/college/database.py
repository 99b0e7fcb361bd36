"""
Configuration de la connexion à la base de données relationnelle.
PostgreSQL en production, SQLite accepté pour le développement et les tests.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.orm import sessionmaker

from college.config import settings


def build_engine(url: str):
    """Crée un moteur SQLAlchemy ; SQLite doit être partageable entre threads (TestClient)."""
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, connect_args=connect_args)


engine = build_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Dépendance FastAPI : fournit une session BDD et la ferme après usage."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
