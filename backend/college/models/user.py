"""
Modèle SQLAlchemy pour les comptes de connexion (un par étudiant et par membre du personnel).
"""

from sqlalchemy import Column, DateTime, Integer, String, func

from college.database import Base


class AppUser(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_name = Column(String(256), unique=True, nullable=False)
    email = Column(String(256), unique=True, nullable=True)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    phone_number = Column(String(20), nullable=True)
    role = Column(String(20), nullable=False)  # admin, user, superuser, student
    security_stamp = Column(String(64), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
