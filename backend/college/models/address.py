"""
Modèle SQLAlchemy pour les adresses (relation 1-1 avec une personne).
"""

from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from college.database import Base
from college.models.base import EntityMixin


class Address(EntityMixin, Base):
    __tablename__ = "addresses"

    city = Column(String(100), nullable=True)
    state = Column(String(100), nullable=True)
    zip_code = Column(String(20), nullable=True)
    street = Column(String(200), nullable=True)
    country = Column(String(100), nullable=True)

    person = relationship("Person", back_populates="address", uselist=False)
