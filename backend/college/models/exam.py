"""
Modèle SQLAlchemy pour les examens.
"""

from datetime import datetime

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer
from sqlalchemy.orm import relationship

from college.database import Base
from college.models.base import EntityMixin


class Exam(EntityMixin, Base):
    __tablename__ = "exams"

    max_grade = Column(Integer, nullable=False, default=100)
    created = Column(DateTime, default=datetime.now)
    duration = Column(Float, nullable=False, default=0.0)  # en heures
    department_id = Column(Integer, ForeignKey("departments.id", ondelete="SET NULL"), nullable=True)

    department = relationship("Department", back_populates="exams")
    grades = relationship("Grade", back_populates="exam", cascade="all, delete")

    @property
    def department_name(self):
        return self.department.name if self.department is not None else None
