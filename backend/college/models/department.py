"""
Modèle SQLAlchemy pour les départements.
"""

from sqlalchemy import Column, Integer
from sqlalchemy.orm import relationship, validates

from college.database import Base
from college.models.base import EntityMixin

DEFAULT_MAX_STUDENT_COUNT = 100
MIN_ACCEPTED_STUDENT_COUNT = 25


class Department(EntityMixin, Base):
    __tablename__ = "departments"

    max_student_count = Column(Integer, nullable=False, default=DEFAULT_MAX_STUDENT_COUNT)

    students = relationship("Student", back_populates="department")
    professors = relationship("Professor", back_populates="department")
    administrators = relationship("Administrator", back_populates="department")
    courses = relationship("Course", back_populates="department")
    exams = relationship("Exam", back_populates="department")

    @validates("max_student_count")
    def _floor_max_student_count(self, key, value):
        # Correction silencieuse, pas une erreur de validation
        if value is None or value <= MIN_ACCEPTED_STUDENT_COUNT:
            return DEFAULT_MAX_STUDENT_COUNT
        return value

    @property
    def students_count(self) -> int:
        return len(self.students or [])

    @property
    def professors_count(self) -> int:
        return len(self.professors or [])

    @property
    def courses_count(self) -> int:
        return len(self.courses or [])

    @property
    def exams_count(self) -> int:
        return len(self.exams or [])
