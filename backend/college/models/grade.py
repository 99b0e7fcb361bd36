"""
Modèle SQLAlchemy pour les notes : un examen, un étudiant (par code), un score.
"""

from sqlalchemy import Column, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from college.database import Base
from college.models.base import EntityMixin


class Grade(EntityMixin, Base):
    __tablename__ = "grades"

    exam_id = Column(Integer, ForeignKey("exams.id", ondelete="CASCADE"), nullable=False)
    student_code = Column(String(12), ForeignKey("persons.student_code", ondelete="CASCADE"), nullable=False)
    exam_grade = Column(Float, nullable=False, default=0.0)

    exam = relationship("Exam", back_populates="grades")
    student = relationship("Student", back_populates="grades")

    @property
    def exam_name(self) -> str:
        return self.exam.name if self.exam is not None else ""

    @property
    def student_name(self) -> str:
        return self.student.name if self.student is not None else ""
