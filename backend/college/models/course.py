"""
Modèles SQLAlchemy pour les cours et leur association avec les étudiants.
"""

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, String
from sqlalchemy.orm import relationship, validates

from college.database import Base
from college.models.base import EntityMixin
from college.models.enums import AcademicYear

ALLOWED_SEMESTERS = (1, 2)


class Course(EntityMixin, Base):
    __tablename__ = "courses"

    start_date = Column(DateTime, nullable=True)
    end_date = Column(DateTime, nullable=True)
    course_code = Column(String(20), nullable=False, default="")
    year = Column(Enum(AcademicYear), nullable=True)
    semester = Column(Integer, nullable=False, default=1)
    professor_id = Column(Integer, ForeignKey("persons.id", ondelete="SET NULL"), nullable=True)
    department_id = Column(Integer, ForeignKey("departments.id", ondelete="SET NULL"), nullable=True)

    professor = relationship("Professor", back_populates="courses")
    department = relationship("Department", back_populates="courses")
    students = relationship("StudentCourse", back_populates="course", cascade="all, delete")

    @validates("semester")
    def _validate_semester(self, key, value):
        # Levée avant affectation : l'état de l'objet reste inchangé
        if value not in ALLOWED_SEMESTERS:
            raise ValueError(f"Le semestre doit valoir 1 ou 2 (reçu : {value}).")
        return value

    @property
    def department_name(self):
        return self.department.name if self.department is not None else None

    @property
    def students_count(self) -> int:
        return len(self.students or [])


class StudentCourse(Base):
    """Association étudiant ↔ cours."""
    __tablename__ = "student_courses"

    student_id = Column(Integer, ForeignKey("persons.id", ondelete="CASCADE"), primary_key=True)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), primary_key=True)

    student = relationship("Student", back_populates="courses")
    course = relationship("Course", back_populates="students")
