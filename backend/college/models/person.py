"""
Hiérarchie des personnes, stockée dans une seule table `persons`.
La colonne `type` sert de discriminant : student, professor, administrator.
"""

from datetime import datetime

from sqlalchemy import Column, Date, DateTime, Enum, Float, ForeignKey, Integer, Numeric, String, func
from sqlalchemy.orm import relationship

from college.database import Base
from college.models.base import EntityMixin
from college.models.enums import AcademicYear, AdminPosition

STUDENT_CODE_MAX_LENGTH = 12


class Person(EntityMixin, Base):
    __tablename__ = "persons"

    type = Column(String(20), nullable=False)
    age = Column(Integer, nullable=True)
    phone_number = Column(String(13), nullable=True)
    email = Column(String(255), nullable=True)
    address_id = Column(Integer, ForeignKey("addresses.id", ondelete="SET NULL"), nullable=True)
    # Partagé par les trois sous-types (une seule table)
    department_id = Column(Integer, ForeignKey("departments.id", ondelete="SET NULL"), nullable=True)

    address = relationship("Address", back_populates="person", uselist=False)

    __mapper_args__ = {"polymorphic_on": type, "polymorphic_identity": "person"}

    @property
    def department_name(self):
        department = getattr(self, "department", None)
        return department.name if department is not None else None


class Student(Person):
    student_code = Column(String(STUDENT_CODE_MAX_LENGTH), unique=True, index=True, nullable=True)
    total_quality_points = Column(Float, default=0.0)
    total_credit_hours = Column(Float, default=0.0)
    birth_date = Column(Date, nullable=True)
    join_time = Column(DateTime, default=datetime.now)
    academic_year = Column(Enum(AcademicYear), nullable=True)

    department = relationship("Department", back_populates="students")
    courses = relationship("StudentCourse", back_populates="student", cascade="all, delete-orphan")
    grades = relationship("Grade", back_populates="student", cascade="all, delete")
    crucial_information = relationship(
        "StudentCrucialInformation",
        back_populates="student",
        uselist=False,
        cascade="all, delete-orphan",
    )

    __mapper_args__ = {"polymorphic_identity": "student"}

    @property
    def first_name(self) -> str:
        parts = (self.name or "").split()
        return parts[0] if parts else ""

    @property
    def last_name(self) -> str:
        parts = (self.name or "").split()
        return " ".join(parts[1:])

    @property
    def courses_count(self) -> int:
        return len(self.courses or [])

    @property
    def gpa(self) -> float:
        """Moyenne pondérée : points de qualité / heures de crédit."""
        if not self.total_credit_hours:
            return 0.0
        return round(self.total_quality_points / self.total_credit_hours, 2)


class Professor(Person):
    hire_date = Column(DateTime, server_default=func.now())
    salary = Column(Numeric(12, 2), nullable=True)

    department = relationship("Department", back_populates="professors")
    courses = relationship("Course", back_populates="professor")

    __mapper_args__ = {"polymorphic_identity": "professor"}

    @property
    def courses_count(self) -> int:
        return len(self.courses or [])


class Administrator(Person):
    admin_position = Column(Enum(AdminPosition), nullable=True)

    department = relationship("Department", back_populates="administrators")

    __mapper_args__ = {"polymorphic_identity": "administrator"}
