"""
Schémas Pydantic pour les étudiants.
Plusieurs vues d'une même entité : résumé, détail, détail après création.
"""

import re
from datetime import date
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from college.models.enums import AcademicYear
from college.schemas.department import DepartmentSummary

PHONE_RE = re.compile(r"^\+?[0-9]{6,13}$")


def _check_phone(v: Optional[str]) -> Optional[str]:
    if v is not None and not PHONE_RE.match(v):
        raise ValueError("Le numéro de téléphone est invalide.")
    return v


class StudentBase(BaseModel):
    first_name: str
    last_name: Optional[str] = None

    model_config = {"from_attributes": True}


class StudentCreate(StudentBase):
    age: int = Field(ge=18, le=26)
    email: EmailStr
    phone_number: str = Field(max_length=13)
    department_id: Optional[int] = None
    academic_year: AcademicYear
    birth_date: Optional[date] = None

    @field_validator("first_name")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le prénom ne peut pas être vide.")
        return v.strip()

    @field_validator("phone_number")
    @classmethod
    def valid_phone(cls, v: str) -> str:
        return _check_phone(v)


class StudentUpdate(BaseModel):
    """Mise à jour partielle ; l'étudiant est désigné par son code."""
    student_code: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    name: Optional[str] = Field(default=None, min_length=3, max_length=25)
    age: Optional[int] = Field(default=None, ge=18, le=26)
    department_id: Optional[int] = Field(default=None, ge=1)
    phone_number: Optional[str] = Field(default=None, max_length=14)
    email: Optional[EmailStr] = None
    academic_year: Optional[AcademicYear] = None

    @field_validator("phone_number")
    @classmethod
    def valid_phone(cls, v: Optional[str]) -> Optional[str]:
        return _check_phone(v)


class StudentSummary(BaseModel):
    id: int
    name: str
    student_code: Optional[str] = None

    model_config = {"from_attributes": True}


class StudentResponse(StudentBase):
    id: int
    name: str
    age: Optional[int] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None
    student_code: Optional[str] = None
    academic_year: Optional[AcademicYear] = None
    department_id: Optional[int] = None
    department_name: Optional[str] = None
    department: Optional[DepartmentSummary] = None
    total_quality_points: float = 0.0
    total_credit_hours: float = 0.0
    gpa: float = 0.0
    courses_count: int = 0


class StudentCredentials(BaseModel):
    university_email: str
    password: str

    model_config = {"from_attributes": True}


class StudentCreated(StudentResponse):
    """Vue renvoyée à la création : contient les identifiants générés."""
    crucial_information: Optional[StudentCredentials] = None
