"""
Schémas Pydantic pour les départements.
"""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from college.schemas.course import CourseSummary
from college.schemas.exam import ExamSummary


class DepartmentBase(BaseModel):
    name: str = Field(max_length=70)

    model_config = {"from_attributes": True}

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le nom du département ne peut pas être vide.")
        return v.strip()


class DepartmentCreate(DepartmentBase):
    # Valeur ≤ 25 ramenée silencieusement à 100 par le modèle
    max_student_count: Optional[int] = None


class DepartmentUpdate(BaseModel):
    id: int
    name: Optional[str] = Field(default=None, max_length=70)
    max_student_count: Optional[int] = None

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Le nom du département ne peut pas être vide.")
        return v.strip() if v else v


class DepartmentSummary(BaseModel):
    id: int
    name: str

    model_config = {"from_attributes": True}


class ProfessorSummary(BaseModel):
    id: int
    name: str
    email: Optional[str] = None

    model_config = {"from_attributes": True}


class DepartmentResponse(DepartmentBase):
    id: int
    max_student_count: int
    students_count: int
    professors_count: int
    courses_count: int
    exams_count: int
    professors: List[ProfessorSummary] = []
    courses: List[CourseSummary] = []
    exams: List[ExamSummary] = []
