"""
Schémas Pydantic pour les cours.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from college.models.enums import AcademicYear


class CourseBase(BaseModel):
    name: str = Field(max_length=70)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    model_config = {"from_attributes": True}


class CourseCreate(CourseBase):
    course_code: str = Field(max_length=20)
    semester: int = 1
    year: Optional[AcademicYear] = None
    department_id: Optional[int] = None
    professor_id: Optional[int] = None

    @field_validator("name", "course_code")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le champ ne peut pas être vide.")
        return v.strip()

    @field_validator("semester")
    @classmethod
    def valid_semester(cls, v: int) -> int:
        if v not in (1, 2):
            raise ValueError("Le semestre doit valoir 1 ou 2.")
        return v

    @model_validator(mode="after")
    def dates_in_order(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("La date de fin doit suivre la date de début.")
        return self


class CourseUpdate(BaseModel):
    id: int
    name: Optional[str] = Field(default=None, max_length=70)
    course_code: Optional[str] = Field(default=None, max_length=20)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    semester: Optional[int] = None
    year: Optional[AcademicYear] = None
    department_id: Optional[int] = None
    professor_id: Optional[int] = None


class CourseSummary(BaseModel):
    id: int
    name: str
    course_code: str
    semester: int

    model_config = {"from_attributes": True}


class CourseResponse(CourseBase):
    id: int
    course_code: str
    semester: int
    year: Optional[AcademicYear] = None
    department_id: Optional[int] = None
    department_name: Optional[str] = None
    professor_id: Optional[int] = None
    students_count: int = 0
