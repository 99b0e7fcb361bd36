"""
Schémas Pydantic pour les notes.
"""

from typing import Optional

from pydantic import BaseModel, Field


class GradeCreate(BaseModel):
    name: str = Field(min_length=1, max_length=70)
    exam_id: int
    student_code: str = Field(min_length=1, max_length=12)
    exam_grade: float = Field(ge=0)


class GradeUpdate(BaseModel):
    id: int
    name: Optional[str] = Field(default=None, min_length=1, max_length=70)
    exam_grade: Optional[float] = Field(default=None, ge=0)


class GradeResponse(BaseModel):
    id: int
    name: str
    exam_id: int
    exam_name: str
    student_code: str
    student_name: str
    exam_grade: float

    model_config = {"from_attributes": True}
