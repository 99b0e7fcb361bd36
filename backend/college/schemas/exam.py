"""
Schémas Pydantic pour les examens.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ExamCreate(BaseModel):
    name: str = Field(min_length=1, max_length=70)
    max_grade: int = Field(default=100, gt=0)
    duration: float = Field(gt=0)
    department_id: Optional[int] = None


class ExamUpdate(BaseModel):
    id: int
    name: Optional[str] = Field(default=None, min_length=1, max_length=70)
    max_grade: Optional[int] = Field(default=None, gt=0)
    duration: Optional[float] = Field(default=None, gt=0)
    department_id: Optional[int] = None


class ExamSummary(BaseModel):
    id: int
    name: str
    max_grade: int

    model_config = {"from_attributes": True}


class ExamResponse(BaseModel):
    id: int
    name: str
    max_grade: int
    duration: float
    created: Optional[datetime] = None
    department_id: Optional[int] = None
    department_name: Optional[str] = None

    model_config = {"from_attributes": True}
