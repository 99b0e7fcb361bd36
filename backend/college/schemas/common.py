"""
Enveloppe de réponse commune à toutes les routes.
"""

from typing import Any, List, Optional

from pydantic import BaseModel

from college.core.results import ErrorCode, FailureLevel


class ErrorDetailSchema(BaseModel):
    code: ErrorCode
    message: str
    level: FailureLevel

    model_config = {"from_attributes": True}


class ApiResponse(BaseModel):
    data: Optional[Any] = None
    is_success: bool
    message: str = ""
    status_code: int
    errors: List[ErrorDetailSchema] = []
