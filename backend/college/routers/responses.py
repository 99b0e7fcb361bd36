"""
Conversion d'un OperationResult en réponse HTTP (enveloppe ApiResponse).

Succès -> code demandé (200 ou 201) ; échec -> 400, ou 500 dès qu'une erreur
est de niveau CRITICAL (panne de la base, exception inattendue).
"""

from typing import Any, Iterable, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from college.core.results import ErrorDetail, FailureLevel, OperationResult
from college.schemas.common import ApiResponse, ErrorDetailSchema


def status_for(result: OperationResult, success_status: int = 200) -> int:
    if result.is_success:
        return success_status
    critical = any(e.level == FailureLevel.CRITICAL for e in result.errors)
    return 500 if critical else 400


def envelope(
    status_code: int,
    data: Any = None,
    message: str = "",
    errors: Iterable[ErrorDetail] = (),
    headers: Optional[dict] = None,
) -> JSONResponse:
    body = ApiResponse(
        data=data,
        is_success=200 <= status_code < 300,
        message=message,
        status_code=status_code,
        errors=[ErrorDetailSchema.model_validate(e) for e in errors],
    )
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body), headers=headers)


def to_response(result: OperationResult, success_status: int = 200) -> JSONResponse:
    status_code = status_for(result, success_status)
    message = result.message or (result.errors[0].message if result.errors else "")
    return envelope(status_code, result.data, message, result.errors)
