"""
Point d'entrée principal de l'API College.
Démarrage : uvicorn college.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

import college.models  # noqa: F401  enregistre tous les modèles dans Base.metadata avant les routers
from college.config import settings
from college.core.results import ErrorCode, ErrorDetail, FailureLevel, get_message
from college.database import Base, engine
from college.routers import accounts, courses, departments, exams, grades, students
from college.routers.responses import envelope

logger = logging.getLogger(__name__)

HTTP_ERROR_CODES = {
    401: ErrorCode.UNAUTHORIZED_ACCESS,
    403: ErrorCode.INSUFFICIENT_PERMISSIONS,
    404: ErrorCode.NOT_FOUND,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Cycle de vie de l'application : journalisation et, si demandé, création du schéma."""
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    if settings.AUTO_CREATE_SCHEMA:
        Base.metadata.create_all(bind=engine)
        logger.info("Schéma de la base de données créé")
    yield


app = FastAPI(
    title="College API",
    description="API d'administration universitaire : étudiants, départements, cours, examens et notes",
    version="0.1.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

# CORS : autorise tous les ports localhost en développement (à restreindre en production).
app.add_middleware(
    CORSMiddleware,
    allow_origins=[],
    allow_origin_regex=r"https?://(localhost|127\.0\.0\.1)(:\d+)?",
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "Accept"],
)


app.include_router(accounts.router)
app.include_router(students.router)
app.include_router(departments.router)
app.include_router(courses.router)
app.include_router(exams.router)
app.include_router(grades.router)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Erreurs de validation des DTO : 400 avec un message par champ."""
    errors = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        errors.append(ErrorDetail(ErrorCode.VALIDATION_FAILED, f"{field}: {error.get('msg')}", FailureLevel.IMPORTANT))
    return envelope(400, message=get_message(ErrorCode.VALIDATION_FAILED), errors=errors)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = HTTP_ERROR_CODES.get(exc.status_code, ErrorCode.INVALID_REQUEST)
    return envelope(
        exc.status_code,
        message=str(exc.detail),
        errors=[ErrorDetail(code, str(exc.detail))],
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Intercepte toutes les exceptions non gérées pour garantir que la réponse 500
    passe bien par CORSMiddleware et conserve l'enveloppe habituelle.
    """
    logger.error("Exception non gérée : %s", exc, exc_info=True)
    return envelope(
        500,
        message="Une erreur interne est survenue.",
        errors=[ErrorDetail(ErrorCode.GENERAL_ERROR, get_message(ErrorCode.GENERAL_ERROR), FailureLevel.CRITICAL)],
    )


@app.get("/api/health", tags=["Santé"])
def health_check():
    """Vérifie que l'API est opérationnelle."""
    return {"status": "ok", "service": "College API", "version": "0.1.0"}
