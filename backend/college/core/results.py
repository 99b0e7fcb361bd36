"""
Résultats d'opération et pages de résultats.

Les échecs attendus (introuvable, doublon, validation) ne sont jamais signalés
par exception : chaque opération renvoie un OperationResult que la couche HTTP
inspecte pour choisir le code de réponse.
"""

import enum
import logging
import math
from dataclasses import dataclass
from typing import Any, Callable, Generic, List, Optional, TypeVar

from pydantic import BaseModel, computed_field

logger = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")


class OperationStatus(str, enum.Enum):
    PENDING = "PENDING"
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"


class FailureLevel(str, enum.Enum):
    CRITICAL = "CRITICAL"    # l'opération ne peut pas continuer
    IMPORTANT = "IMPORTANT"  # erreur significative, à traiter
    MINOR = "MINOR"          # sans impact réel sur l'opération


class ErrorCode(str, enum.Enum):
    # Authentification & autorisation
    UNAUTHORIZED_ACCESS = "UNAUTHORIZED_ACCESS"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    TOKEN_INVALID = "TOKEN_INVALID"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    INSUFFICIENT_PERMISSIONS = "INSUFFICIENT_PERMISSIONS"
    PASSWORD_TOO_WEAK = "PASSWORD_TOO_WEAK"
    ACCOUNT_ALREADY_EXISTS = "ACCOUNT_ALREADY_EXISTS"

    # CRUD
    CREATE_FAILED = "CREATE_FAILED"
    READ_FAILED = "READ_FAILED"
    UPDATE_FAILED = "UPDATE_FAILED"
    DELETE_FAILED = "DELETE_FAILED"
    NOT_FOUND = "NOT_FOUND"
    DUPLICATE_RECORD = "DUPLICATE_RECORD"
    DATA_CONFLICT = "DATA_CONFLICT"
    DATA_INTEGRITY_VIOLATION = "DATA_INTEGRITY_VIOLATION"
    RECORD_ALREADY_EXISTS = "RECORD_ALREADY_EXISTS"
    CREATE_NO_CHANGES = "CREATE_NO_CHANGES"
    UPDATE_NO_CHANGES = "UPDATE_NO_CHANGES"
    DELETE_NO_CHANGES = "DELETE_NO_CHANGES"

    # Validation des données
    VALIDATION_FAILED = "VALIDATION_FAILED"
    DATA_FORMAT_INVALID = "DATA_FORMAT_INVALID"
    REQUIRED_FIELD_MISSING = "REQUIRED_FIELD_MISSING"
    MAX_LENGTH_EXCEEDED = "MAX_LENGTH_EXCEEDED"
    INVALID_EMAIL_FORMAT = "INVALID_EMAIL_FORMAT"
    INVALID_PHONE_NUMBER = "INVALID_PHONE_NUMBER"
    VALUE_OUT_OF_RANGE = "VALUE_OUT_OF_RANGE"
    UNSUPPORTED_DATA_TYPE = "UNSUPPORTED_DATA_TYPE"
    INVALID_AGE = "INVALID_AGE"

    # Règles métier
    OPERATION_NOT_ALLOWED = "OPERATION_NOT_ALLOWED"
    RESOURCE_LIMIT_EXCEEDED = "RESOURCE_LIMIT_EXCEEDED"
    BUSINESS_RULE_VIOLATION = "BUSINESS_RULE_VIOLATION"

    # Général
    GENERAL_ERROR = "GENERAL_ERROR"
    OPERATION_FAILED = "OPERATION_FAILED"
    UNEXPECTED_ERROR = "UNEXPECTED_ERROR"
    INVALID_REQUEST = "INVALID_REQUEST"


ERROR_MESSAGES = {
    ErrorCode.UNAUTHORIZED_ACCESS: "Accès refusé : utilisateur non authentifié.",
    ErrorCode.INVALID_CREDENTIALS: "Les identifiants fournis sont invalides.",
    ErrorCode.TOKEN_INVALID: "Le jeton est invalide.",
    ErrorCode.TOKEN_EXPIRED: "Le jeton a expiré.",
    ErrorCode.INSUFFICIENT_PERMISSIONS: "Permissions insuffisantes pour cette opération.",
    ErrorCode.PASSWORD_TOO_WEAK: "Le mot de passe fourni est trop faible.",
    ErrorCode.ACCOUNT_ALREADY_EXISTS: "Un compte avec ces informations existe déjà.",
    ErrorCode.CREATE_FAILED: "Échec de la création de l'enregistrement.",
    ErrorCode.READ_FAILED: "Échec de la lecture de l'enregistrement.",
    ErrorCode.UPDATE_FAILED: "Échec de la mise à jour de l'enregistrement.",
    ErrorCode.DELETE_FAILED: "Échec de la suppression de l'enregistrement.",
    ErrorCode.NOT_FOUND: "L'enregistrement est introuvable.",
    ErrorCode.DUPLICATE_RECORD: "Un enregistrement avec le même identifiant existe déjà.",
    ErrorCode.DATA_CONFLICT: "Conflit de données pendant l'opération.",
    ErrorCode.DATA_INTEGRITY_VIOLATION: "Violation d'intégrité des données.",
    ErrorCode.RECORD_ALREADY_EXISTS: "L'enregistrement existe déjà.",
    ErrorCode.CREATE_NO_CHANGES: "Aucune modification effectuée lors de la création.",
    ErrorCode.UPDATE_NO_CHANGES: "Aucune modification effectuée lors de la mise à jour.",
    ErrorCode.DELETE_NO_CHANGES: "Aucune modification effectuée lors de la suppression.",
    ErrorCode.VALIDATION_FAILED: "La validation des données a échoué.",
    ErrorCode.DATA_FORMAT_INVALID: "Le format des données est invalide.",
    ErrorCode.REQUIRED_FIELD_MISSING: "Un champ obligatoire est manquant.",
    ErrorCode.MAX_LENGTH_EXCEEDED: "Le champ dépasse la longueur maximale autorisée.",
    ErrorCode.INVALID_EMAIL_FORMAT: "Le format de l'adresse email est invalide.",
    ErrorCode.INVALID_PHONE_NUMBER: "Le format du numéro de téléphone est invalide.",
    ErrorCode.VALUE_OUT_OF_RANGE: "La valeur est hors de la plage autorisée.",
    ErrorCode.UNSUPPORTED_DATA_TYPE: "Le type de données n'est pas supporté.",
    ErrorCode.INVALID_AGE: "L'âge fourni est invalide.",
    ErrorCode.OPERATION_NOT_ALLOWED: "L'opération n'est pas autorisée.",
    ErrorCode.RESOURCE_LIMIT_EXCEEDED: "La limite de ressources est dépassée.",
    ErrorCode.BUSINESS_RULE_VIOLATION: "Une règle métier a été violée.",
    ErrorCode.GENERAL_ERROR: "Une erreur inattendue est survenue.",
    ErrorCode.OPERATION_FAILED: "L'opération a échoué.",
    ErrorCode.UNEXPECTED_ERROR: "Une erreur inattendue est survenue.",
    ErrorCode.INVALID_REQUEST: "La requête est invalide.",
}


def get_message(code: ErrorCode) -> str:
    """Message par défaut associé à un code d'erreur."""
    return ERROR_MESSAGES[code]


@dataclass(frozen=True)
class ErrorDetail:
    code: ErrorCode
    message: str
    level: FailureLevel = FailureLevel.IMPORTANT


class OperationResult:
    """
    Statut + liste d'erreurs d'une opération, avec la donnée produite.

    Les mutateurs renvoient l'instance pour permettre le chaînage :
        result.with_status(OperationStatus.FAILURE).with_error_code(ErrorCode.NOT_FOUND)
    Une erreur CRITICAL force le statut à FAILURE.
    """

    def __init__(self, status: OperationStatus = OperationStatus.PENDING, data: Any = None):
        self.status = status
        self.errors: List[ErrorDetail] = []
        self.data = data
        self.message: Optional[str] = None

    @classmethod
    def success(cls, data: Any = None) -> "OperationResult":
        return cls(OperationStatus.SUCCESS, data=data)

    @classmethod
    def failure(
        cls,
        code: ErrorCode,
        message: Optional[str] = None,
        level: FailureLevel = FailureLevel.IMPORTANT,
    ) -> "OperationResult":
        return cls(OperationStatus.FAILURE).with_error_code(code, message, level)

    @property
    def is_success(self) -> bool:
        return self.status == OperationStatus.SUCCESS and not self.errors

    @property
    def is_failure(self) -> bool:
        return self.status == OperationStatus.FAILURE or bool(self.errors)

    def has_error(self, code: ErrorCode) -> bool:
        return any(e.code == code for e in self.errors)

    def with_status(self, status: OperationStatus) -> "OperationResult":
        self.status = status
        logger.info("Statut de l'opération : %s", status.value)
        return self

    def with_error_code(
        self,
        code: ErrorCode,
        message: Optional[str] = None,
        level: FailureLevel = FailureLevel.IMPORTANT,
    ) -> "OperationResult":
        message = message or get_message(code)
        self.errors.append(ErrorDetail(code, message, level))
        if level == FailureLevel.CRITICAL:
            self.status = OperationStatus.FAILURE
            logger.error("Erreur critique : code=%s, message=%s", code.value, message)
        else:
            logger.warning("Erreur : code=%s, message=%s", code.value, message)
        return self

    def with_exception(self, exc: Exception, level: FailureLevel = FailureLevel.CRITICAL) -> "OperationResult":
        self.errors.append(ErrorDetail(ErrorCode.GENERAL_ERROR, str(exc) or type(exc).__name__, level))
        if level == FailureLevel.CRITICAL:
            self.status = OperationStatus.FAILURE
            logger.error("Erreur critique : exception=%r", exc)
        else:
            logger.warning("Erreur : exception=%r", exc)
        return self

    def with_data(self, data: Any) -> "OperationResult":
        self.data = data
        return self

    def merge(self, other: "OperationResult") -> "OperationResult":
        """Reprend les erreurs (et l'échec éventuel) d'une sous-opération."""
        self.errors.extend(other.errors)
        if other.status == OperationStatus.FAILURE:
            self.status = OperationStatus.FAILURE
        return self

    def clear_errors(self) -> "OperationResult":
        self.errors.clear()
        logger.info("Erreurs de l'opération effacées.")
        return self

    def __repr__(self) -> str:
        return f"<OperationResult status={self.status.value} errors={len(self.errors)}>"


class PagedResult(BaseModel, Generic[T]):
    """Une page de résultats et ses métadonnées de navigation."""
    items: List[T] = []
    total_count: int = 0
    page_size: int = 0
    current_page: int = 0

    @computed_field
    @property
    def total_pages(self) -> int:
        if self.page_size <= 0:
            return 0
        return math.ceil(self.total_count / self.page_size)

    @computed_field
    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @computed_field
    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages

    def map(self, fn: Callable[[T], U]) -> "PagedResult[U]":
        return PagedResult[Any](
            items=[fn(item) for item in self.items],
            total_count=self.total_count,
            page_size=self.page_size,
            current_page=self.current_page,
        )
