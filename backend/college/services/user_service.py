"""
Service des comptes de connexion : création par rôle, inscription, connexion et émission de jetons.
"""

import logging
import uuid
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from college.core.results import ErrorCode, FailureLevel, OperationResult
from college.models.enums import Role
from college.models.user import AppUser
from college.repositories.base import BaseRepository
from college.schemas.account import LoginRequest, RegisterRequest, TokenResponse
from college.security import create_access_token, get_password_hash, verify_password

logger = logging.getLogger(__name__)


class UserService:

    def __init__(self, db: Session):
        self.db = db
        self.repository = BaseRepository(db, AppUser)

    def create_admin(self, user: AppUser, password: str, commit: bool = True) -> OperationResult:
        return self._create_role_based_user(user, Role.ADMIN, password, commit)

    def create_user(self, user: AppUser, password: str, commit: bool = True) -> OperationResult:
        return self._create_role_based_user(user, Role.USER, password, commit)

    def create_super_user(self, user: AppUser, password: str, commit: bool = True) -> OperationResult:
        return self._create_role_based_user(user, Role.SUPER_USER, password, commit)

    def create_student(self, user: AppUser, password: str, commit: bool = True) -> OperationResult:
        return self._create_role_based_user(user, Role.STUDENT, password, commit)

    def register(self, dto: RegisterRequest) -> OperationResult:
        """
        Crée un compte de rôle `user` et le connecte immédiatement.
        Le jeton est placé dans `result.message` et dans `result.data`.
        """
        if self.repository.exists(AppUser.email == dto.email):
            return OperationResult.failure(
                ErrorCode.ACCOUNT_ALREADY_EXISTS, "Cette adresse email est déjà utilisée."
            )
        user = AppUser(
            user_name=dto.user_name,
            email=dto.email,
            first_name=dto.first_name,
            last_name=dto.last_name,
            security_stamp=str(uuid.uuid4()),
        )
        result = self.create_user(user, dto.password)
        if result.is_failure:
            return result

        token = self.generate_token(user)
        logger.info("Nouveau compte enregistré : %s", user.user_name)
        result.message = token
        return result.with_data(TokenResponse(token=token, user_name=user.user_name))

    def login(self, dto: LoginRequest) -> OperationResult:
        user = self.authenticate(dto.user_name or dto.email, dto.password)
        if user is None:
            return OperationResult.failure(ErrorCode.INVALID_CREDENTIALS)
        token = self.generate_token(user)
        result = OperationResult.success(TokenResponse(token=token, user_name=user.user_name))
        result.message = token
        return result

    def authenticate(self, identifier: Optional[str], password: str) -> Optional[AppUser]:
        """Utilisateur dont le nom ou l'email correspond et dont le mot de passe est valide."""
        if not identifier:
            return None
        user = self.repository.get_where(or_(AppUser.user_name == identifier, AppUser.email == identifier))
        if user is None or not verify_password(password, user.password_hash):
            logger.warning("Tentative de connexion refusée pour %s", identifier)
            return None
        return user

    def generate_token(self, user: AppUser) -> str:
        return create_access_token(user)

    def get_by_user_name(self, user_name: str) -> Optional[AppUser]:
        return self.repository.get_where(AppUser.user_name == user_name)

    def _create_role_based_user(self, user: AppUser, role: Role, password: str, commit: bool) -> OperationResult:
        if not user.user_name:
            return OperationResult.failure(
                ErrorCode.CREATE_FAILED, "Le nom d'utilisateur est obligatoire.", FailureLevel.CRITICAL
            )
        if self.repository.exists(AppUser.user_name == user.user_name):
            return OperationResult.failure(
                ErrorCode.ACCOUNT_ALREADY_EXISTS, "Ce nom d'utilisateur existe déjà.", FailureLevel.MINOR
            )

        user.role = role.value
        user.password_hash = get_password_hash(password)
        result = self.repository.create(user, commit=commit)
        if result.is_failure:
            return result.with_error_code(ErrorCode.CREATE_FAILED)
        logger.info("Compte %s créé avec le rôle %s", user.user_name, role.value)
        return result
