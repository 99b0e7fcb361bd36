"""
Sécurité : hachage des mots de passe, émission/lecture des JWT et politiques par rôle.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext

from college.config import settings
from college.models.enums import Role
from college.models.user import AppUser
from college.schemas.account import CurrentUser

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.BCRYPT_ROUNDS)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/Account/login")


class AppPolicies:
    ADMIN_ONLY = "AdminOnly"
    USER_ONLY = "UserOnly"
    SUPER_USER_ONLY = "SuperUserOnly"
    ANY_ROLE = "AnyRole"


POLICY_ROLES = {
    AppPolicies.ADMIN_ONLY: {Role.ADMIN.value},
    AppPolicies.USER_ONLY: {Role.USER.value},
    AppPolicies.SUPER_USER_ONLY: {Role.SUPER_USER.value},
    AppPolicies.ANY_ROLE: {r.value for r in Role},
}


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def create_access_token(user: AppUser, expires_delta: Optional[timedelta] = None) -> str:
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    claims = {
        "sub": user.user_name,
        "given_name": user.first_name or user.user_name,
        "email": user.email or "",
        "roles": [user.role],
        "iss": settings.JWT_ISSUER,
        "aud": settings.JWT_AUDIENCE,
        "iat": now,
        "exp": expire,
    }
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> CurrentUser:
    """Lève JWTError si la signature, l'émetteur, l'audience ou l'expiration est invalide."""
    payload = jwt.decode(
        token,
        settings.SECRET_KEY,
        algorithms=[settings.ALGORITHM],
        audience=settings.JWT_AUDIENCE,
        issuer=settings.JWT_ISSUER,
    )
    user_name = payload.get("sub")
    if not user_name:
        raise JWTError("Claim 'sub' manquant.")
    return CurrentUser(user_name=user_name, email=payload.get("email") or None, roles=payload.get("roles", []))


def get_current_user(token: str = Depends(oauth2_scheme)) -> CurrentUser:
    """Dépendance FastAPI : identité de l'appelant à partir du jeton Bearer."""
    try:
        return decode_access_token(token)
    except JWTError as e:
        logger.warning("Jeton refusé : %s", e)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Impossible de valider les identifiants.",
            headers={"WWW-Authenticate": "Bearer"},
        )


def require_policy(policy: str):
    """Fabrique de dépendance : l'appelant doit porter un des rôles de la politique."""
    allowed = POLICY_ROLES[policy]

    def dependency(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if not allowed.intersection(user.roles):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Accès refusé : politique {policy} requise.",
            )
        return user

    return dependency
