"""
Schémas Pydantic pour l'inscription et la connexion.
"""

from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, model_validator


class RegisterRequest(BaseModel):
    user_name: str = Field(min_length=3, max_length=256)
    email: EmailStr
    password: str = Field(min_length=8)
    confirm_password: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    @model_validator(mode="after")
    def passwords_match(self):
        if self.confirm_password is not None and self.confirm_password != self.password:
            raise ValueError("La confirmation du mot de passe ne correspond pas.")
        return self


class LoginRequest(BaseModel):
    email: Optional[str] = None
    user_name: Optional[str] = None
    password: str = Field(min_length=1)

    @model_validator(mode="after")
    def identifier_present(self):
        if not self.email and not self.user_name:
            raise ValueError("Un email ou un nom d'utilisateur est requis.")
        return self


class TokenResponse(BaseModel):
    token: str
    user_name: str
    token_type: str = "bearer"


class CurrentUser(BaseModel):
    """Identité extraite du JWT."""
    user_name: str
    email: Optional[str] = None
    roles: List[str] = []
