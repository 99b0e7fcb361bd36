"""
Router des comptes : inscription, connexion, rôles de l'appelant.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from college.core.results import OperationResult
from college.database import get_db
from college.routers.responses import to_response
from college.schemas.account import CurrentUser, LoginRequest, RegisterRequest
from college.schemas.common import ApiResponse
from college.security import get_current_user
from college.services.user_service import UserService

router = APIRouter(prefix="/api/Account", tags=["Account"])


@router.post("", response_model=ApiResponse, status_code=201, summary="Créer un compte")
def register(data: RegisterRequest, db: Session = Depends(get_db)):
    """Crée un compte de rôle `user` ; le jeton est renvoyé dans `message` et `data.token`."""
    return to_response(UserService(db).register(data), 201)


@router.post("/login", response_model=ApiResponse, summary="Se connecter")
def login(data: LoginRequest, db: Session = Depends(get_db)):
    return to_response(UserService(db).login(data))


@router.get("/CheckRoles", response_model=ApiResponse, summary="Rôles de l'utilisateur connecté")
def check_roles(user: CurrentUser = Depends(get_current_user)):
    return to_response(OperationResult.success(user))
