"""
Router pour la gestion des étudiants.
Modification et suppression désignent l'étudiant par son code (StudentCode).
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from college.database import get_db
from college.routers.responses import to_response
from college.schemas.common import ApiResponse
from college.schemas.student import StudentCreate, StudentUpdate
from college.security import AppPolicies, require_policy
from college.services.student_service import StudentService

router = APIRouter(prefix="/api/Student", tags=["Students"])

readers = [Depends(require_policy(AppPolicies.ANY_ROLE))]
writers = [Depends(require_policy(AppPolicies.ADMIN_ONLY))]


@router.get("/GetAll", response_model=ApiResponse, dependencies=readers, summary="Lister les étudiants")
def list_students(
    query: Optional[str] = None,
    includes: Optional[List[str]] = Query(None),
    order_by: Optional[List[str]] = Query(None),
    db: Session = Depends(get_db),
):
    """Filtre optionnel, ex. `query=and::Age>=20,DepartmentId==1::and`."""
    return to_response(StudentService(db).get_all(query=query, includes=includes, order_by=order_by))


@router.get("/Get/{student_id}", response_model=ApiResponse, dependencies=readers, summary="Détail d'un étudiant")
def get_student(
    student_id: int,
    includes: Optional[List[str]] = Query(None),
    db: Session = Depends(get_db),
):
    return to_response(StudentService(db).get(student_id, includes=includes))


@router.get(
    "/GetByCode/{student_code}", response_model=ApiResponse, dependencies=readers,
    summary="Étudiant par code",
)
def get_student_by_code(
    student_code: str,
    includes: Optional[List[str]] = Query(None),
    db: Session = Depends(get_db),
):
    return to_response(StudentService(db).get_by_code(student_code, includes=includes))


@router.get("/GetQuery", response_model=ApiResponse, dependencies=readers, summary="Rechercher un étudiant")
def find_student(
    query: str,
    includes: Optional[List[str]] = Query(None),
    db: Session = Depends(get_db),
):
    """Premier étudiant correspondant au filtre."""
    return to_response(StudentService(db).get_where(query, includes=includes))


@router.get("", response_model=ApiResponse, dependencies=readers, summary="Page d'étudiants")
def page_students(
    page: int = Query(1, ge=1),
    page_size: Optional[int] = Query(None, ge=1),
    query: Optional[str] = None,
    includes: Optional[List[str]] = Query(None),
    order_by: Optional[List[str]] = Query(None),
    db: Session = Depends(get_db),
):
    """Une page vide est signalée comme introuvable (400, code NOT_FOUND)."""
    return to_response(
        StudentService(db).get_all_paged(page, page_size, query=query, includes=includes, order_by=order_by)
    )


@router.post("", response_model=ApiResponse, status_code=201, dependencies=writers, summary="Créer un étudiant")
def create_student(data: StudentCreate, db: Session = Depends(get_db)):
    """
    Crée l'étudiant, l'inscrit aux cours de son département pour son année,
    génère ses identifiants universitaires et son compte de connexion.
    """
    return to_response(StudentService(db).create(data), 201)


@router.post(
    "/Range", response_model=ApiResponse, status_code=201, dependencies=writers,
    summary="Créer plusieurs étudiants",
)
def create_students(data: List[StudentCreate], db: Session = Depends(get_db)):
    return to_response(StudentService(db).create(data), 201)


@router.put("", response_model=ApiResponse, dependencies=writers, summary="Modifier un étudiant")
def update_student(data: StudentUpdate, db: Session = Depends(get_db)):
    return to_response(StudentService(db).update_by_code(data.student_code, data))


@router.delete("/{student_code}", response_model=ApiResponse, dependencies=writers, summary="Supprimer un étudiant")
def delete_student(student_code: str, db: Session = Depends(get_db)):
    return to_response(StudentService(db).delete_by_code(student_code))
