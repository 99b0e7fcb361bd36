"""
Router pour la gestion des notes.
En plus des routes CRUD, expose les notes d'un étudiant désigné par son code.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from college.database import get_db
from college.routers.crud import build_crud_router
from college.routers.responses import to_response
from college.schemas.common import ApiResponse
from college.schemas.grade import GradeCreate, GradeUpdate
from college.security import AppPolicies, require_policy
from college.services.grade_service import GradeService

router = build_crud_router(
    prefix="/api/Grade",
    tag="Grades",
    service_class=GradeService,
    create_schema=GradeCreate,
    update_schema=GradeUpdate,
)


@router.get(
    "/Student/{student_code}",
    response_model=ApiResponse,
    dependencies=[Depends(require_policy(AppPolicies.ANY_ROLE))],
    summary="Notes d'un étudiant",
)
def grades_for_student(student_code: str, db: Session = Depends(get_db)):
    return to_response(GradeService(db).for_student(student_code))
