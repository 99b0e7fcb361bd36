"""
Router pour la gestion des examens.
"""

from college.routers.crud import build_crud_router
from college.schemas.exam import ExamCreate, ExamUpdate
from college.services.exam_service import ExamService

router = build_crud_router(
    prefix="/api/Exam",
    tag="Exams",
    service_class=ExamService,
    create_schema=ExamCreate,
    update_schema=ExamUpdate,
)
