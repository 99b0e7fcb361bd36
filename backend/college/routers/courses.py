"""
Router pour la gestion des cours.
"""

from college.routers.crud import build_crud_router
from college.schemas.course import CourseCreate, CourseUpdate
from college.services.course_service import CourseService

router = build_crud_router(
    prefix="/api/Course",
    tag="Courses",
    service_class=CourseService,
    create_schema=CourseCreate,
    update_schema=CourseUpdate,
)
