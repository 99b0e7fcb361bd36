"""
Router pour la gestion des départements (administrateurs uniquement).
"""

from college.routers.crud import build_crud_router
from college.schemas.department import DepartmentCreate, DepartmentUpdate
from college.security import AppPolicies
from college.services.department_service import DepartmentService

router = build_crud_router(
    prefix="/api/Department",
    tag="Departments",
    service_class=DepartmentService,
    create_schema=DepartmentCreate,
    update_schema=DepartmentUpdate,
    read_policy=AppPolicies.ADMIN_ONLY,
)
