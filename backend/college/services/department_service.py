"""
Service métier des départements.
"""

from college.models.department import Department
from college.schemas.department import DepartmentResponse
from college.services.base import Service


class DepartmentService(Service[Department]):
    model = Department
    default_view = DepartmentResponse
