"""
Service métier des cours : le département et le professeur référencés doivent exister.
"""

from typing import Optional, Sequence, Type, Union

from pydantic import BaseModel

from college.core.results import OperationResult
from college.models.course import Course
from college.schemas.course import CourseCreate, CourseResponse, CourseUpdate
from college.services.base import Service
from college.services.validation import validate_references


class CourseService(Service[Course]):
    model = Course
    default_view = CourseResponse

    def create(
        self,
        dto: Union[CourseCreate, Sequence[CourseCreate]],
        view: Optional[Type[BaseModel]] = None,
    ) -> OperationResult:
        for item in dto if isinstance(dto, (list, tuple)) else [dto]:
            check = validate_references(self.db, item.department_id, item.professor_id)
            if check.is_failure:
                return self._done(check)
        return super().create(dto, view)

    def update(self, entity_id: int, dto: CourseUpdate, view: Optional[Type[BaseModel]] = None) -> OperationResult:
        check = validate_references(self.db, dto.department_id, dto.professor_id)
        if check.is_failure:
            return self._done(check)
        return super().update(entity_id, dto, view)
