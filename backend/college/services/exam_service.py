"""
Service métier des examens.
"""

from typing import Optional, Sequence, Type, Union

from pydantic import BaseModel

from college.core.results import OperationResult
from college.models.exam import Exam
from college.schemas.exam import ExamCreate, ExamResponse, ExamUpdate
from college.services.base import Service
from college.services.validation import validate_references


class ExamService(Service[Exam]):
    model = Exam
    default_view = ExamResponse

    def create(
        self,
        dto: Union[ExamCreate, Sequence[ExamCreate]],
        view: Optional[Type[BaseModel]] = None,
    ) -> OperationResult:
        for item in dto if isinstance(dto, (list, tuple)) else [dto]:
            check = validate_references(self.db, department_id=item.department_id)
            if check.is_failure:
                return self._done(check)
        return super().create(dto, view)

    def update(self, entity_id: int, dto: ExamUpdate, view: Optional[Type[BaseModel]] = None) -> OperationResult:
        check = validate_references(self.db, department_id=dto.department_id)
        if check.is_failure:
            return self._done(check)
        return super().update(entity_id, dto, view)
