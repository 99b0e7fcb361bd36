"""
Service métier des notes.
Une note référence un examen existant et un étudiant par son code ;
elle ne peut pas dépasser la note maximale de l'examen.
"""

import logging
from typing import Optional, Sequence, Type, Union

from pydantic import BaseModel

from college.core.query import DtoQuery
from college.core.results import OperationResult
from college.models.grade import Grade
from college.schemas.grade import GradeCreate, GradeResponse, GradeUpdate
from college.services.base import Service
from college.services.validation import validate_grade, validate_grade_update

logger = logging.getLogger(__name__)


class GradeService(Service[Grade]):
    model = Grade
    default_view = GradeResponse

    def create(
        self,
        dto: Union[GradeCreate, Sequence[GradeCreate]],
        view: Optional[Type[BaseModel]] = None,
    ) -> OperationResult:
        for item in dto if isinstance(dto, (list, tuple)) else [dto]:
            check = validate_grade(self.db, item)
            if check.is_failure:
                return self._done(check)
        return super().create(dto, view)

    def update(self, entity_id: int, dto: GradeUpdate, view: Optional[Type[BaseModel]] = None) -> OperationResult:
        grade = self.repository.get(entity_id)
        if grade is None:
            return self._done(self._not_found())
        check = validate_grade_update(self.db, grade.exam, dto)
        if check.is_failure:
            return self._done(check)
        return self._update_entity(grade, dto, view)

    def for_student(self, student_code: str, view: Optional[Type[BaseModel]] = None) -> OperationResult:
        """Toutes les notes d'un étudiant, de la plus récente à la plus ancienne."""
        logger.debug("Notes de l'étudiant %s", student_code)
        return self.get_all(view, DtoQuery.where(student_code=student_code), order_by=["-id"])
