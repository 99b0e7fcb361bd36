"""
Service métier des étudiants.

Les étudiants sont désignés par leur code (StudentCode) pour la lecture
unitaire, la mise à jour et la suppression. La création valide d'abord
les règles d'unicité et de capacité, puis délègue au StudentRepository
qui crée l'étudiant, ses identifiants et son compte en une seule transaction.
"""

import logging
from typing import Optional, Sequence, Type, Union

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from college.core.results import ErrorCode, FailureLevel, OperationResult, OperationStatus
from college.models.person import Student
from college.repositories.student import StudentRepository
from college.schemas.student import StudentCreate, StudentCreated, StudentResponse, StudentUpdate
from college.services.base import QUERY_ERRORS, Service
from college.services.validation import validate_student_create, validate_student_update

logger = logging.getLogger(__name__)


class StudentService(Service[Student]):
    model = Student
    default_view = StudentResponse

    def __init__(self, db: Session, repository: Optional[StudentRepository] = None):
        super().__init__(db, repository or StudentRepository(db))

    def to_entity(self, dto: StudentCreate) -> Student:
        return Student(
            name=" ".join(part for part in (dto.first_name, dto.last_name) if part),
            age=dto.age,
            email=dto.email,
            phone_number=dto.phone_number,
            department_id=dto.department_id,
            academic_year=dto.academic_year,
            birth_date=dto.birth_date,
        )

    def merge(self, entity: Student, dto: StudentUpdate) -> Student:
        data = dto.model_dump(exclude_unset=True, exclude={"student_code", "first_name", "last_name"})
        if "first_name" in dto.model_fields_set or "last_name" in dto.model_fields_set:
            first = dto.first_name if dto.first_name is not None else entity.first_name
            last = dto.last_name if dto.last_name is not None else entity.last_name
            data.setdefault("name", " ".join(part for part in (first, last) if part))
        for field, value in data.items():
            setattr(entity, field, value)
        return entity

    def create(
        self,
        dto: Union[StudentCreate, Sequence[StudentCreate]],
        view: Optional[Type[BaseModel]] = None,
    ) -> OperationResult:
        """La vue par défaut de création expose les identifiants générés."""
        items = list(dto) if isinstance(dto, (list, tuple)) else [dto]
        for index, item in enumerate(items):
            check = validate_student_create(self.db, item, items[:index])
            if check.is_failure:
                return self._done(check)
        return super().create(dto, view or StudentCreated)

    def get_by_code(
        self,
        code: str,
        view: Optional[Type[BaseModel]] = None,
        includes: Optional[Sequence[str]] = None,
    ) -> OperationResult:
        try:
            options = self.mapper(view).map_includes(includes)
        except QUERY_ERRORS as e:
            return self._done(self._invalid_query(e))
        student = self.repository.get_by_code(code, options)
        if student is None:
            return self._done(self._missing_code(code))
        return self._done(self._single(student, view))

    def update_by_code(self, code: str, dto: StudentUpdate, view: Optional[Type[BaseModel]] = None) -> OperationResult:
        student = self.repository.get_by_code(code)
        if student is None:
            return self._done(self._missing_code(code))
        check = validate_student_update(self.db, student, dto)
        if check.is_failure:
            return self._done(check)
        return self._update_entity(student, dto, view)

    def delete_by_code(self, code: str) -> OperationResult:
        """
        Supprime l'étudiant et son compte dans une même transaction ;
        identifiants, inscriptions et notes suivent en cascade.
        """
        student = self.repository.get_by_code(code)
        if student is None:
            return self._done(self._missing_code(code))
        user_name = student.crucial_information.university_email.split("@")[0] \
            if student.crucial_information is not None else code
        if not self.repository.delete(student, commit=False) or not self._delete_account(user_name):
            self.db.rollback()
            return self._done(OperationResult.failure(ErrorCode.DELETE_FAILED, level=FailureLevel.CRITICAL))
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Suppression de l'étudiant %s impossible : %s", code, e, exc_info=True)
            return self._done(OperationResult(OperationStatus.FAILURE).with_error_code(
                ErrorCode.DELETE_FAILED, level=FailureLevel.CRITICAL
            ).with_exception(e))
        logger.info("Étudiant %s supprimé", code)
        return self._done(OperationResult.success())

    def _delete_account(self, user_name: str) -> bool:
        """Un étudiant sans compte n'est pas une erreur."""
        account = self.repository.user_service.get_by_user_name(user_name)
        if account is None:
            return True
        return self.repository.user_service.repository.delete(account, commit=False)

    @staticmethod
    def _missing_code(code: str) -> OperationResult:
        return OperationResult.failure(ErrorCode.NOT_FOUND, f"Aucun étudiant avec le code {code}.")
