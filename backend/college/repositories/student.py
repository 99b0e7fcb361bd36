"""
Dépôt des étudiants.

La création d'un étudiant est une seule unité de travail :
code unique -> étudiant -> inscription aux cours du département -> identifiants -> compte.
Un échec à n'importe quelle étape annule l'ensemble (rollback), aucun
étudiant n'est laissé sans ses identifiants ni son compte.
"""

import logging
from typing import Iterable

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from college.core.results import ErrorCode, OperationResult, OperationStatus
from college.models.course import Course, StudentCourse
from college.models.person import Student
from college.repositories.base import BaseRepository
from college.services import student_helper
from college.services.user_service import UserService

logger = logging.getLogger(__name__)

MAX_CODE_ATTEMPTS = 20


class StudentRepository(BaseRepository[Student]):
    model = Student

    def __init__(self, db: Session, user_service: UserService = None):
        super().__init__(db)
        self.user_service = user_service or UserService(db)

    def create(self, entity: Student, commit: bool = True) -> OperationResult:
        try:
            code = self.generate_unique_student_code(entity)
            entity.student_code = code
            self.db.add(entity)
            self.db.flush()

            self.assign_department_courses(entity)

            info = student_helper.generate_student_info(code)
            entity.crucial_information = info
            self.db.flush()

            user = student_helper.build_student_user(entity, info)
            account = self.user_service.create_student(user, info.password, commit=False)
            if account.is_failure:
                self.db.rollback()
                logger.error("Compte de l'étudiant %s non créé, création annulée", code)
                return OperationResult(OperationStatus.FAILURE).merge(account).with_error_code(
                    ErrorCode.CREATE_FAILED,
                    f"Impossible de créer le compte de l'étudiant {code}.",
                )

            self._save(commit)
            logger.info("Étudiant %s créé (id=%s)", entity.student_code, entity.id)
            return OperationResult.success(entity)
        except (SQLAlchemyError, ValueError) as e:
            return self._write_failure(e, ErrorCode.CREATE_FAILED)

    def create_range(self, entities: Iterable[Student], commit: bool = True) -> OperationResult:
        """Chaque étudiant suit le parcours complet ; le lot est validé en une fois."""
        entities = list(entities)
        if not entities:
            return OperationResult.failure(ErrorCode.CREATE_NO_CHANGES)
        for entity in entities:
            result = self.create(entity, commit=False)
            if result.is_failure:
                return result
        try:
            self._save(commit)
        except SQLAlchemyError as e:
            return self._write_failure(e, ErrorCode.CREATE_FAILED)
        return OperationResult.success(entities)

    def generate_unique_student_code(self, entity: Student) -> str:
        """Tire des codes jusqu'à en trouver un absent de la table des étudiants."""
        for _ in range(MAX_CODE_ATTEMPTS):
            code = student_helper.generate_student_code(entity)
            if not self.exists(Student.student_code == code):
                return code
            logger.debug("Code étudiant %s déjà attribué, nouveau tirage", code)
        raise ValueError("Impossible de générer un code étudiant unique.")

    def assign_department_courses(self, student: Student) -> int:
        """Inscrit l'étudiant aux cours de son département pour son année académique."""
        if student.department_id is None or student.academic_year is None:
            return 0
        course_ids = self.db.execute(
            select(Course.id).where(
                Course.department_id == student.department_id,
                Course.year == student.academic_year,
            )
        ).scalars().all()
        for course_id in course_ids:
            student.courses.append(StudentCourse(course_id=course_id))
        return len(course_ids)

    def get_by_code(self, code: str, includes=None):
        return self.get_where(Student.student_code == code, includes)

