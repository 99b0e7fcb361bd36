"""
Règles de validation qui nécessitent la base de données (unicité, existence, capacité).
Les contrôles de format sont portés par les schémas Pydantic.
"""

from typing import Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from college.core.results import ErrorCode, OperationResult, OperationStatus
from college.models.department import Department
from college.models.exam import Exam
from college.models.person import Person, Professor, Student
from college.schemas.grade import GradeCreate, GradeUpdate
from college.schemas.student import StudentCreate, StudentUpdate


def _taken(db: Session, column, value, exclude_id: Optional[int] = None) -> bool:
    stmt = select(Person.id).where(column == value)
    if exclude_id is not None:
        stmt = stmt.where(Person.id != exclude_id)
    return db.execute(select(stmt.exists())).scalar()


def _check_department(db: Session, department_id: int, result: OperationResult, pending: int = 0) -> None:
    """`pending` : étudiants du même lot déjà acceptés pour ce département, pas encore en base."""
    department = db.get(Department, department_id)
    if department is None:
        result.with_error_code(ErrorCode.NOT_FOUND, f"Département {department_id} introuvable.")
        return
    enrolled = db.execute(
        select(func.count(Student.id)).where(Student.department_id == department_id)
    ).scalar_one()
    if enrolled + pending >= department.max_student_count:
        result.with_error_code(
            ErrorCode.RESOURCE_LIMIT_EXCEEDED,
            f"Le département {department.name} a atteint sa capacité ({department.max_student_count}).",
        )


def _finish(result: OperationResult) -> OperationResult:
    return result.with_status(OperationStatus.FAILURE if result.errors else OperationStatus.SUCCESS)


def validate_student_create(
    db: Session,
    dto: StudentCreate,
    pending: Sequence[StudentCreate] = (),
) -> OperationResult:
    """
    Email et téléphone uniques ; département existant et non complet.
    `pending` contient les étudiants du même lot validés avant celui-ci :
    ils comptent pour l'unicité et pour la capacité du département.
    """
    result = OperationResult()
    if _taken(db, Person.email, dto.email) or any(p.email == dto.email for p in pending):
        result.with_error_code(ErrorCode.DUPLICATE_RECORD, "Cette adresse email est déjà utilisée.")
    if _taken(db, Person.phone_number, dto.phone_number) or any(p.phone_number == dto.phone_number for p in pending):
        result.with_error_code(ErrorCode.DUPLICATE_RECORD, "Ce numéro de téléphone est déjà utilisé.")
    if dto.department_id is not None:
        same_department = sum(1 for p in pending if p.department_id == dto.department_id)
        _check_department(db, dto.department_id, result, same_department)
    return _finish(result)


def validate_student_update(db: Session, student: Student, dto: StudentUpdate) -> OperationResult:
    result = OperationResult()
    if dto.email is not None and _taken(db, Person.email, dto.email, exclude_id=student.id):
        result.with_error_code(ErrorCode.DUPLICATE_RECORD, "Cette adresse email est déjà utilisée.")
    if dto.phone_number is not None and _taken(db, Person.phone_number, dto.phone_number, exclude_id=student.id):
        result.with_error_code(ErrorCode.DUPLICATE_RECORD, "Ce numéro de téléphone est déjà utilisé.")
    if dto.department_id is not None and dto.department_id != student.department_id:
        _check_department(db, dto.department_id, result)
    return _finish(result)


def validate_grade(db: Session, dto: GradeCreate) -> OperationResult:
    """L'examen et l'étudiant doivent exister ; la note ne dépasse pas la note maximale."""
    result = OperationResult()
    exam = db.get(Exam, dto.exam_id)
    if exam is None:
        result.with_error_code(ErrorCode.NOT_FOUND, f"Examen {dto.exam_id} introuvable.")
    elif dto.exam_grade > exam.max_grade:
        result.with_error_code(
            ErrorCode.VALUE_OUT_OF_RANGE,
            f"La note {dto.exam_grade} dépasse la note maximale de l'examen ({exam.max_grade}).",
        )
    if not _taken(db, Student.student_code, dto.student_code):
        result.with_error_code(ErrorCode.NOT_FOUND, f"Aucun étudiant avec le code {dto.student_code}.")
    return _finish(result)


def validate_grade_update(db: Session, exam: Exam, dto: GradeUpdate) -> OperationResult:
    result = OperationResult()
    if dto.exam_grade is not None and exam is not None and dto.exam_grade > exam.max_grade:
        result.with_error_code(
            ErrorCode.VALUE_OUT_OF_RANGE,
            f"La note {dto.exam_grade} dépasse la note maximale de l'examen ({exam.max_grade}).",
        )
    return _finish(result)


def validate_references(
    db: Session,
    department_id: Optional[int] = None,
    professor_id: Optional[int] = None,
) -> OperationResult:
    """Le département et le professeur référencés, s'ils sont fournis, doivent exister."""
    result = OperationResult()
    if department_id is not None and db.get(Department, department_id) is None:
        result.with_error_code(ErrorCode.NOT_FOUND, f"Département {department_id} introuvable.")
    if professor_id is not None and db.get(Professor, professor_id) is None:
        result.with_error_code(ErrorCode.NOT_FOUND, f"Professeur {professor_id} introuvable.")
    return _finish(result)
