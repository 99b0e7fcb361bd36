"""
Tests des invariants portés par les modèles SQLAlchemy.
"""

import pytest
from sqlalchemy import select

from college.models.address import Address
from college.models.course import Course, StudentCourse
from college.models.department import Department
from college.models.enums import AcademicYear, AdminPosition
from college.models.exam import Exam
from college.models.grade import Grade
from college.models.person import Administrator, Person, Professor, Student
from college.models.student_info import StudentCrucialInformation


# ============================================================
# Nom commun à toutes les entités
# ============================================================

def test_nom_vide_rejete():
    with pytest.raises(ValueError):
        Department(name="   ")


def test_nom_trop_long_rejete():
    with pytest.raises(ValueError):
        Course(name="x" * 71, course_code="C1")


def test_nom_de_70_caracteres_accepte():
    assert len(Exam(name="x" * 70).name) == 70


# ============================================================
# Département : capacité
# ============================================================

@pytest.mark.parametrize("value, expected", [(None, 100), (0, 100), (25, 100), (26, 26), (300, 300)])
def test_capacite_ramenee_a_100(value, expected):
    assert Department(name="Informatique", max_student_count=value).max_student_count == expected


def test_capacite_par_defaut_persistee(db):
    department = Department(name="Informatique")
    db.add(department)
    db.commit()
    assert department.max_student_count == 100


def test_compteurs_du_departement(db):
    department = Department(name="Informatique")
    department.students = [Student(name="Ali Hassan"), Student(name="Sara Adel")]
    department.professors = [Professor(name="Dr Karim")]
    department.courses = [Course(name="Algo", course_code="CS101")]
    db.add(department)
    db.commit()
    assert department.students_count == 2
    assert department.professors_count == 1
    assert department.courses_count == 1
    assert department.exams_count == 0


# ============================================================
# Cours : semestre
# ============================================================

@pytest.mark.parametrize("semester", [0, 3, -1])
def test_semestre_invalide_rejete(semester):
    with pytest.raises(ValueError):
        Course(name="Algo", course_code="CS101", semester=semester)


def test_semestre_invalide_laisse_la_valeur_precedente():
    course = Course(name="Algo", course_code="CS101", semester=2)
    with pytest.raises(ValueError):
        course.semester = 5
    assert course.semester == 2


# ============================================================
# Hiérarchie des personnes (table unique)
# ============================================================

def test_discriminant_de_type(db):
    db.add_all([
        Student(name="Ali Hassan"),
        Professor(name="Dr Karim"),
        Administrator(name="Mme Lina", admin_position=AdminPosition.DEAN),
    ])
    db.commit()
    types = sorted(db.execute(select(Person.type)).scalars().all())
    assert types == ["administrator", "professor", "student"]
    assert len(db.execute(select(Professor)).scalars().all()) == 1


def test_prenom_nom_et_moyenne():
    student = Student(name="Ali Ben Hassan", total_quality_points=30.0, total_credit_hours=9.0)
    assert student.first_name == "Ali"
    assert student.last_name == "Ben Hassan"
    assert student.gpa == 3.33


def test_moyenne_sans_heures_de_credit():
    assert Student(name="Ali", total_credit_hours=0).gpa == 0.0


def test_adresse_un_a_un(db):
    student = Student(name="Ali Hassan", address=Address(name="Domicile", city="Le Caire", country="Égypte"))
    db.add(student)
    db.commit()
    assert student.address.person is student


# ============================================================
# Cascades depuis l'étudiant
# ============================================================

def test_suppression_etudiant_en_cascade(db):
    course = Course(name="Algo", course_code="CS101", year=AcademicYear.FIRST)
    exam = Exam(name="Final", max_grade=100, duration=2)
    student = Student(name="Ali Hassan", student_code="ST2419110001")
    student.courses.append(StudentCourse(course=course))
    student.crucial_information = StudentCrucialInformation(
        student_code="ST2419110001", university_email="ST2419110001@college.edu", password="x" * 14,
    )
    db.add_all([course, exam, student])
    db.flush()
    db.add(Grade(name="Final", exam=exam, student=student, exam_grade=80))
    db.commit()

    db.delete(student)
    db.commit()

    assert db.execute(select(StudentCrucialInformation)).scalars().all() == []
    assert db.execute(select(StudentCourse)).scalars().all() == []
    assert db.execute(select(Grade)).scalars().all() == []
    assert db.get(Course, course.id) is not None
