"""
Tests unitaires de la génération des informations étudiantes.
"""

import re
import string
from datetime import date

import pytest

from college.config import settings
from college.models.enums import AcademicYear
from college.models.person import Student
from college.services.student_helper import (
    PASSWORD_MIN_LENGTH,
    SPECIAL_CHARS,
    build_student_user,
    generate_password,
    generate_student_code,
    generate_student_email,
    generate_student_info,
)


# --- Helper ---

def make_student(**kwargs) -> Student:
    return Student(
        name=kwargs.get("name", "Ali Hassan"),
        age=kwargs.get("age", 19),
        academic_year=kwargs.get("academic_year", AcademicYear.FIRST),
        phone_number=kwargs.get("phone_number", "0123456789"),
    )


# ============================================================
# Code étudiant
# ============================================================

def test_code_format():
    code = generate_student_code(make_student(), today=date(2024, 9, 1))
    assert re.fullmatch(r"ST24191\d{5}", code)
    assert 10101 <= int(code[-5:]) <= 99118


def test_code_sans_annee_academique():
    code = generate_student_code(make_student(age=22, academic_year=None), today=date(2025, 1, 15))
    assert code.startswith("ST25220")
    assert len(code) == 12


# ============================================================
# Email et mot de passe
# ============================================================

def test_email_universitaire():
    assert generate_student_email("ST2419110452") == f"ST2419110452@{settings.STUDENT_EMAIL_DOMAIN}"


@pytest.mark.parametrize("attempt", range(20))
def test_mot_de_passe_respecte_les_regles(attempt):
    password = generate_password("ST2419110452")
    assert len(password) >= PASSWORD_MIN_LENGTH
    assert any(c in string.ascii_uppercase for c in password)
    assert any(c in string.ascii_lowercase for c in password)
    assert any(c in string.digits for c in password)
    assert any(c in SPECIAL_CHARS for c in password)


def test_mots_de_passe_differents():
    assert generate_password("ST2419110452") != generate_password("ST2419110452")


def test_info_sans_code_rejetee():
    with pytest.raises(ValueError):
        generate_student_info("")


def test_info_et_compte():
    info = generate_student_info("ST2419110452")
    user = build_student_user(make_student(name="Sara Adel Nour"), info)

    assert info.student_code == "ST2419110452"
    assert user.user_name == "ST2419110452"
    assert user.email == info.university_email
    assert user.first_name == "Sara"
    assert user.last_name == "Adel Nour"
    assert user.phone_number == "0123456789"
    assert user.security_stamp
