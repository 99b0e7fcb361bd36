"""
Génération des informations d'un nouvel étudiant : code, email universitaire,
mot de passe initial et compte de connexion associé.
"""

import secrets
import string
import uuid
from datetime import date
from typing import Optional

from college.config import settings
from college.models.person import Student
from college.models.student_info import StudentCrucialInformation
from college.models.user import AppUser

CODE_PREFIX = "ST"
CODE_RANDOM_MIN = 10101
CODE_RANDOM_MAX = 99118
PASSWORD_MIN_LENGTH = 14
SPECIAL_CHARS = "!@#$%^&*()-_=+[]{}|;:,.<>?"

_random = secrets.SystemRandom()


def generate_student_code(student: Student, today: Optional[date] = None) -> str:
    """
    ST + année sur 2 chiffres + âge + année académique (0 si inconnue) + 5 chiffres aléatoires.
    Ex. ST2419110452 pour un étudiant de 19 ans en 1re année, inscrit en 2024.
    """
    today = today or date.today()
    year = student.academic_year.value if student.academic_year is not None else 0
    suffix = _random.randint(CODE_RANDOM_MIN, CODE_RANDOM_MAX)
    return f"{CODE_PREFIX}{today.year % 100:02d}{student.age or 0:02d}{year}{suffix}"


def generate_student_email(code: str) -> str:
    return f"{code}@{settings.STUDENT_EMAIL_DOMAIN}"


def generate_password(code: str) -> str:
    """
    Au moins 14 caractères : une majuscule, une minuscule, un chiffre, un
    caractère spécial, un fragment du code, complétés au hasard puis mélangés.
    """
    chars = [
        _random.choice(string.ascii_uppercase),
        _random.choice(string.ascii_lowercase),
        _random.choice(string.digits),
        _random.choice(SPECIAL_CHARS),
    ]
    if len(code) > 2:
        chars.extend(code[_random.randrange(0, len(code) - 2):])

    alphabet = string.ascii_letters + string.digits + SPECIAL_CHARS
    while len(chars) < PASSWORD_MIN_LENGTH:
        chars.append(_random.choice(alphabet))

    _random.shuffle(chars)
    return "".join(chars)


def generate_student_info(code: str) -> StudentCrucialInformation:
    if not code:
        raise ValueError("Impossible de générer les identifiants d'un étudiant sans code.")
    return StudentCrucialInformation(
        student_code=code,
        university_email=generate_student_email(code),
        password=generate_password(code),
    )


def build_student_user(student: Student, info: StudentCrucialInformation) -> AppUser:
    """Compte de connexion de l'étudiant ; le nom d'utilisateur est son code."""
    return AppUser(
        user_name=info.university_email.split("@")[0],
        email=info.university_email,
        first_name=student.first_name,
        last_name=student.last_name,
        phone_number=student.phone_number,
        security_stamp=str(uuid.uuid4()),
    )
