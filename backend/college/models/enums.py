"""
Énumérations partagées par les modèles et les schémas.
"""

import enum


class AcademicYear(int, enum.Enum):
    FIRST = 1
    SECOND = 2
    THIRD = 3
    FOURTH = 4


class AdminPosition(str, enum.Enum):
    DEAN = "DEAN"
    VICE_DEAN = "VICE_DEAN"
    HEAD_OF_DEPARTMENT = "HEAD_OF_DEPARTMENT"
    SECRETARY = "SECRETARY"


class Role(str, enum.Enum):
    """Rôles portés par le claim `roles` du JWT."""
    ADMIN = "admin"
    USER = "user"
    SUPER_USER = "superuser"
    STUDENT = "student"
