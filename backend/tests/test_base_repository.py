"""
Tests du dépôt générique (BaseRepository) sur SQLite en mémoire,
et de la conversion des erreurs d'écriture sur une session mockée.
"""

from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from college.core.results import ErrorCode, FailureLevel
from college.models.department import Department
from college.models.person import Student
from college.repositories.base import BaseRepository


# --- Helpers ---

def make_departments(db, count=5):
    repo = BaseRepository(db, Department)
    repo.create_range([Department(name=f"Département {i}") for i in range(1, count + 1)])
    return repo


# ============================================================
# Écriture
# ============================================================

def test_depot_sans_modele_rejete(db):
    with pytest.raises(ValueError):
        BaseRepository(db)


def test_create_succes(db):
    repo = BaseRepository(db, Department)
    result = repo.create(Department(name="Informatique"))
    assert result.is_success
    assert result.data.id is not None
    assert repo.count() == 1


def test_create_sans_commit_se_contente_d_un_flush(db):
    repo = BaseRepository(db, Department)
    result = repo.create(Department(name="Informatique"), commit=False)
    assert result.data.id is not None
    db.rollback()
    assert repo.count() == 0


def test_create_range_vide(db):
    result = BaseRepository(db, Department).create_range([])
    assert result.has_error(ErrorCode.CREATE_NO_CHANGES)


def test_create_doublon_renvoie_duplicate_record(db):
    repo = BaseRepository(db, Student)
    repo.create(Student(name="Ali Hassan", student_code="ST2419110001"))
    result = repo.create(Student(name="Sara Adel", student_code="ST2419110001"))
    assert result.is_failure
    assert result.has_error(ErrorCode.DUPLICATE_RECORD)
    assert repo.count() == 1


def test_update_remplace_l_instance_suivie(db):
    repo = make_departments(db, 1)
    tracked = repo.get_all()[0]
    incoming = Department(id=tracked.id, name="Mathématiques", max_student_count=250)

    result = repo.update(incoming)

    assert result.is_success
    reloaded = repo.get(tracked.id)
    assert reloaded.name == "Mathématiques"
    assert reloaded.max_student_count == 250


def test_update_range(db):
    repo = make_departments(db, 2)
    departments = repo.get_all()
    for department in departments:
        department.name = department.name.upper()
    assert repo.update_range(departments).is_success
    assert all(d.name.startswith("DÉPARTEMENT") for d in repo.get_all())


def test_delete_par_id_instance_et_predicat(db):
    repo = make_departments(db, 4)
    first, second = repo.get_all(order_by=[Department.id.asc()])[:2]

    assert repo.delete(first.id) is True
    assert repo.delete(second) is True
    assert repo.delete(Department.name.like("Département%")) is True
    assert repo.count() == 0


def test_delete_id_inconnu(db):
    assert BaseRepository(db, Department).delete(999) is False


def test_delete_range(db):
    repo = make_departments(db, 3)
    assert repo.delete_range(repo.get_all()) is True
    assert repo.delete_range([]) is False
    assert repo.count() == 0


# ============================================================
# Lecture
# ============================================================

def test_get_absent_renvoie_none(db):
    assert BaseRepository(db, Department).get(42) is None


def test_get_where_et_exists(db):
    repo = make_departments(db, 3)
    assert repo.get_where(Department.name == "Département 2").name == "Département 2"
    assert repo.get_where(Department.name == "Physique") is None
    assert repo.exists(Department.name == "Département 3") is True
    assert repo.exists(Department.name == "Physique") is False


def test_count_avec_predicat(db):
    repo = make_departments(db, 5)
    assert repo.count(Department.id > 2) == 3


def test_page_intermediaire(db):
    repo = make_departments(db, 5)
    page = repo.get_all_paged(2, 2)
    assert [d.name for d in page.items] == ["Département 3", "Département 4"]
    assert page.total_count == 5
    assert page.total_pages == 3
    assert page.has_previous and page.has_next


def test_page_inferieure_a_1_ramenee_a_1(db):
    repo = make_departments(db, 3)
    page = repo.get_all_paged(0, 2)
    assert page.current_page == 1
    assert len(page.items) == 2


def test_page_filtree_et_triee(db):
    repo = make_departments(db, 5)
    page = repo.get_all_paged(1, 10, Department.id >= 4, order_by=[Department.id.desc()])
    assert [d.name for d in page.items] == ["Département 5", "Département 4"]
    assert page.total_count == 2


def test_page_au_dela_de_la_fin(db):
    page = make_departments(db, 2).get_all_paged(3, 2)
    assert page.items == []
    assert page.total_count == 2


# ============================================================
# Erreurs sur une session mockée
# ============================================================

def test_echec_inattendu_rollback_et_erreur_critique():
    db = MagicMock()
    db.commit.side_effect = OperationalError("INSERT", {}, Exception("base indisponible"))
    result = BaseRepository(db, Department).create(Department(name="Informatique"))

    db.rollback.assert_called_once()
    assert result.has_error(ErrorCode.CREATE_FAILED)
    assert result.has_error(ErrorCode.GENERAL_ERROR)
    assert any(e.level == FailureLevel.CRITICAL for e in result.errors)


def test_violation_d_integrite_signalee_comme_doublon():
    db = MagicMock()
    db.commit.side_effect = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed"))
    result = BaseRepository(db, Department).create(Department(name="Informatique"))

    assert result.has_error(ErrorCode.DUPLICATE_RECORD)
    assert not result.has_error(ErrorCode.GENERAL_ERROR)


def test_lecture_en_echec_renvoie_none():
    db = MagicMock()
    db.execute.side_effect = OperationalError("SELECT", {}, Exception("base indisponible"))
    repo = BaseRepository(db, Department)
    assert repo.get_all() is None
    assert repo.get_all_paged(1, 10) is None
    assert repo.count() == 0
    assert repo.exists() is False
