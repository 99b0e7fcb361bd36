"""
Tests d'intégration API pour les départements, cours et examens (routes CRUD communes),
sur la base SQLite en mémoire.
"""

import pytest


# --- Helper ---

def make_departments(api_client, *names):
    return [api_client.post("/api/Department", json={"name": n}).json()["data"] for n in names]


# ============================================================
# POST /api/Department
# ============================================================

def test_create_departement_201(api_client):
    response = api_client.post("/api/Department", json={"name": "Informatique", "max_student_count": 20})

    assert response.status_code == 201
    body = response.json()
    assert body["is_success"] is True
    assert body["data"]["max_student_count"] == 100
    assert body["data"]["students_count"] == 0


def test_create_departement_nom_vide_400(api_client):
    response = api_client.post("/api/Department", json={"name": "   "})
    assert response.status_code == 400
    assert response.json()["errors"][0]["code"] == "VALIDATION_FAILED"


def test_create_plusieurs_departements(api_client):
    response = api_client.post("/api/Department/Range", json=[{"name": "Chimie"}, {"name": "Physique"}])
    assert response.status_code == 201
    assert [d["name"] for d in response.json()["data"]] == ["Chimie", "Physique"]


# ============================================================
# GET
# ============================================================

def test_get_all_filtre_et_tri(api_client):
    make_departments(api_client, "Chimie", "Informatique", "Physique")

    response = api_client.get(
        "/api/Department/GetAll", params={"query": "Name!='Chimie'", "order_by": "-Name"},
    )

    assert response.status_code == 200
    assert [d["name"] for d in response.json()["data"]] == ["Physique", "Informatique"]


def test_get_par_id(api_client):
    department = make_departments(api_client, "Informatique")[0]
    response = api_client.get(f"/api/Department/Get/{department['id']}")
    assert response.json()["data"]["name"] == "Informatique"


def test_get_par_id_introuvable(api_client):
    response = api_client.get("/api/Department/Get/999")
    assert response.status_code == 400
    assert response.json()["errors"][0]["code"] == "NOT_FOUND"


def test_get_query_mal_formee(api_client):
    response = api_client.get("/api/Department/GetQuery", params={"query": "Name=>'x'"})
    assert response.status_code == 400
    assert response.json()["errors"][0]["code"] == "INVALID_REQUEST"


def test_page(api_client):
    make_departments(api_client, "A1", "A2", "A3")

    response = api_client.get("/api/Department", params={"page": 1, "page_size": 2})

    data = response.json()["data"]
    assert response.status_code == 200
    assert [d["name"] for d in data["items"]] == ["A1", "A2"]
    assert data["total_count"] == 3
    assert data["total_pages"] == 2
    assert data["has_next"] is True


def test_page_vide_400_not_found(api_client):
    make_departments(api_client, "A1")

    response = api_client.get("/api/Department", params={"page": 5, "page_size": 10})

    body = response.json()
    assert response.status_code == 400
    assert body["errors"][0]["code"] == "NOT_FOUND"
    assert body["data"]["items"] == []
    assert body["data"]["total_count"] == 1


# ============================================================
# PUT / DELETE
# ============================================================

def test_update_departement(api_client):
    department = make_departments(api_client, "Informatique")[0]
    response = api_client.put("/api/Department", json={"id": department["id"], "max_student_count": 250})
    assert response.status_code == 200
    assert response.json()["data"]["max_student_count"] == 250
    assert response.json()["data"]["name"] == "Informatique"


def test_delete_departement(api_client):
    department = make_departments(api_client, "Informatique")[0]
    assert api_client.delete(f"/api/Department/{department['id']}").status_code == 200
    assert api_client.delete(f"/api/Department/{department['id']}").status_code == 400


# ============================================================
# Cours et examens
# ============================================================

def test_cours_semestre_invalide_400(api_client):
    response = api_client.post("/api/Course", json={"name": "Algo", "course_code": "CS101", "semester": 3})
    assert response.status_code == 400


def test_cours_dates_inversees_400(api_client):
    response = api_client.post("/api/Course", json={
        "name": "Algo", "course_code": "CS101",
        "start_date": "2025-02-01T08:00:00", "end_date": "2025-01-01T08:00:00",
    })
    assert response.status_code == 400


def test_cours_modification_semestre_invalide(api_client):
    course = api_client.post("/api/Course", json={"name": "Algo", "course_code": "CS101"}).json()["data"]
    response = api_client.put("/api/Course", json={"id": course["id"], "semester": 4})
    assert response.status_code == 400
    assert response.json()["errors"][0]["code"] == "VALIDATION_FAILED"


@pytest.mark.parametrize("payload", [
    {"name": "Final", "duration": 0},
    {"name": "", "duration": 2},
    {"name": "Final", "duration": 2, "max_grade": -5},
])
def test_examen_invalide_400(api_client, payload):
    assert api_client.post("/api/Exam", json=payload).status_code == 400


def test_examen_du_departement(api_client):
    department = make_departments(api_client, "Informatique")[0]
    exam = api_client.post(
        "/api/Exam", json={"name": "Final", "duration": 2, "department_id": department["id"]},
    ).json()["data"]
    assert exam["department_name"] == "Informatique"

    detail = api_client.get(f"/api/Department/Get/{department['id']}", params={"includes": "Exams"})
    assert detail.json()["data"]["exams_count"] == 1
