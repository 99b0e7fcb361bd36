"""
Tests d'intégration API pour les comptes et les politiques d'accès (jetons réels).
"""

from college.models.enums import Role
from college.models.user import AppUser
from college.security import create_access_token

REGISTER = {
    "user_name": "sara",
    "email": "sara.adel@gmail.com",
    "password": "MotDePasse!42",
    "confirm_password": "MotDePasse!42",
}


# --- Helper ---

def bearer(role: Role) -> dict:
    token = create_access_token(AppUser(user_name=f"{role.value}-test", email=None, role=role.value))
    return {"Authorization": f"Bearer {token}"}


# ============================================================
# POST /api/Account
# ============================================================

def test_register_201_avec_jeton(anon_client):
    response = anon_client.post("/api/Account", json=REGISTER)

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == body["data"]["token"]
    assert body["data"]["user_name"] == "sara"


def test_register_deux_fois_400(anon_client):
    anon_client.post("/api/Account", json=REGISTER)
    response = anon_client.post("/api/Account", json={**REGISTER, "user_name": "sara2"})
    assert response.status_code == 400
    assert response.json()["errors"][0]["code"] == "ACCOUNT_ALREADY_EXISTS"


def test_register_mot_de_passe_trop_court_400(anon_client):
    response = anon_client.post("/api/Account", json={**REGISTER, "password": "court", "confirm_password": "court"})
    assert response.status_code == 400


# ============================================================
# POST /api/Account/login et GET /api/Account/CheckRoles
# ============================================================

def test_login_puis_check_roles(anon_client):
    anon_client.post("/api/Account", json=REGISTER)

    login = anon_client.post("/api/Account/login", json={"user_name": "sara", "password": "MotDePasse!42"})
    assert login.status_code == 200
    token = login.json()["data"]["token"]

    roles = anon_client.get("/api/Account/CheckRoles", headers={"Authorization": f"Bearer {token}"})
    assert roles.status_code == 200
    assert roles.json()["data"]["roles"] == ["user"]
    assert roles.json()["data"]["user_name"] == "sara"


def test_login_mauvais_mot_de_passe_400(anon_client):
    anon_client.post("/api/Account", json=REGISTER)
    response = anon_client.post("/api/Account/login", json={"email": "sara.adel@gmail.com", "password": "faux"})
    assert response.status_code == 400
    assert response.json()["errors"][0]["code"] == "INVALID_CREDENTIALS"


def test_check_roles_sans_jeton_401(anon_client):
    response = anon_client.get("/api/Account/CheckRoles")
    assert response.status_code == 401
    assert response.json()["errors"][0]["code"] == "UNAUTHORIZED_ACCESS"


def test_jeton_invalide_401(anon_client):
    response = anon_client.get("/api/Account/CheckRoles", headers={"Authorization": "Bearer abc.def.ghi"})
    assert response.status_code == 401


# ============================================================
# Politiques par contrôleur
# ============================================================

def test_lecture_etudiants_tout_role(anon_client):
    response = anon_client.get("/api/Student/GetAll", headers=bearer(Role.STUDENT))
    assert response.status_code == 200
    assert response.json()["data"] == []


def test_creation_etudiant_reservee_admin_403(anon_client):
    response = anon_client.post("/api/Student", headers=bearer(Role.USER), json={
        "first_name": "Ali", "age": 19, "email": "ali@gmail.com",
        "phone_number": "0123456789", "academic_year": 1,
    })
    assert response.status_code == 403
    assert response.json()["errors"][0]["code"] == "INSUFFICIENT_PERMISSIONS"


def test_departements_reserves_admin(anon_client):
    assert anon_client.get("/api/Department/GetAll", headers=bearer(Role.SUPER_USER)).status_code == 403
    assert anon_client.get("/api/Department/GetAll", headers=bearer(Role.ADMIN)).status_code == 200


def test_health(anon_client):
    assert anon_client.get("/api/health").json()["status"] == "ok"
