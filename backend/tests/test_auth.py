import pytest

from app.models.user import User
from tests.conftest import auth_headers


@pytest.fixture
def mentor_staff(db, seed_users, seed_mentors):
    user = User(emp_id="staff007", name="Asha", role="staff", email="Asha@Example.com")
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def test_login_success(client, seed_users):
    resp = client.post("/api/auth/login", json={"emp_id": "admin001"})
    assert resp.status_code == 200
    data = resp.json()
    assert "access_token" in data
    assert data["user"]["role"] == "admin"
    assert data["user"]["is_admin"] is True
    assert data["user"]["can_manage_schedule"] is True


def test_login_with_email_ignores_case(client, seed_users):
    resp = client.post("/api/auth/login", json={"emp_id": "  STAFF@example.com "})
    assert resp.status_code == 200, resp.text
    assert resp.json()["user"]["emp_id"] == "staff001"
    assert resp.json()["user"]["is_admin"] is False


def test_login_invalid_emp_id(client, seed_users):
    resp = client.post("/api/auth/login", json={"emp_id": "nonexistent"})
    assert resp.status_code == 401


def test_login_rejects_inactive_staff(client, db, seed_users):
    seed_users["staff"].is_active = False
    db.commit()
    assert client.post("/api/auth/login", json={"emp_id": "staff001"}).status_code == 401


def test_me_authenticated(client, seed_users):
    headers = auth_headers(client, "staff001")
    resp = client.get("/api/auth/me", headers=headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["emp_id"] == "staff001"
    assert data["can_manage_schedule"] is True
    assert data["mentor_id"] is None


def test_me_links_mentor_by_email(client, mentor_staff):
    resp = client.get("/api/auth/me", headers=auth_headers(client, "staff007"))
    assert resp.status_code == 200
    assert resp.json()["mentor_id"] == 7


def test_token_rejected_after_role_change(client, db, seed_users):
    headers = auth_headers(client, "staff001")
    seed_users["staff"].role = "admin"
    db.commit()
    resp = client.get("/api/auth/me", headers=headers)
    assert resp.status_code == 401


def test_me_unauthenticated(client):
    resp = client.get("/api/auth/me")
    assert resp.status_code in (401, 403)  # HTTPBearer raises 401 or 403 depending on version


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_logout(client, seed_users):
    headers = auth_headers(client, "admin001")
    resp = client.post("/api/auth/logout", headers=headers)
    assert resp.status_code == 200


def test_own_mentor_attendance(client, mentor_staff):
    headers = auth_headers(client, "staff007")
    resp = client.get("/api/mentor-attendance/me", headers=headers)
    assert resp.status_code == 404
    assert resp.json()["success"] is False

    assert client.post("/api/mentor-attendance", headers=auth_headers(client, "admin001")).status_code == 200
    resp = client.get("/api/mentor-attendance/me", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["mentor_id"] == 7

    resp = client.get("/api/mentor-attendance/me", headers=auth_headers(client, "staff001"))
    assert resp.status_code == 404


def test_mentor_list_requires_login(client, seed_users, seed_mentors):
    assert client.get("/api/mentors").status_code in (401, 403)
    resp = client.get("/api/mentors", headers=auth_headers(client, "staff001"))
    assert resp.status_code == 200
    assert [m["mentor_id"] for m in resp.json()] == [1, 7, 9]
