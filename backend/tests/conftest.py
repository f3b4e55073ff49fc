import pytest
from fastapi.testclient import TestClient
from sqlalchemy import MetaData, create_engine
from sqlalchemy.orm import sessionmaker
from app.config import settings
from app.database import Base, get_db
from app.main import app
from app.models.user import User
from app.models.mentor import Mentor
from app.models.schedule import ScheduleTemplate
from app.models.student import Student
from app.models.cohort_schedule import get_cohort_table

TEST_DB_URL = "sqlite:///./test_mentor_schedule.db"

engine = create_engine(TEST_DB_URL, connect_args={"check_same_thread": False})
TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    # 코호트 스케줄 테이블은 요청마다 동적으로 생성되므로 반영 후 제거한다.
    leftovers = MetaData()
    leftovers.reflect(bind=engine)
    leftovers.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def fast_settings(monkeypatch):
    monkeypatch.setattr(settings, "TABLE_CREATE_WAIT_SECONDS", 0)
    monkeypatch.setattr(settings, "SCHEMA_RETRY_WAIT_SECONDS", 0)
    monkeypatch.setattr(settings, "NOTIFY_DELAY_SECONDS", 0)
    monkeypatch.setattr(settings, "SCHEDULE_TABLES", [])
    monkeypatch.setattr(settings, "CRON_SECRET", "")


@pytest.fixture
def db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def seed_users(db):
    users = {
        "admin": User(emp_id="admin001", name="Admin", role="admin", email="admin@example.com"),
        "staff": User(emp_id="staff001", name="Staff", role="staff", email="staff@example.com"),
    }
    for u in users.values():
        db.add(u)
    db.commit()
    for u in users.values():
        db.refresh(u)
    return users


@pytest.fixture
def seed_mentors(db):
    mentors = [
        Mentor(mentor_id=1, name="Default Mentor", email="m1@example.com", phone="+910000000001"),
        Mentor(mentor_id=7, name="Asha", email="asha@example.com", phone="+910000000007"),
        Mentor(mentor_id=9, name="Vikram", email="vikram@example.com", phone="+910000000009"),
    ]
    db.add_all(mentors)
    db.commit()
    return mentors


@pytest.fixture
def seed_template(db):
    rows = [
        ScheduleTemplate(id=1, cohort_type="Basic", week_number=1, session_number=1,
                         session_type="Live Session", subject_name="Python", subject_topic="Intro"),
        ScheduleTemplate(id=2, cohort_type="Basic", week_number=1, session_number=2,
                         session_type="live session", subject_name="Python", subject_topic="Loops"),
        ScheduleTemplate(id=3, cohort_type="Basic", week_number=1, session_number=1,
                         session_type="Contest", subject_name="Weekly Contest"),
        ScheduleTemplate(id=4, cohort_type="Basic", week_number=2, session_number=1,
                         session_type="Live Session", subject_name="DSA", subject_topic="Arrays"),
        ScheduleTemplate(id=5, cohort_type="Basic", week_number=2, session_number=2,
                         session_type="Recorded", subject_name="DSA", subject_topic="Strings"),
    ]
    db.add_all(rows)
    db.commit()
    return rows


@pytest.fixture
def seed_students(db):
    students = [
        Student(full_name="Student One", email="s1@example.com", phone="+919000000001",
                cohort_type="Basic", cohort_number="1.0"),
        Student(full_name="Student Two", email="s2@example.com", phone=None,
                cohort_type="Basic", cohort_number="1.0"),
        Student(full_name="No Mail", email=None, phone=None,
                cohort_type="Basic", cohort_number="1.0"),
    ]
    db.add_all(students)
    db.commit()
    return students


def get_token(client, emp_id: str) -> str:
    resp = client.post("/api/auth/login", json={"emp_id": emp_id})
    assert resp.status_code == 200, resp.text
    return resp.json()["access_token"]


def auth_headers(client, emp_id: str) -> dict:
    return {"Authorization": f"Bearer {get_token(client, emp_id)}"}


def create_cohort_table(table_name: str, rows: list):
    table = get_cohort_table(table_name)
    table.create(bind=engine, checkfirst=True)
    if rows:
        with engine.begin() as conn:
            conn.execute(table.insert(), rows)
    return table
