"""Seed the database with sample staff, mentors, a curriculum template and students."""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.database import SessionLocal, engine, Base
import app.models  # noqa: F401

from app.models.user import User
from app.models.mentor import Mentor
from app.models.schedule import ScheduleTemplate
from app.models.student import Student

BASIC_WEEKS = [
    ("Programming Fundamentals", "Variables and types", "Loops and conditions"),
    ("Data Structures", "Arrays and strings", "Hash maps"),
    ("Algorithms", "Sorting", "Binary search"),
    ("Problem Solving", "Two pointers", "Recursion"),
]


def seed():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        if db.query(User).count() > 0:
            print("Database already seeded. Skipping.")
            return

        # Staff users
        db.add_all([
            User(emp_id="admin001", name="관리자", role="admin", email="admin@example.com"),
            User(emp_id="staff001", name="운영 담당자", role="staff", email="staff@example.com"),
        ])

        # Mentors
        db.add_all([
            Mentor(mentor_id=1, name="Default Mentor", email="mentor1@example.com", phone="+910000000001"),
            Mentor(mentor_id=2, name="Asha Rao", email="asha@example.com", phone="+910000000002"),
            Mentor(mentor_id=3, name="Vikram Shah", email="vikram@example.com", phone="+910000000003"),
        ])

        # Curriculum template: two live sessions per week plus a contest
        for week_number, (subject, topic1, topic2) in enumerate(BASIC_WEEKS, start=1):
            db.add_all([
                ScheduleTemplate(cohort_type="Basic", week_number=week_number, session_number=1,
                                 session_type="live session", subject_type="Core",
                                 subject_name=subject, subject_topic=topic1),
                ScheduleTemplate(cohort_type="Basic", week_number=week_number, session_number=2,
                                 session_type="live session", subject_type="Core",
                                 subject_name=subject, subject_topic=topic2),
                ScheduleTemplate(cohort_type="Basic", week_number=week_number, session_number=1,
                                 session_type="contest", subject_type="Assessment",
                                 subject_name=f"{subject} Contest", subject_topic="Weekly contest"),
            ])

        # Students
        db.add_all([
            Student(full_name="Student One", email="s1@example.com", phone="+919000000001",
                    cohort_type="Basic", cohort_number="1.0"),
            Student(full_name="Student Two", email="s2@example.com", phone="+919000000002",
                    cohort_type="Basic", cohort_number="1.0"),
        ])

        db.commit()
        print("Seed data inserted successfully.")
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed()
