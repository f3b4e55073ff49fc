"""수강생 온보딩 명단 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, Index
from app.database import Base


class Student(Base):
    __tablename__ = "onboarding"

    student_id = Column(Integer, primary_key=True, autoincrement=True)
    full_name = Column(String(100))
    email = Column(String(150))
    phone = Column(String(30))
    cohort_type = Column(String(50))
    cohort_number = Column(String(20))

    __table_args__ = (
        Index("idx_onboarding_cohort", "cohort_type", "cohort_number"),
    )
