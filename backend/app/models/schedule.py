"""커리큘럼 템플릿(코호트 유형별 주차/세션 목록) 모델 정의입니다."""

from sqlalchemy import Column, BigInteger, Integer, String, Text, Index
from app.database import Base


class ScheduleTemplate(Base):
    __tablename__ = "schedule_template"

    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    cohort_type = Column(String(50), nullable=False)
    week_number = Column(Integer)
    session_number = Column(Integer)
    session_type = Column(String(50))
    subject_type = Column(String(100))
    subject_name = Column(String(200))
    subject_topic = Column(Text)
    initial_session_material = Column(Text)

    __table_args__ = (
        Index("idx_schedule_template_type", "cohort_type", "id"),
    )
