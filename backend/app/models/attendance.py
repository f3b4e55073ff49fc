"""멘토 출석 집계 결과 모델 정의입니다. 재계산 시 mentor_id 기준으로 통째로 덮어씁니다."""

from sqlalchemy import Column, Integer, String, Float, DateTime

from app.database import Base


class MentorAttendance(Base):
    __tablename__ = "mentor_attendance"

    mentor_id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String(100))
    email = Column(String(150))
    total_classes = Column(Integer, nullable=False, default=0)
    present = Column(Integer, nullable=False, default=0)
    absent = Column(Integer, nullable=False, default=0)
    special_attendance = Column(Integer, nullable=False, default=0)
    attendance_percent = Column(Float, nullable=False, default=0)
    updated_at = Column(DateTime)
