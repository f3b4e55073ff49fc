"""멘토 명단 모델 정의입니다. 멘토는 특정 코호트에 속하지 않습니다."""

from sqlalchemy import Column, Integer, String
from app.database import Base


class Mentor(Base):
    __tablename__ = "mentor_details"

    mentor_id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String(100))
    email = Column(String(150))
    phone = Column(String(30))
