"""Cohort 스케줄 생성 요청/응답 스키마입니다."""

from datetime import date
from typing import List

from pydantic import BaseModel, Field


class CohortCreate(BaseModel):
    cohort_type: str = Field(min_length=1)
    cohort_number: str = Field(pattern=r"^\d+\.\d+$")
    day1: str
    day2: str
    start_date: date
    mentor_id: int


class CohortCreateResult(BaseModel):
    success: bool
    message: str
    table_name: str
    records_inserted: int


class CohortNumbersOut(BaseModel):
    cohort_type: str
    numbers: List[str]


class CohortExistsOut(BaseModel):
    cohort_type: str
    cohort_number: str
    table_name: str
    exists: bool
