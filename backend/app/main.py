"""FastAPI 애플리케이션 진입점. 미들웨어, API 라우터, 공통 오류 응답 형식을 등록합니다."""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from app.config import settings
from app.database import Base, engine
import app.models  # noqa: F401 - 모델 import로 metadata 등록
from app.routers import auth, cohort_schedules, cohorts, mentor_attendance, mentors, scheduler
from app.utils.errors import ScheduleError

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="멘토 스케줄 관리 시스템",
    description="코호트 수업 스케줄 생성/편집, 멘토 출석 집계, 회의 링크 및 알림 자동화",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register all routers
app.include_router(auth.router)
app.include_router(mentors.router)
app.include_router(cohorts.router)
app.include_router(cohort_schedules.router)
app.include_router(mentor_attendance.router)
app.include_router(scheduler.router)


@app.exception_handler(ScheduleError)
def schedule_error_handler(request: Request, exc: ScheduleError):
    logger.warning("[api] %s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"success": False, "message": exc.message})


@app.exception_handler(Exception)
def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("[api] unexpected error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"success": False, "message": str(exc) or "Internal server error"})


@app.on_event("startup")
def ensure_schema():
    # 고정 테이블만 생성한다. 코호트 스케줄 테이블은 생성 요청 시 만든다.
    Base.metadata.create_all(bind=engine)


@app.get("/api/health")
def health_check():
    return {"status": "ok", "service": "멘토 스케줄 관리 시스템"}
