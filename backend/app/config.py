"""환경 변수 기반 애플리케이션 설정을 중앙에서 관리합니다."""

from pydantic_settings import BaseSettings
from typing import List
from pathlib import Path


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./mentor_schedule.db"
    SECRET_KEY: str = "change-me-to-a-random-secret-key"
    DEBUG: bool = True
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]

    # JWT
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 480

    # Schedule generation
    DEFAULT_SESSION_TIME: str = "21:00:00"
    # 세션에 멘토가 없을 때 주최자/알림 발신자로 사용하는 멘토
    DEFAULT_MENTOR_ID: int = 1
    INSERT_BATCH_SIZE: int = 100
    SCHEMA_RETRY_ATTEMPTS: int = 3
    SCHEMA_RETRY_WAIT_SECONDS: float = 2.0
    TABLE_CREATE_WAIT_SECONDS: float = 3.0

    # 비어 있으면 DB 메타데이터에서 코호트 테이블을 찾는다.
    SCHEDULE_TABLES: List[str] = []

    PROGRAM_TIMEZONE: str = "Asia/Kolkata"

    # Meeting generation (Microsoft Graph)
    MS_TENANT_ID: str = ""
    MS_CLIENT_ID: str = ""
    MS_CLIENT_SECRET: str = ""
    MS_ORGANIZER_USER_ID: str = ""
    MS_GRAPH_AUTH_URL: str = "https://login.microsoftonline.com"
    MS_GRAPH_API_URL: str = "https://graph.microsoft.com/v1.0"
    MEETING_LOOKAHEAD_DAYS: int = 7
    MEETING_DURATION_MINUTES: int = 90
    MEETING_FALLBACK_TIME: str = "19:00:00"
    HTTP_TIMEOUT_SECONDS: float = 15.0

    # Scheduler endpoints
    CRON_SECRET: str = ""

    # Notifications
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 465
    SMTP_USER: str = ""
    SMTP_PASSWORD: str = ""
    SMTP_FROM: str = ""
    WHATSAPP_API_URL: str = ""
    WHATSAPP_API_TOKEN: str = ""
    NOTIFY_DELAY_SECONDS: float = 0.6
    FALLBACK_COHORTS: List[str] = ["Basic 1.0", "Basic 1.1", "Basic 2.0", "Placement 2.0"]

    class Config:
        env_file = str(Path(__file__).resolve().parents[1] / ".env")


settings = Settings()
