"""Scheduler 기능 API 라우터입니다. 외부 cron이 호출하는 회의 생성/알림 발송 작업을 노출합니다.

CRON_SECRET 이 설정되어 있으면 ``Authorization: Bearer <CRON_SECRET>`` 헤더가 필요합니다.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.middleware.auth_middleware import verify_cron_secret
from app.schemas.scheduler import MeetingRunResult, NotificationRunResult
from app.services import meeting_service, notification_service
from app.services.meeting_client import GraphMeetingClient, MeetingClient
from app.services.notifiers import EmailNotifier, Notifier, WhatsAppNotifier
from app.utils.dates import program_today

router = APIRouter(
    prefix="/api/scheduler",
    tags=["scheduler"],
    dependencies=[Depends(verify_cron_secret)],
)


def get_meeting_client() -> MeetingClient:
    return GraphMeetingClient()


def get_notifiers() -> List[Notifier]:
    return [EmailNotifier(), WhatsAppNotifier()]


@router.api_route("/generate-meetings", methods=["GET", "POST"], response_model=MeetingRunResult)
def generate_meetings(
    db: Session = Depends(get_db),
    client: MeetingClient = Depends(get_meeting_client),
):
    return meeting_service.generate_meetings(db, client, program_today())


@router.api_route("/send-notifications", methods=["GET", "POST"], response_model=NotificationRunResult)
def send_notifications(
    db: Session = Depends(get_db),
    notifiers: List[Notifier] = Depends(get_notifiers),
):
    email_notifier, *rest = notifiers
    whatsapp_notifier = rest[0] if rest else None
    return notification_service.send_daily_notifications(
        db,
        email_notifier,
        program_today(),
        whatsapp_notifier=whatsapp_notifier,
    )
