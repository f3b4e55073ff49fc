"""Meeting Client 외부 연동 레이어입니다. Microsoft Graph로 Teams 회의를 만들고 참가 링크를 돌려줍니다."""

import logging
from datetime import datetime
from typing import Dict, List, Optional
from zoneinfo import ZoneInfo

import httpx

from app.config import settings
from app.utils.errors import MeetingCreationError

logger = logging.getLogger(__name__)


class MeetingClient:
    """Capability: (subject, start, end, attendees) -> join URL."""

    def create_meeting(self, subject: str, start: datetime, end: datetime, attendees: List[str]) -> str:
        raise NotImplementedError


class GraphMeetingClient(MeetingClient):
    """Creates a calendar event with an online meeting, falling back to a standalone online meeting."""

    def __init__(self, http: Optional[httpx.Client] = None):
        self.http = http or httpx.Client(timeout=settings.HTTP_TIMEOUT_SECONDS)
        self._token: Optional[str] = None

    def _organizer(self) -> str:
        if not settings.MS_ORGANIZER_USER_ID:
            raise MeetingCreationError("MS_ORGANIZER_USER_ID 설정이 없습니다.")
        return settings.MS_ORGANIZER_USER_ID

    def access_token(self) -> str:
        if self._token:
            return self._token
        if not (settings.MS_TENANT_ID and settings.MS_CLIENT_ID and settings.MS_CLIENT_SECRET):
            raise MeetingCreationError("Microsoft 인증 정보가 설정되지 않았습니다.")
        response = self.http.post(
            f"{settings.MS_GRAPH_AUTH_URL}/{settings.MS_TENANT_ID}/oauth2/v2.0/token",
            data={
                "client_id": settings.MS_CLIENT_ID,
                "client_secret": settings.MS_CLIENT_SECRET,
                "scope": "https://graph.microsoft.com/.default",
                "grant_type": "client_credentials",
            },
        )
        if response.status_code != 200:
            raise MeetingCreationError(f"Graph 토큰 발급 실패: {response.text}")
        self._token = response.json()["access_token"]
        return self._token

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.access_token()}",
            "Content-Type": "application/json",
        }

    def _create_event(self, subject: str, start: datetime, end: datetime, attendees: List[str]) -> str:
        organizer = self._organizer()
        body = {
            "subject": subject,
            "start": {"dateTime": start.replace(tzinfo=None).isoformat(), "timeZone": settings.PROGRAM_TIMEZONE},
            "end": {"dateTime": end.replace(tzinfo=None).isoformat(), "timeZone": settings.PROGRAM_TIMEZONE},
            "isOnlineMeeting": True,
            "onlineMeetingProvider": "teamsForBusiness",
            "attendees": [
                {"emailAddress": {"address": email.strip()}, "type": "required"}
                for email in attendees
                if email and email.strip()
            ],
            "responseRequested": False,
            "allowNewTimeProposals": False,
        }
        response = self.http.post(
            f"{settings.MS_GRAPH_API_URL}/users/{organizer}/events",
            headers=self._headers(),
            json=body,
        )
        if response.status_code >= 300:
            raise MeetingCreationError(f"캘린더 이벤트 생성 실패: {response.text}")
        data = response.json()
        online_meeting = data.get("onlineMeeting") or {}
        join_url = online_meeting.get("joinUrl")
        if not join_url:
            raise MeetingCreationError("이벤트는 생성되었지만 참가 링크가 없습니다.")
        if online_meeting.get("id"):
            self._enable_auto_recording(organizer, online_meeting["id"])
        return join_url

    def _enable_auto_recording(self, organizer: str, meeting_id: str) -> None:
        try:
            response = self.http.patch(
                f"{settings.MS_GRAPH_API_URL}/users/{organizer}/onlineMeetings/{meeting_id}",
                headers=self._headers(),
                json={"recordAutomatically": True},
            )
        except httpx.HTTPError as exc:
            logger.warning("[meeting] auto-recording patch failed: %s", exc)
            return
        if response.status_code >= 300:
            logger.warning("[meeting] could not enable auto-recording: %s", response.text)

    def _create_online_meeting(self, subject: str, start: datetime, end: datetime) -> str:
        tz = ZoneInfo(settings.PROGRAM_TIMEZONE)
        body = {
            "subject": subject,
            "startDateTime": start.replace(tzinfo=tz).isoformat(),
            "endDateTime": end.replace(tzinfo=tz).isoformat(),
            "lobbyBypassSettings": {"scope": "everyone", "isDialInBypassEnabled": True},
            "autoAdmittedUsers": "everyone",
            "allowedPresenters": "everyone",
            "recordAutomatically": True,
        }
        response = self.http.post(
            f"{settings.MS_GRAPH_API_URL}/users/{self._organizer()}/onlineMeetings",
            headers=self._headers(),
            json=body,
        )
        if response.status_code >= 300:
            raise MeetingCreationError(f"온라인 회의 생성 실패: {response.text}")
        return response.json()["joinWebUrl"]

    def create_meeting(self, subject: str, start: datetime, end: datetime, attendees: List[str]) -> str:
        try:
            return self._create_event(subject, start, end, attendees)
        except (MeetingCreationError, httpx.HTTPError) as exc:
            logger.info("[meeting] calendar event failed, falling back to onlineMeetings: %s", exc)
        # 대체 경로는 채팅이 없지만 참가 링크는 항상 생성된다.
        return self._create_online_meeting(subject, start, end)
