"""스케줄/출석 도메인 예외 계층입니다.

HTTP 진입점은 이 예외들을 ``{"success": false, "message": ...}`` 형태로 변환합니다.
재시도 여부는 예외 타입으로 판별합니다 (``TransientStoreError`` 하위만 재시도).
"""


class ScheduleError(Exception):
    """Base exception for scheduling and attendance operations."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class MissingSourceData(ScheduleError):
    """Template or roster is absent or empty."""

    status_code = 404


class UnrecognizedDayName(ScheduleError, ValueError):
    status_code = 400


class InvalidTableName(ScheduleError):
    status_code = 400


class SessionMoveError(ScheduleError):
    """Postpone/prepone or edit request that violates schedule ordering."""

    status_code = 400


class SessionNotFound(ScheduleError):
    status_code = 404


class StoreError(ScheduleError):
    """Wrapped failure from the relational store."""

    status_code = 500


class TransientStoreError(StoreError):
    """Temporary store failure that may succeed on retry."""

    status_code = 503


class SchemaNotReadyError(TransientStoreError):
    """Table was created but is not yet visible to writers."""


class TableNotFoundError(StoreError):
    status_code = 404


class TableDiscoveryError(StoreError):
    """Cohort schedule tables could not be enumerated."""


class MeetingCreationError(ScheduleError):
    """Meeting provider rejected or failed a meeting request."""

    status_code = 502
