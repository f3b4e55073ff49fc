from datetime import date, time

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.sql.dml import Update

from app.routers import cohort_schedules as cohort_schedules_router
from app.services import schedule_edit_service
from app.services.cohort_store import CohortScheduleStore
from app.utils.errors import ScheduleError, SessionMoveError, SessionNotFound, StoreError
from tests.conftest import TestingSession, auth_headers, create_cohort_table

TABLE = "basic1_0_schedule"
TODAY = date(2024, 3, 1)


def _session(row_id, week, number, day):
    session_date = date(2024, 3, day)
    return {
        "id": row_id,
        "week_number": week,
        "session_number": number,
        "date": session_date,
        "time": time(21, 0),
        "day": session_date.strftime("%A"),
        "session_type": "live session",
        "subject_name": f"Subject {row_id}",
        "mentor_id": 7,
        "notification_sent": False,
        "email_sent": False,
        "whatsapp_sent": False,
    }


@pytest.fixture
def schedule_table():
    rows = [
        _session(1, 1, 1, 4),
        _session(2, 1, 2, 6),
        _session(3, 2, 1, 11),
        _session(4, 2, 2, 13),
        _session(5, 3, 1, 18),
        _session(6, 3, 2, 20),
    ]
    create_cohort_table(TABLE, rows)
    return rows


@pytest.fixture
def fixed_today(monkeypatch):
    monkeypatch.setattr(cohort_schedules_router, "program_today", lambda: TODAY)
    return TODAY


def test_postpone_and_prepone_windows(schedule_table):
    rows = schedule_table
    assert schedule_edit_service.postpone_dates(rows, 2, TODAY) == [
        date(2024, 3, 7), date(2024, 3, 8), date(2024, 3, 9), date(2024, 3, 10),
    ]
    assert schedule_edit_service.prepone_dates(rows, 2, TODAY) == [date(2024, 3, 5)]
    # 앞선 세션이 없으면 30일 전까지 보되 오늘 이전은 제외
    assert schedule_edit_service.prepone_dates(rows, 1, TODAY) == [
        date(2024, 3, 1), date(2024, 3, 2), date(2024, 3, 3),
    ]
    later = schedule_edit_service.postpone_dates(rows, 6, TODAY)
    assert later[0] == date(2024, 3, 21)
    assert later[-1] == date(2024, 4, 19)


def test_edit_dates_between_neighbours(schedule_table):
    dates = schedule_edit_service.edit_dates(schedule_table, 3, TODAY)
    assert dates == [date(2024, 3, d) for d in range(7, 13)]


def test_unknown_session_raises(schedule_table):
    with pytest.raises(SessionNotFound):
        schedule_edit_service.postpone_dates(schedule_table, 99, TODAY)


def test_time_direction_rules():
    assert schedule_edit_service.is_time_valid_for_move("21:00:00", "22:30", "postpone")
    assert not schedule_edit_service.is_time_valid_for_move("21:00:00", "20:00", "postpone")
    assert schedule_edit_service.is_time_valid_for_move(time(21, 0), time(19, 0), "prepone")
    assert not schedule_edit_service.is_time_valid_for_move(time(21, 0), time(21, 0), "prepone")


def test_move_session_service(db, schedule_table):
    moved = schedule_edit_service.move_session(db, TABLE, 2, "postpone", date(2024, 3, 8), None, TODAY)
    assert moved["date"] == date(2024, 3, 8)
    assert moved["day"] == "Friday"

    with pytest.raises(SessionMoveError):
        schedule_edit_service.move_session(db, TABLE, 3, "postpone", date(2024, 3, 18), None, TODAY)
    with pytest.raises(SessionMoveError):
        schedule_edit_service.move_session(db, TABLE, 3, "postpone", None, None, TODAY)
    with pytest.raises(SessionMoveError):
        schedule_edit_service.move_session(db, TABLE, 3, "postpone", None, "20:00", TODAY)

    later = schedule_edit_service.move_session(db, TABLE, 3, "postpone", None, "22:15", TODAY)
    assert later["time"] == time(22, 15)
    assert later["date"] == date(2024, 3, 11)


def test_available_spans(schedule_table):
    spans = schedule_edit_service.available_date_spans(schedule_table, 2, TODAY)
    assert [(s["start"], s["end"]) for s in spans] == [
        (date(2024, 3, 7), date(2024, 3, 10)),
        (date(2024, 3, 12), date(2024, 3, 12)),
        (date(2024, 3, 14), date(2024, 3, 17)),
    ]
    assert [s["label"] for s in spans] == ["7th Mar → 10th Mar", "12th Mar", "14th Mar → 17th Mar"]


def test_span_labels_use_ordinals():
    assert schedule_edit_service.format_span_label(date(2024, 1, 1), date(2024, 1, 2)) == "1st Jan → 2nd Jan"
    assert schedule_edit_service.format_span_label(date(2024, 1, 3), date(2024, 1, 3)) == "3rd Jan"
    assert schedule_edit_service.format_span_label(date(2024, 1, 11), date(2024, 1, 23)) == "11th Jan → 23rd Jan"


def test_delete_week_shifts_later_weeks(db, schedule_table):
    result = schedule_edit_service.delete_week(db, TABLE, 2)
    assert result == {"deleted_count": 2, "updated_count": 2}
    rows = CohortScheduleStore(db, TABLE).all_rows()
    assert [(r["id"], r["week_number"], r["date"], r["day"]) for r in rows] == [
        (1, 1, date(2024, 3, 4), "Monday"),
        (2, 1, date(2024, 3, 6), "Wednesday"),
        (5, 2, date(2024, 3, 11), "Monday"),
        (6, 2, date(2024, 3, 13), "Wednesday"),
    ]
    with pytest.raises(SessionNotFound):
        schedule_edit_service.delete_week(db, TABLE, 9)


def test_delete_week_rolls_back_when_a_shift_fails(db, schedule_table, monkeypatch):
    real_execute = db.execute
    updates = []

    def flaky_execute(statement, *args, **kwargs):
        if isinstance(statement, Update):
            updates.append(statement)
            if len(updates) == 2:
                raise OperationalError("UPDATE", {}, Exception("database is locked"))
        return real_execute(statement, *args, **kwargs)

    monkeypatch.setattr(db, "execute", flaky_execute)
    with pytest.raises(StoreError):
        schedule_edit_service.delete_week(db, TABLE, 2)

    fresh = TestingSession()
    try:
        rows = CohortScheduleStore(fresh, TABLE).all_rows()
    finally:
        fresh.close()
    assert [(r["id"], r["week_number"], r["date"]) for r in rows] == [
        (s["id"], s["week_number"], s["date"]) for s in schedule_table
    ]


def test_day_is_not_editable_on_its_own(db, schedule_table):
    with pytest.raises(ScheduleError) as exc_info:
        schedule_edit_service.update_session_field(db, TABLE, 1, "day", "Friday")
    assert exc_info.value.status_code == 400
    with pytest.raises(ScheduleError):
        schedule_edit_service.bulk_update_sessions(db, TABLE, [1, 2], {"day": "Sunday"})

    rows = CohortScheduleStore(db, TABLE).all_rows()
    assert rows[0]["day"] == "Monday"
    assert rows[1]["day"] == "Wednesday"


def test_add_session_derives_day_from_date(db, schedule_table):
    result = schedule_edit_service.add_session(
        db, TABLE, {"week_number": 2, "date": date(2024, 3, 15), "day": "Sunday", "subject_name": "Extra"}
    )
    assert result["session"]["date"] == date(2024, 3, 15)
    assert result["session"]["day"] == "Friday"

    undated = schedule_edit_service.add_session(db, TABLE, {"week_number": 4, "day": "Monday"})
    assert undated["session"]["date"] is None
    assert undated["session"]["day"] is None


def test_list_and_edit_via_api(client, seed_users, schedule_table, fixed_today):
    headers = auth_headers(client, "staff001")

    resp = client.get(f"/api/cohort-schedules/{TABLE}", headers=headers)
    assert resp.status_code == 200
    assert [r["id"] for r in resp.json()] == [1, 2, 3, 4, 5, 6]

    resp = client.patch(
        f"/api/cohort-schedules/{TABLE}/sessions/1",
        json={"field": "date", "value": "2024-03-05"},
        headers=headers,
    )
    assert resp.status_code == 200, resp.text
    assert resp.json()["date"] == "2024-03-05"
    assert resp.json()["day"] == "Tuesday"

    resp = client.patch(f"/api/cohort-schedules/{TABLE}/sessions/1", json={"field": "id", "value": 5}, headers=headers)
    assert resp.status_code == 400
    assert resp.json()["success"] is False

    resp = client.patch(
        f"/api/cohort-schedules/{TABLE}/sessions/1",
        json={"field": "date", "value": "not-a-date"},
        headers=headers,
    )
    assert resp.status_code == 400

    resp = client.patch(f"/api/cohort-schedules/{TABLE}/sessions/42", json={"field": "subject_name", "value": "Graphs"}, headers=headers)
    assert resp.status_code == 404


def test_add_session_via_api(client, seed_users, schedule_table):
    headers = auth_headers(client, "admin001")
    resp = client.post(
        f"/api/cohort-schedules/{TABLE}/sessions",
        json={"week_number": 2, "date": "2024-03-15", "session_type": "live session", "subject_name": "Extra"},
        headers=headers,
    )
    assert resp.status_code == 201, resp.text
    session = resp.json()["session"]
    assert session["id"] == 7
    assert session["session_number"] == 3
    assert session["day"] == "Friday"
    assert session["notification_sent"] is False


def test_bulk_update_via_api(client, seed_users, schedule_table):
    headers = auth_headers(client, "admin001")
    resp = client.put(
        f"/api/cohort-schedules/{TABLE}/sessions/bulk",
        json={"session_ids": [1, 2], "values": {"session_recording": "https://rec/x", "swapped_mentor_id": 9}},
        headers=headers,
    )
    assert resp.status_code == 200
    assert resp.json() == {"updated": 2}

    resp = client.put(
        f"/api/cohort-schedules/{TABLE}/sessions/bulk",
        json={"session_ids": [1], "values": {"created_at": "2024-01-01T00:00:00"}},
        headers=headers,
    )
    assert resp.status_code == 400


def test_move_endpoints(client, seed_users, schedule_table, fixed_today):
    headers = auth_headers(client, "staff001")
    resp = client.get(f"/api/cohort-schedules/{TABLE}/sessions/2/move-dates?mode=prepone", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["dates"] == ["2024-03-05"]

    resp = client.get(f"/api/cohort-schedules/{TABLE}/sessions/3/edit-dates", headers=headers)
    assert resp.json()["dates"][0] == "2024-03-07"

    resp = client.post(
        f"/api/cohort-schedules/{TABLE}/sessions/2/move",
        json={"mode": "prepone", "new_date": "2024-03-05"},
        headers=headers,
    )
    assert resp.status_code == 200, resp.text
    assert resp.json()["day"] == "Tuesday"

    resp = client.post(
        f"/api/cohort-schedules/{TABLE}/sessions/2/move",
        json={"mode": "prepone", "new_date": "2024-03-20"},
        headers=headers,
    )
    assert resp.status_code == 400
    assert resp.json()["success"] is False


def test_week_endpoints(client, seed_users, schedule_table, fixed_today):
    headers = auth_headers(client, "admin001")
    resp = client.get(f"/api/cohort-schedules/{TABLE}/weeks/2/spans", headers=headers)
    assert resp.status_code == 200
    assert resp.json()[0] == {"start": "2024-03-07", "end": "2024-03-10", "label": "7th Mar → 10th Mar"}

    resp = client.delete(f"/api/cohort-schedules/{TABLE}/weeks/1", headers=headers)
    assert resp.status_code == 200
    assert resp.json() == {"deleted_count": 2, "updated_count": 4}


def test_unknown_and_invalid_tables(client, seed_users):
    headers = auth_headers(client, "staff001")
    assert client.get("/api/cohort-schedules/basic7_7_schedule", headers=headers).status_code == 404
    resp = client.get("/api/cohort-schedules/users", headers=headers)
    assert resp.status_code == 400
    assert resp.json()["success"] is False
