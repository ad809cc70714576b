from datetime import datetime

import pytest

from lab_attendance.core.enums import SessionState
from lab_attendance.core.exceptions import ConflictError, NotFoundError, ValidationError


def test_check_in_opens_a_session(container, attendance_repo):
    interval = container.attendance_service.check_in(
        {"email": "ana@example.edu", "checkIn": "2026-02-04T09:00:00", "reason": "Estudio"}
    )

    assert interval.user_id == 1
    assert interval.reason_id == 1
    assert interval.check_in == datetime(2026, 2, 4, 9, 0)
    assert interval.is_open
    assert attendance_repo.find_open_by_user(1) == interval


def test_check_in_accepts_capitalized_reason_key(container):
    interval = container.attendance_service.check_in(
        {"email": "ana@example.edu", "checkIn": "2026-02-04T09:00:00", "Reason": "Clases"}
    )
    assert interval.reason_id == 2


def test_check_in_lists_missing_fields(container):
    with pytest.raises(ValidationError) as exc:
        container.attendance_service.check_in({"email": "ana@example.edu"})

    assert exc.value.errors == ["checkIn is required", "reason is required"]


def test_check_in_rejects_bad_timestamp(container):
    with pytest.raises(ValidationError):
        container.attendance_service.check_in(
            {"email": "ana@example.edu", "checkIn": "yesterday", "reason": "Estudio"}
        )


def test_check_in_unknown_user_or_reason(container):
    with pytest.raises(NotFoundError):
        container.attendance_service.check_in(
            {"email": "nobody@example.edu", "checkIn": "2026-02-04T09:00:00", "reason": "Estudio"}
        )
    with pytest.raises(NotFoundError):
        container.attendance_service.check_in(
            {"email": "ana@example.edu", "checkIn": "2026-02-04T09:00:00", "reason": "Siesta"}
        )


def test_second_check_in_is_a_conflict_and_keeps_the_open_session(container, attendance_repo):
    first = attendance_repo.add(1, datetime(2026, 2, 4, 9, 0))

    with pytest.raises(ConflictError):
        container.attendance_service.check_in(
            {"email": "ana@example.edu", "checkIn": "2026-02-04T10:00:00", "reason": "Clases"}
        )

    assert list(attendance_repo.intervals.values()) == [first]


def test_check_out_closes_the_open_session(container, attendance_repo):
    attendance_repo.add(1, datetime(2026, 2, 4, 9, 0))

    closed = container.attendance_service.check_out(
        {"email": "ana@example.edu", "checkOut": "2026-02-04T11:30:00"}
    )

    assert closed.check_out == datetime(2026, 2, 4, 11, 30)
    assert attendance_repo.find_open_by_user(1) is None


def test_check_out_without_open_session(container, attendance_repo):
    attendance_repo.add(1, datetime(2026, 2, 4, 9, 0), datetime(2026, 2, 4, 10, 0))

    with pytest.raises(NotFoundError):
        container.attendance_service.check_out(
            {"email": "ana@example.edu", "checkOut": "2026-02-04T11:30:00"}
        )


def test_check_out_before_check_in_is_rejected(container, attendance_repo):
    attendance_repo.add(1, datetime(2026, 2, 4, 9, 0))

    with pytest.raises(ValidationError):
        container.attendance_service.check_out(
            {"email": "ana@example.edu", "checkOut": "2026-02-04T08:00:00"}
        )
    assert attendance_repo.find_open_by_user(1) is not None


def test_force_checkout_closes_at_closing_hour_and_is_idempotent(container, attendance_repo):
    attendance_repo.add(1, datetime(2026, 2, 4, 9, 0))
    attendance_repo.add(2, datetime(2026, 2, 3, 15, 0))
    late = attendance_repo.add(3, datetime(2026, 2, 4, 18, 0))

    assert container.attendance_service.force_checkout() == 2
    assert container.attendance_service.force_checkout() == 0

    deadline = datetime(2026, 2, 4, 17, 30)
    assert attendance_repo.intervals[1].check_out == deadline
    assert attendance_repo.intervals[2].check_out == deadline
    assert attendance_repo.intervals[late.attendance_id].is_open


def test_checkout_deadline_follows_configuration(container, lab_config):
    lab_config.update(final_hour="16:00")
    assert container.attendance_service.checkout_deadline() == datetime(2026, 2, 4, 16, 0)


def test_list_sessions_by_state(container, attendance_repo):
    attendance_repo.add(1, datetime(2026, 2, 4, 9, 0))
    attendance_repo.add(2, datetime(2026, 2, 3, 9, 0), datetime(2026, 2, 3, 10, 0))

    service = container.attendance_service
    assert [r.email for r in service.list_sessions(SessionState.OPEN)] == ["ana@example.edu"]
    assert [r.email for r in service.list_sessions(SessionState.CLOSED)] == ["bruno@example.edu"]
    assert len(service.list_sessions(SessionState.ALL)) == 2


def test_top_users_ranks_closed_time(container, attendance_repo):
    attendance_repo.add(1, datetime(2026, 2, 2, 9, 0), datetime(2026, 2, 2, 10, 0))
    attendance_repo.add(1, datetime(2026, 2, 3, 9, 0), datetime(2026, 2, 3, 11, 0))
    attendance_repo.add(2, datetime(2026, 2, 3, 9, 0), datetime(2026, 2, 3, 9, 30))
    attendance_repo.add(3, datetime(2026, 2, 4, 8, 30))

    top = [u.to_dict() for u in container.attendance_service.top_users()]

    assert [u["email"] for u in top] == ["ana@example.edu", "bruno@example.edu"]
    assert top[0]["totalTime"] == 3 * 60 * 60 * 1000
    assert top[0]["sessionCount"] == 2
    assert top[0]["totalTimeHours"] == 3.0
    assert top[0]["averageSessionHours"] == 1.5
    assert top[1]["totalTimeHours"] == 0.5


def test_top_users_respects_limit(container, attendance_repo):
    for user_id in (1, 2, 3):
        attendance_repo.add(user_id, datetime(2026, 2, 2, 9, 0), datetime(2026, 2, 2, 9 + user_id, 0))

    top = container.attendance_service.top_users(limit=2)

    assert [u.user_id for u in top] == [3, 2]
