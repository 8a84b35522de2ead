from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from attendance_tracker.core.enums import AttendanceStatus, SessionState, TravelFlag, WorkModality
from attendance_tracker.core.exceptions import SessionConflictError, StorageError, ValidationError


def at(hour: int, minute: int = 0) -> datetime:
    return datetime(2026, 3, 2, hour, minute)


def clock_in(service, ctx, hour=9, minute=0, **kwargs):
    kwargs.setdefault("work_modality", WorkModality.WFH)
    return service.clock_in(ctx, now=at(hour, minute), **kwargs)


def test_scenario_full_day_without_lunch(service, fixed_now):
    ctx = service.load_session("u1", now=fixed_now)
    clock_in(service, ctx)

    record = service.clock_out(ctx, now=at(17))

    assert record.total_time == timedelta(hours=8)
    assert record.total_hours == 8.0
    assert record.status == AttendanceStatus.COMPLETED
    assert ctx.state == SessionState.CLOSED


def test_scenario_lunch_is_subtracted(service, attendance_repo, fixed_now):
    ctx = service.load_session("u1", now=fixed_now)
    clock_in(service, ctx)
    service.start_lunch(ctx, now=at(12))
    service.end_lunch(ctx, now=at(12, 30))

    record = service.clock_out(ctx, now=at(17))

    assert attendance_repo.calls[-1][1]["total_time"] == "7 hours 30 minutes"
    assert record.total_time == timedelta(hours=7, minutes=30)
    assert record.total_hours == 7.5


def test_scenario_clock_out_closes_running_lunch(service, attendance_repo, fixed_now):
    ctx = service.load_session("u1", now=fixed_now)
    clock_in(service, ctx)
    service.start_lunch(ctx, now=at(12))
    assert ctx.state == SessionState.ON_LUNCH

    record = service.clock_out(ctx, now=at(17))

    # 8 hours on the clock, 5 of them spent on the never-ended lunch.
    assert record.lunch_break_end == at(17)
    assert attendance_repo.calls[-1][1]["total_time"] == "3 hours"
    assert record.total_time == timedelta(hours=3)


def test_second_clock_in_is_rejected_and_record_untouched(service, attendance_repo, fixed_now):
    ctx = service.load_session("u1", now=fixed_now)
    first = clock_in(service, ctx, location_in="14.6,121.0")
    calls_before = len(attendance_repo.calls)

    with pytest.raises(SessionConflictError):
        clock_in(service, ctx, hour=10, location_in="15.0,121.0")

    assert len(attendance_repo.calls) == calls_before
    assert ctx.records == [first]
    assert service.load_session("u1", now=at(10)).open_record == first


def test_clock_in_conflict_is_a_validation_error(service, fixed_now):
    ctx = service.load_session("u1", now=fixed_now)
    clock_in(service, ctx)

    with pytest.raises(ValidationError):
        clock_in(service, ctx, hour=11)


def test_clock_in_fills_defaults(service, fixed_now):
    ctx = service.load_session("u1", now=fixed_now)

    record = clock_in(service, ctx, location_in=" 14.6,121.0 ")

    assert record.clock_in == fixed_now
    assert record.user_id == "u1"
    assert record.facial_status == "not verified"
    assert record.status == AttendanceStatus.OPEN
    assert record.location_in == "14.6,121.0"
    assert record.clock_out is None and record.lunch_break_start is None and record.lunch_break_end is None
    assert ctx.state == SessionState.CLOCKED_IN


def test_clock_in_keeps_branch_only_for_office(service, fixed_now):
    ctx = service.load_session("u1", now=fixed_now)
    wfh = clock_in(service, ctx, branch_location="Alabang", facial_status="verified")
    service.clock_out(ctx, now=at(10))

    office = clock_in(service, ctx, hour=11, work_modality="office", branch_location="Alabang")

    assert wfh.branch_location is None
    assert wfh.facial_status == "verified"
    assert office.branch_location == "Alabang"
    assert office.work_modality == WorkModality.OFFICE


def test_clock_in_rejects_unknown_modality(service, attendance_repo, fixed_now):
    ctx = service.load_session("u1", now=fixed_now)

    with pytest.raises(ValidationError):
        clock_in(service, ctx, work_modality="moon")
    assert attendance_repo.calls == []


@pytest.mark.parametrize("action", ["start_lunch", "end_lunch", "clock_out"])
def test_transitions_require_open_session(service, attendance_repo, fixed_now, action):
    ctx = service.load_session("u1", now=fixed_now)

    with pytest.raises(ValidationError):
        getattr(service, action)(ctx, now=at(12))
    assert attendance_repo.calls == []


def test_only_one_lunch_break_per_session(service, fixed_now):
    ctx = service.load_session("u1", now=fixed_now)
    clock_in(service, ctx)
    service.start_lunch(ctx, now=at(12))
    service.end_lunch(ctx, now=at(12, 30))

    with pytest.raises(ValidationError):
        service.start_lunch(ctx, now=at(15))
    assert ctx.open_record.lunch_break_start == at(12)


def test_start_lunch_twice_is_rejected(service, fixed_now):
    ctx = service.load_session("u1", now=fixed_now)
    clock_in(service, ctx)
    service.start_lunch(ctx, now=at(12))

    with pytest.raises(ValidationError):
        service.start_lunch(ctx, now=at(12, 10))
    assert ctx.open_record.lunch_break_start == at(12)


def test_end_lunch_requires_started_lunch(service, fixed_now):
    ctx = service.load_session("u1", now=fixed_now)
    clock_in(service, ctx)

    with pytest.raises(ValidationError):
        service.end_lunch(ctx, now=at(12))


def test_end_lunch_twice_is_rejected(service, fixed_now):
    ctx = service.load_session("u1", now=fixed_now)
    clock_in(service, ctx)
    service.start_lunch(ctx, now=at(12))
    service.end_lunch(ctx, now=at(12, 30))

    with pytest.raises(ValidationError):
        service.end_lunch(ctx, now=at(13))


def test_clock_out_before_clock_in_is_rejected(service, fixed_now):
    ctx = service.load_session("u1", now=fixed_now)
    clock_in(service, ctx)

    with pytest.raises(ValidationError):
        service.clock_out(ctx, now=at(8))
    assert ctx.state == SessionState.CLOCKED_IN


def test_storage_failure_leaves_session_unchanged(service, attendance_repo, fixed_now):
    ctx = service.load_session("u1", now=fixed_now)
    record = clock_in(service, ctx)
    attendance_repo.fail_with = StorageError("connection reset")

    with pytest.raises(StorageError):
        service.clock_out(ctx, now=at(17))

    assert ctx.records == [record]
    assert ctx.state == SessionState.CLOCKED_IN


def test_storage_failure_on_clock_in_caches_nothing(service, attendance_repo, fixed_now):
    ctx = service.load_session("u1", now=fixed_now)
    attendance_repo.fail_with = StorageError("timeout")

    with pytest.raises(StorageError):
        clock_in(service, ctx)
    assert ctx.records == []
    assert ctx.state == SessionState.NO_OPEN_SESSION


def test_new_session_may_start_after_clock_out(service, fixed_now):
    ctx = service.load_session("u1", now=fixed_now)
    clock_in(service, ctx)
    service.clock_out(ctx, now=at(12))

    second = clock_in(service, ctx, hour=13)

    assert ctx.open_record == second
    assert len(ctx.records) == 2
    assert ctx.state == SessionState.CLOCKED_IN


def test_load_session_includes_open_record_from_previous_day(service, fixed_now):
    ctx = service.load_session("u1", now=fixed_now - timedelta(days=1))
    service.clock_in(ctx, work_modality="wfh", now=fixed_now - timedelta(hours=12))

    today = service.load_session("u1", now=fixed_now)

    assert today.open_record is not None
    with pytest.raises(SessionConflictError):
        service.clock_in(today, work_modality="wfh", now=fixed_now)


def test_load_session_is_per_user(service, fixed_now):
    clock_in(service, service.load_session("u1", now=fixed_now))

    other = service.load_session("u2", now=fixed_now)

    assert other.records == []
    assert clock_in(service, other).user_id == "u2"


def test_echoed_record_replaces_cache(service, attendance_repo, fixed_now):
    ctx = service.load_session("u1", now=fixed_now)
    record = clock_in(service, ctx)
    attendance_repo.rows[record.attendance_id]["facial_status"] = "verified"

    service.start_lunch(ctx, now=at(12))

    assert ctx.open_record.facial_status == "verified"


def test_elapsed_displays(service, fixed_now):
    ctx = service.load_session("u1", now=fixed_now)
    assert service.elapsed_display(ctx, now=at(10)) == "0h 0m 0s"

    clock_in(service, ctx)
    service.start_lunch(ctx, now=at(12))

    assert service.elapsed_display(ctx, now=at(12, 45)) == "3h 0m 0s"
    assert service.lunch_elapsed_display(ctx, now=at(12, 45)) == "0h 45m 0s"


def test_clock_out_records_location_and_travel(service, fixed_now):
    ctx = service.load_session("u1", now=fixed_now)
    clock_in(service, ctx, location_in="14.6,121.0")

    record = service.clock_out(ctx, location_out="14.601,121.0", now=at(17))

    assert record.location_out == "14.601,121.0"
    assert service.classify(record) == TravelFlag.POSSIBLE_TRAVEL


def test_get_today_ui(service, fixed_now):
    ctx = service.load_session("u1", now=fixed_now)
    clock_in(service, ctx, work_modality="office", branch_location="Alabang")
    service.clock_out(ctx, location_out="14.4534,121.026", now=at(17))

    ui = service.get_today_ui(ctx, now=at(18))

    assert ui["state"] == "closed"
    assert ui["elapsed"] == "0h 0m 0s"
    assert ui["records"][0]["total_time"] == "8 hours"
    assert ui["records"][0]["total_display"] == "8h 0m 0s"
    assert ui["records"][0]["travel"] == "travel"


def test_clock_out_during_finished_lunch_is_rejected(service, attendance_repo, fixed_now):
    ctx = service.load_session("u1", now=fixed_now)
    clock_in(service, ctx)
    service.start_lunch(ctx, now=at(12))
    service.end_lunch(ctx, now=at(12, 30))
    calls_before = len(attendance_repo.calls)

    with pytest.raises(ValidationError):
        service.clock_out(ctx, now=at(12, 15))

    assert len(attendance_repo.calls) == calls_before
    assert ctx.state == SessionState.CLOCKED_IN


def test_start_lunch_before_clock_in_is_rejected(service, attendance_repo, fixed_now):
    ctx = service.load_session("u1", now=fixed_now)
    clock_in(service, ctx)
    calls_before = len(attendance_repo.calls)

    with pytest.raises(ValidationError):
        service.start_lunch(ctx, now=at(8, 30))

    assert len(attendance_repo.calls) == calls_before
    assert ctx.open_record.lunch_break_start is None


def test_end_lunch_before_lunch_start_is_rejected(service, attendance_repo, fixed_now):
    ctx = service.load_session("u1", now=fixed_now)
    clock_in(service, ctx)
    service.start_lunch(ctx, now=at(12))
    calls_before = len(attendance_repo.calls)

    with pytest.raises(ValidationError):
        service.end_lunch(ctx, now=at(11, 45))

    assert len(attendance_repo.calls) == calls_before
    assert ctx.state == SessionState.ON_LUNCH


def test_locations_are_normalized(service, attendance_repo, fixed_now):
    ctx = service.load_session("u1", now=fixed_now)
    clock_in(service, ctx, location_in=" 14.6 , 121 ")

    record = service.clock_out(ctx, location_out="14.601,121.0", now=at(17))

    assert attendance_repo.calls[0][1]["location_in"] == "14.6,121.0"
    assert record.location_in == "14.6,121.0"
    assert record.location_out == "14.601,121.0"


def test_oversized_malformed_location_is_trimmed_not_fatal(service, attendance_repo, fixed_now):
    ctx = service.load_session("u1", now=fixed_now)

    record = clock_in(service, ctx, location_in="x" * 1000)
    closed = service.clock_out(ctx, location_out="y" * 1000, now=at(17))

    assert len(record.location_in) == 255
    assert len(closed.location_out) == 255
    assert service.classify(closed) == TravelFlag.NONE


def test_oversized_branch_is_trimmed(service, fixed_now):
    ctx = service.load_session("u1", now=fixed_now)

    record = clock_in(service, ctx, work_modality="office", branch_location="b" * 300)

    assert len(record.branch_location) == 255


def test_oversized_facial_status_is_rejected(service, attendance_repo, fixed_now):
    ctx = service.load_session("u1", now=fixed_now)

    with pytest.raises(ValidationError):
        clock_in(service, ctx, facial_status="v" * 33)
    assert attendance_repo.calls == []
