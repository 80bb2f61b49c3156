from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from src.school_management.school_management.attendance.model import ScanRecord, ScanValidation
from src.school_management.school_management.attendance.recorder import AttendanceRecorder
from src.school_management.school_management.attendance.scan_log import RecentScansLog
from src.school_management.school_management.attendance.service import SAVE_FAILED
from src.school_management.school_management.core.enums import AttendanceStatus, AttendanceType
from src.school_management.school_management.core.exceptions import BackendError, ValidationError


def test_recorder_writes_one_present_row_per_call(repos, fixed_now):
    recorder = AttendanceRecorder(repos.attendance)
    validation = ScanValidation(valid=True, student_id=1, schedule_id=1, class_id=1)

    first = recorder.record(validation, recorded_by=2, now=fixed_now)
    second = recorder.record(validation, recorded_by=2, now=fixed_now)

    # Scanning the same student twice is not deduplicated.
    assert first.attendance_id != second.attendance_id
    assert len(repos.attendance.rows) == 2
    assert first.attendance_type == AttendanceType.CLASSROOM
    assert first.status == AttendanceStatus.PRESENT
    assert first.attendance_date == date(2024, 3, 4)
    assert first.class_id == 1
    assert first.bus_route_id is None


def test_recorder_bus_record(repos, fixed_now):
    recorder = AttendanceRecorder(repos.attendance)

    rec = recorder.record(ScanValidation(valid=True, student_id=1, route_id=1), recorded_by=None, now=fixed_now)

    assert rec.attendance_type == AttendanceType.BUS
    assert rec.bus_route_id == 1
    assert rec.schedule_id is None


def test_recorder_refuses_invalid_validation(repos):
    recorder = AttendanceRecorder(repos.attendance)

    with pytest.raises(ValidationError):
        recorder.record(ScanValidation.reject("Not a student code"), recorded_by=None)
    assert repos.attendance.rows == []


def test_scan_log_keeps_ten_most_recent_first(fixed_now):
    log = RecentScansLog()
    for i in range(12):
        log.add(ScanRecord(f"STU{i:04d}", None, True, fixed_now + timedelta(seconds=i), "Present"))

    entries = log.entries()
    assert len(entries) == 10
    assert entries[0].code == "STU0011"
    assert entries[-1].code == "STU0002"


def test_scan_log_survives_session_round_trip(fixed_now):
    log = RecentScansLog(limit=3)
    log.add(ScanRecord("STU0001", "Emma Thompson", True, fixed_now, "Present"))
    log.add(ScanRecord("XYZ", None, False, fixed_now, "Not a student code"))

    restored = RecentScansLog.from_list(log.to_list(), limit=3)

    assert restored.entries() == log.entries()
    restored.clear()
    assert len(restored) == 0


def test_scan_log_limit_must_be_positive():
    with pytest.raises(ValueError):
        RecentScansLog(limit=0)


def test_classroom_scan_success_records_and_logs(container, repos, fixed_now):
    log = RecentScansLog()

    outcome = container.attendance_service.scan_classroom(
        "STUDENT:STU0001", 1, actor_id=2, log=log, now=fixed_now
    )

    assert outcome.success
    assert outcome.scan.message == "Present"
    assert outcome.scan.name == "Emma Thompson"
    assert outcome.record.recorded_by == 2
    assert len(repos.attendance.rows) == 1
    assert log.entries()[0] == outcome.scan


def test_rejected_scan_logs_failure_without_record(container, repos, fixed_now):
    log = RecentScansLog()

    outcome = container.attendance_service.scan_classroom("hello", 1, actor_id=2, log=log, now=fixed_now)

    assert not outcome.success
    assert outcome.scan.message == "Not a student code"
    assert outcome.scan.code == "hello"
    assert repos.attendance.rows == []
    assert len(log) == 1


def test_failed_write_is_reported_not_raised(container, repos, fixed_now):
    repos.attendance.fail_create = BackendError("connection lost")
    log = RecentScansLog()

    outcome = container.attendance_service.scan_classroom(
        "STUDENT:STU0001", 1, actor_id=2, log=log, now=fixed_now
    )

    assert outcome.validation.valid
    assert not outcome.success
    assert outcome.scan.message == SAVE_FAILED


def test_manual_bus_entry_by_student_code(container, repos, fixed_now):
    log = RecentScansLog()
    svc = container.attendance_service

    ok = svc.scan_bus_by_code(" stu0001 ", 1, actor_id=None, log=log, now=fixed_now)
    missing = svc.scan_bus_by_code("STU9999", 1, actor_id=None, log=log, now=fixed_now)

    assert ok.success
    assert ok.scan.message == "Boarded"
    assert ok.record.attendance_type == AttendanceType.BUS
    assert not missing.success
    assert missing.scan.message == "Student not found"
    assert [e.code for e in log.entries()] == ["STU9999", "STU0001"]


def test_daily_summary_counts_distinct_students(container, fixed_now):
    svc = container.attendance_service
    log = RecentScansLog()
    for token in ("STUDENT:STU0001", "STUDENT:STU0001", "STUDENT:STU0002"):
        svc.scan_classroom(token, 1, actor_id=2, log=log, now=fixed_now)
    svc.scan_bus("STUDENT:STU0001", 1, actor_id=None, log=log, now=fixed_now)

    summary = svc.daily_summary(fixed_now.date())

    assert summary.classroom_present == 2
    assert summary.bus_present == 1
    assert summary.students_present == 2
    assert summary.by_class == {1: 2}


def test_student_history_window(container, fixed_now):
    svc = container.attendance_service
    log = RecentScansLog()
    svc.scan_classroom("STUDENT:STU0001", 1, actor_id=2, log=log, now=fixed_now - timedelta(days=40))
    svc.scan_classroom("STUDENT:STU0001", 1, actor_id=2, log=log, now=fixed_now)

    history = svc.student_history(1, today=fixed_now.date())

    assert [r.scanned_at for r in history] == [fixed_now]


def test_scan_record_dict_uses_iso_timestamp():
    rec = ScanRecord("STU0001", "Emma Thompson", True, datetime(2024, 3, 4, 8, 5), "Present")

    assert rec.to_dict()["scanned_at"] == "2024-03-04T08:05:00"
    assert ScanRecord.from_dict(rec.to_dict()) == rec
