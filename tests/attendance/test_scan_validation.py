from __future__ import annotations

from src.school_management.school_management.attendance.tokens import make_student_token, parse_student_token
from src.school_management.school_management.attendance.validator import (
    NOT_A_STUDENT_CODE,
    NOT_ASSIGNED,
    NOT_ENROLLED,
    ROUTE_NOT_FOUND,
    SCHEDULE_NOT_FOUND,
    STUDENT_INACTIVE,
    STUDENT_NOT_FOUND,
    AttendanceValidator,
)


def _validator(repos) -> AttendanceValidator:
    return AttendanceValidator(repos.students, repos.schedules, repos.enrollments, repos.routes, repos.assignments)


def test_token_format():
    assert make_student_token("STU0001") == "STUDENT:STU0001"
    assert parse_student_token("STUDENT:STU0001") == "STU0001"
    assert parse_student_token("  STUDENT:STU0001 ") == "STU0001"
    assert parse_student_token("STU0001") is None
    assert parse_student_token("STUDENT:") is None
    assert parse_student_token("") is None
    assert parse_student_token(None) is None


def test_enrolled_active_student_is_valid_for_classroom(repos):
    v = _validator(repos).validate_classroom("STUDENT:STU0001", 1)

    assert v.valid
    assert v.reason is None
    assert v.student_id == 1
    assert v.display_name == "Emma Thompson"
    assert v.class_id == 1
    assert v.schedule_id == 1


def test_token_lookup_uses_the_parsed_student_code(repos):
    v = _validator(repos).validate_classroom("STUDENT: STU0001 ", 1)

    assert v.valid
    assert v.student_id == 1


def test_non_student_token_is_rejected_without_lookup(repos):
    v = _validator(repos).validate_classroom("https://example.com/not-a-card", 1)

    assert not v.valid
    assert v.reason == NOT_A_STUDENT_CODE
    assert v.student_id is None


def test_unknown_student(repos):
    v = _validator(repos).validate_classroom("STUDENT:STU9999", 1)

    assert not v.valid
    assert v.reason == STUDENT_NOT_FOUND


def test_inactive_student_is_rejected_but_named(repos):
    v = _validator(repos).validate_classroom("STUDENT:STU0003", 1)

    assert not v.valid
    assert v.reason == STUDENT_INACTIVE
    assert v.display_name == "Olivia Wilson"


def test_missing_schedule(repos):
    v = _validator(repos).validate_classroom("STUDENT:STU0001", 42)

    assert not v.valid
    assert v.reason == SCHEDULE_NOT_FOUND


def test_student_not_enrolled_in_scheduled_class(repos):
    repos.students.create(
        full_name="Liam Brown",
        student_code="STU0004",
        qr_code="STUDENT:STU0004",
        grade="Grade 6",
        section="A",
        date_of_birth=None,
        gender=None,
        photo_url=None,
    )

    v = _validator(repos).validate_classroom("STUDENT:STU0004", 1)

    assert not v.valid
    assert v.reason == NOT_ENROLLED
    assert v.class_id == 1


def test_bus_scan_requires_active_assignment_on_that_route(repos):
    validator = _validator(repos)

    assert validator.validate_bus("STUDENT:STU0001", 1).valid

    v = validator.validate_bus("STUDENT:STU0002", 1)
    assert not v.valid
    assert v.reason == NOT_ASSIGNED

    v = validator.validate_bus("STUDENT:STU0001", 99)
    assert not v.valid
    assert v.reason == ROUTE_NOT_FOUND


def test_ended_assignment_no_longer_validates(repos):
    repos.assignments.end(1)

    v = _validator(repos).validate_bus("STUDENT:STU0001", 1)

    assert v.reason == NOT_ASSIGNED
