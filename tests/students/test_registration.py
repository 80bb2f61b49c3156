from __future__ import annotations

import itertools
from datetime import date

import pytest

from src.school_management.school_management.core.enums import RecordStatus
from src.school_management.school_management.core.exceptions import (
    BackendError,
    BusAssignmentError,
    NotFoundError,
    ValidationError,
)
from src.school_management.school_management.students.service import StudentService
from src.school_management.school_management.transport.service import TransportService


def _services(repos, codes=None):
    transport = TransportService(repos.routes, repos.stops, repos.assignments)
    it = iter(codes) if codes else (f"STU{n:04d}" for n in itertools.count(100))
    return StudentService(repos.students, transport, code_factory=lambda: next(it)), transport


def test_register_generates_code_and_token(repos):
    students, _ = _services(repos, codes=("STU0001", "STU0100"))

    student_id = students.register(full_name="Ava Lee", grade="Grade 5", section="a", date_of_birth="2014-05-01")

    s = students.get(student_id)
    # STU0001 is taken, so the second generated code is used.
    assert s.student_code == "STU0100"
    assert s.qr_code == "STUDENT:STU0100"
    assert s.section == "A"
    assert s.date_of_birth == date(2014, 5, 1)
    assert s.is_active


def test_register_with_given_code_and_bus(repos):
    students, transport = _services(repos)

    student_id = students.register(
        full_name="Ava Lee", grade="Grade 5", section="A", student_code="stu0200", route_id=1, stop_id=2
    )

    assert students.get(student_id).student_code == "STU0200"
    assignment = transport.active_assignment(student_id)
    assert (assignment.route_id, assignment.stop_id) == (1, 2)


def test_register_rejects_bad_input(repos):
    students, _ = _services(repos)

    with pytest.raises(ValidationError, match="already exists"):
        students.register(full_name="Ava Lee", grade="Grade 5", section="A", student_code="STU0001")
    with pytest.raises(ValidationError, match="Unknown grade"):
        students.register(full_name="Ava Lee", grade="Grade 13", section="A")
    with pytest.raises(ValidationError, match="Date of birth"):
        students.register(full_name="Ava Lee", grade="Grade 5", section="A", date_of_birth="01/05/2014")
    with pytest.raises(NotFoundError, match="Bus route"):
        students.register(full_name="Ava Lee", grade="Grade 5", section="A", route_id=99)


def test_failed_bus_assignment_keeps_student(repos):
    repos.assignments.fail_create = BackendError("lock wait timeout")
    students, _ = _services(repos)

    with pytest.raises(BusAssignmentError) as exc:
        students.register(full_name="Ava Lee", grade="Grade 5", section="A", route_id=1)

    student = students.get(exc.value.student_id)
    assert student.full_name == "Ava Lee"


def test_stop_must_belong_to_route(repos):
    repos.routes.create(
        name="Route #2", route_code="R2", driver_name=None, driver_phone=None, departure_time=None, return_time=None
    )
    students, _ = _services(repos)

    with pytest.raises(BusAssignmentError, match="Stop does not belong"):
        students.register(full_name="Ava Lee", grade="Grade 5", section="A", route_id=2, stop_id=1)


def test_status_and_search(repos):
    students, _ = _services(repos)

    students.set_status(1, "Inactive")
    assert students.get(1).status == RecordStatus.INACTIVE
    with pytest.raises(ValidationError):
        students.set_status(1, "graduated")

    assert [s.student_code for s in students.list(status="active")] == ["STU0002"]
    assert [s.student_code for s in students.list(query="olivia")] == ["STU0003"]
    assert students.count_active() == 1


def test_qr_png_encodes_student_token(repos):
    students, _ = _services(repos)

    png = students.qr_png(1)

    assert png.startswith(b"\x89PNG")


def test_reassigning_bus_ends_previous_assignment(repos):
    transport = TransportService(repos.routes, repos.stops, repos.assignments)

    new_id = transport.assign_student(student_id=1, route_id=1, stop_id=2)

    assert repos.assignments.rows[1].status == RecordStatus.INACTIVE
    assert transport.active_assignment(1).assignment_id == new_id
    assert [a.student_id for a in transport.route_students(1)] == [1]


def test_route_management(repos):
    transport = TransportService(repos.routes, repos.stops, repos.assignments)

    route_id = transport.create_route(name="Route #2", route_code="r2", departure_time="07:15")
    with pytest.raises(ValidationError, match="already exists"):
        transport.create_route(name="Again", route_code="R2")

    transport.add_stop(route_id, name="Elm Road")
    transport.add_stop(route_id, name="Maple Court")
    assert [s.stop_order for s in transport.list_stops(route_id)] == [1, 2]
    assert transport.count_active_routes() == 2
