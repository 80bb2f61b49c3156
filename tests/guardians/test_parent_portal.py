from __future__ import annotations

import pytest

from src.school_management.school_management.attendance.scan_log import RecentScansLog
from src.school_management.school_management.core.exceptions import NotFoundError
from src.school_management.school_management.guardians.model import AttendanceStats


def test_rates_round_half_up_and_handle_no_records():
    assert AttendanceStats().classroom_rate == 0
    assert AttendanceStats(classroom_total=8, classroom_present=5).classroom_rate == 63
    assert AttendanceStats(bus_total=3, bus_present=2).bus_rate == 67
    assert AttendanceStats(bus_total=2, bus_present=2).bus_rate == 100


def test_children_by_guardian_phone(container):
    portal = container.parent_portal_service

    assert [s.full_name for s in portal.children("555-0199")] == ["Emma Thompson"]
    assert portal.children("555-0000") == []


def test_student_overview(container, fixed_now):
    log = RecentScansLog()
    container.attendance_service.scan_classroom("STUDENT:STU0001", 1, actor_id=2, log=log, now=fixed_now)
    container.attendance_service.scan_bus("STUDENT:STU0001", 1, actor_id=None, log=log, now=fixed_now)

    overview = container.parent_portal_service.student_overview(1, today=fixed_now.date())

    assert overview.student.student_code == "STU0001"
    assert [s.schedule_id for s in overview.schedule] == [1]
    assert len(overview.attendance) == 2
    assert overview.stats.classroom_rate == 100
    assert overview.stats.bus_rate == 100
    assert overview.bus.route.route_code == "R1"
    assert overview.bus.stop.name == "Oak Street"


def test_overview_without_bus_or_classes(container, fixed_now):
    overview = container.parent_portal_service.student_overview(3, today=fixed_now.date())

    assert overview.bus is None
    assert overview.stats == AttendanceStats()

    with pytest.raises(NotFoundError):
        container.parent_portal_service.student_overview(99, today=fixed_now.date())
