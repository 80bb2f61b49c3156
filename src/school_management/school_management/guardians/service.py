from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..attendance.service import AttendanceService
from ..classes.repository import EnrollmentRepository
from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_HISTORY_DAYS
from ..core.enums import AttendanceStatus, AttendanceType
from ..core.exceptions import NotFoundError
from ..schedules.service import ScheduleService
from ..students.model import Student
from ..students.repository import StudentRepository
from ..transport.repository import BusStopRepository
from ..transport.service import TransportService
from .model import AttendanceStats, BusInfo, StudentOverview
from .repository import GuardianRepository


class ParentPortalService:
    """Read-only views for guardians: their children and each child's week."""

    def __init__(
        self,
        guardians: GuardianRepository,
        students: StudentRepository,
        enrollments: EnrollmentRepository,
        schedules: ScheduleService,
        attendance: AttendanceService,
        transport: TransportService,
        stops: BusStopRepository,
    ):
        self._guardians = guardians
        self._students = students
        self._enrollments = enrollments
        self._schedules = schedules
        self._attendance = attendance
        self._transport = transport
        self._stops = stops

    def children(self, phone: str) -> Sequence[Student]:
        phone = require_non_empty(phone, "Guardian phone")
        ids = sorted({g.student_id for g in self._guardians.list_by_phone(phone)})
        return self._students.get_many(ids)

    def _bus_info(self, student_id: int) -> Optional[BusInfo]:
        assignment = self._transport.active_assignment(student_id)
        if not assignment:
            return None
        route = self._transport.get_route(assignment.route_id)
        stop = self._stops.get_by_id(assignment.stop_id) if assignment.stop_id is not None else None
        return BusInfo(assignment=assignment, route=route, stop=stop)

    def student_overview(self, student_id: int, *, today: date) -> StudentOverview:
        student = self._students.get_by_id(int(student_id))
        if not student:
            raise NotFoundError("Student not found")

        class_ids = self._enrollments.class_ids_for_student(student.student_id)
        schedule = self._schedules.week_for_classes(class_ids, today) if class_ids else []
        records = self._attendance.student_history(student.student_id, days=DEFAULT_HISTORY_DAYS, today=today)

        classroom = [r for r in records if r.attendance_type == AttendanceType.CLASSROOM]
        bus = [r for r in records if r.attendance_type == AttendanceType.BUS]
        stats = AttendanceStats(
            classroom_total=len(classroom),
            classroom_present=sum(1 for r in classroom if r.status == AttendanceStatus.PRESENT),
            bus_total=len(bus),
            bus_present=sum(1 for r in bus if r.status == AttendanceStatus.PRESENT),
        )

        return StudentOverview(
            student=student,
            schedule=schedule,
            attendance=records,
            stats=stats,
            bus=self._bus_info(student.student_id),
        )
