from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..attendance.service import AttendanceService
from ..core.enums import AttendanceType
from ..core.exceptions import ValidationError
from ..students.repository import StudentRepository
from ..teachers.repository import TeacherRepository
from ..transport.repository import BusRouteRepository

REPORT_COLUMNS = (
    "attendance_date",
    "scanned_at",
    "student_code",
    "student_name",
    "grade",
    "section",
    "attendance_type",
    "status",
)


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: list[dict]


class ReportService:
    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def build_attendance_report(
        self,
        *,
        start: date,
        end: date,
        attendance_type: Optional[AttendanceType] = None,
    ) -> ReportData:
        if end < start:
            raise ValidationError("End date must not be before start date")

        query_rows = self._attendance.get_report_rows(start_date=start, end_date=end, attendance_type=attendance_type)

        out_rows: list[dict] = []
        per_day: dict[date, dict[AttendanceType, set[int]]] = {}
        for r in query_rows:
            out_rows.append(
                {
                    "attendance_date": r.attendance_date.strftime("%Y-%m-%d"),
                    "scanned_at": r.scanned_at.strftime("%H:%M:%S"),
                    "student_code": r.student_code,
                    "student_name": r.student_name,
                    "grade": r.grade,
                    "section": r.section,
                    "attendance_type": r.attendance_type.value,
                    "status": r.status.value,
                }
            )
            day = per_day.setdefault(r.attendance_date, {t: set() for t in AttendanceType})
            day[r.attendance_type].add(r.student_id)

        summary = [
            {
                "date": d.strftime("%Y-%m-%d"),
                "classroom_present": len(by_type[AttendanceType.CLASSROOM]),
                "bus_present": len(by_type[AttendanceType.BUS]),
            }
            for d, by_type in sorted(per_day.items(), reverse=True)
        ]
        return ReportData(rows=out_rows, summary=summary)


@dataclass(frozen=True)
class DashboardStats:
    active_students: int
    active_teachers: int
    active_routes: int
    classroom_present: int
    bus_present: int
    attendance_percentage: int


class DashboardService:
    def __init__(
        self,
        students: StudentRepository,
        teachers: TeacherRepository,
        routes: BusRouteRepository,
        attendance: AttendanceService,
    ):
        self._students = students
        self._teachers = teachers
        self._routes = routes
        self._attendance = attendance

    def stats(self, today: date) -> DashboardStats:
        active_students = self._students.count_active()
        summary = self._attendance.daily_summary(today)
        percentage = int(summary.students_present * 100 / active_students + 0.5) if active_students else 0
        return DashboardStats(
            active_students=active_students,
            active_teachers=self._teachers.count_active(),
            active_routes=self._routes.count_active(),
            classroom_present=summary.classroom_present,
            bus_present=summary.bus_present,
            attendance_percentage=min(percentage, 100),
        )
