from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceType
from .model import AttendanceRecord, AttendanceReportRow, NewAttendanceRecord


class AttendanceRepository(Protocol):
    def create(self, record: NewAttendanceRecord) -> AttendanceRecord:
        raise NotImplementedError

    def list_for_student(self, student_id: int, *, since: date) -> Sequence[AttendanceRecord]:
        """Most recent first."""

        raise NotImplementedError

    def list_for_date(self, day: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def get_report_rows(
        self,
        *,
        start_date: date,
        end_date: date,
        attendance_type: Optional[AttendanceType] = None,
    ) -> Sequence[AttendanceReportRow]:
        raise NotImplementedError
