from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus, AttendanceType


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one successful scan of a student."""

    attendance_id: int
    student_id: int
    attendance_type: AttendanceType
    status: AttendanceStatus
    attendance_date: date
    scanned_at: datetime
    schedule_id: Optional[int] = None
    class_id: Optional[int] = None
    bus_route_id: Optional[int] = None
    recorded_by: Optional[int] = None


@dataclass(frozen=True)
class NewAttendanceRecord:
    student_id: int
    attendance_type: AttendanceType
    status: AttendanceStatus
    attendance_date: date
    scanned_at: datetime
    schedule_id: Optional[int] = None
    class_id: Optional[int] = None
    bus_route_id: Optional[int] = None
    recorded_by: Optional[int] = None


@dataclass(frozen=True)
class AttendanceReportRow:
    """Read-model for reports/exports (record joined with its student)."""

    attendance_id: int
    student_id: int
    student_name: str
    student_code: str
    grade: str
    section: str
    attendance_type: AttendanceType
    status: AttendanceStatus
    attendance_date: date
    scanned_at: datetime
    class_id: Optional[int] = None
    bus_route_id: Optional[int] = None


@dataclass(frozen=True)
class ScanValidation:
    """Outcome of validating a scanned token against a classroom or bus context."""

    valid: bool
    reason: Optional[str] = None
    student_id: Optional[int] = None
    display_name: Optional[str] = None
    student_code: Optional[str] = None
    class_id: Optional[int] = None
    schedule_id: Optional[int] = None
    route_id: Optional[int] = None

    @classmethod
    def reject(cls, reason: str, **context) -> "ScanValidation":
        return cls(valid=False, reason=reason, **context)


@dataclass(frozen=True)
class ScanRecord:
    """One line of the operator's recent-scans log."""

    code: str
    name: Optional[str]
    success: bool
    scanned_at: datetime
    message: str

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "name": self.name,
            "success": self.success,
            "scanned_at": self.scanned_at.isoformat(),
            "message": self.message,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ScanRecord":
        return cls(
            code=str(data.get("code") or ""),
            name=data.get("name"),
            success=bool(data.get("success")),
            scanned_at=datetime.fromisoformat(data["scanned_at"]),
            message=str(data.get("message") or ""),
        )


@dataclass(frozen=True)
class ScanOutcome:
    validation: ScanValidation
    scan: ScanRecord
    record: Optional[AttendanceRecord] = None

    @property
    def success(self) -> bool:
        return self.record is not None


@dataclass(frozen=True)
class DailySummary:
    day: date
    classroom_present: int = 0
    bus_present: int = 0
    students_present: int = 0
    by_class: dict[int, int] = field(default_factory=dict)
