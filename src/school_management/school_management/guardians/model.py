from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..schedules.model import ScheduleSlot
from ..students.model import Student
from ..transport.model import BusAssignment, BusRoute, BusStop


@dataclass(frozen=True)
class Guardian:
    guardian_id: int
    student_id: int
    full_name: str
    phone: str
    relationship: Optional[str] = None
    email: Optional[str] = None


def _rate(present: int, total: int) -> int:
    # Percent rounded half up; 0 when nothing was recorded.
    if total <= 0:
        return 0
    return int(present * 100 / total + 0.5)


@dataclass(frozen=True)
class AttendanceStats:
    classroom_total: int = 0
    classroom_present: int = 0
    bus_total: int = 0
    bus_present: int = 0

    @property
    def classroom_rate(self) -> int:
        return _rate(self.classroom_present, self.classroom_total)

    @property
    def bus_rate(self) -> int:
        return _rate(self.bus_present, self.bus_total)


@dataclass(frozen=True)
class BusInfo:
    assignment: BusAssignment
    route: BusRoute
    stop: Optional[BusStop] = None


@dataclass(frozen=True)
class StudentOverview:
    student: Student
    schedule: Sequence[ScheduleSlot]
    attendance: Sequence[AttendanceRecord]
    stats: AttendanceStats
    bus: Optional[BusInfo] = None
