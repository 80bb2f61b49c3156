from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional


@dataclass(frozen=True)
class ScheduleEntry:
    """One recurring class session: (day, period, week) plus class, room and teacher."""

    schedule_id: int
    class_id: int
    teacher_id: int
    room_id: int
    period_id: int
    day: str
    week_number: int


@dataclass(frozen=True)
class NewScheduleEntry:
    class_id: int
    teacher_id: int
    room_id: int
    period_id: int
    day: str
    week_number: int


@dataclass(frozen=True)
class ScheduleSlot:
    """Read view of a schedule entry joined with its period, class, room and teacher."""

    schedule_id: int
    day: str
    week_number: int
    period_id: int
    period_number: int
    start_time: time
    end_time: time
    class_id: int
    grade: str
    section: str
    subject: str
    room_id: int
    room_name: str
    teacher_id: int
    teacher_name: Optional[str] = None

    @property
    def class_name(self) -> str:
        name = f"{self.grade} - Section {self.section}"
        return f"{name} ({self.subject})" if self.subject else name
