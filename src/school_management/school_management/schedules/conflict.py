from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Union

from ..core.enums import ConflictKind
from .model import NewScheduleEntry, ScheduleEntry

_MESSAGES = {
    ConflictKind.TEACHER: "Teacher already has a class",
    ConflictKind.ROOM: "Room is already booked",
    ConflictKind.CLASS: "Class already has a lesson",
}


@dataclass(frozen=True)
class ScheduleConflict:
    kind: ConflictKind
    existing: ScheduleEntry

    @property
    def message(self) -> str:
        e = self.existing
        return f"{_MESSAGES[self.kind]} on {e.day}, period {e.period_id}, week {e.week_number}"


class ScheduleConflictChecker:
    """Detect double bookings of a teacher, room or class.

    Two entries only collide when they share the same (day, period, week).
    Each collision kind is reported independently; any one blocks the entry.
    """

    def find_conflicts(
        self,
        proposed: Union[NewScheduleEntry, ScheduleEntry],
        existing: Iterable[ScheduleEntry],
        exclude_id: Optional[int] = None,
    ) -> list[ScheduleConflict]:
        conflicts: list[ScheduleConflict] = []
        for entry in existing:
            if exclude_id is not None and entry.schedule_id == exclude_id:
                continue
            if (entry.day, entry.period_id, entry.week_number) != (
                proposed.day,
                proposed.period_id,
                proposed.week_number,
            ):
                continue

            if entry.teacher_id == proposed.teacher_id:
                conflicts.append(ScheduleConflict(ConflictKind.TEACHER, entry))
            if entry.room_id == proposed.room_id:
                conflicts.append(ScheduleConflict(ConflictKind.ROOM, entry))
            if entry.class_id == proposed.class_id:
                conflicts.append(ScheduleConflict(ConflictKind.CLASS, entry))
        return conflicts

    def has_conflict(self, proposed, existing: Iterable[ScheduleEntry], exclude_id: Optional[int] = None) -> bool:
        return bool(self.find_conflicts(proposed, existing, exclude_id=exclude_id))
