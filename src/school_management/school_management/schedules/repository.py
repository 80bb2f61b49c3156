from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import NewScheduleEntry, ScheduleEntry, ScheduleSlot


class ScheduleRepository(Protocol):
    def list_all(self) -> Sequence[ScheduleEntry]:
        raise NotImplementedError

    def get_by_id(self, schedule_id: int) -> Optional[ScheduleEntry]:
        raise NotImplementedError

    def create_many(self, entries: Sequence[NewScheduleEntry]) -> list[int]:
        raise NotImplementedError

    def update(self, schedule_id: int, entry: NewScheduleEntry) -> bool:
        raise NotImplementedError

    def delete(self, schedule_id: int) -> bool:
        raise NotImplementedError

    def slots_for_teacher(self, teacher_id: int, *, day: str, week_number: int) -> Sequence[ScheduleSlot]:
        """Ordered by period number."""

        raise NotImplementedError

    def slots_for_room(self, room_id: int, *, day: str, week_number: int) -> Sequence[ScheduleSlot]:
        raise NotImplementedError

    def slots_for_classes(self, class_ids: Sequence[int], *, week_number: int) -> Sequence[ScheduleSlot]:
        """Whole-week timetable for a set of classes."""

        raise NotImplementedError

    def get_slot(self, schedule_id: int) -> Optional[ScheduleSlot]:
        raise NotImplementedError
