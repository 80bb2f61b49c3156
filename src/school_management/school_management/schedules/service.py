from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, Optional, Sequence

from ..classes.repository import EnrollmentRepository
from ..common.datetime_utils import rotation_week, weekday_name
from ..core.constants import SCHEDULE_WEEKS, SCHOOL_DAYS
from ..core.exceptions import NotFoundError, ScheduleConflictError, ValidationError
from ..rooms.model import Room
from ..rooms.repository import RoomRepository
from .conflict import ScheduleConflictChecker
from .model import NewScheduleEntry, ScheduleEntry, ScheduleSlot
from .repository import ScheduleRepository

logger = logging.getLogger(__name__)


def _normalize_weeks(weeks: Optional[Iterable[int]], apply_to_all_weeks: bool) -> list[int]:
    if apply_to_all_weeks:
        return list(SCHEDULE_WEEKS)

    try:
        picked = sorted({int(w) for w in (weeks or [])})
    except (TypeError, ValueError):
        raise ValidationError("Week must be a whole number")
    if not picked:
        raise ValidationError("Select at least one week")
    for w in picked:
        if w not in SCHEDULE_WEEKS:
            raise ValidationError(f"Week must be between {SCHEDULE_WEEKS[0]} and {SCHEDULE_WEEKS[-1]}")
    return picked


def _check_day(day: str) -> str:
    day = (day or "").strip().capitalize()
    if day not in SCHOOL_DAYS:
        raise ValidationError("Day must be a school day (Monday to Friday)")
    return day


class ScheduleService:
    """Admin timetable management plus the "what is on today" lookups."""

    def __init__(
        self,
        schedules: ScheduleRepository,
        rooms: RoomRepository,
        enrollments: EnrollmentRepository,
        checker: Optional[ScheduleConflictChecker] = None,
    ):
        self._schedules = schedules
        self._rooms = rooms
        self._enrollments = enrollments
        self._checker = checker or ScheduleConflictChecker()

    @staticmethod
    def week_number_for(day: date) -> int:
        return rotation_week(day)

    def list_all(self) -> Sequence[ScheduleEntry]:
        return self._schedules.list_all()

    def get(self, schedule_id: int) -> ScheduleEntry:
        entry = self._schedules.get_by_id(int(schedule_id))
        if not entry:
            raise NotFoundError("Schedule entry not found")
        return entry

    def create(
        self,
        *,
        class_id: int,
        teacher_id: int,
        room_id: int,
        period_id: int,
        day: str,
        weeks: Optional[Iterable[int]] = None,
        apply_to_all_weeks: bool = False,
    ) -> list[int]:
        """Create one entry per selected week.

        Every week is checked before anything is written, so a conflict in one
        week leaves the timetable untouched.
        """

        day = _check_day(day)
        proposed = [
            NewScheduleEntry(
                class_id=int(class_id),
                teacher_id=int(teacher_id),
                room_id=int(room_id),
                period_id=int(period_id),
                day=day,
                week_number=w,
            )
            for w in _normalize_weeks(weeks, apply_to_all_weeks)
        ]

        existing = self._schedules.list_all()
        conflicts = []
        for entry in proposed:
            conflicts.extend(self._checker.find_conflicts(entry, existing))
        if conflicts:
            logger.info("Schedule rejected: %d conflict(s)", len(conflicts))
            raise ScheduleConflictError(conflicts[0].message, conflicts=conflicts)

        ids = self._schedules.create_many(proposed)
        logger.info("Created %d schedule entr%s for class %s", len(ids), "y" if len(ids) == 1 else "ies", class_id)
        return ids

    def update(
        self,
        schedule_id: int,
        *,
        class_id: int,
        teacher_id: int,
        room_id: int,
        period_id: int,
        day: str,
        week_number: int,
    ) -> None:
        self.get(schedule_id)
        entry = NewScheduleEntry(
            class_id=int(class_id),
            teacher_id=int(teacher_id),
            room_id=int(room_id),
            period_id=int(period_id),
            day=_check_day(day),
            week_number=_normalize_weeks([week_number], False)[0],
        )

        conflicts = self._checker.find_conflicts(entry, self._schedules.list_all(), exclude_id=int(schedule_id))
        if conflicts:
            raise ScheduleConflictError(conflicts[0].message, conflicts=conflicts)

        if not self._schedules.update(int(schedule_id), entry):
            raise ValidationError("Failed to update schedule")

    def delete(self, schedule_id: int) -> None:
        if not self._schedules.delete(int(schedule_id)):
            raise NotFoundError("Schedule entry not found")

    def today_for_teacher(self, teacher_id: int, today: date) -> Sequence[ScheduleSlot]:
        day = weekday_name(today)
        if day not in SCHOOL_DAYS:
            return []
        return self._schedules.slots_for_teacher(int(teacher_id), day=day, week_number=rotation_week(today))

    def today_for_room(self, room_id: int, today: date) -> Sequence[ScheduleSlot]:
        day = weekday_name(today)
        if day not in SCHOOL_DAYS:
            return []
        return self._schedules.slots_for_room(int(room_id), day=day, week_number=rotation_week(today))

    def week_for_classes(self, class_ids: Sequence[int], today: date) -> Sequence[ScheduleSlot]:
        return self._schedules.slots_for_classes(list(class_ids), week_number=rotation_week(today))

    def get_slot(self, schedule_id: int) -> ScheduleSlot:
        slot = self._schedules.get_slot(int(schedule_id))
        if not slot:
            raise NotFoundError("Schedule entry not found")
        return slot

    def suggest_rooms(
        self,
        *,
        class_id: int,
        day: str,
        period_id: int,
        weeks: Optional[Iterable[int]] = None,
        apply_to_all_weeks: bool = False,
    ) -> list[Room]:
        """Rooms free in every selected week that can seat the whole class."""

        day = _check_day(day)
        week_list = _normalize_weeks(weeks, apply_to_all_weeks)
        headcount = self._enrollments.count_for_class(int(class_id))

        booked = {
            e.room_id
            for e in self._schedules.list_all()
            if e.day == day and e.period_id == int(period_id) and e.week_number in week_list
        }
        return [r for r in self._rooms.list_all() if r.room_id not in booked and r.fits(headcount)]
