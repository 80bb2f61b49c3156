from __future__ import annotations

from datetime import date

import pytest

from src.school_management.school_management.core.enums import ConflictKind
from src.school_management.school_management.core.exceptions import ScheduleConflictError, ValidationError
from src.school_management.school_management.schedules.conflict import ScheduleConflictChecker
from src.school_management.school_management.schedules.model import NewScheduleEntry, ScheduleEntry
from src.school_management.school_management.schedules.service import ScheduleService

EXISTING = ScheduleEntry(1, class_id=1, teacher_id=2, room_id=1, period_id=1, day="Monday", week_number=2)


def _proposed(**overrides) -> NewScheduleEntry:
    fields = dict(class_id=9, teacher_id=9, room_id=9, period_id=1, day="Monday", week_number=2)
    fields.update(overrides)
    return NewScheduleEntry(**fields)


def test_each_collision_kind_is_detected():
    checker = ScheduleConflictChecker()

    assert [c.kind for c in checker.find_conflicts(_proposed(teacher_id=2), [EXISTING])] == [ConflictKind.TEACHER]
    assert [c.kind for c in checker.find_conflicts(_proposed(room_id=1), [EXISTING])] == [ConflictKind.ROOM]
    assert [c.kind for c in checker.find_conflicts(_proposed(class_id=1), [EXISTING])] == [ConflictKind.CLASS]


def test_all_three_kinds_reported_together():
    conflicts = ScheduleConflictChecker().find_conflicts(_proposed(class_id=1, teacher_id=2, room_id=1), [EXISTING])

    assert {c.kind for c in conflicts} == set(ConflictKind)


def test_different_slot_is_not_a_conflict():
    checker = ScheduleConflictChecker()
    same_everything = dict(class_id=1, teacher_id=2, room_id=1)

    assert not checker.has_conflict(_proposed(week_number=3, **same_everything), [EXISTING])
    assert not checker.has_conflict(_proposed(period_id=2, **same_everything), [EXISTING])
    assert not checker.has_conflict(_proposed(day="Tuesday", **same_everything), [EXISTING])


def test_editing_an_entry_ignores_itself():
    checker = ScheduleConflictChecker()

    assert checker.has_conflict(EXISTING, [EXISTING])
    assert not checker.has_conflict(EXISTING, [EXISTING], exclude_id=1)


def test_conflict_message_names_the_slot():
    (conflict,) = ScheduleConflictChecker().find_conflicts(_proposed(room_id=1), [EXISTING])

    assert conflict.message == "Room is already booked on Monday, period 1, week 2"


def _service(repos) -> ScheduleService:
    return ScheduleService(repos.schedules, repos.rooms, repos.enrollments)


def test_create_for_every_week(repos):
    ids = _service(repos).create(
        class_id=2, teacher_id=2, room_id=2, period_id=2, day="monday", apply_to_all_weeks=True
    )

    assert len(ids) == 4
    weeks = sorted(repos.schedules.get_by_id(i).week_number for i in ids)
    assert weeks == [1, 2, 3, 4]
    assert repos.schedules.get_by_id(ids[0]).day == "Monday"


def test_conflict_in_one_week_writes_nothing(repos):
    before = len(repos.schedules.rows)

    with pytest.raises(ScheduleConflictError) as exc:
        _service(repos).create(class_id=2, teacher_id=1, room_id=1, period_id=1, day="Monday", weeks=[1, 2, 3])

    assert len(repos.schedules.rows) == before
    assert [c.kind for c in exc.value.conflicts] == [ConflictKind.ROOM]
    assert exc.value.conflicts[0].existing.week_number == 2


def test_create_rejects_bad_input(repos):
    svc = _service(repos)

    with pytest.raises(ValidationError, match="at least one week"):
        svc.create(class_id=2, teacher_id=2, room_id=2, period_id=2, day="Monday", weeks=[])
    with pytest.raises(ValidationError, match="between 1 and 4"):
        svc.create(class_id=2, teacher_id=2, room_id=2, period_id=2, day="Monday", weeks=[5])
    with pytest.raises(ValidationError, match="school day"):
        svc.create(class_id=2, teacher_id=2, room_id=2, period_id=2, day="Saturday", weeks=[1])


def test_update_moves_entry_without_clashing_with_itself(repos):
    svc = _service(repos)

    svc.update(1, class_id=1, teacher_id=2, room_id=2, period_id=1, day="Monday", week_number=2)

    assert repos.schedules.get_by_id(1).room_id == 2


def test_today_lookups_follow_rotation(repos):
    svc = _service(repos)
    monday_week2 = date(2024, 3, 4)
    monday_week3 = date(2024, 3, 11)
    saturday = date(2024, 3, 9)

    assert ScheduleService.week_number_for(monday_week2) == 2
    assert [s.schedule_id for s in svc.today_for_teacher(2, monday_week2)] == [1]
    assert svc.today_for_teacher(2, monday_week3) == []
    assert svc.today_for_room(1, saturday) == []

    slot = svc.today_for_room(1, monday_week2)[0]
    assert slot.class_name == "Grade 5 - Section A (Mathematics)"
    assert slot.teacher_name == "Sarah Johnson"


def test_suggest_rooms_skips_booked_and_small_rooms(repos):
    svc = _service(repos)

    # Room 101 is taken on Monday period 1 in week 2; Lab A seats one student.
    assert svc.suggest_rooms(class_id=1, day="Monday", period_id=1, weeks=[2]) == []
    assert [r.name for r in svc.suggest_rooms(class_id=1, day="Monday", period_id=1, weeks=[1])] == ["Room 101"]
    assert [r.name for r in svc.suggest_rooms(class_id=2, day="Monday", period_id=1, weeks=[2])] == ["Lab A"]
