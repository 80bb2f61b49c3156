from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause, normalize_mysql_time
from .model import NewScheduleEntry, ScheduleEntry, ScheduleSlot
from .repository import ScheduleRepository

_ENTRY_COLUMNS = "schedule_id, class_id, teacher_id, room_id, period_id, day, week_number"

_SLOT_SELECT = """
    SELECT cs.schedule_id, cs.day, cs.week_number,
           p.period_id, p.period_number, p.start_time, p.end_time,
           c.class_id, c.grade, c.section, c.subject,
           r.room_id, r.name AS room_name,
           t.teacher_id, t.full_name AS teacher_name
    FROM class_schedules cs
    JOIN periods p ON p.period_id = cs.period_id
    JOIN classes c ON c.class_id = cs.class_id
    JOIN rooms r ON r.room_id = cs.room_id
    LEFT JOIN teachers t ON t.teacher_id = cs.teacher_id
"""


def _to_entry(r: dict) -> ScheduleEntry:
    return ScheduleEntry(
        schedule_id=int(r["schedule_id"]),
        class_id=int(r["class_id"]),
        teacher_id=int(r["teacher_id"]),
        room_id=int(r["room_id"]),
        period_id=int(r["period_id"]),
        day=r["day"],
        week_number=int(r["week_number"]),
    )


def _to_slot(r: dict) -> ScheduleSlot:
    return ScheduleSlot(
        schedule_id=int(r["schedule_id"]),
        day=r["day"],
        week_number=int(r["week_number"]),
        period_id=int(r["period_id"]),
        period_number=int(r["period_number"]),
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r["end_time"]),
        class_id=int(r["class_id"]),
        grade=r["grade"],
        section=r["section"],
        subject=r.get("subject") or "",
        room_id=int(r["room_id"]),
        room_name=r["room_name"],
        teacher_id=int(r["teacher_id"]),
        teacher_name=r.get("teacher_name"),
    )


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[ScheduleEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_ENTRY_COLUMNS} FROM class_schedules ORDER BY week_number, day, period_id")
            return [_to_entry(r) for r in fetchall(cur)]

    def get_by_id(self, schedule_id: int) -> Optional[ScheduleEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_ENTRY_COLUMNS} FROM class_schedules WHERE schedule_id=%s", (int(schedule_id),))
            r = fetchone(cur)
            return _to_entry(r) if r else None

    def create_many(self, entries: Sequence[NewScheduleEntry]) -> list[int]:
        ids: list[int] = []
        with db_cursor(self._conn_factory) as (_, cur):
            for e in entries:
                cur.execute(
                    """
                    INSERT INTO class_schedules(class_id, teacher_id, room_id, period_id, day, week_number)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    """,
                    (e.class_id, e.teacher_id, e.room_id, e.period_id, e.day, e.week_number),
                )
                ids.append(int(cur.lastrowid))
        return ids

    def update(self, schedule_id: int, entry: NewScheduleEntry) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE class_schedules
                SET class_id=%s, teacher_id=%s, room_id=%s, period_id=%s, day=%s, week_number=%s
                WHERE schedule_id=%s
                """,
                (
                    entry.class_id,
                    entry.teacher_id,
                    entry.room_id,
                    entry.period_id,
                    entry.day,
                    entry.week_number,
                    int(schedule_id),
                ),
            )
            return cur.rowcount > 0

    def delete(self, schedule_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM class_schedules WHERE schedule_id=%s", (int(schedule_id),))
            return cur.rowcount > 0

    def slots_for_teacher(self, teacher_id: int, *, day: str, week_number: int) -> Sequence[ScheduleSlot]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SLOT_SELECT
                + " WHERE cs.teacher_id=%s AND cs.day=%s AND cs.week_number=%s ORDER BY p.period_number",
                (int(teacher_id), day, int(week_number)),
            )
            return [_to_slot(r) for r in fetchall(cur)]

    def slots_for_room(self, room_id: int, *, day: str, week_number: int) -> Sequence[ScheduleSlot]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SLOT_SELECT + " WHERE cs.room_id=%s AND cs.day=%s AND cs.week_number=%s ORDER BY p.period_number",
                (int(room_id), day, int(week_number)),
            )
            return [_to_slot(r) for r in fetchall(cur)]

    def slots_for_classes(self, class_ids: Sequence[int], *, week_number: int) -> Sequence[ScheduleSlot]:
        if not class_ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SLOT_SELECT
                + f"""
                WHERE cs.class_id IN ({in_clause(class_ids)}) AND cs.week_number=%s
                ORDER BY FIELD(cs.day, 'Monday','Tuesday','Wednesday','Thursday','Friday'), p.period_number
                """,
                (*[int(c) for c in class_ids], int(week_number)),
            )
            return [_to_slot(r) for r in fetchall(cur)]

    def get_slot(self, schedule_id: int) -> Optional[ScheduleSlot]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SLOT_SELECT + " WHERE cs.schedule_id=%s", (int(schedule_id),))
            r = fetchone(cur)
            return _to_slot(r) if r else None
