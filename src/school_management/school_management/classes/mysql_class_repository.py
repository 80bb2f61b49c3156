from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import SchoolClass
from .repository import ClassRepository, EnrollmentRepository

_COLUMNS = "class_id, grade, section, subject, room_number"


def _to_class(r: dict) -> SchoolClass:
    return SchoolClass(
        class_id=int(r["class_id"]),
        grade=r["grade"],
        section=r["section"],
        subject=r.get("subject") or "",
        room_number=r.get("room_number") or "",
    )


class MySQLClassRepository(ClassRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[SchoolClass]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM classes ORDER BY grade, section, subject")
            return [_to_class(r) for r in fetchall(cur)]

    def get_by_id(self, class_id: int) -> Optional[SchoolClass]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM classes WHERE class_id=%s", (int(class_id),))
            r = fetchone(cur)
            return _to_class(r) if r else None

    def get_many(self, class_ids: Sequence[int]) -> Sequence[SchoolClass]:
        if not class_ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM classes WHERE class_id IN ({in_clause(class_ids)})",
                tuple(int(c) for c in class_ids),
            )
            return [_to_class(r) for r in fetchall(cur)]

    def create(self, *, grade: str, section: str, subject: str, room_number: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO classes(grade, section, subject, room_number) VALUES(%s,%s,%s,%s)",
                (grade, section, subject, room_number),
            )
            return int(cur.lastrowid)

    def update_fields(self, class_id: int, *, subject: str, room_number: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE classes SET subject=%s, room_number=%s WHERE class_id=%s",
                (subject, room_number, int(class_id)),
            )
            return cur.rowcount > 0

    def list_incomplete(self) -> Sequence[SchoolClass]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM classes
                WHERE TRIM(COALESCE(subject, ''))='' OR TRIM(COALESCE(room_number, ''))=''
                ORDER BY class_id
                """
            )
            return [_to_class(r) for r in fetchall(cur)]


class MySQLEnrollmentRepository(EnrollmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def is_enrolled(self, *, student_id: int, class_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT 1 AS ok FROM class_enrollments WHERE student_id=%s AND class_id=%s",
                (int(student_id), int(class_id)),
            )
            return fetchone(cur) is not None

    def enroll(self, *, student_id: int, class_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT IGNORE INTO class_enrollments(student_id, class_id) VALUES(%s,%s)",
                (int(student_id), int(class_id)),
            )
            return cur.rowcount > 0

    def unenroll(self, *, student_id: int, class_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM class_enrollments WHERE student_id=%s AND class_id=%s",
                (int(student_id), int(class_id)),
            )
            return cur.rowcount > 0

    def count_for_class(self, class_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM class_enrollments WHERE class_id=%s", (int(class_id),))
            r = fetchone(cur)
            return int(r["n"]) if r else 0

    def class_ids_for_student(self, student_id: int) -> Sequence[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT class_id FROM class_enrollments WHERE student_id=%s", (int(student_id),))
            return [int(r["class_id"]) for r in fetchall(cur)]

    def student_ids_for_class(self, class_id: int) -> Sequence[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT student_id FROM class_enrollments WHERE class_id=%s", (int(class_id),))
            return [int(r["student_id"]) for r in fetchall(cur)]
