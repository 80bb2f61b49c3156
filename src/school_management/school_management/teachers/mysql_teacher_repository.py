from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Teacher
from .repository import TeacherRepository

_COLUMNS = "teacher_id, full_name, username, password_hash, role, email, phone, subject, is_active"


def _to_teacher(r: dict) -> Teacher:
    return Teacher(
        teacher_id=int(r["teacher_id"]),
        full_name=r["full_name"],
        username=r["username"],
        password_hash=r["password_hash"],
        role=Role(r["role"]),
        email=r.get("email"),
        phone=r.get("phone"),
        subject=r.get("subject"),
        is_active=bool(r.get("is_active", 1)),
    )


class MySQLTeacherRepository(TeacherRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, teacher_id: int) -> Optional[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM teachers WHERE teacher_id=%s", (int(teacher_id),))
            r = fetchone(cur)
            return _to_teacher(r) if r else None

    def get_by_username(self, username: str) -> Optional[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM teachers WHERE username=%s", (username,))
            r = fetchone(cur)
            return _to_teacher(r) if r else None

    def create(
        self,
        *,
        full_name: str,
        username: str,
        password_hash: str,
        role: Role,
        email: Optional[str],
        phone: Optional[str],
        subject: Optional[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO teachers(full_name, username, password_hash, role, email, phone, subject)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (full_name, username, password_hash, role.value, email, phone, subject),
            )
            return int(cur.lastrowid)

    def set_active(self, teacher_id: int, *, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE teachers SET is_active=%s WHERE teacher_id=%s",
                (1 if is_active else 0, int(teacher_id)),
            )
            return cur.rowcount > 0

    def list_all(self) -> Sequence[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM teachers ORDER BY full_name ASC")
            return [_to_teacher(r) for r in fetchall(cur)]

    def count_active(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM teachers WHERE is_active=1 AND role=%s", (Role.TEACHER.value,))
            r = fetchone(cur)
            return int(r["n"]) if r else 0
