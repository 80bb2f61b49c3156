from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Guardian
from .repository import GuardianRepository

_COLUMNS = "guardian_id, student_id, full_name, phone, relationship, email"


def _to_guardian(r: dict) -> Guardian:
    return Guardian(
        guardian_id=int(r["guardian_id"]),
        student_id=int(r["student_id"]),
        full_name=r["full_name"],
        phone=r["phone"],
        relationship=r.get("relationship"),
        email=r.get("email"),
    )


class MySQLGuardianRepository(GuardianRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_by_phone(self, phone: str) -> Sequence[Guardian]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM guardians WHERE phone=%s ORDER BY guardian_id", (phone,))
            return [_to_guardian(r) for r in fetchall(cur)]

    def list_for_student(self, student_id: int) -> Sequence[Guardian]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM guardians WHERE student_id=%s", (int(student_id),))
            return [_to_guardian(r) for r in fetchall(cur)]
