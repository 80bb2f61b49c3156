from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import RecordStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import Student, StudentFilter
from .repository import StudentRepository

# bus_route_id comes from the student's active assignment, if any.
_SELECT = """
    SELECT s.student_id, s.full_name, s.student_code, s.qr_code, s.grade, s.section, s.status,
           s.date_of_birth, s.gender, s.photo_url,
           (SELECT ba.route_id FROM bus_assignments ba
            WHERE ba.student_id = s.student_id AND ba.status = 'active'
            ORDER BY ba.assignment_id DESC LIMIT 1) AS bus_route_id
    FROM students s
"""


def _to_student(r: dict) -> Student:
    return Student(
        student_id=int(r["student_id"]),
        full_name=r["full_name"],
        student_code=r["student_code"],
        qr_code=r["qr_code"],
        grade=r["grade"],
        section=r["section"],
        status=RecordStatus(r.get("status") or RecordStatus.ACTIVE.value),
        bus_route_id=int(r["bus_route_id"]) if r.get("bus_route_id") is not None else None,
        date_of_birth=r.get("date_of_birth"),
        gender=r.get("gender"),
        photo_url=r.get("photo_url"),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _one(self, where: str, params: tuple) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE " + where, params)
            r = fetchone(cur)
            return _to_student(r) if r else None

    def get_by_id(self, student_id: int) -> Optional[Student]:
        return self._one("s.student_id=%s", (int(student_id),))

    def get_by_code(self, student_code: str) -> Optional[Student]:
        return self._one("s.student_code=%s", (student_code,))

    def get_by_token(self, qr_code: str) -> Optional[Student]:
        return self._one("s.qr_code=%s", (qr_code,))

    def get_many(self, student_ids: Sequence[int]) -> Sequence[Student]:
        if not student_ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + f" WHERE s.student_id IN ({in_clause(student_ids)}) ORDER BY s.full_name",
                tuple(int(s) for s in student_ids),
            )
            return [_to_student(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        full_name: str,
        student_code: str,
        qr_code: str,
        grade: str,
        section: str,
        date_of_birth: Optional[date],
        gender: Optional[str],
        photo_url: Optional[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO students(full_name, student_code, qr_code, grade, section,
                                     date_of_birth, gender, photo_url)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (full_name, student_code, qr_code, grade, section, date_of_birth, gender, photo_url),
            )
            return int(cur.lastrowid)

    def update(
        self,
        student_id: int,
        *,
        full_name: str,
        grade: str,
        section: str,
        date_of_birth: Optional[date],
        gender: Optional[str],
        photo_url: Optional[str],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE students
                SET full_name=%s, grade=%s, section=%s, date_of_birth=%s, gender=%s, photo_url=%s
                WHERE student_id=%s
                """,
                (full_name, grade, section, date_of_birth, gender, photo_url, int(student_id)),
            )
            return cur.rowcount > 0

    def set_status(self, student_id: int, status: RecordStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE students SET status=%s WHERE student_id=%s", (status.value, int(student_id)))
            return cur.rowcount > 0

    def search(self, flt: StudentFilter) -> Sequence[Student]:
        where = ["1=1"]
        params: list = []
        if flt.query:
            where.append("(s.full_name LIKE %s OR s.student_code LIKE %s)")
            like = f"%{flt.query}%"
            params.extend([like, like])
        if flt.grade:
            where.append("s.grade=%s")
            params.append(flt.grade)
        if flt.section:
            where.append("s.section=%s")
            params.append(flt.section)
        if flt.status:
            where.append("s.status=%s")
            params.append(flt.status.value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE " + " AND ".join(where) + " ORDER BY s.full_name", tuple(params))
            return [_to_student(r) for r in fetchall(cur)]

    def count_active(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM students WHERE status=%s", (RecordStatus.ACTIVE.value,))
            r = fetchone(cur)
            return int(r["n"]) if r else 0
