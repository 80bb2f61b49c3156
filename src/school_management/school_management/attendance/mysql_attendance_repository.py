from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus, AttendanceType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import AttendanceRecord, AttendanceReportRow, NewAttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = (
    "attendance_id, student_id, attendance_type, status, attendance_date, scanned_at, "
    "schedule_id, class_id, bus_route_id, recorded_by"
)


def _opt_int(value) -> Optional[int]:
    return int(value) if value is not None else None


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        student_id=int(r["student_id"]),
        attendance_type=AttendanceType(r["attendance_type"]),
        status=AttendanceStatus(r["status"]),
        attendance_date=r["attendance_date"],
        scanned_at=r["scanned_at"],
        schedule_id=_opt_int(r.get("schedule_id")),
        class_id=_opt_int(r.get("class_id")),
        bus_route_id=_opt_int(r.get("bus_route_id")),
        recorded_by=_opt_int(r.get("recorded_by")),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, record: NewAttendanceRecord) -> AttendanceRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(student_id, attendance_type, status, attendance_date, scanned_at,
                                               schedule_id, class_id, bus_route_id, recorded_by)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    record.student_id,
                    record.attendance_type.value,
                    record.status.value,
                    record.attendance_date,
                    record.scanned_at,
                    record.schedule_id,
                    record.class_id,
                    record.bus_route_id,
                    record.recorded_by,
                ),
            )
            attendance_id = int(cur.lastrowid)

        return AttendanceRecord(
            attendance_id=attendance_id,
            student_id=record.student_id,
            attendance_type=record.attendance_type,
            status=record.status,
            attendance_date=record.attendance_date,
            scanned_at=record.scanned_at,
            schedule_id=record.schedule_id,
            class_id=record.class_id,
            bus_route_id=record.bus_route_id,
            recorded_by=record.recorded_by,
        )

    def list_for_student(self, student_id: int, *, since: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM attendance_records
                WHERE student_id=%s AND attendance_date >= %s
                ORDER BY scanned_at DESC
                """,
                (int(student_id), since),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_date(self, day: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_date=%s ORDER BY scanned_at",
                (day,),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def get_report_rows(
        self,
        *,
        start_date: date,
        end_date: date,
        attendance_type: Optional[AttendanceType] = None,
    ) -> Sequence[AttendanceReportRow]:
        sql = """
            SELECT a.attendance_id, a.student_id, s.full_name AS student_name, s.student_code,
                   s.grade, s.section, a.attendance_type, a.status, a.attendance_date, a.scanned_at,
                   a.class_id, a.bus_route_id
            FROM attendance_records a
            JOIN students s ON s.student_id = a.student_id
            WHERE a.attendance_date BETWEEN %s AND %s
        """
        params: list = [start_date, end_date]
        if attendance_type is not None:
            sql += " AND a.attendance_type=%s"
            params.append(attendance_type.value)
        sql += " ORDER BY a.attendance_date DESC, a.scanned_at DESC"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [
                AttendanceReportRow(
                    attendance_id=int(r["attendance_id"]),
                    student_id=int(r["student_id"]),
                    student_name=r["student_name"],
                    student_code=r["student_code"],
                    grade=r["grade"],
                    section=r["section"],
                    attendance_type=AttendanceType(r["attendance_type"]),
                    status=AttendanceStatus(r["status"]),
                    attendance_date=r["attendance_date"],
                    scanned_at=r["scanned_at"],
                    class_id=_opt_int(r.get("class_id")),
                    bus_route_id=_opt_int(r.get("bus_route_id")),
                )
                for r in fetchall(cur)
            ]
