from __future__ import annotations

from datetime import time
from typing import Optional, Sequence

from ..core.enums import RecordStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import BusAssignment, BusRoute, BusStop
from .repository import BusAssignmentRepository, BusRouteRepository, BusStopRepository

_ROUTE_COLUMNS = "route_id, name, route_code, driver_name, driver_phone, departure_time, return_time, status"
_STOP_COLUMNS = "stop_id, route_id, name, location, arrival_time, stop_order"
_ASSIGNMENT_COLUMNS = "assignment_id, student_id, route_id, stop_id, status"


def _to_route(r: dict) -> BusRoute:
    return BusRoute(
        route_id=int(r["route_id"]),
        name=r["name"],
        route_code=r["route_code"],
        driver_name=r.get("driver_name"),
        driver_phone=r.get("driver_phone"),
        departure_time=normalize_mysql_time(r.get("departure_time")),
        return_time=normalize_mysql_time(r.get("return_time")),
        status=RecordStatus(r.get("status") or RecordStatus.ACTIVE.value),
    )


def _to_stop(r: dict) -> BusStop:
    return BusStop(
        stop_id=int(r["stop_id"]),
        route_id=int(r["route_id"]),
        name=r["name"],
        location=r.get("location"),
        arrival_time=normalize_mysql_time(r.get("arrival_time")),
        stop_order=int(r.get("stop_order") or 1),
    )


def _to_assignment(r: dict) -> BusAssignment:
    return BusAssignment(
        assignment_id=int(r["assignment_id"]),
        student_id=int(r["student_id"]),
        route_id=int(r["route_id"]),
        stop_id=int(r["stop_id"]) if r.get("stop_id") is not None else None,
        status=RecordStatus(r.get("status") or RecordStatus.ACTIVE.value),
    )


class MySQLBusRouteRepository(BusRouteRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self, *, active_only: bool = False) -> Sequence[BusRoute]:
        sql = f"SELECT {_ROUTE_COLUMNS} FROM bus_routes"
        params: tuple = ()
        if active_only:
            sql += " WHERE status=%s"
            params = (RecordStatus.ACTIVE.value,)
        sql += " ORDER BY route_code"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return [_to_route(r) for r in fetchall(cur)]

    def get_by_id(self, route_id: int) -> Optional[BusRoute]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_ROUTE_COLUMNS} FROM bus_routes WHERE route_id=%s", (int(route_id),))
            r = fetchone(cur)
            return _to_route(r) if r else None

    def get_by_code(self, route_code: str) -> Optional[BusRoute]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_ROUTE_COLUMNS} FROM bus_routes WHERE route_code=%s", (route_code,))
            r = fetchone(cur)
            return _to_route(r) if r else None

    def create(
        self,
        *,
        name: str,
        route_code: str,
        driver_name: Optional[str],
        driver_phone: Optional[str],
        departure_time: Optional[time],
        return_time: Optional[time],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO bus_routes(name, route_code, driver_name, driver_phone, departure_time, return_time)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (name, route_code, driver_name, driver_phone, departure_time, return_time),
            )
            return int(cur.lastrowid)

    def count_active(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM bus_routes WHERE status=%s", (RecordStatus.ACTIVE.value,))
            r = fetchone(cur)
            return int(r["n"]) if r else 0


class MySQLBusStopRepository(BusStopRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_route(self, route_id: int) -> Sequence[BusStop]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_STOP_COLUMNS} FROM bus_stops WHERE route_id=%s ORDER BY stop_order",
                (int(route_id),),
            )
            return [_to_stop(r) for r in fetchall(cur)]

    def get_by_id(self, stop_id: int) -> Optional[BusStop]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_STOP_COLUMNS} FROM bus_stops WHERE stop_id=%s", (int(stop_id),))
            r = fetchone(cur)
            return _to_stop(r) if r else None

    def create(
        self,
        *,
        route_id: int,
        name: str,
        location: Optional[str],
        arrival_time: Optional[time],
        stop_order: int,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO bus_stops(route_id, name, location, arrival_time, stop_order)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(route_id), name, location, arrival_time, int(stop_order)),
            )
            return int(cur.lastrowid)


class MySQLBusAssignmentRepository(BusAssignmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_active_for_student(self, student_id: int) -> Optional[BusAssignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_ASSIGNMENT_COLUMNS} FROM bus_assignments
                WHERE student_id=%s AND status=%s
                ORDER BY assignment_id DESC LIMIT 1
                """,
                (int(student_id), RecordStatus.ACTIVE.value),
            )
            r = fetchone(cur)
            return _to_assignment(r) if r else None

    def has_active(self, *, student_id: int, route_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT 1 AS ok FROM bus_assignments WHERE student_id=%s AND route_id=%s AND status=%s LIMIT 1",
                (int(student_id), int(route_id), RecordStatus.ACTIVE.value),
            )
            return fetchone(cur) is not None

    def create(self, *, student_id: int, route_id: int, stop_id: Optional[int]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO bus_assignments(student_id, route_id, stop_id) VALUES(%s,%s,%s)",
                (int(student_id), int(route_id), stop_id),
            )
            return int(cur.lastrowid)

    def end(self, assignment_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE bus_assignments SET status=%s WHERE assignment_id=%s",
                (RecordStatus.INACTIVE.value, int(assignment_id)),
            )
            return cur.rowcount > 0

    def list_active_for_route(self, route_id: int) -> Sequence[BusAssignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_ASSIGNMENT_COLUMNS} FROM bus_assignments WHERE route_id=%s AND status=%s",
                (int(route_id), RecordStatus.ACTIVE.value),
            )
            return [_to_assignment(r) for r in fetchall(cur)]
