from __future__ import annotations

from datetime import time
from typing import Optional, Sequence

from ..core.enums import ChangeAction
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from ..realtime.feed import ChangeFeed
from .model import Period
from .repository import PeriodRepository

TABLE = "periods"


def _to_period(r: dict) -> Period:
    return Period(
        period_id=int(r["period_id"]),
        period_number=int(r["period_number"]),
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r["end_time"]),
    )


class MySQLPeriodRepository(PeriodRepository):
    def __init__(self, conn_factory: DatabaseConnection, feed: ChangeFeed):
        self._conn_factory = conn_factory
        self._feed = feed

    def list_all(self) -> Sequence[Period]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT period_id, period_number, start_time, end_time
                FROM periods
                ORDER BY period_number ASC
                """
            )
            return [_to_period(r) for r in fetchall(cur)]

    def get_by_id(self, period_id: int) -> Optional[Period]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT period_id, period_number, start_time, end_time FROM periods WHERE period_id=%s",
                (int(period_id),),
            )
            r = fetchone(cur)
            return _to_period(r) if r else None

    def upsert(self, *, period_number: int, start_time: time, end_time: time) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO periods(period_number, start_time, end_time)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE start_time=VALUES(start_time), end_time=VALUES(end_time)
                """,
                (int(period_number), start_time, end_time),
            )

            # If it was an update, lastrowid can be 0; fetch period_id.
            if cur.lastrowid:
                period_id = int(cur.lastrowid)
            else:
                cur.execute("SELECT period_id FROM periods WHERE period_number=%s", (int(period_number),))
                r = fetchone(cur)
                period_id = int(r["period_id"]) if r else 0

        self._feed.notify(TABLE, ChangeAction.UPDATE, period_id)
        return period_id

    def delete(self, period_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM periods WHERE period_id=%s", (int(period_id),))
            ok = cur.rowcount > 0
        if ok:
            self._feed.notify(TABLE, ChangeAction.DELETE, int(period_id))
        return ok
