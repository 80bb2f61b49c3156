from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Notification
from .repository import NotificationRepository


def _to_notification(r: dict) -> Notification:
    return Notification(
        notification_id=int(r["notification_id"]),
        title=r["title"],
        message=r["message"],
        category=r.get("category") or "general",
        is_read=bool(r.get("is_read")),
        created_at=r["created_at"],
    )


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_recent(self, *, unread_only: bool = False, limit: int = 50) -> Sequence[Notification]:
        sql = "SELECT notification_id, title, message, category, is_read, created_at FROM notifications"
        if unread_only:
            sql += " WHERE is_read=0"
        sql += " ORDER BY created_at DESC, notification_id DESC LIMIT %s"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, (int(limit),))
            return [_to_notification(r) for r in fetchall(cur)]

    def create(self, *, title: str, message: str, category: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO notifications(title, message, category) VALUES(%s,%s,%s)",
                (title, message, category),
            )
            return int(cur.lastrowid)

    def mark_read(self, notification_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE notifications SET is_read=1 WHERE notification_id=%s", (int(notification_id),))
            return cur.rowcount > 0

    def mark_all_read(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE notifications SET is_read=1 WHERE is_read=0")
            return int(cur.rowcount)

    def count_unread(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM notifications WHERE is_read=0")
            r = fetchone(cur)
            return int(r["n"]) if r else 0
