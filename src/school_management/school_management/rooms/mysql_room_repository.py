from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import ChangeAction
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from ..realtime.feed import ChangeFeed
from .model import NewRoom, Room
from .repository import RoomRepository

TABLE = "rooms"


def _to_room(r: dict) -> Room:
    return Room(
        room_id=int(r["room_id"]),
        name=r["name"],
        building=r.get("building"),
        floor=int(r["floor"]) if r.get("floor") is not None else None,
        capacity=int(r["capacity"]) if r.get("capacity") is not None else None,
    )


class MySQLRoomRepository(RoomRepository):
    def __init__(self, conn_factory: DatabaseConnection, feed: ChangeFeed):
        self._conn_factory = conn_factory
        self._feed = feed

    def list_all(self) -> Sequence[Room]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT room_id, name, building, floor, capacity FROM rooms ORDER BY name ASC")
            return [_to_room(r) for r in fetchall(cur)]

    def get_by_id(self, room_id: int) -> Optional[Room]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT room_id, name, building, floor, capacity FROM rooms WHERE room_id=%s",
                (int(room_id),),
            )
            r = fetchone(cur)
            return _to_room(r) if r else None

    def get_by_name(self, name: str) -> Optional[Room]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT room_id, name, building, floor, capacity FROM rooms WHERE name=%s",
                (name,),
            )
            r = fetchone(cur)
            return _to_room(r) if r else None

    def create(self, room: NewRoom) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO rooms(name, building, floor, capacity) VALUES(%s,%s,%s,%s)",
                (room.name, room.building, room.floor, room.capacity),
            )
            room_id = int(cur.lastrowid)
        self._feed.notify(TABLE, ChangeAction.INSERT, room_id)
        return room_id

    def create_many(self, rooms: Sequence[NewRoom]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                "INSERT INTO rooms(name, building, floor, capacity) VALUES(%s,%s,%s,%s)",
                [(r.name, r.building, r.floor, r.capacity) for r in rooms],
            )
        self._feed.notify(TABLE, ChangeAction.INSERT)
        return len(rooms)

    def update(self, room_id: int, room: NewRoom) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE rooms SET name=%s, building=%s, floor=%s, capacity=%s WHERE room_id=%s",
                (room.name, room.building, room.floor, room.capacity, int(room_id)),
            )
            ok = cur.rowcount > 0
        if ok:
            self._feed.notify(TABLE, ChangeAction.UPDATE, int(room_id))
        return ok

    def delete(self, room_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM rooms WHERE room_id=%s", (int(room_id),))
            ok = cur.rowcount > 0
        if ok:
            self._feed.notify(TABLE, ChangeAction.DELETE, int(room_id))
        return ok
