from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import NewRoom, Room


class RoomRepository(Protocol):
    def list_all(self) -> Sequence[Room]:
        raise NotImplementedError

    def get_by_id(self, room_id: int) -> Optional[Room]:
        raise NotImplementedError

    def get_by_name(self, name: str) -> Optional[Room]:
        raise NotImplementedError

    def create(self, room: NewRoom) -> int:
        raise NotImplementedError

    def create_many(self, rooms: Sequence[NewRoom]) -> int:
        """Insert all rooms in one transaction. Returns number inserted."""

        raise NotImplementedError

    def update(self, room_id: int, room: NewRoom) -> bool:
        raise NotImplementedError

    def delete(self, room_id: int) -> bool:
        raise NotImplementedError
