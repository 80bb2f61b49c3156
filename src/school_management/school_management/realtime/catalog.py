from __future__ import annotations

from ..periods.model import Period
from ..periods.repository import PeriodRepository
from ..rooms.model import Room
from ..rooms.repository import RoomRepository
from .feed import ChangeFeed
from .live_table import LiveTable


class ScheduleCatalog:
    """Live room and period lists backing the scheduling screens.

    open() subscribes both tables; close() releases the subscriptions.
    """

    def __init__(self, feed: ChangeFeed, rooms: RoomRepository, periods: PeriodRepository):
        self._rooms: LiveTable[Room] = LiveTable(feed, "rooms", rooms.list_all)
        self._periods: LiveTable[Period] = LiveTable(feed, "periods", periods.list_all)

    @property
    def rooms(self) -> list[Room]:
        return self._rooms.rows

    @property
    def periods(self) -> list[Period]:
        return self._periods.rows

    @property
    def is_open(self) -> bool:
        return self._rooms.is_open and self._periods.is_open

    def open(self) -> "ScheduleCatalog":
        self._rooms.open()
        self._periods.open()
        return self

    def close(self) -> None:
        self._rooms.close()
        self._periods.close()

    def __enter__(self) -> "ScheduleCatalog":
        return self.open()

    def __exit__(self, *exc) -> None:
        self.close()
