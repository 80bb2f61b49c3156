from __future__ import annotations

import logging
import threading
from typing import Callable, Generic, Optional, Sequence, TypeVar

from .feed import ChangeEvent, ChangeFeed, Subscription

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LiveTable(Generic[T]):
    """Cached list of rows that re-fetches whenever its table changes."""

    def __init__(self, feed: ChangeFeed, table: str, loader: Callable[[], Sequence[T]]):
        self._feed = feed
        self._table = table
        self._loader = loader
        self._rows: list[T] = []
        self._sub: Optional[Subscription] = None
        self._lock = threading.Lock()

    @property
    def is_open(self) -> bool:
        return self._sub is not None

    @property
    def rows(self) -> list[T]:
        with self._lock:
            return list(self._rows)

    def reload(self) -> None:
        rows = list(self._loader())
        with self._lock:
            self._rows = rows

    def _on_change(self, event: ChangeEvent) -> None:
        logger.info("%s changed (%s), reloading", self._table, event.action.value)
        self.reload()

    def open(self) -> "LiveTable[T]":
        if self._sub is None:
            self.reload()
            self._sub = self._feed.subscribe(self._table, self._on_change)
        return self

    def close(self) -> None:
        if self._sub is not None:
            self._sub.close()
            self._sub = None

    def __enter__(self) -> "LiveTable[T]":
        return self.open()

    def __exit__(self, *exc) -> None:
        self.close()
