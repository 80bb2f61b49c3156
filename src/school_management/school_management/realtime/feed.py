from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Optional

from ..core.enums import ChangeAction

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChangeEvent:
    table: str
    action: ChangeAction
    row_id: Optional[int] = None


ChangeHandler = Callable[[ChangeEvent], None]


class Subscription:
    """Handle returned by ChangeFeed.subscribe; close() detaches the handler."""

    def __init__(self, feed: "ChangeFeed", table: str, handler: ChangeHandler):
        self._feed = feed
        self.table = table
        self.handler = handler
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._feed._remove(self)

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


class ChangeFeed:
    """In-process table change notifications.

    Repositories publish after each committed write; views subscribe while they
    are open and unsubscribe when they close.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._subs: dict[str, list[Subscription]] = {}

    def subscribe(self, table: str, handler: ChangeHandler) -> Subscription:
        sub = Subscription(self, table, handler)
        with self._lock:
            self._subs.setdefault(table, []).append(sub)
        logger.debug("Subscribed to %s changes", table)
        return sub

    def _remove(self, sub: Subscription) -> None:
        with self._lock:
            subs = self._subs.get(sub.table, [])
            if sub in subs:
                subs.remove(sub)
        logger.debug("Unsubscribed from %s changes", sub.table)

    def subscriber_count(self, table: str) -> int:
        with self._lock:
            return len(self._subs.get(table, []))

    def publish(self, event: ChangeEvent) -> None:
        with self._lock:
            targets = list(self._subs.get(event.table, []))

        for sub in targets:
            try:
                sub.handler(event)
            except Exception:
                logger.exception("Change handler for %s failed", event.table)

    def notify(self, table: str, action: ChangeAction, row_id: Optional[int] = None) -> None:
        self.publish(ChangeEvent(table=table, action=action, row_id=row_id))
