from __future__ import annotations

from typing import Protocol, Sequence

from .model import Notification


class NotificationRepository(Protocol):
    def list_recent(self, *, unread_only: bool = False, limit: int = 50) -> Sequence[Notification]:
        raise NotImplementedError

    def create(self, *, title: str, message: str, category: str) -> int:
        raise NotImplementedError

    def mark_read(self, notification_id: int) -> bool:
        raise NotImplementedError

    def mark_all_read(self) -> int:
        raise NotImplementedError

    def count_unread(self) -> int:
        raise NotImplementedError
