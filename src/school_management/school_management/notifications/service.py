from __future__ import annotations

from typing import Sequence

from ..common.validators import require_max_length, require_non_empty
from ..core.exceptions import NotFoundError, ValidationError
from .model import Notification
from .repository import NotificationRepository

CATEGORIES = ("general", "attendance", "transport", "schedule")


class NotificationService:
    def __init__(self, notifications: NotificationRepository):
        self._notifications = notifications

    def create(self, *, title: str, message: str, category: str = "general") -> int:
        title = require_non_empty(title, "Title")
        require_max_length(title, "Title", 120)
        message = require_non_empty(message, "Message")
        category = (category or "general").strip().lower()
        if category not in CATEGORIES:
            raise ValidationError(f"Category must be one of: {', '.join(CATEGORIES)}")
        return self._notifications.create(title=title, message=message, category=category)

    def list(self, *, unread_only: bool = False) -> Sequence[Notification]:
        return self._notifications.list_recent(unread_only=unread_only)

    def mark_read(self, notification_id: int) -> None:
        if not self._notifications.mark_read(int(notification_id)):
            raise NotFoundError("Notification not found")

    def mark_all_read(self) -> int:
        return self._notifications.mark_all_read()

    def unread_count(self) -> int:
        return self._notifications.count_unread()
