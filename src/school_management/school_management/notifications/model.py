from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Notification:
    notification_id: int
    title: str
    message: str
    category: str
    is_read: bool
    created_at: datetime
