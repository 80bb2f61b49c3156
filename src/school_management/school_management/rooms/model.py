from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Room:
    room_id: int
    name: str
    building: Optional[str] = None
    floor: Optional[int] = None
    capacity: Optional[int] = None

    def fits(self, headcount: int) -> bool:
        """Rooms without a recorded capacity accept any class size."""
        return self.capacity is None or self.capacity >= headcount


@dataclass(frozen=True)
class NewRoom:
    """Validated room fields ready to be written."""

    name: str
    building: Optional[str] = None
    floor: Optional[int] = None
    capacity: Optional[int] = None
