from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional

from ..core.enums import RecordStatus


@dataclass(frozen=True)
class BusRoute:
    route_id: int
    name: str
    route_code: str
    driver_name: Optional[str] = None
    driver_phone: Optional[str] = None
    departure_time: Optional[time] = None
    return_time: Optional[time] = None
    status: RecordStatus = RecordStatus.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.status == RecordStatus.ACTIVE


@dataclass(frozen=True)
class BusStop:
    stop_id: int
    route_id: int
    name: str
    location: Optional[str] = None
    arrival_time: Optional[time] = None
    stop_order: int = 1


@dataclass(frozen=True)
class BusAssignment:
    assignment_id: int
    student_id: int
    route_id: int
    stop_id: Optional[int] = None
    status: RecordStatus = RecordStatus.ACTIVE
