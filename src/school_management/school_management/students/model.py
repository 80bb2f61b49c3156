from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import RecordStatus


@dataclass(frozen=True)
class Student:
    """Domain entity: an enrolled student and the token printed on their QR card."""

    student_id: int
    full_name: str
    student_code: str
    qr_code: str
    grade: str
    section: str
    status: RecordStatus = RecordStatus.ACTIVE
    bus_route_id: Optional[int] = None
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    photo_url: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.status == RecordStatus.ACTIVE


@dataclass(frozen=True)
class StudentFilter:
    query: Optional[str] = None
    grade: Optional[str] = None
    section: Optional[str] = None
    status: Optional[RecordStatus] = None
