from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import RecordStatus
from .model import Student, StudentFilter


class StudentRepository(Protocol):
    def get_by_id(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def get_by_code(self, student_code: str) -> Optional[Student]:
        raise NotImplementedError

    def get_by_token(self, qr_code: str) -> Optional[Student]:
        raise NotImplementedError

    def get_many(self, student_ids: Sequence[int]) -> Sequence[Student]:
        raise NotImplementedError

    def create(
        self,
        *,
        full_name: str,
        student_code: str,
        qr_code: str,
        grade: str,
        section: str,
        date_of_birth: Optional[date],
        gender: Optional[str],
        photo_url: Optional[str],
    ) -> int:
        raise NotImplementedError

    def update(
        self,
        student_id: int,
        *,
        full_name: str,
        grade: str,
        section: str,
        date_of_birth: Optional[date],
        gender: Optional[str],
        photo_url: Optional[str],
    ) -> bool:
        raise NotImplementedError

    def set_status(self, student_id: int, status: RecordStatus) -> bool:
        raise NotImplementedError

    def search(self, flt: StudentFilter) -> Sequence[Student]:
        raise NotImplementedError

    def count_active(self) -> int:
        raise NotImplementedError
