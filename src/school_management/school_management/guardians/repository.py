from __future__ import annotations

from typing import Protocol, Sequence

from .model import Guardian


class GuardianRepository(Protocol):
    def list_by_phone(self, phone: str) -> Sequence[Guardian]:
        raise NotImplementedError

    def list_for_student(self, student_id: int) -> Sequence[Guardian]:
        raise NotImplementedError
