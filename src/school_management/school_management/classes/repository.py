from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import SchoolClass


class ClassRepository(Protocol):
    def list_all(self) -> Sequence[SchoolClass]:
        raise NotImplementedError

    def get_by_id(self, class_id: int) -> Optional[SchoolClass]:
        raise NotImplementedError

    def get_many(self, class_ids: Sequence[int]) -> Sequence[SchoolClass]:
        raise NotImplementedError

    def create(self, *, grade: str, section: str, subject: str, room_number: str) -> int:
        raise NotImplementedError

    def update_fields(self, class_id: int, *, subject: str, room_number: str) -> bool:
        raise NotImplementedError

    def list_incomplete(self) -> Sequence[SchoolClass]:
        """Classes with an empty subject or room number."""

        raise NotImplementedError


class EnrollmentRepository(Protocol):
    def is_enrolled(self, *, student_id: int, class_id: int) -> bool:
        raise NotImplementedError

    def enroll(self, *, student_id: int, class_id: int) -> bool:
        raise NotImplementedError

    def unenroll(self, *, student_id: int, class_id: int) -> bool:
        raise NotImplementedError

    def count_for_class(self, class_id: int) -> int:
        raise NotImplementedError

    def class_ids_for_student(self, student_id: int) -> Sequence[int]:
        raise NotImplementedError

    def student_ids_for_class(self, class_id: int) -> Sequence[int]:
        raise NotImplementedError
