from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SchoolClass:
    """A teaching group: one grade/section studying one subject.

    Grade, section and subject are stored separately; display_name is derived.
    """

    class_id: int
    grade: str
    section: str
    subject: str = ""
    room_number: str = ""

    @property
    def group_name(self) -> str:
        return f"{self.grade} - Section {self.section}"

    @property
    def display_name(self) -> str:
        if self.subject:
            return f"{self.group_name} ({self.subject})"
        return self.group_name

    @property
    def is_incomplete(self) -> bool:
        return not self.subject.strip() or not self.room_number.strip()
