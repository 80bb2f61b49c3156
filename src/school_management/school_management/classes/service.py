from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.validators import optional_text, require_non_empty
from ..core.constants import ALL_GRADES, ALL_SECTIONS, DEFAULT_ROOM_NUMBER, DEFAULT_SUBJECT
from ..core.exceptions import NotFoundError, ValidationError
from .model import SchoolClass
from .repository import ClassRepository, EnrollmentRepository

logger = logging.getLogger(__name__)


class ClassService:
    def __init__(self, classes: ClassRepository, enrollments: EnrollmentRepository):
        self._classes = classes
        self._enrollments = enrollments

    def list_all(self) -> Sequence[SchoolClass]:
        return self._classes.list_all()

    def get(self, class_id: int) -> SchoolClass:
        cls = self._classes.get_by_id(int(class_id))
        if not cls:
            raise NotFoundError("Class not found")
        return cls

    def create_class(self, *, grade: str, section: str, subject: str, room_number: Optional[str] = None) -> int:
        grade = require_non_empty(grade, "Grade")
        section = require_non_empty(section, "Section").upper()
        subject = require_non_empty(subject, "Subject")
        if grade not in ALL_GRADES:
            raise ValidationError(f"Unknown grade: {grade}")
        if section not in ALL_SECTIONS:
            raise ValidationError(f"Unknown section: {section}")

        duplicate = any(
            c.grade == grade and c.section == section and c.subject.lower() == subject.lower()
            for c in self._classes.list_all()
        )
        if duplicate:
            raise ValidationError(f"{grade} - Section {section} already has a {subject} class")

        return self._classes.create(
            grade=grade,
            section=section,
            subject=subject,
            room_number=optional_text(room_number) or "",
        )

    def enroll(self, *, student_id: int, class_id: int) -> None:
        self.get(class_id)
        if not self._enrollments.enroll(student_id=int(student_id), class_id=int(class_id)):
            raise ValidationError("Student is already enrolled in this class")

    def unenroll(self, *, student_id: int, class_id: int) -> None:
        if not self._enrollments.unenroll(student_id=int(student_id), class_id=int(class_id)):
            raise NotFoundError("Enrollment not found")

    def enrollment_count(self, class_id: int) -> int:
        return self._enrollments.count_for_class(int(class_id))

    # Lookup helpers for cascading grade -> section -> subject pickers.

    def available_grades(self) -> list[str]:
        return sorted({c.grade for c in self._classes.list_all()})

    def available_sections(self, grade: str) -> list[str]:
        return sorted({c.section for c in self._classes.list_all() if c.grade == grade})

    def available_subjects(self, grade: str, section: str) -> list[str]:
        return [c.subject for c in self._classes.list_all() if c.grade == grade and c.section == section]

    # Data cleanup

    def find_incomplete(self) -> Sequence[SchoolClass]:
        return self._classes.list_incomplete()

    def fix_incomplete(self) -> int:
        """Fill empty subjects with "General" and empty room numbers with "TBD"."""

        fixed = 0
        for cls in self._classes.list_incomplete():
            subject = cls.subject.strip() or DEFAULT_SUBJECT
            room_number = cls.room_number.strip() or DEFAULT_ROOM_NUMBER
            if self._classes.update_fields(cls.class_id, subject=subject, room_number=room_number):
                fixed += 1
            else:
                logger.warning("Could not fix class %s", cls.class_id)
        logger.info("Data cleanup fixed %d class(es)", fixed)
        return fixed
