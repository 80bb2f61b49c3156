from __future__ import annotations

import logging
import random
from datetime import date
from typing import Callable, Optional, Sequence

from ..attendance.tokens import make_student_token
from ..common.datetime_utils import parse_iso_date
from ..common.qr import render_qr_png
from ..common.validators import optional_text, require_max_length, require_non_empty
from ..core.constants import ALL_GRADES, ALL_SECTIONS, STUDENT_CODE_PREFIX
from ..core.enums import RecordStatus
from ..core.exceptions import BackendError, BusAssignmentError, DomainError, NotFoundError, ValidationError
from ..transport.service import TransportService
from .model import Student, StudentFilter
from .repository import StudentRepository

logger = logging.getLogger(__name__)

_CODE_ATTEMPTS = 20


def random_student_code() -> str:
    return f"{STUDENT_CODE_PREFIX}{random.randint(0, 9999):04d}"


def _optional_date(value) -> Optional[date]:
    if value is None or isinstance(value, date):
        return value
    value = optional_text(value)
    if not value:
        return None
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ValidationError("Date of birth must be YYYY-MM-DD")


def _check_group(grade: str, section: str) -> tuple[str, str]:
    grade = require_non_empty(grade, "Grade")
    section = require_non_empty(section, "Section").upper()
    if grade not in ALL_GRADES:
        raise ValidationError(f"Unknown grade: {grade}")
    if section not in ALL_SECTIONS:
        raise ValidationError(f"Unknown section: {section}")
    return grade, section


class StudentService:
    def __init__(
        self,
        students: StudentRepository,
        transport: TransportService,
        code_factory: Callable[[], str] = random_student_code,
    ):
        self._students = students
        self._transport = transport
        self._code_factory = code_factory

    def _unique_code(self) -> str:
        for _ in range(_CODE_ATTEMPTS):
            code = self._code_factory()
            if not self._students.get_by_code(code):
                return code
        raise ValidationError("Could not generate a unique student code, please enter one")

    def register(
        self,
        *,
        full_name: str,
        grade: str,
        section: str,
        student_code: Optional[str] = None,
        date_of_birth=None,
        gender: Optional[str] = None,
        photo_url: Optional[str] = None,
        route_id: Optional[int] = None,
        stop_id: Optional[int] = None,
    ) -> int:
        """Create a student and, when a route is given, their bus assignment.

        These are two separate writes. If the assignment fails the student
        stays registered and BusAssignmentError reports the new student id.
        """

        full_name = require_non_empty(full_name, "Full name")
        require_max_length(full_name, "Full name", 100)
        grade, section = _check_group(grade, section)

        code = optional_text(student_code)
        if code:
            code = code.upper()
            require_max_length(code, "Student code", 20)
            if self._students.get_by_code(code):
                raise ValidationError("Student code already exists")
        else:
            code = self._unique_code()

        if route_id is not None:
            self._transport.get_route(route_id)

        student_id = self._students.create(
            full_name=full_name,
            student_code=code,
            qr_code=make_student_token(code),
            grade=grade,
            section=section,
            date_of_birth=_optional_date(date_of_birth),
            gender=optional_text(gender),
            photo_url=optional_text(photo_url),
        )
        logger.info("Registered student %s (%s)", code, student_id)

        if route_id is not None:
            try:
                self._transport.assign_student(student_id=student_id, route_id=int(route_id), stop_id=stop_id)
            except (BackendError, DomainError) as e:
                logger.error("Bus assignment failed for student %s: %s", student_id, e)
                raise BusAssignmentError(
                    f"Student registered but bus assignment failed: {e}", student_id=student_id
                ) from e

        return student_id

    def update(
        self,
        student_id: int,
        *,
        full_name: str,
        grade: str,
        section: str,
        date_of_birth=None,
        gender: Optional[str] = None,
        photo_url: Optional[str] = None,
    ) -> None:
        self.get(student_id)
        full_name = require_non_empty(full_name, "Full name")
        grade, section = _check_group(grade, section)

        if not self._students.update(
            int(student_id),
            full_name=full_name,
            grade=grade,
            section=section,
            date_of_birth=_optional_date(date_of_birth),
            gender=optional_text(gender),
            photo_url=optional_text(photo_url),
        ):
            raise ValidationError("Failed to update student")

    def set_status(self, student_id: int, status: str) -> None:
        try:
            new_status = RecordStatus(str(status).strip().lower())
        except ValueError:
            raise ValidationError("Status must be active or inactive")

        self.get(student_id)
        if not self._students.set_status(int(student_id), new_status):
            raise ValidationError("Failed to update student status")
        logger.info("Student %s is now %s", student_id, new_status.value)

    def get(self, student_id: int) -> Student:
        student = self._students.get_by_id(int(student_id))
        if not student:
            raise NotFoundError("Student not found")
        return student

    def list(
        self,
        *,
        query: Optional[str] = None,
        grade: Optional[str] = None,
        section: Optional[str] = None,
        status: Optional[str] = None,
    ) -> Sequence[Student]:
        try:
            status_filter = RecordStatus(status) if status else None
        except ValueError:
            raise ValidationError("Status must be active or inactive")
        return self._students.search(
            StudentFilter(
                query=optional_text(query),
                grade=optional_text(grade),
                section=optional_text(section),
                status=status_filter,
            )
        )

    def qr_png(self, student_id: int) -> bytes:
        return render_qr_png(self.get(student_id).qr_code)

    def count_active(self) -> int:
        return self._students.count_active()
