from __future__ import annotations

import logging
from typing import Optional

from ..classes.repository import EnrollmentRepository
from ..schedules.repository import ScheduleRepository
from ..students.model import Student
from ..students.repository import StudentRepository
from ..transport.repository import BusAssignmentRepository, BusRouteRepository
from .model import ScanValidation
from .tokens import make_student_token, parse_student_token

logger = logging.getLogger(__name__)

NOT_A_STUDENT_CODE = "Not a student code"
STUDENT_NOT_FOUND = "Student not found"
STUDENT_INACTIVE = "Student is not active"
SCHEDULE_NOT_FOUND = "Schedule entry not found"
ROUTE_NOT_FOUND = "Bus route not found"
NOT_ENROLLED = "Not enrolled in this class"
NOT_ASSIGNED = "Not assigned to this bus"


class AttendanceValidator:
    """Decide whether a scanned token may be marked present in a context.

    Checks run in a fixed order and the first failure is the reported reason:
    token format, student exists, student active, context exists, then
    enrollment (classroom) or active assignment (bus). Read-only.
    """

    def __init__(
        self,
        students: StudentRepository,
        schedules: ScheduleRepository,
        enrollments: EnrollmentRepository,
        routes: BusRouteRepository,
        assignments: BusAssignmentRepository,
    ):
        self._students = students
        self._schedules = schedules
        self._enrollments = enrollments
        self._routes = routes
        self._assignments = assignments

    def _resolve_student(self, token: Optional[str]):
        code = parse_student_token(token)
        if code is None:
            return None, NOT_A_STUDENT_CODE

        student: Optional[Student] = self._students.get_by_token(make_student_token(code))
        if not student:
            return None, STUDENT_NOT_FOUND
        if not student.is_active:
            return student, STUDENT_INACTIVE
        return student, None

    def validate_classroom(self, token: Optional[str], schedule_id: int) -> ScanValidation:
        student, reason = self._resolve_student(token)
        context = {"schedule_id": int(schedule_id)}
        if student:
            context.update(student_id=student.student_id, display_name=student.full_name, student_code=student.student_code)
        if reason:
            return ScanValidation.reject(reason, **context)

        entry = self._schedules.get_by_id(int(schedule_id))
        if not entry:
            return ScanValidation.reject(SCHEDULE_NOT_FOUND, **context)
        context["class_id"] = entry.class_id

        if not self._enrollments.is_enrolled(student_id=student.student_id, class_id=entry.class_id):
            return ScanValidation.reject(NOT_ENROLLED, **context)

        return ScanValidation(valid=True, **context)

    def validate_bus(self, token: Optional[str], route_id: int) -> ScanValidation:
        student, reason = self._resolve_student(token)
        context = {"route_id": int(route_id)}
        if student:
            context.update(student_id=student.student_id, display_name=student.full_name, student_code=student.student_code)
        if reason:
            return ScanValidation.reject(reason, **context)

        if not self._routes.get_by_id(int(route_id)):
            return ScanValidation.reject(ROUTE_NOT_FOUND, **context)

        if not self._assignments.has_active(student_id=student.student_id, route_id=int(route_id)):
            return ScanValidation.reject(NOT_ASSIGNED, **context)

        return ScanValidation(valid=True, **context)
