from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_HISTORY_DAYS
from ..core.enums import AttendanceType
from ..core.exceptions import BackendError
from ..students.repository import StudentRepository
from .model import AttendanceRecord, DailySummary, ScanOutcome, ScanRecord, ScanValidation
from .recorder import AttendanceRecorder
from .repository import AttendanceRepository
from .scan_log import RecentScansLog
from .validator import STUDENT_NOT_FOUND, AttendanceValidator

logger = logging.getLogger(__name__)

SAVE_FAILED = "Could not save attendance, please try again"
BACKEND_FAILED = "Attendance service unavailable, please try again"


class AttendanceService:
    """Scan flow: validate -> record on success -> add outcome to the operator's log."""

    def __init__(
        self,
        validator: AttendanceValidator,
        recorder: AttendanceRecorder,
        attendance: AttendanceRepository,
        students: StudentRepository,
    ):
        self._validator = validator
        self._recorder = recorder
        self._attendance = attendance
        self._students = students

    def validate_scan(self, token: str, schedule_id: int, actor_id: Optional[int]) -> ScanValidation:
        """Structured validity result for a classroom scan. No side effects."""

        validation = self._validator.validate_classroom(token, schedule_id)
        logger.debug("Scan validation by %s for schedule %s: %s", actor_id, schedule_id, validation.reason or "ok")
        return validation

    def _scan(
        self,
        token: str,
        validate: Callable[[], ScanValidation],
        *,
        actor_id: Optional[int],
        log: RecentScansLog,
        success_message: str,
        now: Optional[datetime],
    ) -> ScanOutcome:
        now = now or now_local()
        record: Optional[AttendanceRecord] = None
        try:
            validation = validate()
        except BackendError:
            logger.exception("Scan validation failed for %r", token)
            validation = ScanValidation.reject(BACKEND_FAILED)

        message = validation.reason or success_message
        if validation.valid:
            try:
                record = self._recorder.record(validation, recorded_by=actor_id, now=now)
            except BackendError:
                logger.exception("Attendance write failed for student %s", validation.student_id)
                message = SAVE_FAILED

        scan = ScanRecord(
            code=validation.student_code or (token or "").strip(),
            name=validation.display_name,
            success=record is not None,
            scanned_at=now,
            message=message,
        )
        log.add(scan)
        if record is None:
            logger.info("Scan rejected (%s): %s", scan.code, message)
        return ScanOutcome(validation=validation, scan=scan, record=record)

    def scan_classroom(
        self,
        token: str,
        schedule_id: int,
        *,
        actor_id: Optional[int],
        log: RecentScansLog,
        now: Optional[datetime] = None,
    ) -> ScanOutcome:
        return self._scan(
            token,
            lambda: self._validator.validate_classroom(token, schedule_id),
            actor_id=actor_id,
            log=log,
            success_message="Present",
            now=now,
        )

    def scan_bus(
        self,
        token: str,
        route_id: int,
        *,
        actor_id: Optional[int],
        log: RecentScansLog,
        now: Optional[datetime] = None,
    ) -> ScanOutcome:
        return self._scan(
            token,
            lambda: self._validator.validate_bus(token, route_id),
            actor_id=actor_id,
            log=log,
            success_message="Boarded",
            now=now,
        )

    def scan_bus_by_code(
        self,
        student_code: str,
        route_id: int,
        *,
        actor_id: Optional[int],
        log: RecentScansLog,
        now: Optional[datetime] = None,
    ) -> ScanOutcome:
        """Manual entry: resolve a typed student code to its token, then scan."""

        code = (student_code or "").strip().upper()
        student = self._students.get_by_code(code) if code else None
        if not student:
            now = now or now_local()
            validation = ScanValidation.reject(STUDENT_NOT_FOUND, route_id=int(route_id))
            scan = ScanRecord(code=code, name=None, success=False, scanned_at=now, message=STUDENT_NOT_FOUND)
            log.add(scan)
            return ScanOutcome(validation=validation, scan=scan)

        return self.scan_bus(student.qr_code, route_id, actor_id=actor_id, log=log, now=now)

    def student_history(
        self,
        student_id: int,
        *,
        days: int = DEFAULT_HISTORY_DAYS,
        today: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        today = today or now_local().date()
        return self._attendance.list_for_student(int(student_id), since=today - timedelta(days=int(days)))

    def daily_summary(self, day: date) -> DailySummary:
        """Distinct students present per type; repeated scans count once."""

        classroom: set[int] = set()
        bus: set[int] = set()
        by_class: dict[int, set[int]] = {}
        for r in self._attendance.list_for_date(day):
            if r.attendance_type == AttendanceType.BUS:
                bus.add(r.student_id)
            else:
                classroom.add(r.student_id)
                if r.class_id is not None:
                    by_class.setdefault(r.class_id, set()).add(r.student_id)

        return DailySummary(
            day=day,
            classroom_present=len(classroom),
            bus_present=len(bus),
            students_present=len(classroom | bus),
            by_class={k: len(v) for k, v in by_class.items()},
        )
