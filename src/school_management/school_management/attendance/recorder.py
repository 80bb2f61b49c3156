from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..common.datetime_utils import now_local
from ..core.enums import AttendanceStatus, AttendanceType
from ..core.exceptions import ValidationError
from .model import AttendanceRecord, NewAttendanceRecord, ScanValidation
from .repository import AttendanceRepository


class AttendanceRecorder:
    """Write exactly one "present" record per call.

    No deduplication: recording the same student twice yields two rows.
    Write failures propagate to the caller; nothing is retried.
    """

    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def record(
        self,
        validation: ScanValidation,
        *,
        recorded_by: Optional[int],
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        if not validation.valid or validation.student_id is None:
            raise ValidationError(validation.reason or "Scan is not valid")

        now = now or now_local()
        is_bus = validation.route_id is not None and validation.schedule_id is None
        return self._attendance.create(
            NewAttendanceRecord(
                student_id=validation.student_id,
                attendance_type=AttendanceType.BUS if is_bus else AttendanceType.CLASSROOM,
                status=AttendanceStatus.PRESENT,
                attendance_date=now.date(),
                scanned_at=now,
                schedule_id=None if is_bus else validation.schedule_id,
                class_id=None if is_bus else validation.class_id,
                bus_route_id=validation.route_id if is_bus else None,
                recorded_by=recorded_by,
            )
        )
