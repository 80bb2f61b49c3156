from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from flask import Flask, current_app, request, session
from PIL import UnidentifiedImageError

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.qr import decode_qr_image
from ..common.web import current_teacher_id, fail, login_required, ok, payload, to_jsonable
from ..container import Container
from ..core.exceptions import ValidationError
from .model import ScanOutcome
from .scan_log import RecentScansLog

logger = logging.getLogger(__name__)

SESSION_KEY = "recent_scans"


def slot_json(slot) -> dict:
    data = to_jsonable(slot)
    data["class_name"] = slot.class_name
    return data


def _day_arg() -> date:
    value = request.args.get("date")
    if not value:
        return now_local().date()
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ValidationError("Date must be YYYY-MM-DD")


def _required_int(data: dict, key: str, label: str) -> int:
    value = data.get(key)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{label} is required")


def register(app: Flask, container: Container) -> None:
    def _load_log() -> RecentScansLog:
        return RecentScansLog.from_list(session.get(SESSION_KEY), limit=current_app.config["SCAN_LOG_LIMIT"])

    def _save_log(log: RecentScansLog) -> None:
        session[SESSION_KEY] = log.to_list()

    def _outcome_response(outcome: ScanOutcome, log: RecentScansLog):
        _save_log(log)
        return ok(
            success=outcome.success,
            message=outcome.scan.message,
            scan=outcome.scan.to_dict(),
            record=outcome.record,
            recent_scans=log.to_list(),
        )

    def _scan_classroom(token: Optional[str], schedule_id: int):
        log = _load_log()
        outcome = container.attendance_service.scan_classroom(
            token or "",
            schedule_id,
            actor_id=current_teacher_id(),
            log=log,
        )
        return _outcome_response(outcome, log)

    @app.route("/attendance/today", methods=["GET"], endpoint="attendance_today")
    @login_required
    def attendance_today():
        """Schedule selector: the signed-in teacher's periods for the day."""
        day = _day_arg()
        slots = container.schedule_service.today_for_teacher(current_teacher_id(), day)
        return ok([slot_json(s) for s in slots], date=day)

    @app.route("/attendance/scan/<int:room_id>/<int:teacher_id>", methods=["GET"], endpoint="attendance_scan_link")
    @login_required
    def attendance_scan_link(room_id: int, teacher_id: int):
        room = container.room_service.get(room_id)
        day = _day_arg()
        slots = [s for s in container.schedule_service.today_for_room(room_id, day) if s.teacher_id == teacher_id]
        return ok({"room": room, "teacher_id": teacher_id, "slots": [slot_json(s) for s in slots]}, date=day)

    @app.route("/api/attendance/validate", methods=["POST"], endpoint="api_attendance_validate")
    @login_required
    def api_attendance_validate():
        data = payload()
        schedule_id = _required_int(data, "schedule_id", "Schedule")
        validation = container.attendance_service.validate_scan(
            str(data.get("token") or ""), schedule_id, current_teacher_id()
        )
        return ok(validation)

    @app.route("/api/attendance/scan", methods=["POST"], endpoint="api_attendance_scan")
    @login_required
    def api_attendance_scan():
        data = payload()
        token = str(data.get("token") or data.get("qr_code") or "").strip()
        if not token:
            return fail("QR code must not be empty", 400)
        return _scan_classroom(token, _required_int(data, "schedule_id", "Schedule"))

    @app.route("/api/attendance/scan/image", methods=["POST"], endpoint="api_attendance_scan_image")
    @login_required
    def api_attendance_scan_image():
        """Camera variant: decode the uploaded picture, then scan as usual."""
        if "image" not in request.files:
            return fail("Missing image file", 400)
        schedule_id = _required_int(request.form, "schedule_id", "Schedule")

        try:
            token = decode_qr_image(request.files["image"].stream)
        except UnidentifiedImageError:
            return fail("Uploaded file is not an image", 400)

        if not token:
            return fail("No QR code found in the image", 400)
        return _scan_classroom(token, schedule_id)

    @app.route("/api/bus/scan", methods=["POST"], endpoint="api_bus_scan")
    @login_required
    def api_bus_scan():
        data = payload()
        token = str(data.get("token") or data.get("qr_code") or "").strip()
        if not token:
            return fail("QR code must not be empty", 400)
        route_id = _required_int(data, "route_id", "Bus route")

        log = _load_log()
        outcome = container.attendance_service.scan_bus(token, route_id, actor_id=current_teacher_id(), log=log)
        return _outcome_response(outcome, log)

    @app.route("/api/bus/scan/manual", methods=["POST"], endpoint="api_bus_scan_manual")
    @login_required
    def api_bus_scan_manual():
        data = payload()
        code = str(data.get("student_code") or "").strip()
        if not code:
            return fail("Student code must not be empty", 400)
        route_id = _required_int(data, "route_id", "Bus route")

        log = _load_log()
        outcome = container.attendance_service.scan_bus_by_code(code, route_id, actor_id=current_teacher_id(), log=log)
        return _outcome_response(outcome, log)

    @app.route("/api/attendance/scans", methods=["GET", "DELETE"], endpoint="api_attendance_scans")
    @login_required
    def api_attendance_scans():
        log = _load_log()
        if request.method == "DELETE":
            log.clear()
            _save_log(log)
        return ok(log.to_list())

    @app.route("/api/attendance/students/<int:student_id>", methods=["GET"], endpoint="api_student_attendance")
    @login_required
    def api_student_attendance(student_id: int):
        container.student_service.get(student_id)
        days = request.args.get("days", type=int) or 30
        return ok(container.attendance_service.student_history(student_id, days=days))

    @app.route("/api/attendance/summary", methods=["GET"], endpoint="api_attendance_summary")
    @login_required
    def api_attendance_summary():
        return ok(container.attendance_service.daily_summary(_day_arg()))
