from __future__ import annotations

from flask import Flask, request

from ..attendance.controller import slot_json
from ..common.web import admin_required, ok, payload
from ..container import Container
from ..core.exceptions import ValidationError


def _int_field(data: dict, key: str, label: str) -> int:
    try:
        return int(data.get(key))
    except (TypeError, ValueError):
        raise ValidationError(f"{label} is required")


def _weeks(data) -> list:
    if hasattr(data, "getlist"):
        weeks = data.getlist("weeks")
    else:
        weeks = data.get("weeks")
    if not weeks and data.get("week_number") is not None:
        weeks = [data.get("week_number")]
    return list(weeks or [])


def _truthy(value) -> bool:
    return str(value).strip().lower() in ("1", "true", "on", "yes")


def register(app: Flask, container: Container) -> None:
    @app.route("/admin/schedules", methods=["GET"], endpoint="admin_schedules")
    @admin_required
    def admin_schedules():
        return ok(container.schedule_service.list_all())

    @app.route("/admin/schedules", methods=["POST"], endpoint="admin_schedules_create")
    @admin_required
    def admin_schedules_create():
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            data = request.form
        ids = container.schedule_service.create(
            class_id=_int_field(data, "class_id", "Class"),
            teacher_id=_int_field(data, "teacher_id", "Teacher"),
            room_id=_int_field(data, "room_id", "Room"),
            period_id=_int_field(data, "period_id", "Period"),
            day=str(data.get("day") or ""),
            weeks=_weeks(data),
            apply_to_all_weeks=_truthy(data.get("apply_to_all_weeks")),
        )
        return ok({"schedule_ids": ids}, 201)

    @app.route("/admin/schedules/<int:schedule_id>", methods=["GET"], endpoint="admin_schedules_detail")
    @admin_required
    def admin_schedules_detail(schedule_id: int):
        return ok(slot_json(container.schedule_service.get_slot(schedule_id)))

    @app.route("/admin/schedules/<int:schedule_id>", methods=["PUT"], endpoint="admin_schedules_update")
    @admin_required
    def admin_schedules_update(schedule_id: int):
        data = payload()
        container.schedule_service.update(
            schedule_id,
            class_id=_int_field(data, "class_id", "Class"),
            teacher_id=_int_field(data, "teacher_id", "Teacher"),
            room_id=_int_field(data, "room_id", "Room"),
            period_id=_int_field(data, "period_id", "Period"),
            day=str(data.get("day") or ""),
            week_number=_int_field(data, "week_number", "Week"),
        )
        return ok()

    @app.route("/admin/schedules/<int:schedule_id>", methods=["DELETE"], endpoint="admin_schedules_delete")
    @admin_required
    def admin_schedules_delete(schedule_id: int):
        container.schedule_service.delete(schedule_id)
        return ok()

    @app.route("/admin/schedules/suggest-rooms", methods=["GET"], endpoint="admin_schedules_suggest_rooms")
    @admin_required
    def admin_schedules_suggest_rooms():
        args = request.args
        rooms = container.schedule_service.suggest_rooms(
            class_id=_int_field(args, "class_id", "Class"),
            day=args.get("day") or "",
            period_id=_int_field(args, "period_id", "Period"),
            weeks=args.getlist("weeks"),
            apply_to_all_weeks=_truthy(args.get("apply_to_all_weeks")),
        )
        return ok(rooms)

    @app.route("/admin/schedules/catalog", methods=["GET"], endpoint="admin_schedules_catalog")
    @admin_required
    def admin_schedules_catalog():
        """Live room and period lists for the scheduling form."""
        catalog = container.schedule_catalog
        if not catalog.is_open:
            catalog.open()
        return ok({"rooms": catalog.rooms, "periods": catalog.periods})
