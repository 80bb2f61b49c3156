from __future__ import annotations

import io

from flask import Flask, request, send_file

from ..common.validators import parse_optional_int
from ..common.web import admin_required, login_required, ok, payload
from ..container import Container
from ..core.exceptions import BusAssignmentError


def register(app: Flask, container: Container) -> None:
    @app.route("/students", methods=["GET"], endpoint="students")
    @login_required
    def students():
        rows = container.student_service.list(
            query=request.args.get("q"),
            grade=request.args.get("grade"),
            section=request.args.get("section"),
            status=request.args.get("status"),
        )
        return ok(rows)

    @app.route("/students/register", methods=["POST"], endpoint="students_register")
    @admin_required
    def students_register():
        data = payload()
        try:
            student_id = container.student_service.register(
                full_name=data.get("full_name"),
                grade=data.get("grade"),
                section=data.get("section"),
                student_code=data.get("student_code"),
                date_of_birth=data.get("date_of_birth"),
                gender=data.get("gender"),
                photo_url=data.get("photo_url"),
                route_id=parse_optional_int(data.get("route_id"), "Bus route"),
                stop_id=parse_optional_int(data.get("stop_id"), "Bus stop"),
            )
        except BusAssignmentError as e:
            # The student row exists; only the bus assignment is missing.
            return ok({"student_id": e.student_id}, 201, warning=str(e))

        return ok({"student_id": student_id}, 201)

    @app.route("/students/<int:student_id>", methods=["GET"], endpoint="student_detail")
    @login_required
    def student_detail(student_id: int):
        return ok(container.student_service.get(student_id))

    @app.route("/students/<int:student_id>", methods=["PUT"], endpoint="student_update")
    @admin_required
    def student_update(student_id: int):
        data = payload()
        container.student_service.update(
            student_id,
            full_name=data.get("full_name"),
            grade=data.get("grade"),
            section=data.get("section"),
            date_of_birth=data.get("date_of_birth"),
            gender=data.get("gender"),
            photo_url=data.get("photo_url"),
        )
        return ok()

    @app.route("/students/<int:student_id>/status", methods=["POST"], endpoint="student_status")
    @admin_required
    def student_status(student_id: int):
        container.student_service.set_status(student_id, str(payload().get("status") or ""))
        return ok()

    @app.route("/students/<int:student_id>/qr.png", methods=["GET"], endpoint="student_qr")
    @login_required
    def student_qr(student_id: int):
        png = container.student_service.qr_png(student_id)
        return send_file(io.BytesIO(png), mimetype="image/png")
