from __future__ import annotations

import logging

from flask import Flask, session

from ..attendance.controller import slot_json
from ..common.datetime_utils import now_local
from ..common.web import admin_required, current_role, fail, login_required, ok, payload
from ..container import Container
from ..core.exceptions import AuthenticationError
from .model import Teacher

logger = logging.getLogger(__name__)


def teacher_json(t: Teacher) -> dict:
    # Never expose the password hash.
    return {
        "teacher_id": t.teacher_id,
        "full_name": t.full_name,
        "username": t.username,
        "role": t.role.value,
        "email": t.email,
        "phone": t.phone,
        "subject": t.subject,
        "is_active": t.is_active,
    }


def register(app: Flask, container: Container) -> None:
    def _start_session(user) -> None:
        session.clear()
        session["teacher_id"] = user.teacher_id
        session["name"] = user.full_name
        session["role"] = user.role.value

    @app.route("/login", methods=["POST"], endpoint="login")
    def login():
        data = payload()
        try:
            user = container.auth_service.authenticate(str(data.get("username") or ""), str(data.get("password") or ""))
        except AuthenticationError as e:
            return fail(str(e), 401)

        _start_session(user)
        logger.info("Teacher %s signed in", user.teacher_id)
        return ok(user)

    @app.route("/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return ok()

    @app.route("/teachers", methods=["GET"], endpoint="teachers")
    @login_required
    def teachers():
        return ok([teacher_json(t) for t in container.teacher_service.list()])

    @app.route("/teachers", methods=["POST"], endpoint="teachers_create")
    @admin_required
    def teachers_create():
        data = payload()
        teacher_id = container.teacher_service.create_teacher(
            full_name=data.get("full_name"),
            username=data.get("username"),
            password=data.get("password"),
            email=data.get("email"),
            phone=data.get("phone"),
            subject=data.get("subject"),
        )
        return ok({"teacher_id": teacher_id}, 201)

    @app.route("/teachers/<int:teacher_id>", methods=["GET"], endpoint="teacher_profile")
    @login_required
    def teacher_profile(teacher_id: int):
        return ok(teacher_json(container.teacher_service.get(teacher_id)))

    @app.route("/teachers/<int:teacher_id>/deactivate", methods=["POST"], endpoint="teacher_deactivate")
    @admin_required
    def teacher_deactivate(teacher_id: int):
        container.teacher_service.deactivate(current_role=current_role(), teacher_id=teacher_id)
        return ok()

    @app.route("/classroom-login/<int:room_id>", methods=["POST"], endpoint="classroom_login")
    def classroom_login(room_id: int):
        """Device login: sign in and land on the room's scan page for today."""
        data = payload()
        try:
            result = container.classroom_login_service.classroom_login(
                room_id,
                str(data.get("username") or ""),
                str(data.get("password") or ""),
                today=now_local().date(),
            )
        except AuthenticationError as e:
            return fail(str(e), 401)

        _start_session(result.user)
        return ok(
            {
                "user": result.user,
                "room": result.room,
                "slots": [slot_json(s) for s in result.slots],
                "scan_path": result.scan_path,
            }
        )
