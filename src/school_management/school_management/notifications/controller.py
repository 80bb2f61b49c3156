from __future__ import annotations

from flask import Flask, request

from ..common.web import admin_required, login_required, ok, payload
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/notifications", methods=["GET"], endpoint="notifications")
    @login_required
    def notifications():
        unread_only = request.args.get("unread") in ("1", "true")
        service = container.notification_service
        return ok(service.list(unread_only=unread_only), unread=service.unread_count())

    @app.route("/notifications", methods=["POST"], endpoint="notifications_create")
    @admin_required
    def notifications_create():
        data = payload()
        notification_id = container.notification_service.create(
            title=data.get("title"),
            message=data.get("message"),
            category=data.get("category") or "general",
        )
        return ok({"notification_id": notification_id}, 201)

    @app.route("/notifications/<int:notification_id>/read", methods=["POST"], endpoint="notifications_read")
    @login_required
    def notifications_read(notification_id: int):
        container.notification_service.mark_read(notification_id)
        return ok()

    @app.route("/notifications/read-all", methods=["POST"], endpoint="notifications_read_all")
    @login_required
    def notifications_read_all():
        return ok({"updated": container.notification_service.mark_all_read()})
