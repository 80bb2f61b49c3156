from __future__ import annotations

from flask import Flask, request

from ..common.web import admin_required, fail, login_required, ok, payload
from ..container import Container
from .service import RoomService


def register(app: Flask, container: Container) -> None:
    @app.route("/admin/rooms", methods=["GET"], endpoint="admin_rooms")
    @login_required
    def admin_rooms():
        return ok(container.room_service.list_all())

    @app.route("/admin/rooms", methods=["POST"], endpoint="admin_rooms_create")
    @admin_required
    def admin_rooms_create():
        room_id = container.room_service.create(payload())
        return ok({"room_id": room_id}, 201)

    @app.route("/admin/rooms/<int:room_id>", methods=["PUT"], endpoint="admin_rooms_update")
    @admin_required
    def admin_rooms_update(room_id: int):
        container.room_service.update(room_id, payload())
        return ok()

    @app.route("/admin/rooms/<int:room_id>", methods=["DELETE"], endpoint="admin_rooms_delete")
    @admin_required
    def admin_rooms_delete(room_id: int):
        container.room_service.delete(room_id)
        return ok()

    @app.route("/admin/rooms/import", methods=["POST"], endpoint="admin_rooms_import")
    @admin_required
    def admin_rooms_import():
        """Accept an uploaded CSV file ("file") or a raw text/csv body."""
        upload = request.files.get("file")
        if upload is not None:
            raw = upload.read()
        else:
            raw = request.get_data()
        if not raw:
            return fail("Please upload a CSV file", 400)

        try:
            text = raw.decode("utf-8-sig")
        except UnicodeDecodeError:
            return fail("CSV file must be UTF-8 encoded", 400)

        result = container.room_service.import_csv(text)
        if not result.ok:
            return fail("Validation errors found", 400, errors=result.errors)
        return ok({"inserted": result.inserted}, 201)

    @app.route("/admin/rooms/template.csv", methods=["GET"], endpoint="admin_rooms_template")
    @login_required
    def admin_rooms_template():
        return app.response_class(
            RoomService.csv_template().encode("utf-8-sig"),
            mimetype="text/csv",
            headers={"Content-Disposition": "attachment; filename=room_import_template.csv"},
        )
