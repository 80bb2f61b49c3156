from __future__ import annotations

from flask import Flask, request

from ..common.web import admin_required, fail, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/admin/periods", methods=["GET"], endpoint="admin_periods")
    @login_required
    def admin_periods():
        return ok(container.period_service.list_all())

    @app.route("/admin/periods", methods=["POST"], endpoint="admin_periods_save")
    @admin_required
    def admin_periods_save():
        data = request.get_json(silent=True)
        items = data.get("periods") if isinstance(data, dict) else data
        if not isinstance(items, list):
            return fail("Expected a list of periods", 400)
        ids = container.period_service.save_periods(items)
        return ok({"period_ids": ids})

    @app.route("/admin/periods/<int:period_id>", methods=["DELETE"], endpoint="admin_periods_delete")
    @admin_required
    def admin_periods_delete(period_id: int):
        container.period_service.delete(period_id)
        return ok()
