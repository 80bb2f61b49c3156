from __future__ import annotations

from flask import Flask

from ..attendance.controller import slot_json
from ..common.datetime_utils import now_local
from ..common.web import ok, to_jsonable
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/parent/<phone>/children", methods=["GET"], endpoint="parent_children")
    def parent_children(phone: str):
        return ok(container.parent_portal_service.children(phone))

    @app.route("/parent/students/<int:student_id>", methods=["GET"], endpoint="parent_student")
    def parent_student(student_id: int):
        overview = container.parent_portal_service.student_overview(student_id, today=now_local().date())
        stats = to_jsonable(overview.stats)
        stats.update(classroom_rate=overview.stats.classroom_rate, bus_rate=overview.stats.bus_rate)
        return ok(
            {
                "student": overview.student,
                "schedule": [slot_json(s) for s in overview.schedule],
                "attendance": overview.attendance,
                "stats": stats,
                "bus": overview.bus,
            }
        )
