from __future__ import annotations

from flask import Flask, request

from ..common.validators import parse_optional_int
from ..common.web import admin_required, login_required, ok, payload
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/transport/routes", methods=["GET"], endpoint="transport_routes")
    @login_required
    def transport_routes():
        active_only = request.args.get("active") in ("1", "true")
        return ok(container.transport_service.list_routes(active_only=active_only))

    @app.route("/transport/routes", methods=["POST"], endpoint="transport_routes_create")
    @admin_required
    def transport_routes_create():
        data = payload()
        route_id = container.transport_service.create_route(
            name=data.get("name"),
            route_code=data.get("route_code"),
            driver_name=data.get("driver_name"),
            driver_phone=data.get("driver_phone"),
            departure_time=data.get("departure_time"),
            return_time=data.get("return_time"),
        )
        return ok({"route_id": route_id}, 201)

    @app.route("/transport/routes/<int:route_id>/stops", methods=["GET"], endpoint="transport_stops")
    @login_required
    def transport_stops(route_id: int):
        container.transport_service.get_route(route_id)
        return ok(container.transport_service.list_stops(route_id))

    @app.route("/transport/routes/<int:route_id>/stops", methods=["POST"], endpoint="transport_stops_create")
    @admin_required
    def transport_stops_create(route_id: int):
        data = payload()
        stop_id = container.transport_service.add_stop(
            route_id,
            name=data.get("name"),
            location=data.get("location"),
            arrival_time=data.get("arrival_time"),
            stop_order=parse_optional_int(data.get("stop_order"), "Stop order"),
        )
        return ok({"stop_id": stop_id}, 201)

    @app.route("/transport/routes/<int:route_id>/students", methods=["GET"], endpoint="transport_route_students")
    @login_required
    def transport_route_students(route_id: int):
        assignments = container.transport_service.route_students(route_id)
        return ok(container.repos.students.get_many([a.student_id for a in assignments]))

    @app.route("/transport/assignments", methods=["POST"], endpoint="transport_assign")
    @admin_required
    def transport_assign():
        data = payload()
        student_id = parse_optional_int(data.get("student_id"), "Student")
        route_id = parse_optional_int(data.get("route_id"), "Bus route")
        if student_id is None or route_id is None:
            raise ValidationError("Student and bus route are required")
        container.student_service.get(student_id)

        assignment_id = container.transport_service.assign_student(
            student_id=student_id,
            route_id=route_id,
            stop_id=parse_optional_int(data.get("stop_id"), "Bus stop"),
        )
        return ok({"assignment_id": assignment_id}, 201)

    @app.route("/transport/assignments/<int:assignment_id>", methods=["DELETE"], endpoint="transport_unassign")
    @admin_required
    def transport_unassign(assignment_id: int):
        container.transport_service.end_assignment(assignment_id)
        return ok()
