from __future__ import annotations

from flask import Flask, request

from ..common.web import admin_required, login_required, ok, payload, to_jsonable
from ..container import Container
from .model import SchoolClass


def class_json(c: SchoolClass) -> dict:
    data = to_jsonable(c)
    data["display_name"] = c.display_name
    return data


def register(app: Flask, container: Container) -> None:
    @app.route("/admin/classes", methods=["GET"], endpoint="admin_classes")
    @login_required
    def admin_classes():
        return ok([class_json(c) for c in container.class_service.list_all()])

    @app.route("/admin/classes", methods=["POST"], endpoint="admin_classes_create")
    @admin_required
    def admin_classes_create():
        data = payload()
        class_id = container.class_service.create_class(
            grade=data.get("grade"),
            section=data.get("section"),
            subject=data.get("subject"),
            room_number=data.get("room_number"),
        )
        return ok({"class_id": class_id}, 201)

    @app.route("/admin/classes/options", methods=["GET"], endpoint="admin_classes_options")
    @login_required
    def admin_classes_options():
        """Cascading pickers: grades, then sections of a grade, then subjects."""
        grade = request.args.get("grade")
        section = request.args.get("section")
        service = container.class_service
        if grade and section:
            return ok(service.available_subjects(grade, section))
        if grade:
            return ok(service.available_sections(grade))
        return ok(service.available_grades())

    @app.route("/admin/classes/<int:class_id>/enrollments", methods=["GET"], endpoint="admin_class_enrollments")
    @login_required
    def admin_class_enrollments(class_id: int):
        container.class_service.get(class_id)
        student_ids = container.repos.enrollments.student_ids_for_class(class_id)
        return ok(container.repos.students.get_many(student_ids))

    @app.route(
        "/admin/classes/<int:class_id>/enrollments",
        methods=["POST", "DELETE"],
        endpoint="admin_class_enrollments_edit",
    )
    @admin_required
    def admin_class_enrollments_edit(class_id: int):
        student_id = int(payload().get("student_id") or 0)
        container.student_service.get(student_id)
        if request.method == "POST":
            container.class_service.enroll(student_id=student_id, class_id=class_id)
            return ok(status=201)
        container.class_service.unenroll(student_id=student_id, class_id=class_id)
        return ok()

    @app.route("/admin/data-cleanup", methods=["GET", "POST"], endpoint="admin_data_cleanup")
    @admin_required
    def admin_data_cleanup():
        if request.method == "POST":
            return ok({"fixed": container.class_service.fix_incomplete()})
        return ok([class_json(c) for c in container.class_service.find_incomplete()])
