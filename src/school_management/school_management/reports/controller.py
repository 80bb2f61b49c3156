from __future__ import annotations

import csv
import io
from datetime import date

from flask import Flask, request

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.web import login_required, ok
from ..container import Container
from ..core.enums import AttendanceType
from ..core.exceptions import ValidationError
from .service import REPORT_COLUMNS, ReportData


def register(app: Flask, container: Container) -> None:
    def _parse_date(value: str) -> date:
        try:
            return parse_iso_date(value)
        except ValueError:
            raise ValidationError("Date must be YYYY-MM-DD")

    def _build_report() -> ReportData:
        today = now_local().date()
        start = _parse_date(request.args.get("start") or today.replace(day=1).strftime("%Y-%m-%d"))
        end = _parse_date(request.args.get("end") or today.strftime("%Y-%m-%d"))

        type_s = request.args.get("type")
        try:
            attendance_type = AttendanceType(type_s) if type_s else None
        except ValueError:
            raise ValidationError("Type must be classroom or bus")

        return container.report_service.build_attendance_report(start=start, end=end, attendance_type=attendance_type)

    def _write_report_csv(*, data: ReportData, filename: str):
        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=list(REPORT_COLUMNS))
        writer.writeheader()
        for row in data.rows:
            writer.writerow(row)

        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/dashboard", methods=["GET"], endpoint="dashboard")
    @login_required
    def dashboard():
        return ok(container.dashboard_service.stats(now_local().date()))

    @app.route("/reports", methods=["GET"], endpoint="reports")
    @login_required
    def reports():
        data = _build_report()
        return ok({"rows": data.rows, "summary": data.summary})

    @app.route("/reports.csv", methods=["GET"], endpoint="reports_csv")
    @login_required
    def reports_csv():
        return _write_report_csv(data=_build_report(), filename="attendance_report.csv")
