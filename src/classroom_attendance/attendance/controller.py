from __future__ import annotations

from datetime import date

from flask import Flask, request
from werkzeug.utils import secure_filename

from ..common.datetime_utils import parse_iso_date
from ..common.http import api_view, json_body, ok
from ..container import Container
from ..core.ids import student_ref


def register(app: Flask, container: Container) -> None:
    def _csv_response(text: str | None, filename: str):
        if text is None:
            return "", 204
        return app.response_class(
            text.encode("utf-8-sig"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={secure_filename(filename)}"},
        )

    @app.route("/api/attendance", methods=["POST"], endpoint="attendance_mark")
    @api_view
    def attendance_mark():
        data = json_body()
        record = container.attendance_service.mark_attendance(
            student_ref(str(data.get("studentId", ""))),
            str(data.get("classId", "")),
            parse_iso_date(data.get("date") or date.today().isoformat()),
            data.get("status", ""),
        )
        return ok(record.to_dict())

    @app.route("/api/classes/<class_id>/attendance", methods=["GET"], endpoint="attendance_by_date")
    @api_view
    def attendance_by_date(class_id: str):
        on_date = parse_iso_date(request.args.get("date") or date.today().isoformat())
        records = container.attendance_service.get_attendance(class_id, on_date)
        return ok([r.to_dict() for r in records])

    @app.route("/api/students/<student_id>/attendance", methods=["GET"], endpoint="attendance_by_student")
    @api_view
    def attendance_by_student(student_id: str):
        records = container.attendance_service.get_attendance_by_student(student_ref(student_id))
        return ok([r.to_dict() for r in records])

    @app.route("/api/classes/<class_id>/attendance/stats", methods=["GET"], endpoint="attendance_stats")
    @api_view
    def attendance_stats(class_id: str):
        return ok(container.attendance_service.get_attendance_stats(class_id))

    @app.route("/api/classes/<class_id>/report.csv", methods=["GET"], endpoint="attendance_report_csv")
    @api_view
    def attendance_report_csv(class_id: str):
        text = container.report_service.export_attendance_csv(class_id)
        return _csv_response(text, f"attendance_{class_id}.csv")

    @app.route("/api/classes/<class_id>/log.csv", methods=["GET"], endpoint="attendance_log_csv")
    @api_view
    def attendance_log_csv(class_id: str):
        text = container.report_service.export_attendance_log_csv(class_id)
        return _csv_response(text, f"attendance_log_{class_id}.csv")
