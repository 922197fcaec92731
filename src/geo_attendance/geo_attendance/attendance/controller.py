from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import format_iso_date, now_local, parse_iso_date
from ..common.guards import current_user, make_guards
from ..core.exceptions import ValidationError
from ..container import Container
from .reports import build_csv
from .serializers import overview_to_dict, record_to_dict, stats_to_dict


def register(app: Flask, container: Container) -> None:
    auth_required, admin_required = make_guards(container.auth_service)

    def _date_arg(name: str):
        value = request.args.get(name)
        if not value:
            return None
        try:
            return format_iso_date(parse_iso_date(value))
        except ValueError:
            raise ValidationError(f"{name} must be a YYYY-MM-DD date")

    def _int_arg(name: str):
        value = request.args.get(name)
        if value in (None, ""):
            return None
        if not value.isdigit():
            raise ValidationError(f"{name} must be a number")
        return int(value)

    def _list_records():
        return container.attendance_service.list_records(
            current_user(),
            user_id=_int_arg("userId"),
            start=_date_arg("start"),
            end=_date_arg("end"),
            status=request.args.get("status"),
        )

    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_list")
    @auth_required
    def attendance_list():
        return jsonify([record_to_dict(r) for r in _list_records()])

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @auth_required
    def attendance_today():
        record = container.attendance_service.get_today_record(current_user())
        return jsonify(record_to_dict(record))

    @app.route("/api/attendance/status", methods=["GET"], endpoint="attendance_status")
    @auth_required
    def attendance_status():
        status = container.attendance_service.get_current_status(current_user())
        return jsonify({"status": status.value})

    @app.route("/api/attendance/checkin-checkout", methods=["POST"], endpoint="attendance_checkin_checkout")
    @auth_required
    def attendance_checkin_checkout():
        data = request.get_json(silent=True) or {}
        record = container.attendance_service.record_entry(
            current_user(),
            entry_type=data.get("type"),
            location=data.get("location"),
            party_id=data.get("partyId"),
        )
        return jsonify(record_to_dict(record))

    @app.route("/api/attendance/stats", methods=["GET"], endpoint="attendance_stats_self")
    @app.route("/api/attendance/stats/<int:user_id>", methods=["GET"], endpoint="attendance_stats")
    @auth_required
    def attendance_stats(user_id: int | None = None):
        stats = container.attendance_service.get_stats(current_user(), user_id=user_id)
        return jsonify(stats_to_dict(stats))

    @app.route("/api/attendance/overview", methods=["GET"], endpoint="attendance_overview")
    @admin_required
    def attendance_overview():
        overview = container.attendance_service.get_overview(current_user())
        return jsonify(overview_to_dict(overview))

    @app.route("/api/attendance/report.csv", methods=["GET"], endpoint="attendance_report_csv")
    @auth_required
    def attendance_report_csv():
        csv_bytes = build_csv(_list_records())
        filename = f"attendance-report-{format_iso_date(now_local().date())}.csv"
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )
