from __future__ import annotations

from datetime import timedelta

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local, parse_iso_datetime
from ..common.http import query_float, query_int
from ..core.constants import DEFAULT_DEFAULTER_THRESHOLD, DEFAULT_HISTORY_DAYS, DEFAULT_LOG_LIMIT
from ..container import Container


def register(app: Flask, container: Container) -> None:
    reports = container.report_service

    @app.route("/api/student/<student_id>/attendance-stats", methods=["GET"], endpoint="student_attendance_stats")
    def student_attendance_stats(student_id: str):
        return jsonify(reports.student_stats(student_id).to_dict())

    @app.route("/api/student/<student_id>/attendance-history", methods=["GET"], endpoint="student_attendance_history")
    def student_attendance_history(student_id: str):
        now = now_local()
        start_s = request.args.get("startDate")
        end_s = request.args.get("endDate")
        start = parse_iso_datetime(start_s, "startDate") if start_s else now - timedelta(days=DEFAULT_HISTORY_DAYS)
        end = parse_iso_datetime(end_s, "endDate") if end_s else now

        history = reports.date_range_history(student_id, start, end)
        return jsonify([r.to_dict() for r in history])

    @app.route("/api/admin/kpis", methods=["GET"], endpoint="admin_kpis")
    def admin_kpis():
        return jsonify(reports.kpis())

    @app.route("/api/admin/defaulters", methods=["GET"], endpoint="admin_defaulters")
    def admin_defaulters():
        threshold = query_float("threshold", DEFAULT_DEFAULTER_THRESHOLD)
        return jsonify(reports.defaulters(threshold))

    @app.route("/api/admin/department/<department>/stats", methods=["GET"], endpoint="admin_department_stats")
    def admin_department_stats(department: str):
        return jsonify(reports.department_stats(department))

    @app.route("/api/admin/proxy-alerts", methods=["GET"], endpoint="admin_proxy_alerts")
    def admin_proxy_alerts():
        return jsonify(reports.proxy_alerts().to_dict())

    @app.route("/api/admin/system-logs", methods=["GET"], endpoint="admin_system_logs")
    def admin_system_logs():
        limit = query_int("limit", DEFAULT_LOG_LIMIT)
        return jsonify([entry.to_dict() for entry in container.audit_service.recent(limit)])
