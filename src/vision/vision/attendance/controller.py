from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import client_ip, json_body
from ..common.validators import require_bool
from ..core.enums import MarkedBy, MarkingMethod
from ..container import Container


def register(app: Flask, container: Container) -> None:
    attendance = container.attendance_service

    @app.route("/api/session/<session_id>/attendance", methods=["GET"], endpoint="session_attendance")
    def session_attendance(session_id: str):
        return jsonify([r.to_dict() for r in attendance.list_for_session(session_id)])

    @app.route("/api/attendance/mark", methods=["POST"], endpoint="mark_attendance")
    def mark_attendance():
        data = json_body()
        record = attendance.mark_manual(
            session_id=data.get("sessionId"),
            student_id=data.get("studentId"),
            status=data.get("status"),
            method=data.get("method") or MarkingMethod.MANUAL,
            marked_by=data.get("markedBy") or MarkedBy.FACULTY,
            is_proxy=require_bool(data.get("isProxy", False), "isProxy"),
            ip_address=client_ip(),
        )
        return jsonify(record.to_dict())

    @app.route("/api/attendance/<record_id>", methods=["PATCH"], endpoint="update_attendance")
    def update_attendance(record_id: str):
        data = json_body()
        record = attendance.update_record(
            record_id,
            status=data.get("status"),
            method=data.get("method"),
            ip_address=client_ip(),
        )
        return jsonify(record.to_dict())

    @app.route("/api/kiosk/detect-student", methods=["POST"], endpoint="kiosk_detect_student")
    def kiosk_detect_student():
        data = json_body()
        result = attendance.detect_and_mark(
            data.get("sessionId"),
            data.get("studentIdentifier"),
            data.get("method") or MarkingMethod.FACIAL_RECOGNITION,
            ip_address=client_ip(),
        )
        if result.already_marked:
            return jsonify(
                {
                    "success": False,
                    "message": "Student already marked",
                    "student": result.student.name,
                    "status": result.record.status.value,
                }
            )
        return jsonify({"success": True, "student": result.student.name, "attendance": result.record.to_dict()})
