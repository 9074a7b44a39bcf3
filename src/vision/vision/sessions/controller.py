from __future__ import annotations

import io

import qrcode
from flask import Flask, jsonify, send_file

from ..common.datetime_utils import parse_iso_datetime
from ..common.http import client_ip, json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    sessions = container.session_service

    @app.route("/api/sessions", methods=["POST"], endpoint="schedule_session")
    def schedule_session():
        data = json_body()
        session = sessions.schedule(
            subject_id=data.get("subjectId"),
            faculty_id=data.get("facultyId"),
            section=data.get("section"),
            scheduled_start=parse_iso_datetime(data.get("scheduledStart"), "scheduledStart"),
            scheduled_end=parse_iso_datetime(data.get("scheduledEnd"), "scheduledEnd"),
            ip_address=client_ip(),
        )
        return jsonify(session.to_dict()), 201

    @app.route("/api/session/<session_id>", methods=["GET"], endpoint="get_session")
    def get_session(session_id: str):
        return jsonify(sessions.get(session_id).to_dict())

    @app.route("/api/faculty/<faculty_id>/active-session", methods=["GET"], endpoint="active_session")
    def active_session(faculty_id: str):
        session = sessions.get_active_session(faculty_id)
        return jsonify(session.to_dict() if session else None)

    @app.route("/api/session/<session_id>/start", methods=["POST"], endpoint="start_session")
    def start_session(session_id: str):
        sessions.start(session_id, ip_address=client_ip())
        return jsonify({"success": True})

    @app.route("/api/session/<session_id>/end", methods=["POST"], endpoint="end_session")
    def end_session(session_id: str):
        sessions.end(session_id, ip_address=client_ip())
        return jsonify({"success": True})

    @app.route("/api/session/<session_id>/cancel", methods=["POST"], endpoint="cancel_session")
    def cancel_session(session_id: str):
        sessions.cancel(session_id, ip_address=client_ip())
        return jsonify({"success": True})

    @app.route("/api/session/<session_id>/qr", methods=["GET"], endpoint="session_qr")
    def session_qr(session_id: str):
        """PNG QR code a kiosk scans to check students into this session."""
        session = sessions.get(session_id)

        qr = qrcode.QRCode(
            version=1,
            error_correction=qrcode.constants.ERROR_CORRECT_L,
            box_size=10,
            border=2,
        )
        qr.add_data(session.id)
        qr.make(fit=True)
        img = qr.make_image(fill_color="black", back_color="white")

        buf = io.BytesIO()
        img.save(buf, format="PNG")
        buf.seek(0)
        return send_file(buf, mimetype="image/png")
