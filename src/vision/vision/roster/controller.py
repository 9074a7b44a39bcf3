from __future__ import annotations

import logging

from flask import Flask, current_app, jsonify, request

from ..common.http import client_ip, error_response, json_body
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    roster = container.roster_service

    @app.route("/api/students", methods=["POST"], endpoint="create_student")
    def create_student():
        data = json_body()
        student = roster.enroll_student(
            roll_no=data.get("rollNo"),
            name=data.get("name"),
            department=data.get("department"),
            email=data.get("email"),
            ip_address=client_ip(),
        )
        return jsonify(student.to_dict()), 201

    @app.route("/api/students", methods=["GET"], endpoint="list_students")
    def list_students():
        students = roster.list_students(request.args.get("department") or None)
        return jsonify([s.to_dict() for s in students])

    @app.route("/api/student/<student_id>", methods=["GET"], endpoint="get_student")
    def get_student(student_id: str):
        return jsonify(roster.get_student(student_id).to_dict())

    @app.route("/api/faculty", methods=["POST"], endpoint="create_faculty")
    def create_faculty():
        data = json_body()
        faculty = roster.onboard_faculty(
            employee_id=data.get("employeeId"),
            name=data.get("name"),
            department=data.get("department"),
            email=data.get("email"),
            ip_address=client_ip(),
        )
        return jsonify(faculty.to_dict()), 201

    @app.route("/api/faculty/<faculty_id>", methods=["GET"], endpoint="get_faculty")
    def get_faculty(faculty_id: str):
        return jsonify(roster.get_faculty(faculty_id).to_dict())

    @app.route("/api/subjects", methods=["POST"], endpoint="create_subject")
    def create_subject():
        data = json_body()
        subject = roster.add_subject(
            code=data.get("code"),
            name=data.get("name"),
            department=data.get("department"),
            credits=data.get("credits"),
            ip_address=client_ip(),
        )
        return jsonify(subject.to_dict()), 201

    @app.route("/api/subjects", methods=["GET"], endpoint="list_subjects")
    def list_subjects():
        subjects = roster.list_subjects(request.args.get("department", ""))
        return jsonify([s.to_dict() for s in subjects])

    @app.route("/api/seed-data", methods=["POST"], endpoint="seed_data")
    def seed_data():
        """Demo-only: enroll the sample roster."""
        if not current_app.config.get("ENABLE_SEED_ENDPOINT", False):
            return error_response("Not found", 404)
        created = roster.seed_demo_students()
        logger.info("Seeded %d demo students", created)
        return jsonify({"success": True, "message": "Sample data seeded"})
