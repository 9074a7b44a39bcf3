"""Example: drive the service layer directly (no Flask).

Controllers are a thin layer; the attendance rules live in the services.
"""

from datetime import datetime, timedelta

from src.vision.vision.container import STORAGE_MEMORY, build_container


def main():
    container = build_container(storage_backend=STORAGE_MEMORY)
    roster = container.roster_service
    roster.seed_demo_students()

    faculty = roster.onboard_faculty(employee_id="F100", name="Dr. Rao", department="CS")
    subject = roster.add_subject(code="CS301", name="Operating Systems", department="CS")
    start = datetime.now().replace(second=0, microsecond=0)
    session = container.session_service.schedule(
        subject_id=subject.id,
        faculty_id=faculty.id,
        section="A",
        scheduled_start=start,
        scheduled_end=start + timedelta(hours=1),
    )
    container.session_service.start(session.id)

    first = container.attendance_service.detect_and_mark(session.id, "CS001")
    again = container.attendance_service.detect_and_mark(session.id, "CS001")
    print(first.student.name, first.record.status.value, "already marked:", again.already_marked)
    print(container.report_service.student_stats(first.student.id).to_dict())


if __name__ == "__main__":
    main()
