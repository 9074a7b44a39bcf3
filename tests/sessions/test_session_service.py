from __future__ import annotations

import threading
from datetime import datetime, timedelta

import pytest

from src.vision.vision.core.enums import SessionStatus
from src.vision.vision.core.exceptions import InvalidTransitionError, NotFoundError, ValidationError
from src.vision.vision.sessions.service import SessionService

T0 = datetime(2026, 2, 2, 9, 0)


class FixedClock:
    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


class StaleReads:
    """Serves one outdated read per session, as if another request wrote in between."""

    def __init__(self, inner):
        self._inner = inner
        self.stale = {}

    def get_by_id(self, session_id):
        if session_id in self.stale:
            return self.stale.pop(session_id)
        return self._inner.get_by_id(session_id)

    def __getattr__(self, name):
        return getattr(self._inner, name)


def _setup(container):
    roster = container.roster_service
    faculty = roster.onboard_faculty(employee_id="F001", name="Dr. Verma", department="CS")
    subject = roster.add_subject(code="CS101", name="Data Structures", department="CS")
    clock = FixedClock(T0)
    svc = SessionService(
        container.sessions_repo,
        container.subjects_repo,
        container.faculty_repo,
        container.audit_service,
        clock=clock,
    )
    return svc, faculty, subject, clock


def _schedule(svc, faculty, subject, *, offset_hours=0, section="A"):
    start = T0 + timedelta(hours=offset_hours)
    return svc.schedule(
        subject_id=subject.id,
        faculty_id=faculty.id,
        section=section,
        scheduled_start=start,
        scheduled_end=start + timedelta(hours=1),
    )


def test_schedule_creates_scheduled_session(container):
    svc, faculty, subject, _ = _setup(container)

    session = _schedule(svc, faculty, subject)

    assert session.status == SessionStatus.SCHEDULED
    assert session.actual_start is None
    assert svc.get(session.id) == session


def test_schedule_rejects_end_before_start(container):
    svc, faculty, subject, _ = _setup(container)

    with pytest.raises(ValidationError):
        svc.schedule(
            subject_id=subject.id,
            faculty_id=faculty.id,
            section="A",
            scheduled_start=T0,
            scheduled_end=T0,
        )


def test_schedule_requires_existing_faculty(container):
    svc, _, subject, _ = _setup(container)

    with pytest.raises(NotFoundError):
        svc.schedule(
            subject_id=subject.id,
            faculty_id="missing",
            section="A",
            scheduled_start=T0,
            scheduled_end=T0 + timedelta(hours=1),
        )


def test_start_then_end_records_actual_times(container):
    svc, faculty, subject, clock = _setup(container)
    session = _schedule(svc, faculty, subject)

    clock.advance(minutes=3)
    started = svc.start(session.id)
    assert started.status == SessionStatus.ACTIVE
    assert started.actual_start == T0 + timedelta(minutes=3)

    clock.advance(minutes=55)
    ended = svc.end(session.id)
    assert ended.status == SessionStatus.COMPLETED
    assert ended.actual_start == T0 + timedelta(minutes=3)
    assert ended.actual_end == T0 + timedelta(minutes=58)


def test_start_twice_is_a_silent_noop(container):
    svc, faculty, subject, clock = _setup(container)
    session = _schedule(svc, faculty, subject)

    svc.start(session.id)
    clock.advance(minutes=10)
    again = svc.start(session.id)

    assert again.status == SessionStatus.ACTIVE
    assert again.actual_start == T0


def test_end_twice_is_a_silent_noop(container):
    svc, faculty, subject, clock = _setup(container)
    session = _schedule(svc, faculty, subject)
    svc.start(session.id)
    svc.end(session.id)

    clock.advance(minutes=5)
    again = svc.end(session.id)

    assert again.status == SessionStatus.COMPLETED
    assert again.actual_end == T0


def test_completed_session_cannot_restart_or_cancel(container):
    svc, faculty, subject, _ = _setup(container)
    session = _schedule(svc, faculty, subject)
    svc.start(session.id)
    svc.end(session.id)

    with pytest.raises(InvalidTransitionError):
        svc.start(session.id)
    with pytest.raises(InvalidTransitionError):
        svc.cancel(session.id)


def test_end_requires_active_session(container):
    svc, faculty, subject, _ = _setup(container)
    session = _schedule(svc, faculty, subject)

    with pytest.raises(InvalidTransitionError):
        svc.end(session.id)
    assert svc.get(session.id).status == SessionStatus.SCHEDULED


@pytest.mark.parametrize("start_first", [False, True])
def test_cancel_from_non_terminal_states(container, start_first):
    svc, faculty, subject, _ = _setup(container)
    session = _schedule(svc, faculty, subject)
    if start_first:
        svc.start(session.id)

    cancelled = svc.cancel(session.id)

    assert cancelled.status == SessionStatus.CANCELLED
    with pytest.raises(InvalidTransitionError):
        svc.start(session.id)
    assert svc.get_active_session(faculty.id) is None


def test_faculty_has_at_most_one_active_session(container):
    svc, faculty, subject, _ = _setup(container)
    first = _schedule(svc, faculty, subject)
    second = _schedule(svc, faculty, subject, offset_hours=2, section="B")

    svc.start(first.id)
    with pytest.raises(InvalidTransitionError):
        svc.start(second.id)

    assert svc.get_active_session(faculty.id).id == first.id
    svc.end(first.id)
    svc.start(second.id)
    assert svc.get_active_session(faculty.id).id == second.id


def test_unknown_session_is_not_found(container):
    svc, _, _, _ = _setup(container)

    with pytest.raises(NotFoundError):
        svc.start("nope")


def test_transitions_are_audited(container):
    svc, faculty, subject, _ = _setup(container)
    session = _schedule(svc, faculty, subject)
    svc.start(session.id)
    svc.end(session.id)

    actions = [entry.action for entry in container.audit_service.recent(10)]
    assert actions[:3] == ["session_completed", "session_started", "session_scheduled"]


def test_concurrent_starts_leave_one_active_session_per_faculty(container):
    svc, faculty, subject, _ = _setup(container)
    sessions = [_schedule(svc, faculty, subject, offset_hours=2 * i, section=f"S{i}") for i in range(8)]
    barrier = threading.Barrier(len(sessions))
    refused = []
    lock = threading.Lock()

    def worker(session_id):
        barrier.wait()
        try:
            svc.start(session_id)
        except InvalidTransitionError:
            with lock:
                refused.append(session_id)

    threads = [threading.Thread(target=worker, args=(s.id,)) for s in sessions]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    active = [s.id for s in sessions if svc.get(s.id).status == SessionStatus.ACTIVE]
    assert len(active) == 1
    assert len(refused) == len(sessions) - 1
    assert svc.get_active_session(faculty.id).id == active[0]


def test_end_loses_to_a_cancel_that_landed_first(container):
    svc, faculty, subject, clock = _setup(container)
    session = _schedule(svc, faculty, subject)
    seen_active = svc.start(session.id)
    svc.cancel(session.id)

    stale = StaleReads(container.sessions_repo)
    stale.stale[session.id] = seen_active
    racing = SessionService(stale, container.subjects_repo, container.faculty_repo, container.audit_service, clock=clock)

    with pytest.raises(InvalidTransitionError):
        racing.end(session.id)

    stored = svc.get(session.id)
    assert stored.status == SessionStatus.CANCELLED
    assert stored.actual_end is None


def test_start_that_lost_to_the_same_start_is_a_no_op(container):
    svc, faculty, subject, clock = _setup(container)
    session = _schedule(svc, faculty, subject)
    svc.start(session.id)

    stale = StaleReads(container.sessions_repo)
    stale.stale[session.id] = session
    racing = SessionService(stale, container.subjects_repo, container.faculty_repo, container.audit_service, clock=clock)
    clock.advance(minutes=5)

    result = racing.start(session.id)

    assert result.status == SessionStatus.ACTIVE
    assert result.actual_start == T0
    actions = [entry.action for entry in container.audit_service.recent(10)]
    assert actions.count("session_started") == 1


def test_cancel_retries_when_session_started_underneath(container):
    svc, faculty, subject, clock = _setup(container)
    session = _schedule(svc, faculty, subject)
    svc.start(session.id)

    stale = StaleReads(container.sessions_repo)
    stale.stale[session.id] = session
    racing = SessionService(stale, container.subjects_repo, container.faculty_repo, container.audit_service, clock=clock)

    assert racing.cancel(session.id).status == SessionStatus.CANCELLED
    assert svc.get_active_session(faculty.id) is None
