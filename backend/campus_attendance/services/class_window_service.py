"""Marking-window evaluation for class sessions."""
from dataclasses import dataclass
from datetime import datetime, time, timedelta
from enum import Enum

from campus_attendance.models.class_session import ClassSession

class WindowVerdict(Enum):
    """Where a marking attempt falls relative to the class window."""
    REJECTED_EARLY = 'rejected_early'
    PRESENT = 'present'
    LATE = 'late'
    REJECTED_CLOSED = 'rejected_closed'
    REJECTED_CANCELLED = 'rejected_cancelled'

@dataclass(frozen=True)
class MarkingWindow:
    """Instants bounding a session's marking window (naive local time)."""
    start: datetime
    late_threshold: datetime
    end: datetime
    end_with_grace: datetime

@dataclass(frozen=True)
class WindowEvaluation:
    verdict: WindowVerdict
    reason: str

    @property
    def is_open(self) -> bool:
        return self.verdict in (WindowVerdict.PRESENT, WindowVerdict.LATE)

def parse_wall_clock(value: str) -> time:
    """Parse a 24-hour ``HH:MM`` string."""
    return datetime.strptime(value, '%H:%M').time()

class ClassWindowEvaluator:
    """
    Decide present/late/rejected for a marking attempt.

    The session date and its HH:MM times are combined as naive wall-clock
    datetimes, exactly as they were stored, so no time zone shift can move
    a class to a neighbouring day. ``now`` must be naive local time as well.
    """

    def __init__(self, default_late_grace_minutes: int = 10, default_end_grace_minutes: int = 5):
        self.default_late_grace_minutes = default_late_grace_minutes
        self.default_end_grace_minutes = default_end_grace_minutes

    def window(self, session: ClassSession) -> MarkingWindow:
        late_grace = session.late_grace_minutes
        if late_grace is None:
            late_grace = self.default_late_grace_minutes
        end_grace = session.end_grace_minutes
        if end_grace is None:
            end_grace = self.default_end_grace_minutes

        start = datetime.combine(session.date, parse_wall_clock(session.start_time))
        end = datetime.combine(session.date, parse_wall_clock(session.end_time))

        return MarkingWindow(
            start=start,
            late_threshold=start + timedelta(minutes=late_grace),
            end=end,
            end_with_grace=end + timedelta(minutes=end_grace)
        )

    def evaluate(self, session: ClassSession, now: datetime) -> WindowEvaluation:
        if session.is_cancelled():
            return WindowEvaluation(WindowVerdict.REJECTED_CANCELLED, "class has been cancelled")

        window = self.window(session)

        if now < window.start:
            return WindowEvaluation(WindowVerdict.REJECTED_EARLY, "class has not started yet")
        if now > window.end_with_grace:
            return WindowEvaluation(WindowVerdict.REJECTED_CLOSED, "attendance window has closed")
        if now <= window.late_threshold:
            return WindowEvaluation(WindowVerdict.PRESENT, "marked within the on-time window")
        return WindowEvaluation(WindowVerdict.LATE, "marked after the late threshold")
