"""Read-only, in-memory copies of courses for the calendar functions."""

from dataclasses import dataclass, field
from typing import Optional

from django.db.models import Prefetch

from scheduling_app.models import Course, CourseExpert


@dataclass(frozen=True)
class ExpertRef:
    id: int
    name: str
    hourly_rate: float = 0


@dataclass(frozen=True)
class SessionSnapshot:
    id: Optional[int]
    date: str
    start_time: str
    end_time: str
    hours: float = 0


@dataclass(frozen=True)
class CourseSnapshot:
    id: int
    title: str
    total_hours: float
    experts: tuple = field(default_factory=tuple)
    sessions: tuple = field(default_factory=tuple)

    @property
    def expert_ids(self):
        return [e.id for e in self.experts]


def session_snapshot(session):
    return SessionSnapshot(
        id=session.pk,
        date=session.date,
        start_time=session.start_time,
        end_time=session.end_time,
        hours=session.hours,
    )


def course_snapshot(course):
    """
    Snapshot one Course. Reuses prefetched experts/sessions when present.
    """
    experts = tuple(
        ExpertRef(
            id=link.expert_id,
            name=link.expert.full_name,
            hourly_rate=float(link.hourly_rate),
        )
        for link in course.course_experts.all()
    )
    sessions = tuple(session_snapshot(s) for s in course.sessions.all())

    return CourseSnapshot(
        id=course.pk,
        title=course.title,
        total_hours=course.total_hours,
        experts=experts,
        sessions=sessions,
    )


def load_course_snapshots(queryset=None):
    """
    Load every course with its experts and sessions and return a list of CourseSnapshot.
    """
    if queryset is None:
        queryset = Course.objects.all()

    courses = queryset.order_by("id").prefetch_related(
        Prefetch("course_experts", queryset=CourseExpert.objects.select_related("expert")),
        "sessions",
    )
    return [course_snapshot(c) for c in courses]
