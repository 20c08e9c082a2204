import logging

from django.db import transaction
from django.db.models import Q

from scheduling_app.models import Course, CourseSession, Expert
from .calendar import (
    available_hours,
    conflicting_experts,
    hours_between,
    validate_candidate,
)
from .errors import OverAssigned, SessionConflict, SessionNotFound
from .snapshots import SessionSnapshot, load_course_snapshots

logger = logging.getLogger(__name__)


class SessionBooker:
    """
    Adds, reschedules and removes course sessions.

    Every change is checked against the course's hour budget and against the
    calendars of the experts involved before it is written. The check and the
    write happen in one transaction that holds row locks on those experts, so
    two bookings for the same expert cannot both pass the check on stale data.
    """

    def add_session(self, course, date, start_time, end_time, expert_ids=None):
        candidate = SessionSnapshot(None, date, start_time, end_time)
        validate_candidate(candidate)

        with transaction.atomic():
            course, ids = self._lock(course, expert_ids)
            self._check(course, candidate, ids)

            session = CourseSession.objects.create(
                course=course,
                date=date,
                start_time=start_time,
                end_time=end_time,
            )

        logger.info(
            "Session %s added to course %s on %s %s-%s (%sh)",
            session.pk, course.pk, date, start_time, end_time, session.hours,
        )
        return session

    def update_session(self, session, date, start_time, end_time, expert_ids=None):
        candidate = SessionSnapshot(session.pk, date, start_time, end_time)
        validate_candidate(candidate)

        with transaction.atomic():
            course, ids = self._lock(session.course, expert_ids)
            try:
                session = CourseSession.objects.select_for_update().get(pk=session.pk, course=course)
            except CourseSession.DoesNotExist:
                raise SessionNotFound(f"Session {session.pk} not found in course {course.pk}")

            self._check(course, candidate, ids, editing_session_id=session.pk)

            session.date = date
            session.start_time = start_time
            session.end_time = end_time
            session.save()

        logger.info(
            "Session %s of course %s moved to %s %s-%s (%sh)",
            session.pk, course.pk, date, start_time, end_time, session.hours,
        )
        return session

    def delete_session(self, session):
        with transaction.atomic():
            try:
                course = Course.objects.select_for_update().get(pk=session.course_id)
                session = CourseSession.objects.select_for_update().get(pk=session.pk, course=course)
            except (Course.DoesNotExist, CourseSession.DoesNotExist):
                raise SessionNotFound(f"Session {session.pk} not found")

            session_id = session.pk
            session.delete()

        logger.info("Session %s deleted from course %s", session_id, course.pk)

    # --- HELPERS ---
    def _lock(self, course, expert_ids):
        """
        Lock the course row and the rows of the experts to check, always in pk order.
        Returns the fresh course and the expert ids.
        """
        course = Course.objects.select_for_update().get(pk=course.pk)

        if expert_ids is None:
            expert_ids = list(course.course_experts.values_list("expert_id", flat=True))

        list(Expert.objects.select_for_update().filter(pk__in=expert_ids).order_by("pk"))
        return course, list(expert_ids)

    def _check(self, course, candidate, expert_ids, editing_session_id=None):
        relevant = Course.objects.filter(Q(pk=course.pk) | Q(experts__in=expert_ids)).distinct()
        all_courses = load_course_snapshots(relevant)
        current = next(c for c in all_courses if c.id == course.pk)

        editing = None
        if editing_session_id is not None:
            editing = next((s for s in current.sessions if s.id == editing_session_id), None)

        hours = hours_between(candidate.start_time, candidate.end_time)
        available = available_hours(current, editing)
        if hours > available:
            logger.warning(
                "Course %s: %sh requested but only %sh available", course.pk, hours, available
            )
            raise OverAssigned(
                f"Session needs {hours}h but only {available}h are left on the course",
                requested=hours,
                available=available,
            )

        clashes = conflicting_experts(candidate, expert_ids, all_courses, exclude_course_id=course.pk)
        if clashes:
            logger.warning(
                "Course %s: experts %s already booked on %s %s-%s",
                course.pk, clashes, candidate.date, candidate.start_time, candidate.end_time,
            )
            raise SessionConflict(
                "The expert already has another course scheduled at this time",
                expert_ids=clashes,
            )
