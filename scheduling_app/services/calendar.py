"""Session calendar rules: overlap, duration, hour budgets and expert conflicts.

Everything here works on plain in-memory objects (see snapshots.py) and never
touches the database. Times are zero-padded "HH:MM" strings and dates are
"YYYY-MM-DD" strings, so string order is chronological order.
"""

import re
from datetime import date as date_cls, timedelta

from .errors import InvalidInput

MINUTES_PER_DAY = 24 * 60

_TIME_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")
_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_time(t: str) -> int:
    """
    Parse a time string in "HH:MM" format to integer minutes since midnight.
    """
    match = _TIME_RE.match(t or "")
    if not match:
        raise InvalidInput(f"Invalid time {t!r}, expected HH:MM")
    return int(match.group(1)) * 60 + int(match.group(2))


def overlaps(start1, end1, start2, end2) -> bool:
    """
    Returns True if the half-open intervals [start1, end1) and [start2, end2) overlap.
    Touching intervals do not overlap, and an empty interval overlaps nothing.
    Only meaningful for two sessions on the same date.
    """
    if start1 == end1 or start2 == end2:
        return False
    return start1 < end2 and start2 < end1


def hours_between(start_time, end_time) -> float:
    """
    Elapsed hours from start_time to end_time, rounded to the nearest half hour.

    An end time earlier than the start time runs past midnight into the next day.
    Halfway cases use Python's round(), so 15 minutes gives 0 and 45 minutes gives 1.
    """
    diff = parse_time(end_time) - parse_time(start_time)
    if diff < 0:
        diff += MINUTES_PER_DAY
    return round(diff / 30) / 2


def assigned_hours(sessions) -> float:
    return sum((s.hours for s in sessions), 0)


def remaining_hours(course) -> float:
    """
    Budgeted hours not yet committed to sessions, floored at zero.
    Use is_over_assigned() to find out whether the floor was hit.
    """
    return max(0, course.total_hours - assigned_hours(course.sessions))


def is_over_assigned(course) -> bool:
    return assigned_hours(course.sessions) > course.total_hours


def available_hours(course, editing_session=None) -> float:
    """
    Hours that may be given to a new session, or to editing_session when it is
    being rescheduled (its current hours are handed back first).
    """
    available = remaining_hours(course)
    if editing_session is not None:
        available += editing_session.hours
    return available


def completion_percent(course) -> float:
    if not course.total_hours:
        return 0
    return assigned_hours(course.sessions) / course.total_hours * 100


def sorted_sessions(sessions):
    return sorted(sessions, key=lambda s: (s.date, s.start_time))


def validate_candidate(candidate):
    """
    Raise InvalidInput unless the candidate has a well formed date, start_time and end_time.
    """
    for field in ("date", "start_time", "end_time"):
        if not getattr(candidate, field, None):
            raise InvalidInput(f"Session {field} is required")

    if not _DATE_RE.match(candidate.date):
        raise InvalidInput(f"Invalid date {candidate.date!r}, expected YYYY-MM-DD")

    parse_time(candidate.start_time)
    parse_time(candidate.end_time)


def _course_has_expert(course, expert_id):
    return any(expert.id == expert_id for expert in course.experts)


def _clashing_sessions(candidate, expert_id, all_courses, exclude_course_id):
    for course in all_courses:
        if exclude_course_id is not None and course.id == exclude_course_id:
            continue
        if not _course_has_expert(course, expert_id):
            continue

        for session in course.sessions:
            if session.date != candidate.date:
                continue
            if overlaps(candidate.start_time, candidate.end_time,
                        session.start_time, session.end_time):
                yield course, session


def has_conflict(candidate, expert_id, all_courses, exclude_course_id=None) -> bool:
    """
    Returns True if expert_id already has a session on the candidate's date
    whose time range overlaps the candidate's.

    Courses the expert does not teach are ignored, and exclude_course_id skips
    one course entirely (the course being edited). An expert id that matches
    no course simply yields False.
    """
    validate_candidate(candidate)
    for _ in _clashing_sessions(candidate, expert_id, all_courses, exclude_course_id):
        return True
    return False


def find_conflicts(candidate, expert_id, all_courses, exclude_course_id=None):
    """
    Same scan as has_conflict() but returns every clashing (course, session) pair.
    """
    validate_candidate(candidate)
    return list(_clashing_sessions(candidate, expert_id, all_courses, exclude_course_id))


def conflicting_experts(candidate, expert_ids, all_courses, exclude_course_id=None):
    """
    Check each expert on its own and return the ids that are double booked,
    in the order they were given.
    """
    validate_candidate(candidate)
    return [
        expert_id for expert_id in expert_ids
        if has_conflict(candidate, expert_id, all_courses, exclude_course_id)
    ]


def expert_sessions(expert_id, all_courses):
    """
    Every (course, session) pair taught by the expert, ordered by date and start time.
    """
    pairs = [
        (course, session)
        for course in all_courses
        if _course_has_expert(course, expert_id)
        for session in course.sessions
    ]
    pairs.sort(key=lambda pair: (pair[1].date, pair[1].start_time))
    return pairs


def week_schedule(expert_id, all_courses, day):
    """
    Returns {date: [(course, session), ...]} for the seven days of the
    Monday-based week containing `day` (a datetime.date).
    """
    monday = day - timedelta(days=day.weekday())
    week = {monday + timedelta(days=i): [] for i in range(7)}

    by_iso = {d.isoformat(): d for d in week}
    for course, session in expert_sessions(expert_id, all_courses):
        d = by_iso.get(session.date)
        if d is not None:
            week[d].append((course, session))

    return week


def parse_date(value) -> date_cls:
    if not value or not _DATE_RE.match(value):
        raise InvalidInput(f"Invalid date {value!r}, expected YYYY-MM-DD")
    try:
        return date_cls.fromisoformat(value)
    except ValueError:
        raise InvalidInput(f"Invalid date {value!r}")
