import json
from datetime import date

from django.db.models import Sum
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.http import require_GET, require_POST

from .models import Course, CourseSession, Expert, Project, School
from .services.booking import SessionBooker
from .services.calendar import (
    assigned_hours,
    completion_percent,
    conflicting_experts,
    find_conflicts,
    hours_between,
    is_over_assigned,
    parse_date,
    remaining_hours,
    sorted_sessions,
    week_schedule,
)
from .services.errors import (
    InvalidInput,
    OverAssigned,
    SchedulingError,
    SessionConflict,
    SessionNotFound,
)
from .services.snapshots import SessionSnapshot, course_snapshot, load_course_snapshots

# ---------------------------------------------------------------------------
#  Helpers
# ---------------------------------------------------------------------------


def _read_json(request):
    """Decode the JSON request body into a dict, or raise InvalidInput."""
    try:
        data = json.loads(request.body or b"{}")
    except (ValueError, UnicodeDecodeError):
        raise InvalidInput("Request body is not valid JSON")
    if not isinstance(data, dict):
        raise InvalidInput("Request body must be a JSON object")
    return data


def _session_fields(data):
    return (
        str(data.get("date") or ""),
        str(data.get("start_time") or ""),
        str(data.get("end_time") or ""),
    )


def _as_id(value, name):
    # bool is a subclass of int, but true/false is never an id
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value)
    raise InvalidInput(f"{name} must be an integer")


def _expert_ids(data):
    ids = data.get("expert_ids")
    if ids is None:
        return None
    if not isinstance(ids, list):
        raise InvalidInput("expert_ids must be a list of integers")
    return [_as_id(i, "expert_ids") for i in ids]


def _session_json(session):
    return {
        "id": session.id,
        "date": session.date,
        "start_time": session.start_time,
        "end_time": session.end_time,
        "hours": session.hours,
    }


def _error_response(error):
    """Map a scheduling error onto a JSON error response."""
    if isinstance(error, SessionConflict):
        return JsonResponse(
            {"success": False, "error": str(error), "expert_ids": error.expert_ids},
            status=409,
        )
    if isinstance(error, OverAssigned):
        return JsonResponse(
            {
                "success": False,
                "error": str(error),
                "requested": error.requested,
                "available": error.available,
            },
            status=422,
        )
    if isinstance(error, SessionNotFound):
        return JsonResponse({"success": False, "error": str(error)}, status=404)
    return JsonResponse({"success": False, "error": str(error)}, status=400)


# ============================================================================
#  API ENDPOINTS
# ============================================================================


@require_GET
def api_stats(request):
    """
    Return JSON summary statistics for the dashboard.
    """
    total_hours = Course.objects.aggregate(s=Sum("total_hours"))["s"] or 0
    booked_hours = CourseSession.objects.aggregate(s=Sum("hours"))["s"] or 0

    return JsonResponse(
        {
            "total_schools": School.objects.count(),
            "total_projects": Project.objects.count(),
            "total_experts": Expert.objects.count(),
            "total_courses": Course.objects.count(),
            "total_hours": total_hours,
            "assigned_hours": booked_hours,
        }
    )


@require_GET
def api_course_calendar(request, course_id):
    """
    Return the course's sessions (sorted) with its hour budget figures.
    """
    course = get_object_or_404(Course, pk=course_id)
    snapshot = course_snapshot(course)

    return JsonResponse(
        {
            "course": {
                "id": course.id,
                "title": course.title,
                "total_hours": course.total_hours,
                "experts": [
                    {"id": e.id, "name": e.name, "hourly_rate": e.hourly_rate}
                    for e in snapshot.experts
                ],
            },
            "sessions": [_session_json(s) for s in sorted_sessions(snapshot.sessions)],
            "assigned_hours": assigned_hours(snapshot.sessions),
            "remaining_hours": remaining_hours(snapshot),
            "completion_percent": round(completion_percent(snapshot)),
            "over_assigned": is_over_assigned(snapshot),
        }
    )


@require_POST
def api_add_session(request, course_id):
    """
    Book a new session on the course. Body: date, start_time, end_time, optional expert_ids.
    """
    course = get_object_or_404(Course, pk=course_id)
    try:
        data = _read_json(request)
        session_date, start_time, end_time = _session_fields(data)
        session = SessionBooker().add_session(
            course, session_date, start_time, end_time, expert_ids=_expert_ids(data)
        )
    except SchedulingError as e:
        return _error_response(e)

    return JsonResponse({"success": True, "session": _session_json(session)}, status=201)


@require_POST
def api_update_session(request, course_id, session_id):
    """
    Reschedule an existing session of the course.
    """
    session = get_object_or_404(CourseSession, pk=session_id, course_id=course_id)
    try:
        data = _read_json(request)
        session_date, start_time, end_time = _session_fields(data)
        session = SessionBooker().update_session(
            session, session_date, start_time, end_time, expert_ids=_expert_ids(data)
        )
    except SchedulingError as e:
        return _error_response(e)

    return JsonResponse({"success": True, "session": _session_json(session)})


@require_POST
def api_delete_session(request, course_id, session_id):
    session = get_object_or_404(CourseSession, pk=session_id, course_id=course_id)
    try:
        SessionBooker().delete_session(session)
    except SchedulingError as e:
        return _error_response(e)

    return JsonResponse({"success": True})


@require_POST
def api_check_conflicts(request):
    """
    Dry run for the session form: computes the duration and reports which
    experts would be double booked, without saving anything.
    Body: date, start_time, end_time, expert_ids, optional exclude_course_id.
    """
    try:
        data = _read_json(request)
        session_date, start_time, end_time = _session_fields(data)
        candidate = SessionSnapshot(None, session_date, start_time, end_time)
        expert_ids = _expert_ids(data) or []
        exclude_course_id = data.get("exclude_course_id")
        if exclude_course_id is not None:
            exclude_course_id = _as_id(exclude_course_id, "exclude_course_id")

        all_courses = load_course_snapshots()
        clashes = conflicting_experts(candidate, expert_ids, all_courses, exclude_course_id)
        details = [
            {
                "expert_id": expert_id,
                "course_id": course.id,
                "course_title": course.title,
                "session": _session_json(session),
            }
            for expert_id in clashes
            for course, session in find_conflicts(candidate, expert_id, all_courses, exclude_course_id)
        ]
        hours = hours_between(start_time, end_time)
    except SchedulingError as e:
        return _error_response(e)

    return JsonResponse(
        {
            "conflict": bool(clashes),
            "expert_ids": clashes,
            "conflicts": details,
            "hours": hours,
        }
    )


@require_GET
def api_expert_schedule(request, expert_id):
    """
    Return the expert's sessions for the Monday-based week containing ?week=YYYY-MM-DD
    (today when omitted).
    """
    expert = get_object_or_404(Expert, pk=expert_id)
    try:
        week_param = request.GET.get("week")
        day = parse_date(week_param) if week_param else date.today()
    except SchedulingError as e:
        return _error_response(e)

    schedule = week_schedule(expert.pk, load_course_snapshots(expert.courses.all()), day)

    days = []
    for d, entries in schedule.items():
        days.append(
            {
                "date": d.isoformat(),
                "sessions": [
                    dict(_session_json(session), course_id=course.id, course_title=course.title)
                    for course, session in entries
                ],
            }
        )

    return JsonResponse(
        {
            "expert": {"id": expert.id, "name": expert.full_name},
            "days": days,
        }
    )
