from django.urls import path

from . import views

urlpatterns = [
    # ---------------------------------------------------------------
    #  API Endpoints
    # ---------------------------------------------------------------
    path("api/stats/", views.api_stats, name="api_stats"),
    path(
        "api/courses/<int:course_id>/calendar/",
        views.api_course_calendar,
        name="api_course_calendar",
    ),
    path(
        "api/courses/<int:course_id>/sessions/",
        views.api_add_session,
        name="api_add_session",
    ),
    path(
        "api/courses/<int:course_id>/sessions/<int:session_id>/",
        views.api_update_session,
        name="api_update_session",
    ),
    path(
        "api/courses/<int:course_id>/sessions/<int:session_id>/delete/",
        views.api_delete_session,
        name="api_delete_session",
    ),
    path(
        "api/conflicts/check/",
        views.api_check_conflicts,
        name="api_check_conflicts",
    ),
    path(
        "api/experts/<int:expert_id>/schedule/",
        views.api_expert_schedule,
        name="api_expert_schedule",
    ),
]
