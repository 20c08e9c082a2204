import json
from unittest.mock import patch

from django.test import TestCase
from django.urls import reverse
from scheduling_app.models import Course, CourseExpert, CourseSession, Expert, Project, School
from scheduling_app.services.errors import SchedulingError


class SchedulingApiTests(TestCase):

    def setUp(self):
        self.school = School.objects.create(
            name="IC Leonardo", address="Via Roma 1", principal_name="Preside",
            principal_phone="06 123", manager_name="DSGA", manager_phone="06 456",
        )
        self.project = Project.objects.create(
            school=self.school, name="PON Competenze", year=2025, project_type="PON"
        )
        self.expert = Expert.objects.create(
            first_name="Anna", last_name="Rossi", phone="333", email="anna@example.com",
            fiscal_code="RSSNNA80A01H501U",
        )
        self.course = Course.objects.create(
            title="Robotics", total_hours=10, school=self.school, project=self.project
        )
        CourseExpert.objects.create(course=self.course, expert=self.expert, hourly_rate=70)

        self.other = Course.objects.create(title="Coding", total_hours=10)
        CourseExpert.objects.create(course=self.other, expert=self.expert)
        CourseSession.objects.create(
            course=self.other, date="2025-05-15", start_time="14:00", end_time="16:00"
        )

    def post_json(self, url, payload):
        return self.client.post(url, data=json.dumps(payload), content_type="application/json")

    def test_add_session(self):
        url = reverse("api_add_session", args=[self.course.pk])
        response = self.post_json(url, {"date": "2025-05-16", "start_time": "09:00", "end_time": "12:00"})

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["session"]["hours"], 3)
        self.course.refresh_from_db()
        self.assertEqual(self.course.remaining_hours, 7)

    def test_add_session_conflict_returns_409(self):
        url = reverse("api_add_session", args=[self.course.pk])
        response = self.post_json(url, {"date": "2025-05-15", "start_time": "15:00", "end_time": "17:00"})

        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()["expert_ids"], [self.expert.pk])

    def test_add_session_over_budget_returns_422(self):
        url = reverse("api_add_session", args=[self.course.pk])
        response = self.post_json(url, {"date": "2025-05-16", "start_time": "08:00", "end_time": "20:00"})

        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json()["available"], 10)

    def test_add_session_invalid_input_returns_400(self):
        url = reverse("api_add_session", args=[self.course.pk])
        response = self.post_json(url, {"date": "2025-05-16", "start_time": "09:00"})
        self.assertEqual(response.status_code, 400)

        response = self.client.post(url, data="not json", content_type="application/json")
        self.assertEqual(response.status_code, 400)

    def test_expert_ids_must_be_a_list_of_ids(self):
        url = reverse("api_add_session", args=[self.course.pk])
        base = {"date": "2025-05-16", "start_time": "09:00", "end_time": "10:00"}

        for expert_ids in (str(self.expert.pk), [True], [1.5], {"id": self.expert.pk}):
            response = self.post_json(url, dict(base, expert_ids=expert_ids))
            self.assertEqual(response.status_code, 400, expert_ids)

        self.assertFalse(self.course.sessions.exists())

    def test_check_conflicts_rejects_boolean_course_id(self):
        payload = {
            "date": "2025-05-15", "start_time": "15:00", "end_time": "17:00",
            "expert_ids": [self.expert.pk], "exclude_course_id": True,
        }
        response = self.post_json(reverse("api_check_conflicts"), payload)
        self.assertEqual(response.status_code, 400)

    @patch("scheduling_app.views.SessionBooker.add_session", side_effect=SchedulingError("booking failed"))
    def test_any_scheduling_error_returns_400(self, mock_add):
        url = reverse("api_add_session", args=[self.course.pk])
        response = self.post_json(url, {"date": "2025-05-16", "start_time": "09:00", "end_time": "10:00"})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"success": False, "error": "booking failed"})
        mock_add.assert_called_once()

    def test_update_and_delete_session(self):
        session = CourseSession.objects.create(
            course=self.course, date="2025-05-16", start_time="09:00", end_time="10:00"
        )

        url = reverse("api_update_session", args=[self.course.pk, session.pk])
        response = self.post_json(url, {"date": "2025-05-16", "start_time": "09:00", "end_time": "11:00"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["session"]["hours"], 2)

        url = reverse("api_delete_session", args=[self.course.pk, session.pk])
        response = self.client.post(url)
        self.assertEqual(response.status_code, 200)
        self.assertFalse(CourseSession.objects.filter(pk=session.pk).exists())

    def test_session_of_another_course_is_404(self):
        session = self.other.sessions.first()
        url = reverse("api_update_session", args=[self.course.pk, session.pk])
        response = self.post_json(url, {"date": "2025-05-16", "start_time": "09:00", "end_time": "11:00"})
        self.assertEqual(response.status_code, 404)

    def test_course_calendar(self):
        CourseSession.objects.create(course=self.course, date="2025-05-20", start_time="09:00", end_time="11:00")
        CourseSession.objects.create(course=self.course, date="2025-05-18", start_time="09:00", end_time="12:00")

        response = self.client.get(reverse("api_course_calendar", args=[self.course.pk]))
        data = response.json()

        self.assertEqual(response.status_code, 200)
        self.assertEqual([s["date"] for s in data["sessions"]], ["2025-05-18", "2025-05-20"])
        self.assertEqual(data["assigned_hours"], 5)
        self.assertEqual(data["remaining_hours"], 5)
        self.assertEqual(data["completion_percent"], 50)
        self.assertFalse(data["over_assigned"])
        self.assertEqual(data["course"]["experts"][0]["hourly_rate"], 70)

    def test_check_conflicts_dry_run(self):
        url = reverse("api_check_conflicts")
        payload = {
            "date": "2025-05-15", "start_time": "15:00", "end_time": "17:00",
            "expert_ids": [self.expert.pk],
        }

        data = self.post_json(url, payload).json()
        self.assertTrue(data["conflict"])
        self.assertEqual(data["hours"], 2)
        self.assertEqual(data["conflicts"][0]["course_id"], self.other.pk)

        payload["exclude_course_id"] = self.other.pk
        data = self.post_json(url, payload).json()
        self.assertFalse(data["conflict"])
        self.assertEqual(CourseSession.objects.count(), 1)

    def test_check_conflicts_requires_times(self):
        response = self.post_json(reverse("api_check_conflicts"), {"date": "2025-05-15"})
        self.assertEqual(response.status_code, 400)

    def test_expert_schedule(self):
        url = reverse("api_expert_schedule", args=[self.expert.pk])
        data = self.client.get(url, {"week": "2025-05-15"}).json()

        self.assertEqual(data["days"][0]["date"], "2025-05-12")
        thursday = data["days"][3]
        self.assertEqual(thursday["date"], "2025-05-15")
        self.assertEqual(thursday["sessions"][0]["course_title"], "Coding")

        response = self.client.get(url, {"week": "15/05/2025"})
        self.assertEqual(response.status_code, 400)

    def test_stats(self):
        data = self.client.get(reverse("api_stats")).json()
        self.assertEqual(data["total_schools"], 1)
        self.assertEqual(data["total_projects"], 1)
        self.assertEqual(data["total_experts"], 1)
        self.assertEqual(data["total_courses"], 2)
        self.assertEqual(data["total_hours"], 20)
        self.assertEqual(data["assigned_hours"], 2)

    def test_get_not_allowed_on_post_endpoints(self):
        response = self.client.get(reverse("api_add_session", args=[self.course.pk]))
        self.assertEqual(response.status_code, 405)
