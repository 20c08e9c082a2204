import copy
from datetime import date

from django.test import SimpleTestCase
from scheduling_app.services.calendar import (
    conflicting_experts,
    expert_sessions,
    find_conflicts,
    has_conflict,
    week_schedule,
)
from scheduling_app.services.errors import InvalidInput
from scheduling_app.services.snapshots import CourseSnapshot, ExpertRef, SessionSnapshot


def _slot(day, start, end):
    return SessionSnapshot(None, day, start, end)


class ConflictCheckerTests(SimpleTestCase):
    def setUp(self):
        self.exp1 = ExpertRef(1, "Anna Rossi", 60)
        self.exp2 = ExpertRef(2, "Marco Bianchi", 60)

        # Course A: exp1, 15 May 14:00 - 16:00
        self.course_a = CourseSnapshot(
            id=10, title="Robotics", total_hours=20,
            experts=(self.exp1,),
            sessions=(SessionSnapshot(100, "2025-05-15", "14:00", "16:00", 2),),
        )
        # Course B: exp1 and exp2, 15 May 09:00 - 11:00
        self.course_b = CourseSnapshot(
            id=11, title="Coding", total_hours=10,
            experts=(self.exp1, self.exp2),
            sessions=(SessionSnapshot(101, "2025-05-15", "09:00", "11:00", 2),),
        )
        self.all_courses = [self.course_a, self.course_b]

    def test_same_expert_same_date_overlapping(self):
        candidate = _slot("2025-05-15", "15:00", "17:00")
        self.assertTrue(has_conflict(candidate, 1, [self.course_a]))

    def test_different_date(self):
        candidate = _slot("2025-05-16", "15:00", "17:00")
        self.assertFalse(has_conflict(candidate, 1, [self.course_a]))

    def test_excluded_course_is_skipped(self):
        candidate = _slot("2025-05-15", "14:00", "16:00")
        self.assertFalse(has_conflict(candidate, 1, [self.course_a], exclude_course_id=10))

    def test_different_expert(self):
        candidate = _slot("2025-05-15", "14:00", "16:00")
        self.assertFalse(has_conflict(candidate, 2, [self.course_a]))

    def test_back_to_back_is_not_a_conflict(self):
        candidate = _slot("2025-05-15", "16:00", "18:00")
        self.assertFalse(has_conflict(candidate, 1, self.all_courses))

    def test_zero_length_session_does_not_conflict(self):
        candidate = _slot("2025-05-15", "15:00", "15:00")
        self.assertFalse(has_conflict(candidate, 1, self.all_courses))

    def test_unknown_or_empty_expert(self):
        candidate = _slot("2025-05-15", "14:00", "16:00")
        self.assertFalse(has_conflict(candidate, 999, self.all_courses))
        self.assertFalse(has_conflict(candidate, "", self.all_courses))

    def test_missing_fields_raise_invalid_input(self):
        for candidate in (
            _slot("", "14:00", "16:00"),
            _slot("2025-05-15", "", "16:00"),
            _slot("2025-05-15", "14:00", ""),
            _slot("15/05/2025", "14:00", "16:00"),
            _slot("2025-05-15", "2pm", "16:00"),
        ):
            with self.assertRaises(InvalidInput):
                has_conflict(candidate, 1, self.all_courses)

    def test_repeated_calls_do_not_change_inputs(self):
        candidate = _slot("2025-05-15", "15:00", "17:00")
        before = copy.deepcopy(self.all_courses)

        results = {has_conflict(candidate, 1, self.all_courses) for _ in range(5)}

        self.assertEqual(results, {True})
        self.assertEqual(self.all_courses, before)

    def test_each_expert_is_checked_independently(self):
        # 10:00 clashes with course B for both experts, course A is later
        candidate = _slot("2025-05-15", "10:00", "12:00")
        self.assertEqual(conflicting_experts(candidate, [2, 1], self.all_courses), [2, 1])

        # 15:00 only clashes with course A, which exp2 does not teach
        candidate = _slot("2025-05-15", "15:00", "16:00")
        self.assertEqual(conflicting_experts(candidate, [1, 2], self.all_courses), [1])

    def test_find_conflicts_lists_every_clash(self):
        candidate = _slot("2025-05-15", "10:00", "15:00")
        clashes = find_conflicts(candidate, 1, self.all_courses)
        self.assertEqual(
            [(course.id, session.id) for course, session in clashes],
            [(10, 100), (11, 101)],
        )

    def test_expert_sessions_are_sorted(self):
        pairs = expert_sessions(1, self.all_courses)
        self.assertEqual([s.id for _, s in pairs], [101, 100])
        self.assertEqual([s.id for _, s in expert_sessions(2, self.all_courses)], [101])

    def test_week_schedule_starts_on_monday(self):
        # 15 May 2025 is a Thursday
        week = week_schedule(1, self.all_courses, date(2025, 5, 15))

        days = list(week)
        self.assertEqual(days[0], date(2025, 5, 12))
        self.assertEqual(len(days), 7)
        self.assertEqual([s.id for _, s in week[date(2025, 5, 15)]], [101, 100])
        self.assertEqual(week[date(2025, 5, 12)], [])
