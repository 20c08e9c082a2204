from itertools import combinations
from django.core.management.base import BaseCommand
from scheduling_app.services.calendar import expert_sessions, is_over_assigned, assigned_hours, overlaps
from scheduling_app.services.snapshots import load_course_snapshots


class Command(BaseCommand):
    help = "Report experts booked twice at the same time, and courses over their hour budget"

    def handle(self, *args, **kwargs):
        courses = load_course_snapshots()

        experts = {}
        for course in courses:
            for expert in course.experts:
                experts.setdefault(expert.id, expert)

        clashes = 0
        for expert_id, expert in sorted(experts.items()):
            pairs = expert_sessions(expert_id, courses)

            for (course_a, a), (course_b, b) in combinations(pairs, 2):
                # Sessions of one course never conflict with each other
                if course_a.id == course_b.id or a.date != b.date:
                    continue
                if overlaps(a.start_time, a.end_time, b.start_time, b.end_time):
                    clashes += 1
                    self.stdout.write(self.style.WARNING(
                        f"{expert.name}: {a.date} {a.start_time}-{a.end_time} ({course_a.title}) "
                        f"overlaps {b.start_time}-{b.end_time} ({course_b.title})"
                    ))

        over = 0
        for course in courses:
            if is_over_assigned(course):
                over += 1
                self.stdout.write(self.style.WARNING(
                    f"{course.title}: {assigned_hours(course.sessions)} hours booked "
                    f"of {course.total_hours} budgeted"
                ))

        if clashes == 0 and over == 0:
            self.stdout.write(self.style.SUCCESS("No conflicts found."))
        else:
            self.stdout.write(self.style.ERROR(
                f"Found {clashes} double bookings and {over} over-assigned courses."
            ))
