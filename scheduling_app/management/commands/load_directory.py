import json
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from scheduling_app.models import (
    Course,
    CourseExpert,
    CourseSession,
    Expert,
    ExpertSubject,
    Project,
    School,
    SchoolLocation,
)
from scheduling_app.services.errors import InvalidInput


class Command(BaseCommand):
    help = "Load schools, projects, experts and courses (with sessions) from a JSON file"

    def add_arguments(self, parser):
        parser.add_argument("path", nargs="?", default="data/directory.json")

    def handle(self, *args, **options):
        path = options["path"]

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            raise CommandError(f"File not found: {path}")
        except json.JSONDecodeError as e:
            raise CommandError(f"Invalid JSON in {path}: {e}")

        with transaction.atomic():
            schools = self._load_schools(data.get("schools", []))
            experts = self._load_experts(data.get("experts", []))
            self._load_courses(data.get("courses", []), schools, experts)

        self.stdout.write(self.style.SUCCESS("Directory import complete."))

    def _load_schools(self, rows):
        """
        Returns {school name: School} so courses and projects can refer to schools by name.
        """
        schools = {}
        for r in rows:
            school, _ = School.objects.update_or_create(
                name=r["name"].strip(),
                defaults={
                    "address": r.get("address", ""),
                    "principal_name": r.get("principal_name", ""),
                    "principal_phone": r.get("principal_phone", ""),
                    "manager_name": r.get("manager_name", ""),
                    "manager_phone": r.get("manager_phone", ""),
                    "map_link": r.get("map_link") or None,
                },
            )
            schools[school.name] = school

            for loc in r.get("locations", []):
                SchoolLocation.objects.update_or_create(
                    school=school,
                    name=loc["name"].strip(),
                    defaults={
                        "address": loc.get("address", ""),
                        "manager_name": loc.get("manager_name", ""),
                        "manager_phone": loc.get("manager_phone", ""),
                        "map_link": loc.get("map_link") or None,
                    },
                )

            for p in r.get("projects", []):
                Project.objects.update_or_create(
                    school=school,
                    name=p["name"].strip(),
                    year=p["year"],
                    defaults={"project_type": p.get("type", "")},
                )

        self.stdout.write(f"Loaded {len(schools)} schools.")
        return schools

    def _load_experts(self, rows):
        """
        Returns {fiscal code: Expert}; the fiscal code identifies an expert in the file.
        """
        experts = {}
        for r in rows:
            expert, _ = Expert.objects.update_or_create(
                fiscal_code=r["fiscal_code"].strip(),
                defaults={
                    "first_name": r.get("first_name", ""),
                    "last_name": r.get("last_name", ""),
                    "phone": r.get("phone", ""),
                    "email": r.get("email", ""),
                    "vat_number": r.get("vat_number", ""),
                },
            )
            experts[expert.fiscal_code] = expert

            for subject in r.get("subjects", []):
                ExpertSubject.objects.get_or_create(expert=expert, subject=subject.strip())

        self.stdout.write(f"Loaded {len(experts)} experts.")
        return experts

    def _load_courses(self, rows, schools, experts):
        for r in rows:
            title = r.get("title", "?")
            try:
                self._load_course(r, schools, experts)
            except KeyError as e:
                raise CommandError(f"Course {title}: missing field {e}")
            except InvalidInput as e:
                raise CommandError(f"Course {title}: {e}")

        self.stdout.write(f"Loaded {len(rows)} courses.")

    def _load_course(self, r, schools, experts):
        school = schools.get(r.get("school"))
        project = None
        if school and r.get("project"):
            project = Project.objects.filter(school=school, name=r["project"]).first()

        course, _ = Course.objects.update_or_create(
            title=r["title"].strip(),
            school=school,
            defaults={
                "description": r.get("description", ""),
                "project": project,
                "location": r.get("location", ""),
                "total_hours": r["total_hours"],
                "tutor_name": r.get("tutor_name", ""),
                "tutor_phone": r.get("tutor_phone", ""),
                "start_date": r.get("start_date"),
                "end_date": r.get("end_date"),
            },
        )

        for e in r.get("experts", []):
            expert = experts.get(e["fiscal_code"])
            if not expert:
                self.stdout.write(self.style.WARNING(
                    f"Unknown expert {e['fiscal_code']} on course {course.title}, skipping..."
                ))
                continue
            defaults = {}
            if e.get("hourly_rate") is not None:
                defaults["hourly_rate"] = e["hourly_rate"]
            CourseExpert.objects.update_or_create(course=course, expert=expert, defaults=defaults)

        # Sessions are replaced wholesale; save() derives their hours.
        course.sessions.all().delete()
        for s in r.get("sessions", []):
            CourseSession.objects.create(
                course=course,
                date=s["date"],
                start_time=s["start_time"],
                end_time=s["end_time"],
            )

        course.save(update_fields=["remaining_hours"])
