from django.conf import settings
from django.core.validators import MinValueValidator, RegexValidator
from django.db import models
from django.db.models import Sum

from .services.calendar import hours_between

date_validator = RegexValidator(r"^\d{4}-\d{2}-\d{2}$", "Use the YYYY-MM-DD format.")
time_validator = RegexValidator(r"^([01]\d|2[0-3]):[0-5]\d$", "Use the 24-hour HH:MM format.")


def _default_hourly_rate():
    return getattr(settings, "SCHEDULING_DEFAULT_HOURLY_RATE", 60)


class School(models.Model):
    name = models.CharField(max_length=255)
    address = models.CharField(max_length=255)
    principal_name = models.CharField(max_length=255)
    principal_phone = models.CharField(max_length=50)
    manager_name = models.CharField(max_length=255)
    manager_phone = models.CharField(max_length=50)
    map_link = models.URLField(max_length=500, blank=True, null=True)

    def __str__(self):
        return self.name


class SchoolLocation(models.Model):
    school = models.ForeignKey(School, on_delete=models.CASCADE, related_name="locations")
    name = models.CharField(max_length=255)
    address = models.CharField(max_length=255)
    manager_name = models.CharField(max_length=255)
    manager_phone = models.CharField(max_length=50)
    map_link = models.URLField(max_length=500, blank=True, null=True)


class Project(models.Model):
    school = models.ForeignKey(School, on_delete=models.CASCADE, related_name="projects")
    name = models.CharField(max_length=255)
    year = models.IntegerField()
    project_type = models.CharField(max_length=100)

    def __str__(self):
        return f"{self.name} ({self.year})"


class Expert(models.Model):
    first_name = models.CharField(max_length=255)
    last_name = models.CharField(max_length=255)
    phone = models.CharField(max_length=50)
    email = models.EmailField()
    fiscal_code = models.CharField(max_length=16)
    vat_number = models.CharField(max_length=20, blank=True)

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()

    def __str__(self):
        return self.full_name


class ExpertSubject(models.Model):
    expert = models.ForeignKey(Expert, on_delete=models.CASCADE, related_name="subjects")
    subject = models.CharField(max_length=255)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["expert", "subject"], name="unique_expert_subject")
        ]


class Course(models.Model):
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    project = models.ForeignKey(
        Project,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="courses"
    )
    school = models.ForeignKey(
        School,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="courses"
    )
    location = models.CharField(max_length=255, blank=True)
    total_hours = models.PositiveIntegerField()
    remaining_hours = models.FloatField(default=0)   # recomputed on every session change
    tutor_name = models.CharField(max_length=255, blank=True)
    tutor_phone = models.CharField(max_length=50, blank=True)
    start_date = models.CharField(max_length=10, blank=True, null=True, validators=[date_validator])
    end_date = models.CharField(max_length=10, blank=True, null=True, validators=[date_validator])
    experts = models.ManyToManyField(Expert, through="CourseExpert", related_name="courses")

    def compute_remaining_hours(self):
        """Budgeted hours minus the hours of the stored sessions, floored at zero."""
        if self.pk is None:
            return self.total_hours
        booked = self.sessions.aggregate(s=Sum("hours"))["s"] or 0
        return max(0, self.total_hours - booked)

    def save(self, *args, **kwargs):
        self.remaining_hours = self.compute_remaining_hours()
        update_fields = kwargs.get("update_fields")
        if update_fields is not None:
            kwargs["update_fields"] = set(update_fields) | {"remaining_hours"}
        super().save(*args, **kwargs)

    def __str__(self):
        return self.title


class CourseExpert(models.Model):
    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name="course_experts")
    expert = models.ForeignKey(Expert, on_delete=models.CASCADE, related_name="course_assignments")
    hourly_rate = models.DecimalField(max_digits=8, decimal_places=2, default=_default_hourly_rate)

    class Meta:
        ordering = ["id"]
        constraints = [
            models.UniqueConstraint(fields=["course", "expert"], name="unique_course_expert")
        ]


class CourseSession(models.Model):
    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name="sessions")
    date = models.CharField(max_length=10, validators=[date_validator])         # YYYY-MM-DD
    start_time = models.CharField(max_length=5, validators=[time_validator])    # HH:MM
    end_time = models.CharField(max_length=5, validators=[time_validator])
    hours = models.FloatField(default=0, validators=[MinValueValidator(0)])

    class Meta:
        ordering = ["date", "start_time"]
        indexes = [
            models.Index(fields=["date"], name="session_date_idx"),
        ]

    def save(self, *args, **kwargs):
        # hours always follows the clock times, never a hand-entered value
        self.hours = hours_between(self.start_time, self.end_time)
        super().save(*args, **kwargs)
        self._refresh_course()

    def delete(self, *args, **kwargs):
        result = super().delete(*args, **kwargs)
        self._refresh_course()
        return result

    def _refresh_course(self):
        course = Course.objects.filter(pk=self.course_id).first()
        if course is not None:
            course.save(update_fields=["remaining_hours"])

    def __str__(self):
        return f"{self.date} {self.start_time}-{self.end_time}"
