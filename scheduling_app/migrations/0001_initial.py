import django.core.validators
import django.db.models.deletion
import scheduling_app.models
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Expert",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("first_name", models.CharField(max_length=255)),
                ("last_name", models.CharField(max_length=255)),
                ("phone", models.CharField(max_length=50)),
                ("email", models.EmailField(max_length=254)),
                ("fiscal_code", models.CharField(max_length=16)),
                ("vat_number", models.CharField(blank=True, max_length=20)),
            ],
        ),
        migrations.CreateModel(
            name="School",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255)),
                ("address", models.CharField(max_length=255)),
                ("principal_name", models.CharField(max_length=255)),
                ("principal_phone", models.CharField(max_length=50)),
                ("manager_name", models.CharField(max_length=255)),
                ("manager_phone", models.CharField(max_length=50)),
                ("map_link", models.URLField(blank=True, max_length=500, null=True)),
            ],
        ),
        migrations.CreateModel(
            name="Project",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255)),
                ("year", models.IntegerField()),
                ("project_type", models.CharField(max_length=100)),
                (
                    "school",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="projects",
                        to="scheduling_app.school",
                    ),
                ),
            ],
        ),
        migrations.CreateModel(
            name="SchoolLocation",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255)),
                ("address", models.CharField(max_length=255)),
                ("manager_name", models.CharField(max_length=255)),
                ("manager_phone", models.CharField(max_length=50)),
                ("map_link", models.URLField(blank=True, max_length=500, null=True)),
                (
                    "school",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="locations",
                        to="scheduling_app.school",
                    ),
                ),
            ],
        ),
        migrations.CreateModel(
            name="ExpertSubject",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("subject", models.CharField(max_length=255)),
                (
                    "expert",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="subjects",
                        to="scheduling_app.expert",
                    ),
                ),
            ],
            options={
                "constraints": [
                    models.UniqueConstraint(fields=("expert", "subject"), name="unique_expert_subject")
                ],
            },
        ),
        migrations.CreateModel(
            name="Course",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True)),
                ("location", models.CharField(blank=True, max_length=255)),
                ("total_hours", models.PositiveIntegerField()),
                ("remaining_hours", models.FloatField(default=0)),
                ("tutor_name", models.CharField(blank=True, max_length=255)),
                ("tutor_phone", models.CharField(blank=True, max_length=50)),
                (
                    "start_date",
                    models.CharField(
                        blank=True,
                        max_length=10,
                        null=True,
                        validators=[django.core.validators.RegexValidator("^\\d{4}-\\d{2}-\\d{2}$", "Use the YYYY-MM-DD format.")],
                    ),
                ),
                (
                    "end_date",
                    models.CharField(
                        blank=True,
                        max_length=10,
                        null=True,
                        validators=[django.core.validators.RegexValidator("^\\d{4}-\\d{2}-\\d{2}$", "Use the YYYY-MM-DD format.")],
                    ),
                ),
                (
                    "project",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="courses",
                        to="scheduling_app.project",
                    ),
                ),
                (
                    "school",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="courses",
                        to="scheduling_app.school",
                    ),
                ),
            ],
        ),
        migrations.CreateModel(
            name="CourseExpert",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "hourly_rate",
                    models.DecimalField(
                        decimal_places=2, default=scheduling_app.models._default_hourly_rate, max_digits=8
                    ),
                ),
                (
                    "course",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="course_experts",
                        to="scheduling_app.course",
                    ),
                ),
                (
                    "expert",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="course_assignments",
                        to="scheduling_app.expert",
                    ),
                ),
            ],
            options={
                "ordering": ["id"],
                "constraints": [
                    models.UniqueConstraint(fields=("course", "expert"), name="unique_course_expert")
                ],
            },
        ),
        migrations.AddField(
            model_name="course",
            name="experts",
            field=models.ManyToManyField(
                related_name="courses", through="scheduling_app.CourseExpert", to="scheduling_app.expert"
            ),
        ),
        migrations.CreateModel(
            name="CourseSession",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "date",
                    models.CharField(
                        max_length=10,
                        validators=[django.core.validators.RegexValidator("^\\d{4}-\\d{2}-\\d{2}$", "Use the YYYY-MM-DD format.")],
                    ),
                ),
                (
                    "start_time",
                    models.CharField(
                        max_length=5,
                        validators=[django.core.validators.RegexValidator("^([01]\\d|2[0-3]):[0-5]\\d$", "Use the 24-hour HH:MM format.")],
                    ),
                ),
                (
                    "end_time",
                    models.CharField(
                        max_length=5,
                        validators=[django.core.validators.RegexValidator("^([01]\\d|2[0-3]):[0-5]\\d$", "Use the 24-hour HH:MM format.")],
                    ),
                ),
                ("hours", models.FloatField(default=0, validators=[django.core.validators.MinValueValidator(0)])),
                (
                    "course",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="sessions",
                        to="scheduling_app.course",
                    ),
                ),
            ],
            options={
                "ordering": ["date", "start_time"],
                "indexes": [models.Index(fields=["date"], name="session_date_idx")],
            },
        ),
    ]
