from django.db import migrations, models
from django.db.models.functions import Length
from django.db.models.lookups import GreaterThanOrEqual, LessThanOrEqual


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Task",
            fields=[
                ("id", models.AutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=500)),
                ("due_date", models.DateField(blank=True, null=True)),
                ("progress", models.PositiveSmallIntegerField(default=0)),
                ("completed", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(editable=False)),
                ("updated_at", models.DateTimeField()),
            ],
            options={
                "db_table": "tasks",
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(fields=["completed"], name="idx_tasks_completed"),
                    models.Index(fields=["due_date"], name="idx_tasks_due_date"),
                    models.Index(fields=["progress"], name="idx_tasks_progress"),
                    models.Index(fields=["created_at"], name="idx_tasks_created_at"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            GreaterThanOrEqual(Length("title"), 1),
                            LessThanOrEqual(Length("title"), 500),
                        ),
                        name="tasks_title_length",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("progress__gte", 0), ("progress__lte", 100)),
                        name="tasks_progress_range",
                    ),
                ],
            },
        ),
    ]
