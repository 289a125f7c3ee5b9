from django.db import models
from django.db.models.functions import Length
from django.db.models.lookups import GreaterThanOrEqual, LessThanOrEqual

TITLE_MAX_LENGTH = 500


class Task(models.Model):
    title = models.CharField(max_length=TITLE_MAX_LENGTH)
    due_date = models.DateField(blank=True, null=True)
    progress = models.PositiveSmallIntegerField(default=0)
    completed = models.BooleanField(default=False)
    created_at = models.DateTimeField(editable=False)
    updated_at = models.DateTimeField()

    class Meta:
        db_table = "tasks"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["completed"], name="idx_tasks_completed"),
            models.Index(fields=["due_date"], name="idx_tasks_due_date"),
            models.Index(fields=["progress"], name="idx_tasks_progress"),
            models.Index(fields=["created_at"], name="idx_tasks_created_at"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(
                    GreaterThanOrEqual(Length("title"), 1),
                    LessThanOrEqual(Length("title"), TITLE_MAX_LENGTH),
                ),
                name="tasks_title_length",
            ),
            models.CheckConstraint(
                condition=models.Q(progress__gte=0) & models.Q(progress__lte=100),
                name="tasks_progress_range",
            ),
        ]

    def __str__(self):
        return self.title
