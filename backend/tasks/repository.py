# backend/tasks/repository.py
import logging

from django.db import DatabaseError, connection, transaction

from .logic import touch
from .models import Task

logger = logging.getLogger(__name__)

# wire name -> column; only these can be written through update()
FIELD_MAP = {
    "title": "title",
    "dueDate": "due_date",
    "progress": "progress",
    "completed": "completed",
}


class TaskRepository:
    """
    Django ORM access to the tasks table.

    Takes wire-shaped (camelCase) payloads and returns Task model instances.
    Every write is followed by a fresh read so callers see what the database
    actually holds, triggers included.
    """

    # ---- helpers ----

    @staticmethod
    def _filtered(filters):
        qs = Task.objects.all()
        if filters is None:
            return qs
        if filters.completed is not None:
            qs = qs.filter(completed=filters.completed)
        if filters.due_date_from is not None:
            qs = qs.filter(due_date__gte=filters.due_date_from)
        if filters.due_date_to is not None:
            qs = qs.filter(due_date__lte=filters.due_date_to)
        if filters.progress_min is not None:
            qs = qs.filter(progress__gte=filters.progress_min)
        if filters.progress_max is not None:
            qs = qs.filter(progress__lte=filters.progress_max)
        return qs

    # ---- public API ----

    def create(self, data):
        task = Task(
            title=data["title"],
            due_date=data.get("dueDate"),
            progress=data.get("progress", 0),
            completed=bool(data.get("completed", False)),
        )
        touch(task)
        task.created_at = task.updated_at
        task.save(force_insert=True)
        logger.debug("Task created id=%s due_date=%s", task.pk, task.due_date)
        return self.get_by_id(task.pk)

    def get_by_id(self, task_id):
        return Task.objects.filter(pk=task_id).first()

    def list(self, query):
        prefix = "-" if query.sort_order == "desc" else ""
        qs = self._filtered(query.filters).order_by(f"{prefix}{query.sort_column}", f"{prefix}id")
        if query.limit is None:
            # offset only applies together with a limit
            return list(qs)
        start = query.offset or 0
        return list(qs[start:start + query.limit])

    def count(self, filters=None):
        return self._filtered(filters).count()

    def update(self, task_id, data):
        """Write only the supplied fields. None if the task does not exist."""
        fields = {FIELD_MAP[k]: v for k, v in data.items() if k in FIELD_MAP}

        with transaction.atomic():
            task = Task.objects.select_for_update().filter(pk=task_id).first()
            if task is None:
                return None
            if not fields:
                return task
            for column, value in fields.items():
                setattr(task, column, value)
            touch(task)
            task.save(update_fields=[*fields, "updated_at"])

        logger.debug("Task updated id=%s fields=%s", task_id, sorted(fields))
        return self.get_by_id(task_id)

    def delete(self, task_id):
        deleted, _ = Task.objects.filter(pk=task_id).delete()
        if deleted:
            logger.debug("Task deleted id=%s", task_id)
        return deleted > 0

    def health_check(self):
        try:
            with connection.cursor() as cursor:
                cursor.execute("SELECT 1")
                return cursor.fetchone() == (1,)
        except DatabaseError:
            logger.exception("Database health check failed")
            return False
