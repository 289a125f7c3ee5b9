# backend/tasks/services.py
import logging
import math
import re
from functools import wraps

from django.db import DatabaseError, IntegrityError
from django.utils import timezone

from .exceptions import NotFoundError, ServerError, ValidationError
from .logic import enforce_business_rules, validate_for_create, validate_for_update
from .query import TaskFilters, TaskQuery, normalize_query
from .repository import FIELD_MAP, TaskRepository
from .serializers import TaskSerializer

logger = logging.getLogger(__name__)

TASK_ID_RE = re.compile(r"[0-9]+")
MAX_TASK_ID = 2**63 - 1


def storage_errors(action):
    """
    Storage failures never leave the service raw: constraint violations become
    a ValidationError, everything else a ServerError with a generic message.
    """

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            try:
                return fn(*args, **kwargs)
            except IntegrityError as exc:
                logger.warning("%s rejected by a storage constraint: %s", action, exc)
                raise ValidationError(
                    "Data validation failed", ["Task data violates a storage constraint"]
                ) from exc
            except DatabaseError as exc:
                logger.exception("%s failed", action)
                raise ServerError(f"{action} failed", debug_detail=f"{type(exc).__name__}: {exc}") from exc

        return wrapper

    return decorator


def parse_task_id(task_id):
    """Positive integer ids only; numeric strings from the URL are accepted."""
    if isinstance(task_id, bool):
        raise ValidationError("Invalid task ID", ["id: Must be a positive integer."])
    raw = str(task_id).strip() if task_id is not None else ""
    if not TASK_ID_RE.fullmatch(raw):
        raise ValidationError("Invalid task ID", ["id: Must be a positive integer."])
    value = int(raw)
    if value <= 0 or value > MAX_TASK_ID:
        raise ValidationError("Invalid task ID", ["id: Must be a positive integer."])
    return value


def paginate(total, limit, offset):
    # no limit means one page holding every row, so the offset is moot
    if limit is None:
        offset = 0
    page_size = limit or total
    if page_size:
        current_page = offset // page_size + 1
        total_pages = math.ceil(total / page_size)
    else:
        current_page, total_pages = 1, 0
    return {
        "total": total,
        "limit": page_size,
        "offset": offset,
        "hasMore": offset + page_size < total,
        "currentPage": current_page,
        "totalPages": total_pages,
    }


class TaskService:
    """All task reads and writes go through here."""

    def __init__(self, repository=None):
        self.repository = repository or TaskRepository()

    @staticmethod
    def _to_api(task):
        return TaskSerializer(task).data

    @storage_errors("Task creation")
    def create_task(self, data):
        validation = validate_for_create(data)
        if not validation.valid:
            raise ValidationError("Validation failed", validation.errors)

        payload = enforce_business_rules(
            {
                "title": validation.data["title"].strip(),
                "dueDate": validation.data.get("dueDate"),
                "progress": 0,
                "completed": False,
            }
        )
        task = self.repository.create(payload)
        logger.info("Task created id=%s", task.id)
        return self._to_api(task)

    @storage_errors("Task retrieval")
    def get_task(self, task_id):
        task = self.repository.get_by_id(parse_task_id(task_id))
        if task is None:
            raise NotFoundError()
        return self._to_api(task)

    @storage_errors("Tasks retrieval")
    def list_tasks(self, params=None):
        query = params if isinstance(params, TaskQuery) else normalize_query(params or {})

        tasks = self.repository.list(query)
        total = self.repository.count(query.filters)

        return {
            "tasks": [self._to_api(t) for t in tasks],
            "pagination": paginate(total, query.limit, query.offset),
            "filters": query.filters.echo(),
            "sort": query.echo_sort(),
        }

    @storage_errors("Task update")
    def update_task(self, task_id, data):
        pk = parse_task_id(task_id)

        validation = validate_for_update(data if data is not None else {})
        if not validation.valid:
            raise ValidationError("Validation failed", validation.errors)

        if self.repository.get_by_id(pk) is None:
            raise NotFoundError()

        changes = dict(validation.data)
        if "title" in changes:
            changes["title"] = changes["title"].strip()
        changes = enforce_business_rules(changes)
        changes = {k: v for k, v in changes.items() if k in FIELD_MAP}

        task = self.repository.update(pk, changes)
        if task is None:
            # deleted between the existence check and the write
            raise NotFoundError()
        logger.info("Task updated id=%s fields=%s", pk, sorted(changes))
        return self._to_api(task)

    def update_task_progress(self, task_id, progress):
        parse_task_id(task_id)
        if progress is None:
            raise ValidationError("Validation failed", ["progress: This field is required."])
        return self.update_task(task_id, {"progress": progress})

    def toggle_task_completion(self, task_id):
        current = self.get_task(task_id)
        return self.update_task(task_id, {"completed": not current["completed"]})

    @storage_errors("Task deletion")
    def delete_task(self, task_id):
        pk = parse_task_id(task_id)
        if not self.repository.delete(pk):
            raise NotFoundError()
        logger.info("Task deleted id=%s", pk)
        return True

    def get_overdue_tasks(self, today=None):
        """Uncompleted tasks due strictly before today, earliest first."""
        today = today or timezone.localdate()
        query = TaskQuery(
            filters=TaskFilters(completed=False, due_date_to=today),
            sort_by="dueDate",
            sort_order="asc",
        )
        result = self.list_tasks(query)
        cutoff = today.isoformat()
        return [t for t in result["tasks"] if t["dueDate"] and t["dueDate"] < cutoff]

    @storage_errors("Statistics retrieval")
    def get_task_statistics(self, today=None):
        today = today or timezone.localdate()
        count = self.repository.count

        total = count()
        completed = count(TaskFilters(completed=True))
        in_progress = count(TaskFilters(completed=False, progress_min=1))
        not_started = count(TaskFilters(completed=False, progress_max=0))
        overdue = count(TaskFilters(completed=False, due_date_to=today))

        return {
            "total": total,
            "completed": completed,
            "inProgress": in_progress,
            "notStarted": not_started,
            "overdue": overdue,
            "completionRate": _percent(completed, total),
        }


def _percent(part, whole):
    # rounds half up, unlike round()
    if whole <= 0:
        return 0
    return (part * 200 + whole) // (2 * whole)
