# backend/tasks/query.py
import datetime
from dataclasses import dataclass, field
from typing import Optional

from rest_framework import serializers

from .exceptions import ValidationError, flatten_errors
from .serializers import IsoDateField

# wire name -> column
SORT_FIELDS = {
    "id": "id",
    "title": "title",
    "dueDate": "due_date",
    "progress": "progress",
    "completed": "completed",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}
DEFAULT_SORT_BY = "createdAt"
DEFAULT_SORT_ORDER = "desc"
MAX_LIMIT = 100


@dataclass(frozen=True)
class TaskFilters:
    completed: Optional[bool] = None
    due_date_from: Optional[datetime.date] = None
    due_date_to: Optional[datetime.date] = None
    progress_min: Optional[int] = None
    progress_max: Optional[int] = None

    def echo(self):
        """Supplied filters only, in wire form."""
        out = {
            "completed": self.completed,
            "dueDateFrom": self.due_date_from.isoformat() if self.due_date_from else None,
            "dueDateTo": self.due_date_to.isoformat() if self.due_date_to else None,
            "progressMin": self.progress_min,
            "progressMax": self.progress_max,
        }
        return {k: v for k, v in out.items() if v is not None}


@dataclass(frozen=True)
class TaskQuery:
    filters: TaskFilters = field(default_factory=TaskFilters)
    sort_by: str = DEFAULT_SORT_BY
    sort_order: str = DEFAULT_SORT_ORDER
    limit: Optional[int] = None
    offset: int = 0

    @property
    def sort_column(self):
        return SORT_FIELDS[self.sort_by]

    def echo_sort(self):
        return {"sortBy": self.sort_by, "sortOrder": self.sort_order}


class TaskQuerySerializer(serializers.Serializer):
    completed = serializers.ChoiceField(choices=["true", "false"], required=False)
    dueDateFrom = IsoDateField(required=False)
    dueDateTo = IsoDateField(required=False)
    progressMin = serializers.IntegerField(required=False, min_value=0, max_value=100)
    progressMax = serializers.IntegerField(required=False, min_value=0, max_value=100)
    limit = serializers.IntegerField(required=False, min_value=1, max_value=MAX_LIMIT)
    offset = serializers.IntegerField(required=False, min_value=0)


def normalize_query(params):
    """
    Raw query parameters (QueryDict or plain dict) -> TaskQuery.

    Unknown parameters and empty values are ignored. Bad values in typed fields
    raise one ValidationError naming every offending field. An unknown sortBy
    falls back to createdAt and anything but "asc" sorts descending.
    """
    raw = {}
    for name in TaskQuerySerializer().fields:
        value = params.get(name)
        if value is None or value == "":
            continue
        raw[name] = value

    ser = TaskQuerySerializer(data=raw)
    if not ser.is_valid():
        raise ValidationError("Invalid query parameters", flatten_errors(ser.errors))
    data = ser.validated_data

    completed = data.get("completed")
    filters = TaskFilters(
        completed=None if completed is None else completed == "true",
        due_date_from=data.get("dueDateFrom"),
        due_date_to=data.get("dueDateTo"),
        progress_min=data.get("progressMin"),
        progress_max=data.get("progressMax"),
    )

    # sort values are never rejected, only replaced by the defaults
    sort_by = str(params.get("sortBy") or "").strip()
    if sort_by not in SORT_FIELDS:
        sort_by = DEFAULT_SORT_BY
    sort_order = "asc" if str(params.get("sortOrder") or "").strip().lower() == "asc" else DEFAULT_SORT_ORDER

    return TaskQuery(
        filters=filters,
        sort_by=sort_by,
        sort_order=sort_order,
        limit=data.get("limit"),
        offset=data.get("offset", 0),
    )
