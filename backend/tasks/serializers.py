import datetime
import re

from rest_framework import serializers

from .models import TITLE_MAX_LENGTH, Task

ISO_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


# --- strict JSON fields: no coercion from other JSON types ---
class StrictCharField(serializers.CharField):
    default_error_messages = {"invalid": "Must be a string."}

    def to_internal_value(self, data):
        if not isinstance(data, str):
            self.fail("invalid")
        return super().to_internal_value(data)


class StrictIntegerField(serializers.IntegerField):
    default_error_messages = {"invalid": "Must be an integer."}

    def to_internal_value(self, data):
        if isinstance(data, bool) or not isinstance(data, (int, float)):
            self.fail("invalid")
        if isinstance(data, float) and not data.is_integer():
            self.fail("invalid")
        return int(data)


class StrictBooleanField(serializers.BooleanField):
    default_error_messages = {"invalid": "Must be true or false."}

    def to_internal_value(self, data):
        if not isinstance(data, bool):
            self.fail("invalid")
        return data


class IsoDateField(serializers.DateField):
    """YYYY-MM-DD only, and it has to be a real calendar date."""

    default_error_messages = {
        "format": "Must be a date in YYYY-MM-DD format.",
        "invalid_date": "Must be a valid calendar date.",
    }

    def __init__(self, **kwargs):
        kwargs.setdefault("format", "%Y-%m-%d")
        super().__init__(**kwargs)

    def to_internal_value(self, value):
        if not isinstance(value, str) or not ISO_DATE_RE.fullmatch(value):
            self.fail("format")
        try:
            return datetime.date.fromisoformat(value)
        except ValueError:
            self.fail("invalid_date")


# --- input ---
class TaskCreateSerializer(serializers.Serializer):
    title = StrictCharField(max_length=TITLE_MAX_LENGTH)
    dueDate = IsoDateField(required=False, allow_null=True)


class TaskUpdateSerializer(serializers.Serializer):
    title = StrictCharField(required=False, max_length=TITLE_MAX_LENGTH)
    dueDate = IsoDateField(required=False, allow_null=True)
    progress = StrictIntegerField(required=False, min_value=0, max_value=100)
    completed = StrictBooleanField(required=False)


# --- output (wire shape) ---
class TaskSerializer(serializers.ModelSerializer):
    dueDate = serializers.DateField(source="due_date", read_only=True, format="%Y-%m-%d")
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Task
        fields = ["id", "title", "dueDate", "progress", "completed", "createdAt", "updatedAt"]
        read_only_fields = fields
