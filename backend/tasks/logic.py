# backend/tasks/logic.py
"""
Task validation and the progress/completed consistency rule.

Everything here is pure: no database access. `touch` only sets an attribute.
"""
from dataclasses import dataclass, field

from django.utils import timezone

from .exceptions import flatten_errors
from .serializers import TaskCreateSerializer, TaskUpdateSerializer


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    errors: list = field(default_factory=list)
    data: dict = field(default_factory=dict)


def _validate(serializer_class, data):
    ser = serializer_class(data=data)
    if ser.is_valid():
        return ValidationResult(True, [], dict(ser.validated_data))
    # every violated rule is reported, not just the first one
    return ValidationResult(False, flatten_errors(ser.errors), {})


def validate_for_create(data):
    """
    title is required (1-500 chars after trimming), dueDate optional.
    Any progress/completed in the payload is ignored: new tasks always start at 0 / False.
    """
    return _validate(TaskCreateSerializer, data)


def validate_for_update(data):
    return _validate(TaskUpdateSerializer, data)


def enforce_business_rules(data):
    """
    progress == 100     -> completed = True
    completed is True   -> progress = 100

    completed = False never lowers progress, and progress < 100 never clears
    completed. Returns a new dict; f(f(x)) == f(x).
    """
    result = dict(data)
    if result.get("progress") == 100:
        result["completed"] = True
    if result.get("completed") is True and result.get("progress") != 100:
        result["progress"] = 100
    return result


def touch(task):
    task.updated_at = timezone.now()
    return task
