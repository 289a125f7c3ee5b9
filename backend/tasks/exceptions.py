# backend/tasks/exceptions.py
import logging

from django.conf import settings
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class TaskAPIError(APIException):
    """Base for errors raised by the task service. Carries a list of messages in `details`."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Internal server error"
    default_code = "INTERNAL_ERROR"

    def __init__(self, message=None, details=None):
        super().__init__(detail=message or self.default_detail, code=self.default_code)
        self.details = [str(d) for d in (details or [])]


class ValidationError(TaskAPIError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Validation failed"
    default_code = "VALIDATION_ERROR"


class NotFoundError(TaskAPIError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Task not found"
    default_code = "TASK_NOT_FOUND"

    def __init__(self, resource="Task", details=None):
        super().__init__(f"{resource} not found", details)


class ServerError(TaskAPIError):
    # debug_detail is only ever shown when DEBUG is on
    def __init__(self, message=None, debug_detail=None):
        super().__init__(message)
        self.debug_detail = debug_detail


def flatten_errors(detail, prefix=""):
    """Turn DRF error structures into flat "field: message" strings."""
    if isinstance(detail, dict):
        out = []
        for key, value in detail.items():
            name = "" if key == "non_field_errors" else str(key)
            out.extend(flatten_errors(value, name))
        return out
    if isinstance(detail, list):
        out = []
        for item in detail:
            out.extend(flatten_errors(item, prefix))
        return out
    return [f"{prefix}: {detail}" if prefix else str(detail)]


def api_exception_handler(exc, context):
    """
    DRF EXCEPTION_HANDLER. Every error leaves the API as
    {"error": <message>, "code": <CODE>, "details": [<message>, ...]}.
    """
    request = context.get("request")
    where = f"{request.method} {request.path}" if request is not None else "-"

    response = exception_handler(exc, context)
    if response is None:
        # anything that is not an APIException: opaque 500
        logger.error("Unhandled error on %s", where, exc_info=exc)
        body = {"error": "Internal server error", "code": "INTERNAL_ERROR", "details": []}
        if settings.DEBUG:
            body["details"] = [f"{type(exc).__name__}: {exc}"]
        return Response(body, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if isinstance(exc, TaskAPIError):
        body = {"error": str(exc.detail), "code": exc.default_code, "details": list(exc.details)}
        if isinstance(exc, ServerError) and settings.DEBUG and exc.debug_detail:
            body["details"] = [exc.debug_detail]
    else:
        data = response.data
        if isinstance(data, dict) and set(data) == {"detail"}:
            message, details = str(data["detail"]), []
        else:
            message, details = "Request failed", flatten_errors(data)
        code = getattr(exc, "default_code", "error")
        body = {"error": message, "code": str(code).upper(), "details": details}

    if response.status_code >= 500:
        logger.error("%s -> %s %s", where, response.status_code, body["error"], exc_info=exc)
    else:
        logger.warning("%s -> %s %s %s", where, response.status_code, body["error"], body["details"])

    response.data = body
    return response
