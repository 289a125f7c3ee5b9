# backend/tasks/views.py
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from django.conf import settings
from django.http import JsonResponse
from django.utils import timezone

from .repository import TaskRepository
from .services import TaskService


class TaskListCreateAPIView(APIView):
    def get(self, request):
        # filters / sort / pagination all come from the query string
        result = TaskService().list_tasks(request.query_params)
        return Response(result, status=status.HTTP_200_OK)

    def post(self, request):
        task = TaskService().create_task(request.data)
        return Response(task, status=status.HTTP_201_CREATED)


class TaskDetailAPIView(APIView):
    def get(self, request, task_id):
        return Response(TaskService().get_task(task_id), status=status.HTTP_200_OK)

    def put(self, request, task_id):
        task = TaskService().update_task(task_id, request.data)
        return Response(task, status=status.HTTP_200_OK)

    def delete(self, request, task_id):
        TaskService().delete_task(task_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class TaskProgressAPIView(APIView):
    """
    PATCH payload: {"progress": 0..100}
    """
    def patch(self, request, task_id):
        data = request.data if isinstance(request.data, dict) else {}
        task = TaskService().update_task_progress(task_id, data.get("progress"))
        return Response(task, status=status.HTTP_200_OK)


class TaskToggleAPIView(APIView):
    def patch(self, request, task_id):
        return Response(TaskService().toggle_task_completion(task_id), status=status.HTTP_200_OK)


class OverdueTasksAPIView(APIView):
    def get(self, request):
        return Response({"tasks": TaskService().get_overdue_tasks()}, status=status.HTTP_200_OK)


class TaskStatisticsAPIView(APIView):
    def get(self, request):
        return Response(TaskService().get_task_statistics(), status=status.HTTP_200_OK)


class HealthAPIView(APIView):
    def get(self, request):
        db_ok = TaskRepository().health_check()
        return Response({
            "status": "ok",
            "timestamp": timezone.now().isoformat(),
            "database": "connected" if db_ok else "disconnected",
            "version": settings.APP_VERSION,
        }, status=status.HTTP_200_OK)


class ApiInfoAPIView(APIView):
    def get(self, request):
        return Response({
            "name": "TODO Management API",
            "version": settings.APP_VERSION,
            "description": "RESTful API for TODO task management",
            "endpoints": {
                "GET /api/tasks": "List tasks with filtering, sorting and pagination",
                "POST /api/tasks": "Create a task",
                "GET /api/tasks/<id>": "Get a task",
                "PUT /api/tasks/<id>": "Update a task",
                "DELETE /api/tasks/<id>": "Delete a task",
                "PATCH /api/tasks/<id>/progress": "Update task progress",
                "PATCH /api/tasks/<id>/toggle": "Toggle task completion",
                "GET /api/tasks/overdue/list": "List overdue tasks",
                "GET /api/tasks/stats/summary": "Task statistics",
            },
        }, status=status.HTTP_200_OK)


class RootAPIView(APIView):
    def get(self, request):
        return Response({
            "message": "TODO Management API Server",
            "status": "running",
            "documentation": "/api",
        }, status=status.HTTP_200_OK)


def not_found(request, exception=None):
    # handler404: unknown routes answer in the same shape as API errors
    return JsonResponse({
        "error": "Resource not found",
        "code": "NOT_FOUND",
        "details": [f"{request.method} {request.path}"],
    }, status=status.HTTP_404_NOT_FOUND)
