from django.urls import path
from .views import (
    OverdueTasksAPIView,
    TaskDetailAPIView,
    TaskListCreateAPIView,
    TaskProgressAPIView,
    TaskStatisticsAPIView,
    TaskToggleAPIView,
)

urlpatterns = [
    path("tasks", TaskListCreateAPIView.as_view()),
    # fixed paths before the <task_id> ones
    path("tasks/overdue/list", OverdueTasksAPIView.as_view()),
    path("tasks/stats/summary", TaskStatisticsAPIView.as_view()),
    path("tasks/<str:task_id>", TaskDetailAPIView.as_view()),
    path("tasks/<str:task_id>/progress", TaskProgressAPIView.as_view()),
    path("tasks/<str:task_id>/toggle", TaskToggleAPIView.as_view()),
]
