from django.apps import AppConfig


class TasksConfig(AppConfig):
    default_auto_field = "django.db.models.AutoField"
    name = "tasks"
