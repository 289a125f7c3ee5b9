# SQLite triggers that keep updated_at and progress/completed consistent for
# writes that do not go through TaskService. The service applies the same rule
# itself and always re-reads the row, so these never decide an API response.
from django.db import migrations

TRIGGERS = {
    "tasks_updated_at_trigger": """
        CREATE TRIGGER IF NOT EXISTS tasks_updated_at_trigger
        AFTER UPDATE ON tasks
        WHEN NEW.updated_at = OLD.updated_at
        BEGIN
            UPDATE tasks SET updated_at = strftime('%Y-%m-%d %H:%M:%f', 'now') WHERE id = NEW.id;
        END
    """,
    "tasks_progress_completed_sync": """
        CREATE TRIGGER IF NOT EXISTS tasks_progress_completed_sync
        AFTER UPDATE OF progress ON tasks
        WHEN NEW.progress = 100 AND NEW.completed = 0
        BEGIN
            UPDATE tasks SET completed = 1 WHERE id = NEW.id;
        END
    """,
    "tasks_completed_progress_sync": """
        CREATE TRIGGER IF NOT EXISTS tasks_completed_progress_sync
        AFTER UPDATE OF completed ON tasks
        WHEN NEW.completed = 1 AND NEW.progress < 100
        BEGIN
            UPDATE tasks SET progress = 100 WHERE id = NEW.id;
        END
    """,
}


def create_triggers(apps, schema_editor):
    if schema_editor.connection.vendor != "sqlite":
        return
    for sql in TRIGGERS.values():
        schema_editor.execute(sql, params=None)


def drop_triggers(apps, schema_editor):
    if schema_editor.connection.vendor != "sqlite":
        return
    for name in TRIGGERS:
        schema_editor.execute(f"DROP TRIGGER IF EXISTS {name}", params=None)


class Migration(migrations.Migration):

    dependencies = [
        ("tasks", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(create_triggers, drop_triggers),
    ]
