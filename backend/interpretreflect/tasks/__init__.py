"""Celery task package."""

# Ensure task decorators are imported when package is loaded.
from interpretreflect.tasks.side_write_tasks import replay_pending_side_writes_task, run_side_write_task

__all__ = ["replay_pending_side_writes_task", "run_side_write_task"]
