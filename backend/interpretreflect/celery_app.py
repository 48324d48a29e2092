import os
import logging

from celery import Celery
from dotenv import load_dotenv

from interpretreflect.db import init_db

load_dotenv()
logger = logging.getLogger(__name__)


def _broker_url() -> str:
    return os.getenv("CELERY_BROKER_URL", os.getenv("REDIS_URL", "redis://localhost:6379/0"))


def _backend_url() -> str:
    return os.getenv("CELERY_RESULT_BACKEND", os.getenv("REDIS_URL", "redis://localhost:6379/0"))


celery_app = Celery(
    "interpretreflect",
    broker=_broker_url(),
    backend=_backend_url(),
    include=["interpretreflect.tasks.side_write_tasks"],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    # Side writes are acknowledged only after they have run.
    task_acks_late=True,
    imports=("interpretreflect.tasks.side_write_tasks",),
    beat_schedule={
        "replay-pending-side-writes": {
            "task": "side_writes.replay_pending",
            "schedule": 900.0,
        },
    },
)

try:
    init_db()
except Exception as exc:  # pragma: no cover - startup guard for local/dev race conditions
    logger.warning("Celery startup continuing without immediate DB init: %s", exc)
celery_app.autodiscover_tasks(["interpretreflect.tasks"])
