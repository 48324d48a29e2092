import logging

from interpretreflect.celery_app import celery_app
from interpretreflect.services.side_writes import (
    SIDE_WRITE_TASK_NAME,
    SideWriteDispatcher,
    SideWriteRunner,
    retry_countdown,
)
from interpretreflect.settings import side_write_max_retries

LOGGER = logging.getLogger(__name__)


@celery_app.task(bind=True, name=SIDE_WRITE_TASK_NAME, max_retries=side_write_max_retries())
def run_side_write_task(self, job_id: str) -> dict:
    try:
        return SideWriteRunner().run(job_id, task_id=str(self.request.id))
    except Exception as exc:
        if self.request.retries >= self.max_retries:
            LOGGER.error("Side write %s gave up after %s retries", job_id, self.request.retries)
            raise
        raise self.retry(exc=exc, countdown=retry_countdown(self.request.retries))


@celery_app.task(name="side_writes.replay_pending")
def replay_pending_side_writes_task(stale_after_seconds: float = 600) -> dict:
    replayed = SideWriteDispatcher().replay_pending_jobs(stale_after_seconds=stale_after_seconds)
    return {"replayed": [job["jobId"] for job in replayed]}
