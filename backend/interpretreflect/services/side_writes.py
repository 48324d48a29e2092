from __future__ import annotations

import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable
from uuid import uuid4

from sqlalchemy import select, update

from interpretreflect.db_models import SideWriteJobDB
from interpretreflect.services.credentials import StaticCredentialProvider
from interpretreflect.services.daily_activity import DailyActivityService
from interpretreflect.services.rest_store import PostgrestClient
from interpretreflect.services.wellness_metrics import WellnessMetricsService
from interpretreflect.settings import service_role_key, side_write_max_attempts

LOGGER = logging.getLogger(__name__)

SIDE_WRITE_TASK_NAME = "side_writes.run"

WELLNESS_METRICS_JOB = "wellness_metrics"
DAILY_ACTIVITY_JOB = "daily_activity"
SIDE_WRITE_JOB_TYPES = (WELLNESS_METRICS_JOB, DAILY_ACTIVITY_JOB)

STATUS_PENDING = "pending"
STATUS_RUNNING = "running"
STATUS_COMPLETED = "completed"
STATUS_FAILED = "failed"
STATUS_DEAD = "dead"
REPLAYABLE_STATUSES = (STATUS_PENDING, STATUS_FAILED)

BASE_BACKOFF_SECONDS = 10
MAX_BACKOFF_SECONDS = 600


def retry_countdown(retries: int) -> int:
    return min(BASE_BACKOFF_SECONDS * (2 ** max(retries, 0)), MAX_BACKOFF_SECONDS)


def _jsonify(value: Any) -> Any:
    return json.loads(json.dumps(value, default=str))


def _default_session_factory():
    from interpretreflect.db import SessionLocal

    return SessionLocal()


class OutboxStore:
    """Local bookkeeping for side writes so failures stay visible and replayable."""

    def __init__(self, session_factory: Callable[[], Any] | None = None, *, max_attempts: int | None = None) -> None:
        self._session_factory = session_factory or _default_session_factory
        self.max_attempts = max_attempts if max_attempts is not None else side_write_max_attempts()

    def create_job(self, *, job_type: str, user_id: str, entry_kind: str, payload: dict | None = None) -> dict:
        with self._session_factory() as db:
            row = SideWriteJobDB(
                job_id=str(uuid4()),
                job_type=job_type,
                user_id=user_id,
                entry_kind=entry_kind,
                status=STATUS_PENDING,
                attempts=0,
                payload_json=_jsonify(payload or {}),
            )
            db.add(row)
            db.commit()
            db.refresh(row)
            return self._job_to_dict(row)

    def get_job(self, job_id: str) -> dict | None:
        with self._session_factory() as db:
            row = db.get(SideWriteJobDB, str(job_id))
            if row is None:
                return None
            return self._job_to_dict(row)

    def mark_queued(self, job_id: str, task_id: str) -> dict | None:
        return self._update_job(job_id, status=STATUS_PENDING, task_id=task_id)

    def mark_running(self, job_id: str, task_id: str | None = None) -> dict | None:
        return self._update_job(job_id, status=STATUS_RUNNING, task_id=task_id, count_attempt=True)

    def mark_completed(self, job_id: str) -> dict | None:
        return self._update_job(job_id, status=STATUS_COMPLETED, error_message="")

    def mark_failed(self, job_id: str, error_message: str) -> dict | None:
        return self._update_job(job_id, status=STATUS_FAILED, error_message=error_message[:2000])

    def mark_dead(self, job_id: str, error_message: str) -> dict | None:
        return self._update_job(job_id, status=STATUS_DEAD, error_message=error_message[:2000])

    def retire_exhausted(self) -> int:
        """Park replayable jobs that already used up their attempts."""
        with self._session_factory() as db:
            result = db.execute(
                update(SideWriteJobDB)
                .where(SideWriteJobDB.status.in_(REPLAYABLE_STATUSES))
                .where(SideWriteJobDB.attempts >= self.max_attempts)
                .values(status=STATUS_DEAD, updated_at=datetime.now(timezone.utc))
            )
            db.commit()
            return result.rowcount or 0

    def list_replayable(self, *, stale_after_seconds: float = 600, limit: int = 100) -> list[dict]:
        cutoff = datetime.now(timezone.utc) - timedelta(seconds=stale_after_seconds)
        with self._session_factory() as db:
            stmt = (
                select(SideWriteJobDB)
                .where(SideWriteJobDB.status.in_(REPLAYABLE_STATUSES))
                .where(SideWriteJobDB.attempts < self.max_attempts)
                .where(SideWriteJobDB.updated_at <= cutoff)
                .order_by(SideWriteJobDB.updated_at.asc())
                .limit(limit)
            )
            return [self._job_to_dict(row) for row in db.execute(stmt).scalars().all()]

    def _update_job(
        self,
        job_id: str,
        *,
        status: str,
        task_id: str | None = None,
        error_message: str | None = None,
        count_attempt: bool = False,
    ) -> dict | None:
        with self._session_factory() as db:
            row = db.get(SideWriteJobDB, str(job_id))
            if row is None:
                return None
            row.status = status
            if task_id is not None:
                row.task_id = task_id
            if error_message is not None:
                row.error_message = error_message or None
            if count_attempt:
                row.attempts = (row.attempts or 0) + 1
            row.updated_at = datetime.now(timezone.utc)
            db.add(row)
            db.commit()
            db.refresh(row)
            return self._job_to_dict(row)

    def _job_to_dict(self, row: SideWriteJobDB) -> dict:
        return {
            "jobId": row.job_id,
            "jobType": row.job_type,
            "userId": row.user_id,
            "entryKind": row.entry_kind,
            "status": row.status,
            "attempts": row.attempts or 0,
            "taskId": row.task_id,
            "errorMessage": row.error_message,
            "payload": _jsonify(row.payload_json or {}),
            "createdAt": row.created_at,
            "updatedAt": row.updated_at,
        }


TaskSender = Callable[[str, list], Any]


def _celery_send(task_name: str, args: list) -> Any:
    from interpretreflect.celery_app import celery_app

    return celery_app.send_task(task_name, args=args)


class SideWriteDispatcher:
    def __init__(self, store: OutboxStore | None = None, sender: TaskSender | None = None) -> None:
        self.store = store or OutboxStore()
        self._send = sender or _celery_send

    def dispatch(self, user_id: str, kind: str, data: dict[str, Any]) -> list[dict]:
        jobs = []
        for job_type in SIDE_WRITE_JOB_TYPES:
            job = self.store.create_job(
                job_type=job_type,
                user_id=user_id,
                entry_kind=kind,
                payload={"data": data or {}},
            )
            jobs.append(self._enqueue(job))
        return jobs

    def replay_pending_jobs(self, *, stale_after_seconds: float = 600, limit: int = 100) -> list[dict]:
        retired = self.store.retire_exhausted()
        if retired:
            LOGGER.warning("Parked %s side writes that reached %s attempts", retired, self.store.max_attempts)
        replayed = []
        for job in self.store.list_replayable(stale_after_seconds=stale_after_seconds, limit=limit):
            LOGGER.info("Replaying side write %s (%s, status=%s)", job["jobId"], job["jobType"], job["status"])
            replayed.append(self._enqueue(job))
        return replayed

    def _enqueue(self, job: dict) -> dict:
        try:
            task = self._send(SIDE_WRITE_TASK_NAME, [job["jobId"]])
        except Exception as exc:
            LOGGER.warning("Could not enqueue side write %s (%s): %s", job["jobId"], job["jobType"], exc)
            return self.store.mark_failed(job["jobId"], str(exc)) or job
        return self.store.mark_queued(job["jobId"], str(task.id)) or job


SideWriteHandler = Callable[[dict], None]


def _worker_client() -> PostgrestClient:
    return PostgrestClient(credentials=StaticCredentialProvider(service_role_key()))


def _record_wellness_metrics(job: dict) -> None:
    WellnessMetricsService(_worker_client()).record_reflection(
        job["userId"],
        job["entryKind"],
        job["payload"].get("data") or {},
    )


def _record_daily_activity(job: dict) -> None:
    DailyActivityService(_worker_client()).record_activity(job["userId"])


DEFAULT_HANDLERS: dict[str, SideWriteHandler] = {
    WELLNESS_METRICS_JOB: _record_wellness_metrics,
    DAILY_ACTIVITY_JOB: _record_daily_activity,
}


class SideWriteRunner:
    def __init__(self, store: OutboxStore | None = None, handlers: dict[str, SideWriteHandler] | None = None) -> None:
        self.store = store or OutboxStore()
        self._handlers = DEFAULT_HANDLERS if handlers is None else handlers

    def run(self, job_id: str, task_id: str | None = None) -> dict:
        """Execute one outbox job.

        Failures are recorded on the job and re-raised for the task to retry. Once
        the job has used ``max_attempts`` runs it is parked as dead instead.
        """
        job = self.store.get_job(job_id)
        if job is None:
            LOGGER.warning("Side write %s not found in outbox", job_id)
            return {"jobId": job_id, "status": "missing"}
        if job["status"] in (STATUS_COMPLETED, STATUS_DEAD):
            return {"jobId": job_id, "status": job["status"]}

        job = self.store.mark_running(job_id, task_id=task_id) or job
        handler = self._handlers.get(job["jobType"])
        try:
            if handler is None:
                raise ValueError(f"Unknown side write type: {job['jobType']}")
            handler(job)
        except Exception as exc:
            if job["attempts"] >= self.store.max_attempts:
                self.store.mark_dead(job_id, str(exc))
                LOGGER.error(
                    "Side write %s (%s) is dead after %s attempts: %s",
                    job_id,
                    job["jobType"],
                    job["attempts"],
                    exc,
                )
                return {"jobId": job_id, "jobType": job["jobType"], "status": STATUS_DEAD, "attempts": job["attempts"]}
            self.store.mark_failed(job_id, str(exc))
            LOGGER.warning(
                "Side write %s (%s) failed on attempt %s: %s",
                job_id,
                job["jobType"],
                job["attempts"],
                exc,
            )
            raise
        self.store.mark_completed(job_id)
        return {"jobId": job_id, "jobType": job["jobType"], "status": STATUS_COMPLETED, "attempts": job["attempts"]}
