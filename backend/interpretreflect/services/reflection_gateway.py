from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass
from typing import Any, Protocol

from interpretreflect.models.reflection_kinds import STRESS_RESET
from interpretreflect.services.rest_store import (
    PostgrestClient,
    StoreRequestError,
    StoreTimeoutError,
    is_session_expired,
)

LOGGER = logging.getLogger(__name__)

REFLECTIONS_TABLE = "reflection_entries"
STRESS_RESET_TABLE = "stress_reset_logs"

USER_ID_REQUIRED = "User ID is required for saving reflections"
SESSION_EXPIRED = "Session expired. Please refresh the page and try again."

# Shared by all gateways; a hung write keeps its worker until the transport gives up.
_WRITE_EXECUTOR = ThreadPoolExecutor(max_workers=8, thread_name_prefix="reflection-write")


class SideWriteSink(Protocol):
    def dispatch(self, user_id: str, kind: str, data: dict[str, Any]) -> Any:
        ...


@dataclass
class SaveResult:
    success: bool
    error: str | None = None


def _format_seconds(seconds: float) -> str:
    return f"{seconds:g}"


class ReflectionGateway:
    def __init__(
        self,
        client: PostgrestClient,
        dispatcher: SideWriteSink | None = None,
        *,
        save_timeout_seconds: float | None = None,
    ) -> None:
        self._client = client
        self._dispatcher = dispatcher
        self._save_timeout = (
            save_timeout_seconds if save_timeout_seconds is not None else client.settings.save_timeout_seconds
        )

    def save_reflection(self, user_id: str, kind: str, data: dict[str, Any]) -> SaveResult:
        if not user_id:
            return SaveResult(success=False, error=USER_ID_REQUIRED)

        row = {"user_id": user_id, "entry_kind": kind, "data": data}
        result = self._write_with_deadline(REFLECTIONS_TABLE, row)
        if not result.success:
            LOGGER.warning("Reflection save failed for kind %s: %s", kind, result.error)
            return result

        LOGGER.info("Saved %s reflection", kind)
        self._dispatch_side_writes(user_id, kind, data)
        return result

    def save_stress_reset_log(
        self,
        user_id: str,
        tool_type: str,
        *,
        duration_minutes: float | None = None,
        stress_level_before: float | None = None,
        stress_level_after: float | None = None,
        notes: str | None = None,
    ) -> SaveResult:
        if not user_id:
            return SaveResult(success=False, error=USER_ID_REQUIRED)

        row = {
            "user_id": user_id,
            "tool_type": tool_type,
            "duration_minutes": duration_minutes,
            "stress_level_before": stress_level_before,
            "stress_level_after": stress_level_after,
            "notes": notes,
        }
        result = self._write_with_deadline(STRESS_RESET_TABLE, row)
        if not result.success:
            LOGGER.warning("Stress reset log failed for tool %s: %s", tool_type, result.error)
            return result

        if stress_level_before is not None or stress_level_after is not None:
            payload = {
                "stressLevel": stress_level_after if stress_level_after is not None else stress_level_before,
                "stressLevelBefore": stress_level_before,
                "stressLevelAfter": stress_level_after,
                "tool_type": tool_type,
            }
            self._dispatch_side_writes(user_id, STRESS_RESET, payload)
        return result

    def _write_with_deadline(self, table: str, row: dict[str, Any]) -> SaveResult:
        timeout = self._save_timeout
        future = _WRITE_EXECUTOR.submit(self._insert, table, row, timeout)
        try:
            return future.result(timeout=timeout)
        except FutureTimeoutError:
            future.cancel()
            return SaveResult(success=False, error=f"Save timed out after {_format_seconds(timeout)} seconds")

    def _insert(self, table: str, row: dict[str, Any], timeout: float) -> SaveResult:
        try:
            self._client.insert(table, row, prefer="return=minimal", timeout=timeout)
        except StoreTimeoutError:
            return SaveResult(success=False, error=f"Save timed out after {_format_seconds(timeout)} seconds")
        except StoreRequestError as exc:
            if is_session_expired(exc.body, exc.status):
                return SaveResult(success=False, error=SESSION_EXPIRED)
            return SaveResult(success=False, error=exc.body or str(exc))
        except Exception as exc:
            LOGGER.exception("Unexpected error writing to %s", table)
            return SaveResult(success=False, error=str(exc) or "Failed to save reflection")
        return SaveResult(success=True)

    def _dispatch_side_writes(self, user_id: str, kind: str, data: dict[str, Any]) -> None:
        if self._dispatcher is None:
            return
        try:
            self._dispatcher.dispatch(user_id, kind, data)
        except Exception as exc:
            LOGGER.warning("Side writes for %s were not dispatched: %s", kind, exc)
