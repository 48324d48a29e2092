from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Callable

from interpretreflect.models.reflection import DailyActivity
from interpretreflect.services.rest_store import PostgrestClient, eq

LOGGER = logging.getLogger(__name__)

DAILY_ACTIVITY_TABLE = "daily_activity"
REFLECTION_ACTIVITY = "reflection"


class DailyActivityService:
    def __init__(self, client: PostgrestClient, *, today: Callable[[], date] | None = None) -> None:
        self._client = client
        self._today = today or (lambda: datetime.now(timezone.utc).date())

    def record_activity(self, user_id: str, activity: str = REFLECTION_ACTIVITY) -> DailyActivity:
        """Upsert today's activity row so each activity is listed once."""
        activity_date = self._today().isoformat()
        now = datetime.now(timezone.utc).isoformat()
        rows = self._client.select(
            DAILY_ACTIVITY_TABLE,
            [("user_id", eq(user_id)), ("activity_date", eq(activity_date))],
            limit=1,
        )

        if not rows:
            self._client.insert(
                DAILY_ACTIVITY_TABLE,
                {
                    "user_id": user_id,
                    "activity_date": activity_date,
                    "activities_completed": [activity],
                    "created_at": now,
                },
            )
            return DailyActivity(userId=user_id, activityDate=activity_date, activitiesCompleted=[activity])

        existing = rows[0]
        activities = list(existing.get("activities_completed") or [])
        if activity not in activities:
            activities.append(activity)
            self._client.update(
                DAILY_ACTIVITY_TABLE,
                {"activities_completed": activities, "updated_at": now},
                [("id", eq(existing["id"]))],
            )
        return _to_model(existing, activities)

    def get_daily_activity(self, user_id: str, days: int = 365) -> list[DailyActivity]:
        try:
            rows = self._client.select(
                DAILY_ACTIVITY_TABLE,
                [("user_id", eq(user_id))],
                order="activity_date.desc",
                limit=days,
            )
        except Exception as exc:
            LOGGER.warning("Could not read daily activity: %s", exc)
            return []
        return [_to_model(row, row.get("activities_completed") or []) for row in rows]


def _to_model(row: dict, activities: list[str]) -> DailyActivity:
    return DailyActivity(
        id=str(row["id"]) if row.get("id") is not None else None,
        userId=str(row.get("user_id", "")),
        activityDate=str(row.get("activity_date", "")),
        activitiesCompleted=list(activities),
    )
