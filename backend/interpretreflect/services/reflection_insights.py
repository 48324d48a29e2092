from __future__ import annotations

import json
import logging
from collections import Counter
from datetime import date, datetime, timedelta, timezone
from typing import Any, Callable, Iterable

from interpretreflect.models.reflection import (
    EmotionalPatterns,
    EmotionFrequency,
    GrowthSummary,
    KindCount,
    ReflectionEntry,
    ReflectionInsights,
    ReflectionStats,
    StressEnergyPoint,
    WeekOverWeek,
)
from interpretreflect.models.reflection_kinds import CORE_PRACTICE_KINDS, WELLNESS_CHECKIN, display_name
from interpretreflect.scoring.text_signals import DEFAULT_CLASSIFIER, TextSignalClassifier
from interpretreflect.services.rest_store import PostgrestClient, eq, gte

LOGGER = logging.getLogger(__name__)

REFLECTIONS_TABLE = "reflection_entries"
NEWEST_FIRST = "created_at.desc"

WINDOW_DAYS = {
    "week": 7,
    "month": 30,
    "90days": 90,
}

INSIGHTS_SAMPLE_SIZE = 100

# Substrings of a kind's display name and the dashboard theme they map to.
KIND_THEMES = (
    ("Wellness", "wellness"),
    ("Values", "values-alignment"),
    ("Team", "team-collaboration"),
    ("Session", "in-session-management"),
)


def starter_insights() -> ReflectionInsights:
    return ReflectionInsights(
        patterns=["Start building your reflection practice"],
        recommendations=["Try a daily wellness check-in", "Set reflection reminders"],
        achievements=[],
        areasOfGrowth=["Consistency", "Self-awareness"],
    )


def window_start(window: str, now: datetime) -> datetime:
    if window not in WINDOW_DAYS:
        raise ValueError(f"Unknown time window: {window}")
    return now - timedelta(days=WINDOW_DAYS[window])


def calculate_streak_days(timestamps: Iterable[datetime | date], today: date) -> int:
    """Count consecutive activity days ending today or yesterday."""
    unique_dates = sorted({_as_date(value) for value in timestamps}, reverse=True)
    streak = 0
    current = today
    for activity_date in unique_dates:
        if (current - activity_date).days <= 1:
            streak += 1
            current = activity_date
        else:
            break
    return streak


def percent_change(current: int, previous: int) -> int:
    if previous == 0:
        return 100 if current > 0 else 0
    return round((current - previous) / previous * 100)


def _as_date(value: datetime | date) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def _aware(value: datetime | None) -> datetime | None:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _text_answers(data: dict[str, Any]) -> list[str]:
    answers = []
    for value in data.values():
        if isinstance(value, str):
            answers.append(value)
        elif isinstance(value, list):
            answers.extend(item for item in value if isinstance(item, str))
    return answers


def _optional_float(value: Any) -> float | None:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


class ReflectionInsightsService:
    """Read side of the reflection store.

    Every read degrades to an empty result when the store is unreachable,
    the session has expired, or rows are malformed.
    """

    def __init__(
        self,
        client: PostgrestClient,
        *,
        classifier: TextSignalClassifier = DEFAULT_CLASSIFIER,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        self._client = client
        self._classifier = classifier
        self._now = now or (lambda: datetime.now(timezone.utc))

    def get_user_reflections(
        self,
        user_id: str,
        limit: int | None = None,
        window: str | None = None,
    ) -> list[ReflectionEntry]:
        return self._read_windowed([("user_id", eq(user_id))], limit, window)

    def get_user_reflections_by_kind(
        self,
        user_id: str,
        kind: str,
        limit: int | None = None,
        window: str | None = None,
    ) -> list[ReflectionEntry]:
        return self._read_windowed([("user_id", eq(user_id)), ("entry_kind", eq(kind))], limit, window)

    def get_reflection_stats(self, user_id: str) -> ReflectionStats:
        entries = self.get_user_reflections(user_id)
        if not entries:
            return ReflectionStats()

        now = self._now()
        week_ago = now - timedelta(days=7)
        month_ago = now - timedelta(days=30)
        created = [entry.createdAt for entry in entries if entry.createdAt is not None]
        counts = Counter(entry.kind for entry in entries)

        return ReflectionStats(
            totalReflections=len(entries),
            weeklyReflections=sum(1 for value in created if value >= week_ago),
            monthlyReflections=sum(1 for value in created if value >= month_ago),
            streakDays=calculate_streak_days(created, now.date()),
            lastReflectionDate=entries[0].createdAt,
            topReflectionKinds=[
                KindCount(kind=kind, displayName=display_name(kind), count=count)
                for kind, count in counts.most_common(5)
            ],
        )

    def get_reflection_insights(self, user_id: str, window: str = "month") -> ReflectionInsights:
        entries = self.get_user_reflections(user_id, INSIGHTS_SAMPLE_SIZE, window)
        if not entries:
            return starter_insights()

        insights = ReflectionInsights()
        counts = Counter(entry.kind for entry in entries)
        kind, count = counts.most_common(1)[0]
        insights.patterns.append(f"Most frequent: {display_name(kind)} ({count} times)")

        active_days = {entry.createdAt.date() for entry in entries if entry.createdAt is not None}
        if len(active_days) >= 7:
            insights.achievements.append("Consistent weekly practice")
        elif len(active_days) >= 3:
            insights.achievements.append("Regular reflection habit forming")

        themes: set[str] = set()
        for entry in entries:
            for answer in _text_answers(entry.data):
                themes |= self._classifier.classify(answer).themes

        if "stress" in themes:
            insights.patterns.append("Stress management focus detected")
            insights.recommendations.extend(["Try stress-reset techniques", "Schedule regular breaks"])
        if "growth" in themes:
            insights.achievements.append("Growth mindset demonstrated")

        missing = [practice for practice in CORE_PRACTICE_KINDS if practice not in counts]
        if missing:
            insights.areasOfGrowth.append(f"Try: {display_name(missing[0])}")
        return insights

    def get_growth_summary(self, user_id: str) -> GrowthSummary:
        entries = self.get_user_reflections(user_id, window="month")
        now = self._now()
        week_ago = now - timedelta(days=7)
        two_weeks_ago = now - timedelta(days=14)

        current = sum(1 for entry in entries if entry.createdAt is not None and entry.createdAt >= week_ago)
        previous = sum(
            1
            for entry in entries
            if entry.createdAt is not None and two_weeks_ago <= entry.createdAt < week_ago
        )
        return GrowthSummary(
            totalReflections=len(entries),
            reflectionsByKind=dict(Counter(entry.kind for entry in entries)),
            weekOverWeek=WeekOverWeek(current=current, previous=previous, percentChange=percent_change(current, previous)),
        )

    def get_stress_energy_series(self, user_id: str, limit: int = 30) -> list[StressEnergyPoint]:
        entries = self.get_user_reflections_by_kind(user_id, WELLNESS_CHECKIN, limit)
        points = []
        for entry in reversed(entries):
            data = entry.data
            energy = data.get("energy_level")
            if energy is None:
                energy = data.get("physical_energy")
            points.append(
                StressEnergyPoint(
                    date=entry.createdAt.date().isoformat() if entry.createdAt else "",
                    stress=_optional_float(data.get("stress_level")),
                    energy=_optional_float(energy),
                    timestamp=entry.createdAt,
                )
            )
        return points

    def get_emotional_patterns(self, user_id: str, window: str = "month") -> EmotionalPatterns:
        entries = self.get_user_reflections(user_id, INSIGHTS_SAMPLE_SIZE, window)
        emotions: Counter[str] = Counter()
        themes: set[str] = set()
        for entry in entries:
            content = json.dumps(entry.data, default=str)
            emotions.update(self._classifier.classify(content).emotions)
            name = display_name(entry.kind)
            themes.update(theme for marker, theme in KIND_THEMES if marker in name)

        return EmotionalPatterns(
            totalReflections=len(entries),
            kinds=sorted({entry.kind for entry in entries}),
            keyThemes=sorted(themes),
            emotionalPatterns=[
                EmotionFrequency(emotion=emotion, frequency=frequency)
                for emotion, frequency in emotions.most_common()
            ],
        )

    def _read_windowed(
        self,
        filters: list[tuple[str, str]],
        limit: int | None,
        window: str | None,
    ) -> list[ReflectionEntry]:
        if window:
            try:
                since = window_start(window, self._now())
            except ValueError as exc:
                LOGGER.warning("%s", exc)
                return []
            filters = [*filters, ("created_at", gte(since.isoformat()))]
        return self._read_entries(filters, limit)

    def _read_entries(self, filters: list[tuple[str, str]], limit: int | None) -> list[ReflectionEntry]:
        try:
            rows = self._client.select(REFLECTIONS_TABLE, filters, order=NEWEST_FIRST, limit=limit)
            entries = [ReflectionEntry.from_row(row) for row in rows]
        except Exception as exc:
            LOGGER.warning("Reflection read degraded to empty result: %s", exc)
            return []
        for entry in entries:
            entry.createdAt = _aware(entry.createdAt)
            entry.updatedAt = _aware(entry.updatedAt)
        return entries
