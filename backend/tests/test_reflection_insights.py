import json
import unittest
from datetime import date, datetime, timedelta, timezone

try:
    from interpretreflect.services.reflection_insights import (
        ReflectionInsightsService,
        calculate_streak_days,
        percent_change,
    )
    from interpretreflect.services.credentials import StaticCredentialProvider
    from interpretreflect.services.rest_store import PostgrestClient, StoreResponse
    from interpretreflect.settings import StoreSettings

    DEPENDENCIES_AVAILABLE = True
except ModuleNotFoundError:  # pragma: no cover - environment dependent
    DEPENDENCIES_AVAILABLE = False

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def _row(kind: str, days_ago: float, data: dict | None = None, row_id: int = 1) -> dict:
    created = NOW - timedelta(days=days_ago)
    return {
        "id": row_id,
        "user_id": "user-1",
        "entry_kind": kind,
        "data": data or {},
        "created_at": created.isoformat(),
        "updated_at": created.isoformat(),
    }


class RowsTransport:
    def __init__(self, rows=None, response=None) -> None:
        self.rows = rows or []
        self.response = response
        self.urls = []

    def __call__(self, request, timeout):
        self.urls.append(request.url)
        if self.response is not None:
            return self.response
        return StoreResponse(status=200, body=json.dumps(self.rows))


def _service(transport) -> "ReflectionInsightsService":
    settings = StoreSettings(
        base_url="https://store.example",
        anon_key="anon-key",
        save_timeout_seconds=5.0,
        read_timeout_seconds=1.0,
    )
    client = PostgrestClient(settings, StaticCredentialProvider("user-token"), transport)
    return ReflectionInsightsService(client, now=lambda: NOW)


@unittest.skipUnless(DEPENDENCIES_AVAILABLE, "pydantic is not installed")
class StreakTests(unittest.TestCase):
    def test_gap_ends_streak(self) -> None:
        today = date(2026, 10, 19)
        days = [today, today - timedelta(days=1), today - timedelta(days=2), today - timedelta(days=5)]
        self.assertEqual(calculate_streak_days(days, today), 3)

    def test_streak_can_start_yesterday_and_ignores_duplicates(self) -> None:
        today = date(2026, 10, 19)
        stamps = [
            datetime(2026, 10, 18, 9, 0),
            datetime(2026, 10, 18, 21, 0),
            datetime(2026, 10, 17, 8, 0),
        ]
        self.assertEqual(calculate_streak_days(stamps, today), 2)
        self.assertEqual(calculate_streak_days([], today), 0)
        self.assertEqual(calculate_streak_days([date(2026, 10, 10)], today), 0)

    def test_percent_change(self) -> None:
        self.assertEqual(percent_change(3, 0), 100)
        self.assertEqual(percent_change(0, 0), 0)
        self.assertEqual(percent_change(3, 4), -25)
        self.assertEqual(percent_change(5, 2), 150)


@unittest.skipUnless(DEPENDENCIES_AVAILABLE, "pydantic is not installed")
class ReflectionInsightsServiceTests(unittest.TestCase):
    def test_reflections_query_shape(self) -> None:
        transport = RowsTransport([_row("wellness_checkin", 1)])
        entries = _service(transport).get_user_reflections("user-1", limit=5)

        self.assertEqual(len(entries), 1)
        self.assertEqual(entries[0].kind, "wellness_checkin")
        self.assertEqual(entries[0].userId, "user-1")
        self.assertEqual(
            transport.urls[0],
            "https://store.example/rest/v1/reflection_entries?user_id=eq.user-1&order=created_at.desc&limit=5",
        )

    def test_window_adds_created_at_filter(self) -> None:
        transport = RowsTransport([])
        _service(transport).get_user_reflections("user-1", window="week")
        self.assertIn("created_at=gte.2026-10-12T12%3A00%3A00%2B00%3A00", transport.urls[0])

    def test_expired_session_read_returns_empty(self) -> None:
        transport = RowsTransport(response=StoreResponse(status=401, body='{"message":"JWT expired"}'))
        with self.assertLogs("interpretreflect.services.reflection_insights", level="WARNING"):
            entries = _service(transport).get_user_reflections("user-1")
        self.assertEqual(entries, [])

    def test_unknown_window_returns_empty(self) -> None:
        transport = RowsTransport([_row("wellness_checkin", 1)])
        with self.assertLogs("interpretreflect.services.reflection_insights", level="WARNING"):
            self.assertEqual(_service(transport).get_user_reflections("user-1", window="decade"), [])
        self.assertEqual(transport.urls, [])

    def test_stats(self) -> None:
        rows = [
            _row("wellness_checkin", 0, row_id=1),
            _row("wellness_checkin", 1, row_id=2),
            _row("compass_check", 2, row_id=3),
            _row("wellness_checkin", 5, row_id=4),
            _row("teaming_reflection", 20, row_id=5),
            _row("teaming_reflection", 45, row_id=6),
        ]
        stats = _service(RowsTransport(rows)).get_reflection_stats("user-1")

        self.assertEqual(stats.totalReflections, 6)
        self.assertEqual(stats.weeklyReflections, 4)
        self.assertEqual(stats.monthlyReflections, 5)
        self.assertEqual(stats.streakDays, 3)
        self.assertEqual(stats.lastReflectionDate, NOW)
        self.assertEqual(stats.topReflectionKinds[0].kind, "wellness_checkin")
        self.assertEqual(stats.topReflectionKinds[0].count, 3)
        self.assertEqual(stats.topReflectionKinds[0].displayName, "Wellness Check-in")

    def test_empty_history_gives_starter_insights(self) -> None:
        insights = _service(RowsTransport([])).get_reflection_insights("user-1", "month")
        self.assertEqual(insights.patterns, ["Start building your reflection practice"])
        self.assertEqual(insights.recommendations, ["Try a daily wellness check-in", "Set reflection reminders"])
        self.assertEqual(insights.achievements, [])
        self.assertEqual(insights.areasOfGrowth, ["Consistency", "Self-awareness"])

    def test_insights_from_history(self) -> None:
        rows = [
            _row("wellness_checkin", 0, {"bodyMessage": "Feeling overwhelmed after court"}, 1),
            _row("wellness_checkin", 1, {"notes": "Learning to pace myself"}, 2),
            _row("post_assignment_debrief", 2, {}, 3),
        ]
        insights = _service(RowsTransport(rows)).get_reflection_insights("user-1", "month")

        self.assertIn("Most frequent: Wellness Check-in (2 times)", insights.patterns)
        self.assertIn("Stress management focus detected", insights.patterns)
        self.assertEqual(insights.recommendations, ["Try stress-reset techniques", "Schedule regular breaks"])
        self.assertIn("Regular reflection habit forming", insights.achievements)
        self.assertIn("Growth mindset demonstrated", insights.achievements)
        self.assertEqual(insights.areasOfGrowth, ["Try: In-Session Self-Check"])

    def test_growth_summary_week_over_week(self) -> None:
        rows = [
            _row("wellness_checkin", 1, row_id=1),
            _row("wellness_checkin", 2, row_id=2),
            _row("compass_check", 3, row_id=3),
            _row("compass_check", 9, row_id=4),
            _row("compass_check", 10, row_id=5),
        ]
        summary = _service(RowsTransport(rows)).get_growth_summary("user-1")
        self.assertEqual(summary.totalReflections, 5)
        self.assertEqual(summary.reflectionsByKind, {"wellness_checkin": 2, "compass_check": 3})
        self.assertEqual(summary.weekOverWeek.current, 3)
        self.assertEqual(summary.weekOverWeek.previous, 2)
        self.assertEqual(summary.weekOverWeek.percentChange, 50)

    def test_stress_energy_series_is_oldest_first(self) -> None:
        rows = [
            _row("wellness_checkin", 0, {"stress_level": 7, "energy_level": 3}, 1),
            _row("wellness_checkin", 3, {"stress_level": 4, "physical_energy": 6}, 2),
        ]
        transport = RowsTransport(rows)
        points = _service(transport).get_stress_energy_series("user-1")

        self.assertIn("entry_kind=eq.wellness_checkin", transport.urls[0])
        self.assertIn("limit=30", transport.urls[0])
        self.assertEqual([point.stress for point in points], [4.0, 7.0])
        self.assertEqual([point.energy for point in points], [6.0, 3.0])
        self.assertEqual(points[-1].date, "2026-10-19")

    def test_emotional_patterns(self) -> None:
        rows = [
            _row("wellness_checkin", 0, {"note": "calm but tired"}, 1),
            _row("values_alignment", 1, {"note": "so much pressure"}, 2),
            _row("teaming_reflection", 2, {"note": "felt relaxed"}, 3),
        ]
        patterns = _service(RowsTransport(rows)).get_emotional_patterns("user-1", "month")
        frequencies = {item.emotion: item.frequency for item in patterns.emotionalPatterns}

        self.assertEqual(patterns.totalReflections, 3)
        self.assertEqual(frequencies["calm"], 2)
        self.assertEqual(frequencies["tired"], 1)
        self.assertEqual(frequencies["stressed"], 1)
        self.assertEqual(patterns.keyThemes, ["team-collaboration", "values-alignment", "wellness"])


if __name__ == "__main__":
    unittest.main()
