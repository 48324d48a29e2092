from __future__ import annotations

import hashlib
import logging
import math
from datetime import date, datetime, timedelta, timezone
from typing import Any, Callable
from uuid import uuid4

from interpretreflect.models.metrics import (
    AVERAGED_METRICS,
    FLAG_METRICS,
    CurrentWeekMetricsResponse,
    ExtractedMetrics,
    WellnessMetricSnapshot,
)
from interpretreflect.scoring.text_signals import DEFAULT_CLASSIFIER, TextSignalClassifier
from interpretreflect.services.rest_store import PostgrestClient, StoreRequestError, eq, is_unique_violation
from interpretreflect.settings import zkwv_salt

LOGGER = logging.getLogger(__name__)

METRICS_TABLE = "wellness_metrics"
ANONYMIZED_TABLE = "anonymized_reflections"

SAMPLE_COUNTERS = {
    "stress_level": "stress_samples",
    "energy_level": "energy_samples",
    "confidence_score": "confidence_samples",
}

REFLECTION_CATEGORIES = {
    "wellness_checkin": "wellness_check",
    "post_assignment_debrief": "session_reflection",
    "team_reflection": "team_sync",
    "values_alignment_check": "values_alignment",
    "stress_reduction_technique": "stress_management",
}
DEFAULT_REFLECTION_CATEGORY = "growth_assessment"

GROWTH_FIELDS = ("growth_areas", "achievements", "professional_growth")


def hash_user_id(user_id: str, salt: str | None = None) -> str:
    raw = f"{user_id}{zkwv_salt() if salt is None else salt}"
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()


def week_start(day: date) -> date:
    return day - timedelta(days=day.weekday())


def reflection_category(kind: str) -> str:
    return REFLECTION_CATEGORIES.get(kind, DEFAULT_REFLECTION_CATEGORY)


def _number(data: dict[str, Any], key: str) -> float | None:
    value = data.get(key)
    if value is None or value == "" or value is False or value == 0:
        return None
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(parsed) or math.isinf(parsed):
        return None
    return parsed


def extract_metrics(
    kind: str,
    data: dict[str, Any],
    classifier: TextSignalClassifier = DEFAULT_CLASSIFIER,
) -> ExtractedMetrics:
    """Pull stress, energy, burnout and confidence signals out of one reflection.

    Zero, blank and non-numeric answers count as absent. Later rules override
    earlier ones, so a debrief's post-assignment stress wins over a plain
    ``stressLevel``.
    """
    data = data or {}
    metrics: dict[str, Any] = {}

    stress = _number(data, "stressLevel")
    if stress is None:
        stress = _number(data, "stress_level")
    energy = _number(data, "energyLevel")
    if energy is None:
        energy = _number(data, "energy_level")
    if kind == "wellness_checkin" or stress is not None or energy is not None:
        if stress is not None:
            metrics["stress_level"] = stress
        if energy is not None:
            metrics["energy_level"] = energy

    before = _number(data, "stressLevelBefore")
    after = _number(data, "stressLevelAfter")
    if kind == "post_assignment_debrief" or before is not None or after is not None:
        if after is not None:
            metrics["stress_level"] = after
        elif stress is not None:
            metrics["stress_level"] = stress
        if before is not None and before > 7:
            metrics["high_stress_pattern"] = True

    burnout = _number(data, "burnoutLevel")
    feeling = data.get("overall_feeling")
    if burnout is not None:
        metrics["burnout_score"] = burnout
    elif isinstance(feeling, str) and feeling.strip():
        signals = classifier.classify(feeling)
        if signals.burnout_score is not None:
            metrics["burnout_score"] = signals.burnout_score
        if signals.recovery_needed:
            metrics["recovery_needed"] = True

    confidence = _number(data, "confidence")
    if confidence is None:
        confidence = _number(data, "confidenceLevel")
    if confidence is not None:
        metrics["confidence_score"] = confidence

    if data.get("needsBreak") or data.get("recovery_needed"):
        metrics["recovery_needed"] = True

    if any(data.get(field) for field in GROWTH_FIELDS):
        metrics["growth_trajectory"] = True

    return ExtractedMetrics(**metrics)


def merge_snapshot(
    existing: WellnessMetricSnapshot | None,
    metrics: ExtractedMetrics,
    *,
    user_hash: str,
    week_of: str,
) -> WellnessMetricSnapshot:
    snapshot = (
        existing.model_copy(deep=True)
        if existing is not None
        else WellnessMetricSnapshot(user_hash=user_hash, week_of=week_of)
    )

    for name in AVERAGED_METRICS:
        new_value = getattr(metrics, name)
        if new_value is None:
            continue
        counter = SAMPLE_COUNTERS[name]
        old_value = getattr(snapshot, name)
        samples = getattr(snapshot, counter)
        if old_value is None:
            samples = 0
        elif samples <= 0:
            # rows written before sample counters existed hold one sample
            samples = 1
        merged = new_value if samples == 0 else (old_value * samples + new_value) / (samples + 1)
        setattr(snapshot, name, merged)
        setattr(snapshot, counter, samples + 1)

    if metrics.burnout_score is not None:
        current = snapshot.burnout_score
        snapshot.burnout_score = metrics.burnout_score if current is None else max(current, metrics.burnout_score)

    for name in FLAG_METRICS:
        if getattr(metrics, name):
            setattr(snapshot, name, True)

    return snapshot


class WellnessMetricsService:
    def __init__(
        self,
        client: PostgrestClient,
        *,
        classifier: TextSignalClassifier = DEFAULT_CLASSIFIER,
        salt: str | None = None,
        today: Callable[[], date] | None = None,
    ) -> None:
        self._client = client
        self._classifier = classifier
        self._salt = salt
        self._today = today or (lambda: datetime.now(timezone.utc).date())

    def current_week_of(self) -> str:
        return week_start(self._today()).isoformat()

    def record_reflection(self, user_id: str, kind: str, data: dict[str, Any]) -> WellnessMetricSnapshot | None:
        metrics = extract_metrics(kind, data, self._classifier)
        if metrics.is_empty():
            return None

        user_hash = hash_user_id(user_id, self._salt)
        week_of = self.current_week_of()
        existing = self._load_snapshot(user_hash, week_of)
        snapshot = merge_snapshot(existing, metrics, user_hash=user_hash, week_of=week_of)

        if existing is not None and existing.id:
            self._client.update(METRICS_TABLE, snapshot.to_row(), [("id", eq(existing.id))])
        else:
            snapshot = self._insert_snapshot(snapshot, metrics, user_hash, week_of)

        self._append_anonymized(user_hash, kind, data, metrics)
        return snapshot

    def get_current_week_metrics(self, user_id: str) -> CurrentWeekMetricsResponse:
        week_of = self.current_week_of()
        try:
            snapshot = self._load_snapshot(hash_user_id(user_id, self._salt), week_of)
        except Exception as exc:
            LOGGER.warning("Could not read weekly wellness metrics: %s", exc)
            snapshot = None
        if snapshot is None:
            return CurrentWeekMetricsResponse(weekOf=week_of)

        values = snapshot.model_dump()
        return CurrentWeekMetricsResponse(
            weekOf=week_of,
            metrics={
                name: float(values[name])
                for name in (*AVERAGED_METRICS, "burnout_score")
                if values.get(name) is not None
            },
            flags={name: bool(values[name]) for name in FLAG_METRICS},
        )

    def _insert_snapshot(
        self,
        snapshot: WellnessMetricSnapshot,
        metrics: ExtractedMetrics,
        user_hash: str,
        week_of: str,
    ) -> WellnessMetricSnapshot:
        """Insert the week's first row, or merge into the row a concurrent worker created.

        Relies on the unique ``(user_hash, week_of)`` constraint on the store table.
        """
        try:
            self._client.insert(METRICS_TABLE, snapshot.to_row())
            return snapshot
        except StoreRequestError as exc:
            if not is_unique_violation(exc):
                raise
            existing = self._load_snapshot(user_hash, week_of)
            if existing is None or not existing.id:
                raise
        LOGGER.info("Weekly snapshot for %s already exists, merging into it", week_of)
        merged = merge_snapshot(existing, metrics, user_hash=user_hash, week_of=week_of)
        self._client.update(METRICS_TABLE, merged.to_row(), [("id", eq(existing.id))])
        return merged

    def _load_snapshot(self, user_hash: str, week_of: str) -> WellnessMetricSnapshot | None:
        rows = self._client.select(
            METRICS_TABLE,
            [("user_hash", eq(user_hash)), ("week_of", eq(week_of))],
            limit=1,
        )
        if not rows:
            return None
        return WellnessMetricSnapshot.from_row(rows[0])

    def _append_anonymized(
        self,
        user_hash: str,
        kind: str,
        data: dict[str, Any],
        metrics: ExtractedMetrics,
    ) -> None:
        row = {
            "user_hash": user_hash,
            "session_hash": hash_user_id(uuid4().hex, self._salt),
            "reflection_category": reflection_category(kind),
            "metrics": metrics.present(),
            "context_type": (data or {}).get("assignment_type") or "general",
        }
        try:
            self._client.insert(ANONYMIZED_TABLE, row)
        except Exception as exc:
            LOGGER.warning("Failed to save anonymized reflection (%s): %s", row["reflection_category"], exc)
