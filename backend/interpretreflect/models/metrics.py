from typing import Any

from pydantic import BaseModel, Field

AVERAGED_METRICS = ("stress_level", "energy_level", "confidence_score")
MAXED_METRICS = ("burnout_score",)
FLAG_METRICS = ("high_stress_pattern", "recovery_needed", "growth_trajectory")


class ExtractedMetrics(BaseModel):
    """Signals pulled from a single reflection before they are merged."""

    stress_level: float | None = None
    energy_level: float | None = None
    burnout_score: float | None = None
    confidence_score: float | None = None
    high_stress_pattern: bool | None = None
    recovery_needed: bool | None = None
    growth_trajectory: bool | None = None

    def is_empty(self) -> bool:
        return not self.present()

    def present(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class WellnessMetricSnapshot(BaseModel):
    id: str | None = None
    user_hash: str
    week_of: str
    stress_level: float | None = None
    energy_level: float | None = None
    burnout_score: float | None = None
    confidence_score: float | None = None
    stress_samples: int = 0
    energy_samples: int = 0
    confidence_samples: int = 0
    high_stress_pattern: bool = False
    recovery_needed: bool = False
    growth_trajectory: bool = False

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "WellnessMetricSnapshot":
        values = {key: value for key, value in row.items() if key in cls.model_fields and value is not None}
        if "id" in values:
            values["id"] = str(values["id"])
        return cls(**values)

    def to_row(self) -> dict[str, Any]:
        return self.model_dump(exclude={"id"})


class CurrentWeekMetricsResponse(BaseModel):
    weekOf: str
    metrics: dict[str, float] = Field(default_factory=dict)
    flags: dict[str, bool] = Field(default_factory=dict)
