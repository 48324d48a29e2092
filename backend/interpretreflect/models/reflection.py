from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

TimeWindow = Literal["week", "month", "90days"]


class ReflectionEntry(BaseModel):
    id: str | None = None
    userId: str
    kind: str
    data: dict[str, Any] = Field(default_factory=dict)
    createdAt: datetime | None = None
    updatedAt: datetime | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "ReflectionEntry":
        data = row.get("data")
        return cls(
            id=str(row["id"]) if row.get("id") is not None else None,
            userId=str(row.get("user_id", "")),
            kind=str(row.get("entry_kind") or "personal_reflection"),
            data=data if isinstance(data, dict) else {},
            createdAt=row.get("created_at"),
            updatedAt=row.get("updated_at"),
        )


class SaveReflectionResponse(BaseModel):
    success: bool
    kind: str
    record: dict[str, Any] = Field(default_factory=dict)


class ReflectionPreviewResponse(BaseModel):
    kind: str
    displayName: str
    record: dict[str, Any]


class KindCount(BaseModel):
    kind: str
    displayName: str
    count: int


class ReflectionStats(BaseModel):
    totalReflections: int = 0
    weeklyReflections: int = 0
    monthlyReflections: int = 0
    streakDays: int = 0
    lastReflectionDate: datetime | None = None
    topReflectionKinds: list[KindCount] = Field(default_factory=list)


class ReflectionInsights(BaseModel):
    patterns: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    achievements: list[str] = Field(default_factory=list)
    areasOfGrowth: list[str] = Field(default_factory=list)


class WeekOverWeek(BaseModel):
    current: int = 0
    previous: int = 0
    percentChange: int = 0


class GrowthSummary(BaseModel):
    totalReflections: int = 0
    reflectionsByKind: dict[str, int] = Field(default_factory=dict)
    weekOverWeek: WeekOverWeek = Field(default_factory=WeekOverWeek)


class StressEnergyPoint(BaseModel):
    date: str
    stress: float | None = None
    energy: float | None = None
    timestamp: datetime | None = None


class EmotionFrequency(BaseModel):
    emotion: str
    frequency: int


class EmotionalPatterns(BaseModel):
    totalReflections: int = 0
    kinds: list[str] = Field(default_factory=list)
    keyThemes: list[str] = Field(default_factory=list)
    emotionalPatterns: list[EmotionFrequency] = Field(default_factory=list)


class DailyActivity(BaseModel):
    id: str | None = None
    userId: str
    activityDate: str
    activitiesCompleted: list[str] = Field(default_factory=list)


class StressResetRequest(BaseModel):
    toolType: str = Field(..., min_length=1, max_length=100)
    durationMinutes: float | None = Field(default=None, ge=0)
    stressLevelBefore: float | None = Field(default=None, ge=0, le=10)
    stressLevelAfter: float | None = Field(default=None, ge=0, le=10)
    notes: str | None = Field(default=None, max_length=2000)


class StressResetResponse(BaseModel):
    success: bool
    toolType: str


class ReflectionKindInfo(BaseModel):
    kind: str
    displayName: str
    shortName: str | None = None
