from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status

from interpretreflect.api.dependencies import (
    get_daily_activity_service,
    get_insights_service,
    get_reflection_gateway,
)
from interpretreflect.api.security import CurrentUser, get_current_user
from interpretreflect.models.reflection import (
    DailyActivity,
    EmotionalPatterns,
    GrowthSummary,
    ReflectionEntry,
    ReflectionInsights,
    ReflectionKindInfo,
    ReflectionPreviewResponse,
    ReflectionStats,
    SaveReflectionResponse,
    StressEnergyPoint,
)
from interpretreflect.models.reflection_kinds import REFLECTION_KINDS, display_name
from interpretreflect.services.daily_activity import DailyActivityService
from interpretreflect.services.record_assembler import assemble_reflection
from interpretreflect.services.reflection_gateway import ReflectionGateway
from interpretreflect.services.reflection_insights import WINDOW_DAYS, ReflectionInsightsService

router = APIRouter(prefix="/reflections", tags=["Reflections"])


def _validate_window(window: str | None) -> str | None:
    if window is not None and window not in WINDOW_DAYS:
        allowed = ", ".join(WINDOW_DAYS)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"window must be one of: {allowed}")
    return window


@router.get("/kinds", response_model=list[ReflectionKindInfo])
def list_reflection_kinds() -> list[ReflectionKindInfo]:
    return [
        ReflectionKindInfo(kind=kind.entry_kind, displayName=kind.display_name, shortName=kind.short_name)
        for kind in REFLECTION_KINDS.values()
    ]


@router.get("", response_model=list[ReflectionEntry])
def list_reflections(
    limit: int | None = Query(default=None, ge=1, le=500),
    window: str | None = Query(default=None),
    kind: str | None = Query(default=None),
    current_user: CurrentUser = Depends(get_current_user),
    service: ReflectionInsightsService = Depends(get_insights_service),
) -> list[ReflectionEntry]:
    window = _validate_window(window)
    if kind:
        return service.get_user_reflections_by_kind(current_user.user_id, kind, limit, window)
    return service.get_user_reflections(current_user.user_id, limit, window)


@router.get("/stats", response_model=ReflectionStats)
def reflection_stats(
    current_user: CurrentUser = Depends(get_current_user),
    service: ReflectionInsightsService = Depends(get_insights_service),
) -> ReflectionStats:
    return service.get_reflection_stats(current_user.user_id)


@router.get("/insights", response_model=ReflectionInsights)
def reflection_insights(
    window: str = Query(default="month"),
    current_user: CurrentUser = Depends(get_current_user),
    service: ReflectionInsightsService = Depends(get_insights_service),
) -> ReflectionInsights:
    return service.get_reflection_insights(current_user.user_id, _validate_window(window))


@router.get("/summary", response_model=GrowthSummary)
def growth_summary(
    current_user: CurrentUser = Depends(get_current_user),
    service: ReflectionInsightsService = Depends(get_insights_service),
) -> GrowthSummary:
    return service.get_growth_summary(current_user.user_id)


@router.get("/stress-energy", response_model=list[StressEnergyPoint])
def stress_energy_series(
    limit: int = Query(default=30, ge=1, le=365),
    current_user: CurrentUser = Depends(get_current_user),
    service: ReflectionInsightsService = Depends(get_insights_service),
) -> list[StressEnergyPoint]:
    return service.get_stress_energy_series(current_user.user_id, limit)


@router.get("/emotional-patterns", response_model=EmotionalPatterns)
def emotional_patterns(
    window: str = Query(default="month"),
    current_user: CurrentUser = Depends(get_current_user),
    service: ReflectionInsightsService = Depends(get_insights_service),
) -> EmotionalPatterns:
    return service.get_emotional_patterns(current_user.user_id, _validate_window(window))


@router.get("/daily-activity", response_model=list[DailyActivity])
def daily_activity(
    days: int = Query(default=365, ge=1, le=365),
    current_user: CurrentUser = Depends(get_current_user),
    service: DailyActivityService = Depends(get_daily_activity_service),
) -> list[DailyActivity]:
    return service.get_daily_activity(current_user.user_id, days)


@router.post("/{kind}/preview", response_model=ReflectionPreviewResponse)
def preview_reflection(
    kind: str,
    answers: dict[str, Any] = Body(...),
    current_user: CurrentUser = Depends(get_current_user),
) -> ReflectionPreviewResponse:
    return ReflectionPreviewResponse(
        kind=kind,
        displayName=display_name(kind),
        record=assemble_reflection(kind, answers),
    )


@router.post("/{kind}", response_model=SaveReflectionResponse, status_code=status.HTTP_201_CREATED)
def save_reflection(
    kind: str,
    answers: dict[str, Any] = Body(...),
    current_user: CurrentUser = Depends(get_current_user),
    gateway: ReflectionGateway = Depends(get_reflection_gateway),
) -> SaveReflectionResponse:
    record = assemble_reflection(kind, answers)
    result = gateway.save_reflection(current_user.user_id, kind, record)
    if not result.success:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=result.error)
    return SaveReflectionResponse(success=True, kind=kind, record=record)
