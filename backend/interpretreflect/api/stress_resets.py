from fastapi import APIRouter, Depends, HTTPException, status

from interpretreflect.api.dependencies import get_reflection_gateway
from interpretreflect.api.security import CurrentUser, get_current_user
from interpretreflect.models.reflection import StressResetRequest, StressResetResponse
from interpretreflect.services.reflection_gateway import ReflectionGateway

router = APIRouter(prefix="/stress-resets", tags=["Stress Resets"])


@router.post("", response_model=StressResetResponse, status_code=status.HTTP_201_CREATED)
def log_stress_reset(
    payload: StressResetRequest,
    current_user: CurrentUser = Depends(get_current_user),
    gateway: ReflectionGateway = Depends(get_reflection_gateway),
) -> StressResetResponse:
    result = gateway.save_stress_reset_log(
        current_user.user_id,
        payload.toolType,
        duration_minutes=payload.durationMinutes,
        stress_level_before=payload.stressLevelBefore,
        stress_level_after=payload.stressLevelAfter,
        notes=payload.notes,
    )
    if not result.success:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=result.error)
    return StressResetResponse(success=True, toolType=payload.toolType)
