from fastapi import APIRouter, Depends

from interpretreflect.api.dependencies import get_wellness_metrics_service
from interpretreflect.api.security import CurrentUser, get_current_user
from interpretreflect.models.metrics import CurrentWeekMetricsResponse
from interpretreflect.services.wellness_metrics import WellnessMetricsService

router = APIRouter(prefix="/wellness-metrics", tags=["Wellness Metrics"])


@router.get("/current-week", response_model=CurrentWeekMetricsResponse)
def current_week_metrics(
    current_user: CurrentUser = Depends(get_current_user),
    service: WellnessMetricsService = Depends(get_wellness_metrics_service),
) -> CurrentWeekMetricsResponse:
    return service.get_current_week_metrics(current_user.user_id)
