from functools import lru_cache

from fastapi import Depends

from interpretreflect.api.security import get_store_client
from interpretreflect.services.daily_activity import DailyActivityService
from interpretreflect.services.reflection_gateway import ReflectionGateway
from interpretreflect.services.reflection_insights import ReflectionInsightsService
from interpretreflect.services.rest_store import PostgrestClient
from interpretreflect.services.side_writes import SideWriteDispatcher
from interpretreflect.services.wellness_metrics import WellnessMetricsService


@lru_cache(maxsize=1)
def get_side_write_dispatcher() -> SideWriteDispatcher:
    return SideWriteDispatcher()


def get_reflection_gateway(
    client: PostgrestClient = Depends(get_store_client),
    dispatcher: SideWriteDispatcher = Depends(get_side_write_dispatcher),
) -> ReflectionGateway:
    return ReflectionGateway(client, dispatcher)


def get_insights_service(client: PostgrestClient = Depends(get_store_client)) -> ReflectionInsightsService:
    return ReflectionInsightsService(client)


def get_wellness_metrics_service(client: PostgrestClient = Depends(get_store_client)) -> WellnessMetricsService:
    return WellnessMetricsService(client)


def get_daily_activity_service(client: PostgrestClient = Depends(get_store_client)) -> DailyActivityService:
    return DailyActivityService(client)
