"""Request statistics endpoint."""

from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from pokeleague.api.deps import ServicesDep, get_current_user
from pokeleague.utils.helpers import utcnow

router = APIRouter(prefix="/api/monitoring", tags=["monitoring"], dependencies=[Depends(get_current_user)])


class EndpointReport(BaseModel):
    endpoint: str
    count: int
    average_ms: float
    min_ms: float
    max_ms: float
    error_count: int
    success_rate: float


class StatisticsReport(BaseModel):
    timestamp: datetime
    total_requests: int
    endpoints: list[EndpointReport]


@router.get("/statistics", response_model=StatisticsReport)
def get_statistics(services: ServicesDep):
    stats = services.statistics
    return StatisticsReport(
        timestamp=utcnow(),
        total_requests=stats.total_requests,
        endpoints=[
            EndpointReport(
                endpoint=s.endpoint,
                count=s.count,
                average_ms=round(s.average_ms, 2),
                min_ms=round(s.min_ms, 2),
                max_ms=round(s.max_ms, 2),
                error_count=s.error_count,
                success_rate=round(s.success_rate, 1),
            )
            for s in stats.snapshot()
        ],
    )
