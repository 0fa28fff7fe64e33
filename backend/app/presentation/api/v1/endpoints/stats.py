"""Aggregate statistics endpoint."""

from fastapi import APIRouter, Depends

from app.application.schemas import GroupStatsSchema, OverallStatsSchema, StatisticsResponse
from app.application.services import RecordStatisticsService
from app.domain.entities import GroupStats
from app.infrastructure.dependencies import get_record_statistics_service

router = APIRouter(prefix="/stats", tags=["Statistics"])


def _to_group(group: GroupStats) -> GroupStatsSchema:
    return GroupStatsSchema(
        key=group.key,
        count=group.count,
        total_amount_twd=group.total_amount_twd,
        total_amount_rmb=group.total_amount_rmb,
    )


@router.get("", response_model=StatisticsResponse)
async def get_statistics(
    service: RecordStatisticsService = Depends(get_record_statistics_service),
) -> StatisticsResponse:
    """Overall, per-project, per-payment-status and trailing-30-day daily statistics."""
    stats = await service.compute()
    return StatisticsResponse(
        overall=OverallStatsSchema.model_validate(stats.overall, from_attributes=True),
        by_project=[_to_group(g) for g in stats.by_project],
        by_payment=[_to_group(g) for g in stats.by_payment],
        daily=[_to_group(g) for g in stats.daily],
        last_updated=stats.computed_at,
    )
