"""Application service (use case) for aggregate record statistics."""

import asyncio
from datetime import datetime, timedelta, timezone

from app.application.interfaces import RegistrationRecordRepository
from app.domain.entities import RecordStatistics
from app.infrastructure.logging.colored_logger import OperationLogger, OperationStage

log = OperationLogger(__name__)

DAILY_WINDOW = timedelta(days=30)


class RecordStatisticsService:
    """Computes overall, per-project, per-payment and trailing-30-day daily statistics.

    The four views are read concurrently and independently; under
    concurrent writes each may reflect a slightly different snapshot.
    """

    def __init__(self, repository: RegistrationRecordRepository):
        self._repository = repository

    async def compute(self) -> RecordStatistics:
        now = datetime.now(timezone.utc)

        with log.timed_step(OperationStage.AGGREGATE, "Computing record statistics"):
            overall, by_project, by_payment, daily = await asyncio.gather(
                self._repository.overall_stats(),
                self._repository.stats_by_project(),
                self._repository.stats_by_payment(),
                self._repository.daily_stats(since=now - DAILY_WINDOW),
            )

        return RecordStatistics(
            overall=overall,
            by_project=by_project,
            by_payment=by_payment,
            daily=daily,
            computed_at=now,
        )
