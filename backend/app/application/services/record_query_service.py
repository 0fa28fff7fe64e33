"""Application service (use case) for filtered, paginated record listings."""

import asyncio
import logging
from datetime import datetime, timezone

from app.application.interfaces import RegistrationRecordRepository
from app.domain.entities import Pagination, RecordFilter, RecordPage, RecordSort
from app.infrastructure.logging.colored_logger import OperationLogger, OperationStage

logger = logging.getLogger(__name__)
log = OperationLogger(__name__)

DEFAULT_SORT_FIELD = "submitted_at"

# Public (camelCase) field name accepted by `sortBy` → record attribute
_SORT_FIELDS = {
    "submittedAt": "submitted_at",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "name": "name",
    "project": "project",
    "method": "method",
    "content": "content",
    "contact": "contact",
    "payment": "payment",
    "amountTWD": "amount_twd",
    "amountRMB": "amount_rmb",
    "batchId": "batch_id",
    "deviceId": "device_id",
    "localId": "local_id",
    "serverId": "server_id",
    "syncStatus": "sync_status",
}


def resolve_sort_field(sort_by: str | None) -> str:
    """Map a public field name to the record attribute, falling back to submitted_at."""
    if not sort_by:
        return DEFAULT_SORT_FIELD
    if sort_by not in _SORT_FIELDS:
        logger.warning("Unsupported sortBy %r, falling back to submittedAt", sort_by)
        return DEFAULT_SORT_FIELD
    return _SORT_FIELDS[sort_by]


def _as_utc(value: datetime | None) -> datetime | None:
    """Interpret naive bounds as UTC and convert aware ones to UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class RecordQueryService:
    """Lists records with optional filters, returning a page plus the filtered-set totals."""

    def __init__(self, repository: RegistrationRecordRepository):
        self._repository = repository

    async def list_records(
        self,
        *,
        page: int = 1,
        limit: int = 50,
        sort_by: str | None = "submittedAt",
        sort_order: str | None = "desc",
        search: str | None = None,
        project: str | None = None,
        payment: str | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> RecordPage:
        page = max(page, 1)
        limit = max(limit, 1)

        record_filter = RecordFilter(
            search=search or None,
            project=project or None,
            payment=payment or None,
            start_date=_as_utc(start_date),
            end_date=_as_utc(end_date),
        )
        sort = RecordSort(
            field=resolve_sort_field(sort_by),
            descending=(sort_order or "desc") == "desc",
        )

        log.step_start(OperationStage.QUERY, "Listing records", page=page, limit=limit)

        # Page and totals are independent reads; no snapshot consistency between them
        records, totals = await asyncio.gather(
            self._repository.find_page(
                record_filter,
                sort,
                skip=(page - 1) * limit,
                limit=limit,
            ),
            self._repository.aggregate_totals(record_filter),
        )

        log.step_complete(
            OperationStage.QUERY,
            f"Returned {len(records)} of {totals.count} records",
        )
        return RecordPage(
            records=records,
            pagination=Pagination(page=page, limit=limit, total_count=totals.count),
            totals=totals,
        )
