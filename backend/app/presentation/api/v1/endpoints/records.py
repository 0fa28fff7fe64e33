"""Registration record endpoints — submit, list and delete."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from app.application.schemas import (
    FilteredStatsSchema,
    PaginationSchema,
    RecordDeleteResponse,
    RecordListResponse,
    RecordSubmitRequest,
    RecordSubmitResponse,
    RegistrationRecordResponse,
)
from app.application.services import (
    RecordDeletionService,
    RecordIngestionService,
    RecordQueryService,
)
from app.domain.exceptions import ValidationError
from app.infrastructure.dependencies import (
    get_client_ip,
    get_record_deletion_service,
    get_record_ingestion_service,
    get_record_query_service,
)

router = APIRouter(prefix="/records", tags=["Records"])

_datetime_adapter = TypeAdapter(datetime)


def _parse_date(value: str | None, param: str) -> datetime | None:
    """Parse an optional date/datetime query value; empty means no bound."""
    if not value:
        return None
    try:
        return _datetime_adapter.validate_python(value)
    except PydanticValidationError:
        raise ValidationError(f"Invalid {param}: {value!r}")


@router.post("", response_model=RecordSubmitResponse)
async def submit_records(
    body: RecordSubmitRequest,
    client_ip: str | None = Depends(get_client_ip),
    service: RecordIngestionService = Depends(get_record_ingestion_service),
) -> RecordSubmitResponse:
    """Ingest a batch of records submitted by a client device."""
    result = await service.submit_batch(
        body.data,
        batch_id=body.batch_id,
        device_id=body.device_id,
        client_ip=client_ip,
    )
    return RecordSubmitResponse(
        message=f"Submitted {result.submitted_count} records",
        submitted_count=result.submitted_count,
        batch_id=result.batch_id,
        timestamp=datetime.now(timezone.utc),
    )


@router.get("", response_model=RecordListResponse)
async def list_records(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1),
    sort_by: str = Query("submittedAt", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder", description="'asc' or 'desc'"),
    search: str | None = Query(None, description="Substring of name, contact or content"),
    project: str | None = Query(None, description="Exact project"),
    payment: str | None = Query(None, description="Exact payment status"),
    start_date: str | None = Query(None, alias="startDate", description="Inclusive lower bound on submittedAt"),
    end_date: str | None = Query(None, alias="endDate", description="Inclusive upper bound on submittedAt"),
    service: RecordQueryService = Depends(get_record_query_service),
) -> RecordListResponse:
    """Retrieve a filtered, paginated list of records plus totals over the filtered set."""
    result = await service.list_records(
        page=page,
        limit=limit,
        sort_by=sort_by,
        sort_order=sort_order,
        search=search,
        project=project,
        payment=payment,
        start_date=_parse_date(start_date, "startDate"),
        end_date=_parse_date(end_date, "endDate"),
    )
    return RecordListResponse(
        data=[
            RegistrationRecordResponse.model_validate(r, from_attributes=True)
            for r in result.records
        ],
        pagination=PaginationSchema(
            page=result.pagination.page,
            limit=result.pagination.limit,
            total_count=result.pagination.total_count,
            total_pages=result.pagination.total_pages,
        ),
        stats=FilteredStatsSchema(
            total_amount_twd=result.totals.total_amount_twd,
            total_amount_rmb=result.totals.total_amount_rmb,
            count=result.totals.count,
        ),
    )


@router.delete("/{target_id}", response_model=RecordDeleteResponse)
async def delete_records(
    target_id: str,
    batch_id: str | None = Query(None, alias="batchId"),
    admin_password: str | None = Query(None, alias="adminPassword"),
    client_ip: str | None = Depends(get_client_ip),
    service: RecordDeletionService = Depends(get_record_deletion_service),
) -> RecordDeleteResponse:
    """Delete one record, a whole batch ("batch") or everything ("all")."""
    deleted = await service.delete(
        target_id,
        admin_password=admin_password,
        batch_id=batch_id,
        client_ip=client_ip,
    )
    return RecordDeleteResponse(
        message=f"Deleted {deleted} records",
        deleted_count=deleted,
    )
