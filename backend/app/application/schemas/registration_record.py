"""Pydantic DTOs (Data Transfer Objects) for the registration record API.

Client devices speak camelCase JSON; fields are snake_case in Python and
aliased on the wire.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }


# ── Request Schemas ──────────────────────────────────────────────────


class RecordSubmitRequest(_CamelModel):
    """Body of a batch submission.

    ``data`` is deliberately untyped here: its shape is checked by the
    ingestion service so that a malformed batch is rejected as a whole.
    """

    data: Any = Field(
        None,
        examples=[[{"name": "王小明", "project": "副总功德主", "amountTWD": "80000", "localId": "d1-0001"}]],
    )
    batch_id: str | None = Field(None, max_length=255)
    device_id: str | None = Field(None, max_length=255)


# ── Response Schemas ─────────────────────────────────────────────────


class RegistrationRecordResponse(_CamelModel):
    """A stored record as returned to clients."""

    id: str
    local_id: str | None = None
    server_id: str
    name: str | None = None
    project: str | None = None
    method: str | None = None
    content: str | None = None
    contact: str | None = None
    payment: str | None = None
    amount_twd: float = Field(0.0, alias="amountTWD")
    amount_rmb: float = Field(0.0, alias="amountRMB")
    batch_id: str | None = None
    device_id: str | None = None
    sync_status: str
    extra: dict[str, Any] = {}
    submitted_at: datetime
    created_at: datetime
    updated_at: datetime


class RecordSubmitResponse(_CamelModel):
    success: bool = True
    message: str
    submitted_count: int
    batch_id: str
    timestamp: datetime


class PaginationSchema(_CamelModel):
    page: int
    limit: int
    total_count: int
    total_pages: int


class FilteredStatsSchema(_CamelModel):
    """Sums and count over the whole filtered set, not just the returned page."""

    total_amount_twd: float = Field(0.0, alias="totalAmountTWD")
    total_amount_rmb: float = Field(0.0, alias="totalAmountRMB")
    count: int = 0


class RecordListResponse(_CamelModel):
    success: bool = True
    data: list[RegistrationRecordResponse] = []
    pagination: PaginationSchema
    stats: FilteredStatsSchema


class OverallStatsSchema(_CamelModel):
    total_records: int = 0
    total_amount_twd: float = Field(0.0, alias="totalAmountTWD")
    total_amount_rmb: float = Field(0.0, alias="totalAmountRMB")
    avg_amount_twd: float = Field(0.0, alias="avgAmountTWD")
    avg_amount_rmb: float = Field(0.0, alias="avgAmountRMB")


class GroupStatsSchema(_CamelModel):
    """One group: a project, a payment status or a UTC day (``YYYY-MM-DD``)."""

    key: str | None
    count: int = 0
    total_amount_twd: float = Field(0.0, alias="totalAmountTWD")
    total_amount_rmb: float = Field(0.0, alias="totalAmountRMB")


class StatisticsResponse(_CamelModel):
    success: bool = True
    overall: OverallStatsSchema
    by_project: list[GroupStatsSchema] = []
    by_payment: list[GroupStatsSchema] = []
    daily: list[GroupStatsSchema] = []
    last_updated: datetime


class RecordDeleteResponse(_CamelModel):
    success: bool = True
    message: str
    deleted_count: int


class ErrorResponse(BaseModel):
    """Envelope for every failed request."""

    success: bool = False
    error: str
