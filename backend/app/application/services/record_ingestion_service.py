"""Application service (use case) for batch record ingestion."""

import math
import time
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from app.application.interfaces import RegistrationRecordRepository
from app.application.services.audit_trail import AuditTrail
from app.domain.entities import IngestionResult, RegistrationRecord, SYNC_STATUS_SYNCED
from app.domain.exceptions import ConflictError, StoreError, ValidationError
from app.infrastructure.logging.colored_logger import OperationLogger, OperationStage

log = OperationLogger(__name__)

DEFAULT_DEVICE_ID = "unknown"

# Client item key → entity attribute for free-text fields
_TEXT_FIELDS = {
    "name": "name",
    "project": "project",
    "method": "method",
    "content": "content",
    "contact": "contact",
    "payment": "payment",
}

# Keys that map onto columns or are stamped by the server; everything else goes to `extra`
_RESERVED_KEYS = frozenset({
    *_TEXT_FIELDS,
    "id",
    "_id",
    "localId",
    "serverId",
    "amountTWD",
    "amountRMB",
    "batchId",
    "deviceId",
    "submittedAt",
    "createdAt",
    "updatedAt",
    "syncStatus",
})


def coerce_amount(value: Any) -> float:
    """Parse an amount into a float, falling back to 0 for anything non-numeric.

    Numbers pass through, strings are parsed (surrounding whitespace ignored).
    Missing, malformed, boolean, NaN, infinite and out-of-range values all become 0.
    """
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return 0.0
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return 0.0
    else:
        return 0.0
    return number if math.isfinite(number) else 0.0


def _text(value: Any) -> str | None:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def _default_batch_id() -> str:
    return f"batch_{int(time.time() * 1000)}"


class RecordIngestionService:
    """Validates, normalizes and bulk-persists submitted batches, then audits the outcome."""

    def __init__(self, repository: RegistrationRecordRepository, audit_trail: AuditTrail):
        self._repository = repository
        self._audit = audit_trail

    async def submit_batch(
        self,
        items: Any,
        *,
        batch_id: str | None = None,
        device_id: str | None = None,
        client_ip: str | None = None,
    ) -> IngestionResult:
        """Ingest a batch of raw items as one all-or-nothing write.

        Raises:
            ValidationError: ``items`` is missing, not a list, or holds a non-object.
            ConflictError: a ``localId`` is already taken; nothing was inserted.
            StoreError: the record store failed; nothing was inserted.
        """
        if items is None or not isinstance(items, (list, tuple)):
            raise ValidationError("Invalid data format: 'data' must be a list of records")
        if any(not isinstance(item, Mapping) for item in items):
            raise ValidationError("Invalid data format: every record must be an object")

        resolved_batch_id = batch_id or _default_batch_id()
        resolved_device_id = device_id or DEFAULT_DEVICE_ID
        ingested_at = datetime.now(timezone.utc)

        log.step_start(
            OperationStage.INGEST,
            "Received batch",
            batch=resolved_batch_id,
            device=resolved_device_id,
            items=len(items),
        )

        records = [
            self._normalize(item, resolved_batch_id, resolved_device_id, ingested_at)
            for item in items
        ]

        try:
            inserted = await self._repository.insert_many(records)
        except (ConflictError, StoreError) as exc:
            log.step_error(OperationStage.STORE, f"Batch {resolved_batch_id} rejected", error=exc)
            await self._audit.record_submit_error(
                batch_id=resolved_batch_id,
                error=exc,
                client_ip=client_ip,
            )
            raise

        log.step_complete(OperationStage.STORE, f"Inserted {inserted} records", batch=resolved_batch_id)

        await self._audit.record_submit(
            batch_id=resolved_batch_id,
            count=inserted,
            device_id=resolved_device_id,
            client_ip=client_ip,
        )
        return IngestionResult(submitted_count=inserted, batch_id=resolved_batch_id)

    @staticmethod
    def _normalize(
        item: Mapping[str, Any],
        batch_id: str,
        device_id: str,
        ingested_at: datetime,
    ) -> RegistrationRecord:
        """Build a stamped RegistrationRecord from one raw client item."""
        local_id = item.get("localId")
        return RegistrationRecord(
            **{attr: _text(item.get(key)) for key, attr in _TEXT_FIELDS.items()},
            amount_twd=coerce_amount(item.get("amountTWD")),
            amount_rmb=coerce_amount(item.get("amountRMB")),
            local_id=_text(local_id) if local_id not in (None, "") else None,
            server_id=uuid4().hex,
            batch_id=batch_id,
            device_id=device_id,
            sync_status=SYNC_STATUS_SYNCED,
            extra={k: v for k, v in item.items() if k not in _RESERVED_KEYS},
            submitted_at=ingested_at,
            created_at=ingested_at,
            updated_at=ingested_at,
        )
