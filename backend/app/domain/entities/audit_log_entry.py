"""Domain entity for the append-only audit trail of mutating operations."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class AuditLogType(str, Enum):
    """Kinds of mutating operations recorded in the audit trail."""

    SUBMIT = "submit"
    SUBMIT_ERROR = "submit-error"
    DELETE = "delete"


@dataclass
class AuditLogEntry:
    """One audit record, appended once per mutating request and never read back."""

    type: AuditLogType
    batch_id: str | None = None
    target_id: str | None = None  # Deletion target (record id, "batch" or "all")
    count: int = 0  # Submitted or deleted record count
    device_id: str | None = None
    error_message: str | None = None
    client_ip: str | None = None
    id: int | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
