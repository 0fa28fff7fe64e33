"""Domain entity — a single donation/memorial registration entry."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

SYNC_STATUS_SYNCED = "synced"


@dataclass
class RegistrationRecord:
    """Core domain entity for one registration submitted by a client device.

    Records are created in bulk per batch by ingestion and are never mutated
    afterwards; the only other lifecycle event is deletion.
    """

    name: str | None = None
    project: str | None = None
    method: str | None = None
    content: str | None = None
    contact: str | None = None
    payment: str | None = None
    amount_twd: float = 0.0
    amount_rmb: float = 0.0
    local_id: str | None = None
    server_id: str = field(default_factory=lambda: uuid4().hex)
    batch_id: str | None = None
    device_id: str | None = None
    sync_status: str = SYNC_STATUS_SYNCED
    extra: dict[str, Any] = field(default_factory=dict)
    id: str = field(default_factory=lambda: str(uuid4()))
    submitted_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
