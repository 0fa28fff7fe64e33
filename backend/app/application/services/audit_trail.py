"""Audit trail — single entry point for recording mutating operations.

Appends are best-effort: the data mutation has already happened (or
failed) by the time an entry is written, and a failed append is logged
but never propagated to the caller.
"""

from app.application.interfaces import AuditLogRepository
from app.domain.entities import AuditLogEntry, AuditLogType
from app.infrastructure.logging.colored_logger import OperationLogger, OperationStage

log = OperationLogger(__name__)


class AuditTrail:
    """Writes audit log entries for submissions and deletions.

    Usage:
        audit = AuditTrail(audit_log_repository)
        await audit.record_submit(batch_id="batch_1", count=3, device_id="ipad-2", client_ip="10.0.0.4")
    """

    def __init__(self, repository: AuditLogRepository):
        self._repo = repository

    async def record_submit(
        self,
        *,
        batch_id: str,
        count: int,
        device_id: str | None,
        client_ip: str | None,
    ) -> AuditLogEntry | None:
        return await self._append(
            AuditLogEntry(
                type=AuditLogType.SUBMIT,
                batch_id=batch_id,
                count=count,
                device_id=device_id,
                client_ip=client_ip,
            )
        )

    async def record_submit_error(
        self,
        *,
        batch_id: str | None,
        error: Exception,
        client_ip: str | None,
    ) -> AuditLogEntry | None:
        return await self._append(
            AuditLogEntry(
                type=AuditLogType.SUBMIT_ERROR,
                batch_id=batch_id,
                error_message=str(error),
                client_ip=client_ip,
            )
        )

    async def record_delete(
        self,
        *,
        target_id: str,
        deleted_count: int,
        client_ip: str | None,
        error: Exception | None = None,
    ) -> AuditLogEntry | None:
        """A failed deletion is recorded as a delete entry with zero count and the error message."""
        return await self._append(
            AuditLogEntry(
                type=AuditLogType.DELETE,
                target_id=target_id,
                count=deleted_count,
                error_message=str(error) if error is not None else None,
                client_ip=client_ip,
            )
        )

    async def _append(self, entry: AuditLogEntry) -> AuditLogEntry | None:
        """Persist an entry, returning None instead of raising when the write fails."""
        try:
            saved = await self._repo.append(entry)
        except Exception as exc:
            log.warning(
                OperationStage.AUDIT,
                f"Could not write '{entry.type.value}' audit entry: {exc}",
            )
            return None

        log.detail(
            f"Audit entry '{entry.type.value}' written",
            count=entry.count,
            batch=entry.batch_id or entry.target_id,
        )
        return saved
