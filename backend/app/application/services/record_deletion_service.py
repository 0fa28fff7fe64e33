"""Application service (use case) for administrative record deletion."""

import secrets

from app.application.interfaces import RegistrationRecordRepository
from app.application.services.audit_trail import AuditTrail
from app.domain.exceptions import AuthError, StoreError
from app.infrastructure.logging.colored_logger import OperationLogger, OperationStage

log = OperationLogger(__name__)

BATCH_TARGET = "batch"
ALL_TARGET = "all"

# Single-record lookup order: the first field that matches a record decides
LOOKUP_FIELDS: tuple[str, ...] = ("id", "local_id", "server_id")


class RecordDeletionService:
    """Authorizes and executes one of three deletion modes, then audits the outcome.

    Modes, first match wins:
        1. target "batch" with a batch id  → every record of that batch
        2. target "all"                    → every record
        3. anything else                   → at most one record, looked up by
                                             id, then localId, then serverId
    """

    def __init__(
        self,
        repository: RegistrationRecordRepository,
        audit_trail: AuditTrail,
        admin_password: str,
    ):
        self._repository = repository
        self._audit = audit_trail
        self._admin_password = admin_password

    def authorize(self, admin_password: str | None) -> None:
        """Raise AuthError unless the supplied secret matches exactly."""
        supplied = (admin_password or "").encode("utf-8")
        expected = self._admin_password.encode("utf-8")
        if admin_password is None or not secrets.compare_digest(supplied, expected):
            raise AuthError("Unauthorized operation")

    async def delete(
        self,
        target_id: str,
        *,
        admin_password: str | None,
        batch_id: str | None = None,
        client_ip: str | None = None,
    ) -> int:
        """Delete according to the selected mode. Returns the deleted count (0 is valid)."""
        self.authorize(admin_password)

        try:
            if target_id == BATCH_TARGET and batch_id:
                log.step_start(OperationStage.DELETE, "Deleting batch", batch=batch_id)
                deleted = await self._repository.delete_by_batch(batch_id)
            elif target_id == ALL_TARGET:
                log.step_start(OperationStage.DELETE, "Deleting ALL records")
                deleted = await self._repository.delete_all()
            else:
                deleted = await self._delete_single(target_id)
        except StoreError as exc:
            log.step_error(OperationStage.DELETE, f"Delete of {target_id!r} failed", error=exc)
            await self._audit.record_delete(
                target_id=target_id,
                deleted_count=0,
                client_ip=client_ip,
                error=exc,
            )
            raise

        log.step_complete(OperationStage.DELETE, f"Deleted {deleted} records", target=target_id)

        await self._audit.record_delete(
            target_id=target_id,
            deleted_count=deleted,
            client_ip=client_ip,
        )
        return deleted

    async def _delete_single(self, target_id: str) -> int:
        for field in LOOKUP_FIELDS:
            deleted = await self._repository.delete_one_by_field(field, target_id)
            if deleted:
                log.detail(f"Matched record by {field}", target=target_id)
                return deleted
        return 0
