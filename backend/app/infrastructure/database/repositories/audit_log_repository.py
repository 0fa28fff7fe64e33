"""Concrete repository for the audit log backed by SQLAlchemy."""

from app.application.interfaces import AuditLogRepository
from app.domain.entities import AuditLogEntry, AuditLogType
from app.infrastructure.database.models import AuditLogModel
from app.infrastructure.database.store import RecordStore


class SQLAlchemyAuditLogRepository(AuditLogRepository):
    """Implements the AuditLogRepository port; each append is its own transaction."""

    def __init__(self, store: RecordStore):
        self._store = store

    def _to_entity(self, model: AuditLogModel) -> AuditLogEntry:
        """Map ORM model → domain entity."""
        return AuditLogEntry(
            id=model.id,
            type=AuditLogType(model.type),
            batch_id=model.batch_id,
            target_id=model.target_id,
            count=model.count,
            device_id=model.device_id,
            error_message=model.error_message,
            client_ip=model.client_ip,
            timestamp=model.timestamp,
        )

    def _to_model(self, entity: AuditLogEntry) -> AuditLogModel:
        """Map domain entity → ORM model."""
        return AuditLogModel(
            type=entity.type.value,
            batch_id=entity.batch_id,
            target_id=entity.target_id,
            count=entity.count,
            device_id=entity.device_id,
            error_message=entity.error_message,
            client_ip=entity.client_ip,
            timestamp=entity.timestamp,
        )

    async def append(self, entry: AuditLogEntry) -> AuditLogEntry:
        async with self._store.session() as session:
            model = self._to_model(entry)
            session.add(model)
            await session.flush()
            return self._to_entity(model)
