"""FastAPI dependency injection — wires infrastructure to application layer."""

from fastapi import Depends, Request

from app.config import Settings, get_settings
from app.application.services import (
    AuditTrail,
    RecordDeletionService,
    RecordExportService,
    RecordIngestionService,
    RecordQueryService,
    RecordStatisticsService,
)
from app.infrastructure.database.repositories import (
    SQLAlchemyAuditLogRepository,
    SQLAlchemyRegistrationRecordRepository,
)
from app.infrastructure.database.store import RecordStore


def get_record_store(request: Request) -> RecordStore:
    """The process-wide RecordStore built by the application factory."""
    return request.app.state.record_store


def get_client_ip(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> str | None:
    """Caller network address recorded in audit entries.

    With ``trust_proxy`` on, the first ``X-Forwarded-For`` hop wins over the socket peer.
    """
    if settings.trust_proxy:
        first_hop = request.headers.get("x-forwarded-for", "").split(",")[0].strip()
        if first_hop:
            return first_hop
    return request.client.host if request.client else None


def get_audit_trail(store: RecordStore = Depends(get_record_store)) -> AuditTrail:
    return AuditTrail(SQLAlchemyAuditLogRepository(store))


def get_record_ingestion_service(
    store: RecordStore = Depends(get_record_store),
    audit_trail: AuditTrail = Depends(get_audit_trail),
) -> RecordIngestionService:
    """Provides a RecordIngestionService with its repository and audit trail wired up."""
    return RecordIngestionService(SQLAlchemyRegistrationRecordRepository(store), audit_trail)


def get_record_query_service(
    store: RecordStore = Depends(get_record_store),
) -> RecordQueryService:
    return RecordQueryService(SQLAlchemyRegistrationRecordRepository(store))


def get_record_statistics_service(
    store: RecordStore = Depends(get_record_store),
) -> RecordStatisticsService:
    return RecordStatisticsService(SQLAlchemyRegistrationRecordRepository(store))


def get_record_deletion_service(
    store: RecordStore = Depends(get_record_store),
    audit_trail: AuditTrail = Depends(get_audit_trail),
) -> RecordDeletionService:
    """Provides a RecordDeletionService bound to the configured admin secret."""
    settings = get_settings()
    return RecordDeletionService(
        SQLAlchemyRegistrationRecordRepository(store),
        audit_trail,
        admin_password=settings.admin_password,
    )


def get_record_export_service(
    store: RecordStore = Depends(get_record_store),
) -> RecordExportService:
    settings = get_settings()
    return RecordExportService(
        SQLAlchemyRegistrationRecordRepository(store),
        filename_prefix=settings.export_filename_prefix,
    )
