from .audit_trail import AuditTrail
from .record_ingestion_service import RecordIngestionService
from .record_query_service import RecordQueryService
from .record_statistics_service import RecordStatisticsService
from .record_deletion_service import RecordDeletionService
from .record_export_service import RecordExportService

__all__ = [
    "AuditTrail",
    "RecordIngestionService",
    "RecordQueryService",
    "RecordStatisticsService",
    "RecordDeletionService",
    "RecordExportService",
]
