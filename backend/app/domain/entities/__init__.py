from .registration_record import RegistrationRecord, SYNC_STATUS_SYNCED
from .audit_log_entry import AuditLogEntry, AuditLogType
from .record_query import (
    AmountTotals,
    CsvExport,
    GroupStats,
    IngestionResult,
    OverallStats,
    Pagination,
    RecordFilter,
    RecordPage,
    RecordSort,
    RecordStatistics,
)

__all__ = [
    "RegistrationRecord",
    "SYNC_STATUS_SYNCED",
    "AuditLogEntry",
    "AuditLogType",
    "AmountTotals",
    "CsvExport",
    "GroupStats",
    "IngestionResult",
    "OverallStats",
    "Pagination",
    "RecordFilter",
    "RecordPage",
    "RecordSort",
    "RecordStatistics",
]
