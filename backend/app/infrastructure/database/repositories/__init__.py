from .registration_record_repository import SQLAlchemyRegistrationRecordRepository
from .audit_log_repository import SQLAlchemyAuditLogRepository

__all__ = [
    "SQLAlchemyRegistrationRecordRepository",
    "SQLAlchemyAuditLogRepository",
]
