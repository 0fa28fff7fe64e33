from .registration_record_repository import RegistrationRecordRepository
from .audit_log_repository import AuditLogRepository

__all__ = [
    "RegistrationRecordRepository",
    "AuditLogRepository",
]
