from .registration_record import RegistrationRecordModel
from .audit_log import AuditLogModel

__all__ = [
    "RegistrationRecordModel",
    "AuditLogModel",
]
