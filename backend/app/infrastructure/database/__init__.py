from .base import Base
from .models import AuditLogModel, RegistrationRecordModel
from .store import RecordStore, StoreRetryPolicy

__all__ = [
    "Base",
    "AuditLogModel",
    "RegistrationRecordModel",
    "RecordStore",
    "StoreRetryPolicy",
]
