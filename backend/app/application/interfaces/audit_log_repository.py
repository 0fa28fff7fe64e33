"""Abstract repository interface for the audit log."""

from abc import ABC, abstractmethod

from app.domain.entities import AuditLogEntry


class AuditLogRepository(ABC):
    """Append-only persistence for audit log entries."""

    @abstractmethod
    async def append(self, entry: AuditLogEntry) -> AuditLogEntry:
        """Persist a new audit log entry in its own transaction.

        Returns:
            The stored entry with its assigned ID.
        """
        ...
