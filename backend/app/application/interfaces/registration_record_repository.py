"""Abstract repository interface (port) for RegistrationRecord persistence."""

from abc import ABC, abstractmethod
from datetime import datetime

from app.domain.entities import (
    AmountTotals,
    GroupStats,
    OverallStats,
    RecordFilter,
    RecordSort,
    RegistrationRecord,
)


class RegistrationRecordRepository(ABC):
    """Port for registration record persistence — implemented in the infrastructure layer."""

    @abstractmethod
    async def insert_many(self, records: list[RegistrationRecord]) -> int:
        """Persist a whole batch in one write.

        Either every record is committed or none is. Raises ConflictError
        when a record violates the local_id uniqueness constraint.

        Returns:
            The number of inserted records.
        """
        ...

    @abstractmethod
    async def find_page(
        self,
        record_filter: RecordFilter,
        sort: RecordSort,
        *,
        skip: int = 0,
        limit: int = 50,
    ) -> list[RegistrationRecord]:
        """Retrieve a sorted, paginated slice of the filtered record set."""
        ...

    @abstractmethod
    async def aggregate_totals(self, record_filter: RecordFilter) -> AmountTotals:
        """Sum both amounts and count over the entire filtered record set."""
        ...

    @abstractmethod
    async def find_all(self, sort: RecordSort) -> list[RegistrationRecord]:
        """Retrieve every record in the given order."""
        ...

    @abstractmethod
    async def overall_stats(self) -> OverallStats:
        """Count, sums and averages of both amounts over all records."""
        ...

    @abstractmethod
    async def stats_by_project(self) -> list[GroupStats]:
        """Per-project count and sums, ordered by descending count."""
        ...

    @abstractmethod
    async def stats_by_payment(self) -> list[GroupStats]:
        """Per-payment-status count and sums, in order of group discovery."""
        ...

    @abstractmethod
    async def daily_stats(self, since: datetime) -> list[GroupStats]:
        """Per-UTC-day count and sums for records submitted at or after ``since``."""
        ...

    @abstractmethod
    async def delete_by_batch(self, batch_id: str) -> int:
        """Delete every record of a batch. Returns the deleted count."""
        ...

    @abstractmethod
    async def delete_all(self) -> int:
        """Delete every record. Returns the deleted count."""
        ...

    @abstractmethod
    async def delete_one_by_field(self, field: str, value: str) -> int:
        """Delete at most one record whose ``field`` equals ``value``.

        ``field`` is one of "id", "local_id" or "server_id".
        Returns 1 when a record was removed, 0 otherwise.
        """
        ...
