"""In-memory fakes of the repository interfaces, shared by the service unit tests."""

from collections import Counter
from datetime import datetime

import pytest

from app.application.interfaces import AuditLogRepository, RegistrationRecordRepository
from app.application.services import AuditTrail
from app.domain.entities import (
    AmountTotals,
    AuditLogEntry,
    GroupStats,
    OverallStats,
    RecordFilter,
    RecordSort,
    RegistrationRecord,
)
from app.domain.exceptions import ConflictError


class FakeRecordRepository(RegistrationRecordRepository):
    """In-memory fake repository for unit testing.

    Set ``fail_with`` to an exception instance to make every call raise it.
    """

    def __init__(self):
        self.records: list[RegistrationRecord] = []
        self.fail_with: Exception | None = None
        self.page_calls: list[dict] = []
        self.delete_calls: list[tuple[str, str]] = []

    def _check(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    def _matches(self, record: RegistrationRecord, f: RecordFilter) -> bool:
        if f.search and not any(
            f.search.lower() in (value or "").lower()
            for value in (record.name, record.contact, record.content)
        ):
            return False
        if f.project is not None and record.project != f.project:
            return False
        if f.payment is not None and record.payment != f.payment:
            return False
        if f.start_date is not None and record.submitted_at < f.start_date:
            return False
        if f.end_date is not None and record.submitted_at > f.end_date:
            return False
        return True

    async def insert_many(self, records: list[RegistrationRecord]) -> int:
        self._check()
        taken = {r.local_id for r in self.records if r.local_id is not None}
        incoming = [r.local_id for r in records if r.local_id is not None]
        if taken.intersection(incoming) or len(incoming) != len(set(incoming)):
            raise ConflictError("Uniqueness constraint violated: local_id")
        self.records.extend(records)
        return len(records)

    async def find_page(self, record_filter: RecordFilter, sort: RecordSort, *, skip: int, limit: int):
        self._check()
        self.page_calls.append({"filter": record_filter, "sort": sort, "skip": skip, "limit": limit})
        matched = [r for r in self.records if self._matches(r, record_filter)]
        matched.sort(key=lambda r: getattr(r, sort.field) or "", reverse=sort.descending)
        return matched[skip : skip + limit]

    async def aggregate_totals(self, record_filter: RecordFilter) -> AmountTotals:
        self._check()
        matched = [r for r in self.records if self._matches(r, record_filter)]
        return AmountTotals(
            total_amount_twd=sum(r.amount_twd for r in matched),
            total_amount_rmb=sum(r.amount_rmb for r in matched),
            count=len(matched),
        )

    async def find_all(self, sort: RecordSort) -> list[RegistrationRecord]:
        self._check()
        return sorted(self.records, key=lambda r: getattr(r, sort.field), reverse=sort.descending)

    async def overall_stats(self) -> OverallStats:
        self._check()
        n = len(self.records)
        twd = sum(r.amount_twd for r in self.records)
        rmb = sum(r.amount_rmb for r in self.records)
        return OverallStats(
            total_records=n,
            total_amount_twd=twd,
            total_amount_rmb=rmb,
            avg_amount_twd=twd / n if n else 0.0,
            avg_amount_rmb=rmb / n if n else 0.0,
        )

    def _group(self, key_of) -> list[GroupStats]:
        counts = Counter(key_of(r) for r in self.records)
        return [
            GroupStats(
                key=key,
                count=count,
                total_amount_twd=sum(r.amount_twd for r in self.records if key_of(r) == key),
                total_amount_rmb=sum(r.amount_rmb for r in self.records if key_of(r) == key),
            )
            for key, count in counts.most_common()
        ]

    async def stats_by_project(self) -> list[GroupStats]:
        self._check()
        return self._group(lambda r: r.project)

    async def stats_by_payment(self) -> list[GroupStats]:
        self._check()
        return self._group(lambda r: r.payment)

    async def daily_stats(self, since: datetime) -> list[GroupStats]:
        self._check()
        self.daily_since = since
        return []

    async def delete_by_batch(self, batch_id: str) -> int:
        self._check()
        self.delete_calls.append(("batch_id", batch_id))
        before = len(self.records)
        self.records = [r for r in self.records if r.batch_id != batch_id]
        return before - len(self.records)

    async def delete_all(self) -> int:
        self._check()
        self.delete_calls.append(("all", ""))
        deleted = len(self.records)
        self.records = []
        return deleted

    async def delete_one_by_field(self, field: str, value: str) -> int:
        self._check()
        self.delete_calls.append((field, value))
        for i, record in enumerate(self.records):
            if getattr(record, field) == value:
                del self.records[i]
                return 1
        return 0


class FakeAuditLogRepository(AuditLogRepository):
    def __init__(self):
        self.entries: list[AuditLogEntry] = []
        self.fail_with: Exception | None = None

    async def append(self, entry: AuditLogEntry) -> AuditLogEntry:
        if self.fail_with is not None:
            raise self.fail_with
        entry.id = len(self.entries) + 1
        self.entries.append(entry)
        return entry


@pytest.fixture
def record_repo() -> FakeRecordRepository:
    return FakeRecordRepository()


@pytest.fixture
def audit_repo() -> FakeAuditLogRepository:
    return FakeAuditLogRepository()


@pytest.fixture
def audit_trail(audit_repo: FakeAuditLogRepository) -> AuditTrail:
    return AuditTrail(audit_repo)
