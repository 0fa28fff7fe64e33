"""Integration tests for the SQLAlchemy repositories against SQLite."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import func, select

from app.domain.entities import AuditLogEntry, AuditLogType, RecordFilter, RecordSort, RegistrationRecord
from app.domain.exceptions import ConflictError, StoreError
from app.infrastructure.database import AuditLogModel, RecordStore, StoreRetryPolicy
from app.infrastructure.database.repositories import (
    SQLAlchemyAuditLogRepository,
    SQLAlchemyRegistrationRecordRepository,
)

BASE = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def repo(store) -> SQLAlchemyRegistrationRecordRepository:
    return SQLAlchemyRegistrationRecordRepository(store)


def _record(i: int, **overrides) -> RegistrationRecord:
    fields = dict(
        name=f"person {i:02d}",
        project="副总功德主",
        payment="已缴费",
        amount_twd=100.0,
        amount_rmb=20.0,
        batch_id="b1",
        submitted_at=BASE + timedelta(minutes=i),
        created_at=BASE + timedelta(minutes=i),
        updated_at=BASE + timedelta(minutes=i),
    )
    fields.update(overrides)
    return RegistrationRecord(**fields)


@pytest.mark.asyncio
async def test_insert_and_read_back(repo):
    record = _record(1, local_id="d1-1", extra={"note": "x"})

    assert await repo.insert_many([record]) == 1

    (stored,) = await repo.find_all(RecordSort())
    assert stored.id == record.id
    assert stored.local_id == "d1-1"
    assert stored.extra == {"note": "x"}
    assert stored.submitted_at == record.submitted_at
    assert stored.submitted_at.tzinfo is not None


@pytest.mark.asyncio
async def test_second_page_of_25(repo):
    await repo.insert_many([_record(i) for i in range(25)])

    page = await repo.find_page(RecordFilter(), RecordSort("submitted_at", True), skip=10, limit=10)
    totals = await repo.aggregate_totals(RecordFilter())

    assert len(page) == 10
    assert [r.name for r in page][:2] == ["person 14", "person 13"]
    assert totals.count == 25
    assert totals.total_amount_twd == 2500.0
    assert totals.total_amount_rmb == 500.0


@pytest.mark.asyncio
async def test_filters(repo):
    await repo.insert_many(
        [
            _record(1, name="Alice Wang", project="P1", payment="已缴费"),
            _record(2, name="Bob", contact="alice's mom", project="P2", payment="未缴费"),
            _record(3, name="Carol", content="100% done", project="P1", payment="未缴费"),
            _record(4, name="Dan", project="P1", payment="已缴费", submitted_at=BASE + timedelta(days=3)),
        ]
    )

    async def names(f: RecordFilter) -> list[str]:
        rows = await repo.find_page(f, RecordSort("name", False), skip=0, limit=50)
        assert (await repo.aggregate_totals(f)).count == len(rows)
        return [r.name for r in rows]

    assert await names(RecordFilter(search="ALICE")) == ["Alice Wang", "Bob"]
    assert await names(RecordFilter(search="%")) == ["Carol"]
    assert await names(RecordFilter(project="P1", payment="未缴费")) == ["Carol"]
    assert await names(RecordFilter(start_date=BASE + timedelta(days=1))) == ["Dan"]
    assert await names(RecordFilter(end_date=BASE + timedelta(minutes=2))) == ["Alice Wang", "Bob"]
    assert await names(RecordFilter(project="nope")) == []


@pytest.mark.asyncio
async def test_duplicate_local_id_rejects_whole_batch(repo):
    await repo.insert_many([_record(1, local_id="dup")])

    with pytest.raises(ConflictError):
        await repo.insert_many([_record(2, local_id="fresh"), _record(3, local_id="dup")])

    remaining = await repo.find_all(RecordSort())
    assert [r.local_id for r in remaining] == ["dup"]


@pytest.mark.asyncio
async def test_missing_local_ids_never_collide(repo):
    assert await repo.insert_many([_record(1), _record(2)]) == 2
    assert await repo.insert_many([_record(3)]) == 1


@pytest.mark.asyncio
async def test_statistics(repo):
    await repo.insert_many(
        [
            _record(1, project="A", payment="未缴费", amount_twd=100.0),
            _record(2, project="B", payment="已缴费", amount_twd=300.0),
            _record(3, project="B", payment="未缴费", amount_twd=200.0),
        ]
    )

    overall = await repo.overall_stats()
    by_project = await repo.stats_by_project()
    by_payment = await repo.stats_by_payment()

    assert overall.total_records == 3
    assert overall.total_amount_twd == 600.0
    assert overall.avg_amount_twd == 200.0
    assert [(g.key, g.count, g.total_amount_twd) for g in by_project] == [("B", 2, 500.0), ("A", 1, 100.0)]
    assert [g.key for g in by_payment] == ["未缴费", "已缴费"]


@pytest.mark.asyncio
async def test_empty_statistics(repo):
    overall = await repo.overall_stats()

    assert overall.total_records == 0
    assert overall.avg_amount_twd == 0.0
    assert await repo.stats_by_project() == []


@pytest.mark.asyncio
async def test_daily_stats_grouped_by_utc_day(repo):
    day1 = datetime(2024, 5, 1, 23, 30, tzinfo=timezone.utc)
    day2 = datetime(2024, 5, 2, 0, 30, tzinfo=timezone.utc)
    await repo.insert_many(
        [
            _record(1, submitted_at=day1, amount_rmb=1.0),
            _record(2, submitted_at=day1 + timedelta(minutes=10), amount_rmb=2.0),
            _record(3, submitted_at=day2, amount_rmb=4.0),
            _record(4, submitted_at=day1 - timedelta(days=40)),
        ]
    )

    daily = await repo.daily_stats(since=day1 - timedelta(days=30))

    assert [(g.key, g.count, g.total_amount_rmb) for g in daily] == [
        ("2024-05-01", 2, 3.0),
        ("2024-05-02", 1, 4.0),
    ]


@pytest.mark.asyncio
async def test_deletes(repo):
    first = _record(1, local_id="loc-1", batch_id="b1")
    await repo.insert_many([first, _record(2, batch_id="b1"), _record(3, batch_id="b2")])

    assert await repo.delete_one_by_field("local_id", "loc-1") == 1
    assert await repo.delete_one_by_field("id", first.id) == 0
    assert await repo.delete_by_batch("b1") == 1
    assert await repo.delete_by_batch("b1") == 0
    assert await repo.delete_all() == 1
    assert await repo.find_all(RecordSort()) == []


@pytest.mark.asyncio
async def test_audit_append(store):
    audit = SQLAlchemyAuditLogRepository(store)

    saved = await audit.append(AuditLogEntry(type=AuditLogType.SUBMIT, batch_id="b1", count=3))

    assert saved.id is not None
    async with store.session() as session:
        count = (await session.execute(select(func.count(AuditLogModel.id)))).scalar_one()
    assert count == 1


@pytest.mark.asyncio
async def test_unreachable_store_raises_store_error(tmp_path):
    store = RecordStore(
        f"sqlite:///{tmp_path / 'missing' / 'dir' / 'records.db'}",
        retry_policy=StoreRetryPolicy(max_attempts=2, backoff_seconds=0.01),
    )

    with pytest.raises(StoreError):
        await store.ping()
    assert store.is_connected is False
    await store.dispose()


def test_retry_policy_backoff_is_capped():
    policy = StoreRetryPolicy(max_attempts=5, backoff_seconds=0.5, max_backoff_seconds=1.5)

    assert [policy.delay_for(n) for n in range(4)] == [0.5, 1.0, 1.5, 1.5]


@pytest.mark.asyncio
async def test_payment_groups_from_one_batch_are_ordered_by_label(repo):
    same_instant = BASE + timedelta(minutes=5)
    await repo.insert_many(
        [
            _record(1, payment="unpaid", created_at=same_instant),
            _record(2, payment="paid", created_at=same_instant),
            _record(3, payment="unpaid", created_at=same_instant),
        ]
    )
    await repo.insert_many([_record(4, payment="pending", created_at=same_instant + timedelta(minutes=1))])

    by_payment = await repo.stats_by_payment()

    assert [(g.key, g.count) for g in by_payment] == [("paid", 1), ("unpaid", 2), ("pending", 1)]


@pytest.mark.asyncio
async def test_session_without_connection_raises_store_error(tmp_path, monkeypatch):
    store = RecordStore(f"sqlite:///{tmp_path / 'records.db'}")

    async def _no_connect():
        return None

    monkeypatch.setattr(store, "connect", _no_connect)

    with pytest.raises(StoreError):
        async with store.session():
            pass
