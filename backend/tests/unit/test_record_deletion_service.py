"""Unit tests for RecordDeletionService."""

import pytest

from app.application.services import RecordDeletionService
from app.domain.entities import AuditLogType, RegistrationRecord
from app.domain.exceptions import AuthError, StoreError

PASSWORD = "s3cret"


@pytest.fixture
def service(record_repo, audit_trail) -> RecordDeletionService:
    return RecordDeletionService(record_repo, audit_trail, admin_password=PASSWORD)


def _seed(repo, *records: RegistrationRecord) -> None:
    repo.records.extend(records)


@pytest.mark.asyncio
@pytest.mark.parametrize("password", [None, "", "wrong", "S3CRET"])
async def test_wrong_password_deletes_nothing(service, record_repo, audit_repo, password):
    _seed(record_repo, RegistrationRecord(name="A", batch_id="b1"))

    with pytest.raises(AuthError):
        await service.delete("all", admin_password=password)

    assert len(record_repo.records) == 1
    assert record_repo.delete_calls == []
    assert audit_repo.entries == []


@pytest.mark.asyncio
async def test_delete_batch(service, record_repo, audit_repo):
    _seed(
        record_repo,
        RegistrationRecord(name="A", batch_id="b1"),
        RegistrationRecord(name="B", batch_id="b1"),
        RegistrationRecord(name="C", batch_id="b2"),
    )

    deleted = await service.delete("batch", admin_password=PASSWORD, batch_id="b1", client_ip="1.2.3.4")

    assert deleted == 2
    assert [r.name for r in record_repo.records] == ["C"]
    entry = audit_repo.entries[0]
    assert entry.type is AuditLogType.DELETE
    assert entry.target_id == "batch"
    assert entry.count == 2
    assert entry.client_ip == "1.2.3.4"


@pytest.mark.asyncio
async def test_delete_all(service, record_repo):
    _seed(record_repo, RegistrationRecord(name="A"), RegistrationRecord(name="B"))

    deleted = await service.delete("all", admin_password=PASSWORD)

    assert deleted == 2
    assert record_repo.records == []


@pytest.mark.asyncio
async def test_batch_target_without_batch_id_is_single_lookup(service, record_repo):
    _seed(record_repo, RegistrationRecord(name="A", batch_id="b1"))

    deleted = await service.delete("batch", admin_password=PASSWORD)

    assert deleted == 0
    assert len(record_repo.records) == 1
    assert [field for field, _ in record_repo.delete_calls] == ["id", "local_id", "server_id"]


@pytest.mark.asyncio
async def test_single_delete_by_id(service, record_repo):
    record = RegistrationRecord(name="A", local_id="loc-1")
    _seed(record_repo, record, RegistrationRecord(name="B"))

    deleted = await service.delete(record.id, admin_password=PASSWORD)

    assert deleted == 1
    assert [r.name for r in record_repo.records] == ["B"]
    assert record_repo.delete_calls == [("id", record.id)]


@pytest.mark.asyncio
async def test_single_delete_falls_back_to_local_id_then_server_id(service, record_repo):
    by_local = RegistrationRecord(name="A", local_id="loc-1")
    by_server = RegistrationRecord(name="B", server_id="srv-9")
    _seed(record_repo, by_local, by_server)

    assert await service.delete("loc-1", admin_password=PASSWORD) == 1
    assert await service.delete("srv-9", admin_password=PASSWORD) == 1
    assert record_repo.records == []
    assert record_repo.delete_calls[-3:] == [
        ("id", "srv-9"),
        ("local_id", "srv-9"),
        ("server_id", "srv-9"),
    ]


@pytest.mark.asyncio
async def test_unknown_target_returns_zero_and_is_audited(service, record_repo, audit_repo):
    deleted = await service.delete("nope", admin_password=PASSWORD)

    assert deleted == 0
    assert audit_repo.entries[0].count == 0
    assert audit_repo.entries[0].target_id == "nope"


@pytest.mark.asyncio
async def test_store_failure_is_audited_and_propagated(service, record_repo, audit_repo):
    record_repo.fail_with = StoreError("disk I/O error", operation="delete")

    with pytest.raises(StoreError):
        await service.delete("all", admin_password=PASSWORD, client_ip="1.2.3.4")

    entry = audit_repo.entries[0]
    assert entry.type is AuditLogType.DELETE
    assert entry.count == 0
    assert entry.error_message == "disk I/O error"


@pytest.mark.asyncio
async def test_audit_failure_does_not_fail_deletion(service, record_repo, audit_repo):
    _seed(record_repo, RegistrationRecord(name="A"))
    audit_repo.fail_with = RuntimeError("audit down")

    assert await service.delete("all", admin_password=PASSWORD) == 1
