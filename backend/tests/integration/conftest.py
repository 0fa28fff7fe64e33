"""Integration fixtures: a RecordStore on a throwaway SQLite file."""

import pytest_asyncio

from app.infrastructure.database import RecordStore, StoreRetryPolicy


@pytest_asyncio.fixture
async def store(tmp_path):
    record_store = RecordStore(
        f"sqlite:///{tmp_path / 'records.db'}",
        retry_policy=StoreRetryPolicy(max_attempts=1),
    )
    yield record_store
    await record_store.dispose()
