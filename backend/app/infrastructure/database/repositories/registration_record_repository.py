"""Concrete repository implementation for RegistrationRecord backed by SQLAlchemy.

Every method runs in its own session from the shared RecordStore, so the
service layer can issue independent reads concurrently.
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import ColumnElement, delete, func, or_, select

from app.application.interfaces import RegistrationRecordRepository
from app.domain.entities import (
    AmountTotals,
    GroupStats,
    OverallStats,
    RecordFilter,
    RecordSort,
    RegistrationRecord,
)
from app.infrastructure.database.models import RegistrationRecordModel
from app.infrastructure.database.sql_functions import utc_day
from app.infrastructure.database.store import RecordStore

logger = logging.getLogger(__name__)

_Model = RegistrationRecordModel

_SORT_COLUMNS = {
    "submitted_at": _Model.submitted_at,
    "created_at": _Model.created_at,
    "updated_at": _Model.updated_at,
    "name": _Model.name,
    "project": _Model.project,
    "method": _Model.method,
    "content": _Model.content,
    "contact": _Model.contact,
    "payment": _Model.payment,
    "amount_twd": _Model.amount_twd,
    "amount_rmb": _Model.amount_rmb,
    "batch_id": _Model.batch_id,
    "device_id": _Model.device_id,
    "local_id": _Model.local_id,
    "server_id": _Model.server_id,
    "sync_status": _Model.sync_status,
}

_LOOKUP_COLUMNS = {
    "id": _Model.id,
    "local_id": _Model.local_id,
    "server_id": _Model.server_id,
}


def _as_utc(value: datetime | None) -> datetime | None:
    # SQLite hands back naive datetimes; everything is stored as UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class SQLAlchemyRegistrationRecordRepository(RegistrationRecordRepository):
    """Implements the RegistrationRecordRepository port on the shared RecordStore."""

    def __init__(self, store: RecordStore):
        self._store = store

    def _to_entity(self, model: RegistrationRecordModel) -> RegistrationRecord:
        """Map ORM model → domain entity."""
        return RegistrationRecord(
            id=model.id,
            local_id=model.local_id,
            server_id=model.server_id,
            name=model.name,
            project=model.project,
            method=model.method,
            content=model.content,
            contact=model.contact,
            payment=model.payment,
            amount_twd=model.amount_twd,
            amount_rmb=model.amount_rmb,
            batch_id=model.batch_id,
            device_id=model.device_id,
            sync_status=model.sync_status,
            extra=model.extra or {},
            submitted_at=_as_utc(model.submitted_at),
            created_at=_as_utc(model.created_at),
            updated_at=_as_utc(model.updated_at),
        )

    def _to_model(self, entity: RegistrationRecord) -> RegistrationRecordModel:
        """Map domain entity → ORM model (for creation)."""
        return RegistrationRecordModel(
            id=entity.id,
            local_id=entity.local_id,
            server_id=entity.server_id,
            name=entity.name,
            project=entity.project,
            method=entity.method,
            content=entity.content,
            contact=entity.contact,
            payment=entity.payment,
            amount_twd=entity.amount_twd,
            amount_rmb=entity.amount_rmb,
            batch_id=entity.batch_id,
            device_id=entity.device_id,
            sync_status=entity.sync_status,
            extra=entity.extra,
            submitted_at=entity.submitted_at,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )

    # ── Predicates ───────────────────────────────────────────────────

    @staticmethod
    def _conditions(record_filter: RecordFilter) -> list[ColumnElement[bool]]:
        """Translate a RecordFilter into WHERE conditions (ANDed by the caller)."""
        conditions: list[ColumnElement[bool]] = []

        if record_filter.search:
            pattern = f"%{_escape_like(record_filter.search)}%"
            conditions.append(
                or_(
                    _Model.name.ilike(pattern, escape="\\"),
                    _Model.contact.ilike(pattern, escape="\\"),
                    _Model.content.ilike(pattern, escape="\\"),
                )
            )
        if record_filter.project:
            conditions.append(_Model.project == record_filter.project)
        if record_filter.payment:
            conditions.append(_Model.payment == record_filter.payment)
        if record_filter.start_date is not None:
            conditions.append(_Model.submitted_at >= record_filter.start_date)
        if record_filter.end_date is not None:
            conditions.append(_Model.submitted_at <= record_filter.end_date)

        return conditions

    # ── Writes ───────────────────────────────────────────────────────

    async def insert_many(self, records: list[RegistrationRecord]) -> int:
        if not records:
            return 0
        async with self._store.session() as session:
            session.add_all([self._to_model(r) for r in records])
            await session.flush()
        return len(records)

    async def delete_by_batch(self, batch_id: str) -> int:
        async with self._store.session() as session:
            result = await session.execute(delete(_Model).where(_Model.batch_id == batch_id))
            deleted = result.rowcount or 0
        return deleted

    async def delete_all(self) -> int:
        async with self._store.session() as session:
            result = await session.execute(delete(_Model))
            deleted = result.rowcount or 0
        return deleted

    async def delete_one_by_field(self, field: str, value: str) -> int:
        column = _LOOKUP_COLUMNS.get(field)
        if column is None:
            raise ValueError(f"Unsupported lookup field: {field}")

        async with self._store.session() as session:
            result = await session.execute(
                select(_Model.id).where(column == value).order_by(_Model.created_at).limit(1)
            )
            record_id = result.scalar_one_or_none()
            if record_id is None:
                return 0
            result = await session.execute(delete(_Model).where(_Model.id == record_id))
            deleted = result.rowcount or 0
        return deleted

    # ── Reads ────────────────────────────────────────────────────────

    async def find_page(
        self,
        record_filter: RecordFilter,
        sort: RecordSort,
        *,
        skip: int = 0,
        limit: int = 50,
    ) -> list[RegistrationRecord]:
        column = _SORT_COLUMNS.get(sort.field)
        if column is None:
            logger.warning("Unknown sort field %r, using submitted_at", sort.field)
            column = _Model.submitted_at
        order = column.desc() if sort.descending else column.asc()
        tie_break = _Model.id.desc() if sort.descending else _Model.id.asc()

        stmt = (
            select(_Model)
            .where(*self._conditions(record_filter))
            .order_by(order, tie_break)
            .offset(skip)
            .limit(limit)
        )
        async with self._store.session() as session:
            result = await session.execute(stmt)
            return [self._to_entity(row) for row in result.scalars().all()]

    async def aggregate_totals(self, record_filter: RecordFilter) -> AmountTotals:
        stmt = select(
            func.coalesce(func.sum(_Model.amount_twd), 0.0),
            func.coalesce(func.sum(_Model.amount_rmb), 0.0),
            func.count(_Model.id),
        ).where(*self._conditions(record_filter))

        async with self._store.session() as session:
            total_twd, total_rmb, count = (await session.execute(stmt)).one()
        return AmountTotals(
            total_amount_twd=float(total_twd),
            total_amount_rmb=float(total_rmb),
            count=int(count),
        )

    async def find_all(self, sort: RecordSort) -> list[RegistrationRecord]:
        column = _SORT_COLUMNS.get(sort.field, _Model.submitted_at)
        order = column.desc() if sort.descending else column.asc()
        tie_break = _Model.id.desc() if sort.descending else _Model.id.asc()

        async with self._store.session() as session:
            result = await session.execute(select(_Model).order_by(order, tie_break))
            return [self._to_entity(row) for row in result.scalars().all()]

    async def overall_stats(self) -> OverallStats:
        stmt = select(
            func.count(_Model.id),
            func.coalesce(func.sum(_Model.amount_twd), 0.0),
            func.coalesce(func.sum(_Model.amount_rmb), 0.0),
            func.coalesce(func.avg(_Model.amount_twd), 0.0),
            func.coalesce(func.avg(_Model.amount_rmb), 0.0),
        )
        async with self._store.session() as session:
            count, total_twd, total_rmb, avg_twd, avg_rmb = (await session.execute(stmt)).one()
        return OverallStats(
            total_records=int(count),
            total_amount_twd=float(total_twd),
            total_amount_rmb=float(total_rmb),
            avg_amount_twd=float(avg_twd),
            avg_amount_rmb=float(avg_rmb),
        )

    async def stats_by_project(self) -> list[GroupStats]:
        count = func.count(_Model.id)
        stmt = (
            select(
                _Model.project,
                count,
                func.coalesce(func.sum(_Model.amount_twd), 0.0),
                func.coalesce(func.sum(_Model.amount_rmb), 0.0),
            )
            .group_by(_Model.project)
            .order_by(count.desc(), _Model.project)
        )
        return await self._grouped(stmt)

    async def stats_by_payment(self) -> list[GroupStats]:
        stmt = (
            select(
                _Model.payment,
                func.count(_Model.id),
                func.coalesce(func.sum(_Model.amount_twd), 0.0),
                func.coalesce(func.sum(_Model.amount_rmb), 0.0),
            )
            .group_by(_Model.payment)
            # Groups first seen in the same batch share created_at; the label breaks the tie
            .order_by(func.min(_Model.created_at), _Model.payment)
        )
        return await self._grouped(stmt)

    async def daily_stats(self, since: datetime) -> list[GroupStats]:
        day = utc_day(_Model.submitted_at)
        stmt = (
            select(
                day,
                func.count(_Model.id),
                func.coalesce(func.sum(_Model.amount_twd), 0.0),
                func.coalesce(func.sum(_Model.amount_rmb), 0.0),
            )
            .where(_Model.submitted_at >= since)
            .group_by(day)
            .order_by(day)
        )
        return await self._grouped(stmt)

    async def _grouped(self, stmt) -> list[GroupStats]:
        async with self._store.session() as session:
            rows = (await session.execute(stmt)).all()
        return [
            GroupStats(
                key=key,
                count=int(count),
                total_amount_twd=float(total_twd),
                total_amount_rmb=float(total_rmb),
            )
            for key, count, total_twd, total_rmb in rows
        ]
