"""SQLAlchemy ORM model for the RegistrationRecord entity."""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import DateTime, Float, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.database.base import Base


class RegistrationRecordModel(Base):
    """ORM model — maps to the 'registration_records' table."""

    __tablename__ = "registration_records"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    # NULLs never collide under a unique index, so an absent local_id is always accepted
    local_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    server_id: Mapped[str] = mapped_column(String(64), nullable=False)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    project: Mapped[str | None] = mapped_column(String(255), nullable=True)
    method: Mapped[str | None] = mapped_column(Text, nullable=True)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    contact: Mapped[str | None] = mapped_column(String(255), nullable=True)
    payment: Mapped[str | None] = mapped_column(String(100), nullable=True)
    amount_twd: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    amount_rmb: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    batch_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    device_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    sync_status: Mapped[str] = mapped_column(String(20), nullable=False, default="synced")
    extra: Mapped[dict[str, Any]] = mapped_column(nullable=False, default=dict)
    submitted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    __table_args__ = (
        Index("ux_registration_records_local_id", "local_id", unique=True),
        Index("ix_registration_records_created_at", "created_at"),
        Index("ix_registration_records_name", "name"),
        Index("ix_registration_records_project", "project"),
        Index("ix_registration_records_submitted_at", "submitted_at"),
        Index("ix_registration_records_device_id", "device_id"),
        Index("ix_registration_records_sync_status", "sync_status"),
        Index("ix_registration_records_payment", "payment"),
        Index("ix_registration_records_amount_twd", "amount_twd"),
        Index("ix_registration_records_amount_rmb", "amount_rmb"),
        Index("ix_registration_records_batch_id", "batch_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<RegistrationRecordModel(id={self.id}, "
            f"name='{self.name}', batch='{self.batch_id}')>"
        )
