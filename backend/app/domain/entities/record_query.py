"""Domain entities for record listing, statistics and export results."""

import math
from dataclasses import dataclass, field
from datetime import datetime

from .registration_record import RegistrationRecord


@dataclass
class RecordFilter:
    """Optional predicates applied to the record set.

    Every field left as ``None`` imposes no constraint. ``search`` is a
    case-insensitive substring matched against name, contact and content.
    """

    search: str | None = None
    project: str | None = None
    payment: str | None = None
    start_date: datetime | None = None  # inclusive lower bound on submitted_at
    end_date: datetime | None = None  # inclusive upper bound on submitted_at


@dataclass
class RecordSort:
    """Sort column (record field name) and direction."""

    field: str = "submitted_at"
    descending: bool = True


@dataclass
class AmountTotals:
    """Sum of both amount fields and the count over a record set."""

    total_amount_twd: float = 0.0
    total_amount_rmb: float = 0.0
    count: int = 0


@dataclass
class Pagination:
    page: int
    limit: int
    total_count: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.limit) if self.limit else 0


@dataclass
class RecordPage:
    """One page of records plus the aggregate over the whole filtered set."""

    records: list[RegistrationRecord]
    pagination: Pagination
    totals: AmountTotals


@dataclass
class OverallStats:
    total_records: int = 0
    total_amount_twd: float = 0.0
    total_amount_rmb: float = 0.0
    avg_amount_twd: float = 0.0
    avg_amount_rmb: float = 0.0


@dataclass
class GroupStats:
    """Count and amount sums for one group (project, payment status or day)."""

    key: str | None
    count: int = 0
    total_amount_twd: float = 0.0
    total_amount_rmb: float = 0.0


@dataclass
class RecordStatistics:
    overall: OverallStats
    by_project: list[GroupStats] = field(default_factory=list)
    by_payment: list[GroupStats] = field(default_factory=list)
    daily: list[GroupStats] = field(default_factory=list)
    computed_at: datetime | None = None


@dataclass
class IngestionResult:
    submitted_count: int
    batch_id: str


@dataclass
class CsvExport:
    """A fully materialized CSV document and its download metadata."""

    filename: str
    content: str
    row_count: int
    exported_at: datetime
