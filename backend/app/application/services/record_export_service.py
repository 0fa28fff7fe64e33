"""Application service (use case) for the CSV export of all records.

The document layout is fixed: a UTF-8 byte-order mark, one header line of
13 labels, then one line per record (newest submission first). Text columns
are always double-quoted with embedded quotes doubled, so values containing
commas, quotes or newlines stay readable by standard CSV parsers.
"""

from datetime import datetime, timezone

from app.application.interfaces import RegistrationRecordRepository
from app.domain.entities import CsvExport, RecordSort, RegistrationRecord
from app.infrastructure.logging.colored_logger import OperationLogger, OperationStage

log = OperationLogger(__name__)

BOM = "\ufeff"
LINE_END = "\n"

CSV_HEADERS: tuple[str, ...] = (
    "序号",
    "姓名",
    "护持项目",
    "超荐方式",
    "超荐内容",
    "是否缴费",
    "联系人",
    "护持金额(新台币)",
    "护持金额(人民币)",
    "提交时间",
    "设备ID",
    "批次ID",
    "本地ID",
)


def _quote(value: str | None) -> str:
    return '"' + (value or "").replace('"', '""') + '"'


def _format_amount(value: float | None) -> str:
    """Raw amount; integral values are written without a decimal part."""
    if not value:
        return "0"
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def _format_fixed(value: float | None) -> str:
    return f"{value:.2f}" if value else "0"


def _format_instant(value: datetime | None) -> str:
    if value is None:
        return ""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def format_row(index: int, record: RegistrationRecord) -> str:
    """Serialize one record as a CSV line (without the line terminator)."""
    method = (record.method or "").replace("\r\n", "\n").replace("\n", "; ")
    columns = [
        str(index),
        _quote(record.name),
        _quote(record.project),
        _quote(method),
        _quote(record.content),
        _quote(record.payment),
        _quote(record.contact),
        _format_amount(record.amount_twd),
        _format_fixed(record.amount_rmb),
        _format_instant(record.submitted_at),
        _quote(record.device_id),
        _quote(record.batch_id),
        _quote(record.local_id),
    ]
    return ",".join(columns)


def render_csv(records: list[RegistrationRecord]) -> str:
    lines = [",".join(CSV_HEADERS)]
    lines.extend(format_row(i, record) for i, record in enumerate(records, start=1))
    return BOM + LINE_END.join(lines) + LINE_END


class RecordExportService:
    """Materializes every record and serializes it as a CSV document."""

    def __init__(self, repository: RegistrationRecordRepository, filename_prefix: str = "records"):
        self._repository = repository
        self._filename_prefix = filename_prefix

    async def export_csv(self) -> CsvExport:
        exported_at = datetime.now(timezone.utc)

        with log.timed_step(OperationStage.EXPORT, "Exporting records as CSV"):
            records = await self._repository.find_all(
                RecordSort(field="submitted_at", descending=True)
            )
            content = render_csv(records)

        filename = f"{self._filename_prefix}_{exported_at:%Y%m%d}_{len(records)}.csv"
        log.detail("CSV ready", filename=filename, rows=len(records))
        return CsvExport(
            filename=filename,
            content=content,
            row_count=len(records),
            exported_at=exported_at,
        )
