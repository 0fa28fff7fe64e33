"""Unit tests for the CSV export."""

import csv
import io
import re
from datetime import datetime, timezone

import pytest

from app.application.services import RecordExportService
from app.application.services.record_export_service import BOM, CSV_HEADERS, format_row, render_csv
from app.domain.entities import RegistrationRecord


def _parse(content: str) -> list[list[str]]:
    assert content.startswith(BOM)
    return list(csv.reader(io.StringIO(content[len(BOM):], newline="")))


def test_empty_export_has_bom_and_header_only():
    content = render_csv([])

    rows = _parse(content)
    assert rows == [list(CSV_HEADERS)]
    assert len(CSV_HEADERS) == 13
    assert content.endswith("\n")


def test_row_format():
    record = RegistrationRecord(
        name="王小明",
        project="副总功德主",
        method="超度\n回向",
        content="祖先",
        payment="已缴费",
        contact="0912",
        amount_twd=80000.0,
        amount_rmb=12.5,
        device_id="ipad-1",
        batch_id="batch_1",
        local_id="d1-1",
        submitted_at=datetime(2024, 3, 1, 8, 30, 0, 123000, tzinfo=timezone.utc),
    )

    line = format_row(1, record)

    assert line == (
        '1,"王小明","副总功德主","超度; 回向","祖先","已缴费","0912",'
        '80000,12.50,2024-03-01T08:30:00.123Z,"ipad-1","batch_1","d1-1"'
    )


def test_zero_and_missing_values():
    record = RegistrationRecord(amount_twd=0.0, amount_rmb=0.0)

    columns = next(csv.reader([format_row(7, record)]))

    assert columns[0] == "7"
    assert columns[1] == ""
    assert columns[7] == "0"
    assert columns[8] == "0"
    assert columns[12] == ""


def test_embedded_quotes_commas_and_newlines_stay_parseable():
    records = [
        RegistrationRecord(name='Say "hi"', content="a, b\nc", contact='"x"'),
        RegistrationRecord(name="plain"),
    ]

    rows = _parse(render_csv(records))

    assert len(rows) == 3
    assert all(len(row) == 13 for row in rows)
    assert rows[1][1] == 'Say "hi"'
    assert rows[1][4] == "a, b\nc"
    assert rows[1][6] == '"x"'
    assert [row[0] for row in rows[1:]] == ["1", "2"]


@pytest.mark.asyncio
async def test_export_newest_first_with_dated_filename(record_repo):
    record_repo.records.extend(
        [
            RegistrationRecord(name="old", submitted_at=datetime(2024, 1, 1, tzinfo=timezone.utc)),
            RegistrationRecord(name="new", submitted_at=datetime(2024, 6, 1, tzinfo=timezone.utc)),
        ]
    )
    service = RecordExportService(record_repo, filename_prefix="records")

    export = await service.export_csv()

    assert re.fullmatch(r"records_\d{8}_2\.csv", export.filename)
    assert export.filename == f"records_{export.exported_at:%Y%m%d}_2.csv"
    assert export.row_count == 2
    rows = _parse(export.content)
    assert [row[1] for row in rows[1:]] == ["new", "old"]


@pytest.mark.asyncio
async def test_empty_export_filename(record_repo):
    export = await RecordExportService(record_repo).export_csv()

    assert export.filename.endswith("_0.csv")
    assert export.row_count == 0
