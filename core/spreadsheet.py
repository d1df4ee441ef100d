"""Turn an uploaded spreadsheet into chart data.

The pipeline is a structural reshape only:

1. read the first sheet into a row-major grid, header row first
2. drop rows where every cell is blank
3. turn each remaining row into a record keyed by the header cells
4. project every record onto the configured axis fields

Cell values are passed through as the parser returns them, except that
date/time cells become ISO-8601 strings and duration cells become a number of
seconds so they can be stored in a JSON column.
"""
import csv
import io
import logging
import os
from datetime import date, datetime, time, timedelta
from typing import Any, NamedTuple

import openpyxl
import xlrd

from core.errors import FormatError

logger = logging.getLogger(__name__)

PREVIEW_ROWS = 5

XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
XLS_MIME = "application/vnd.ms-excel"
CSV_MIME = "text/csv"
ALLOWED_MIME_TYPES = (XLSX_MIME, XLS_MIME, CSV_MIME)

Record = dict[str, Any]


class IngestResult(NamedTuple):
    data: list[Record]
    preview: list[Record]
    chart_config: dict[str, str]


def _is_blank(cell) -> bool:
    return cell is None or cell == ""


def _normalize_cell(cell):
    if isinstance(cell, (datetime, date, time)):
        return cell.isoformat()
    if isinstance(cell, timedelta):
        # Duration-formatted cells, e.g. [h]:mm:ss
        return cell.total_seconds()
    return cell


def _detect_kind(filename: str | None, content_type: str | None) -> str:
    ext = os.path.splitext(filename or "")[1].lower()
    if ext in (".csv", ".xls", ".xlsx"):
        return ext[1:]
    if content_type == CSV_MIME:
        return "csv"
    if content_type == XLS_MIME:
        return "xls"
    return "xlsx"


def _read_csv(content: bytes) -> list[list]:
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError:
        text = content.decode("latin-1")
    try:
        return [list(row) for row in csv.reader(io.StringIO(text, newline=""))]
    except csv.Error as exc:
        raise FormatError(f"Could not parse CSV file: {exc}") from exc


def _read_xls(content: bytes) -> list[list]:
    try:
        book = xlrd.open_workbook(file_contents=content)
        sheet = book.sheet_by_index(0)
    except Exception as exc:
        raise FormatError(f"Could not parse .xls file: {exc}") from exc

    grid = []
    for r in range(sheet.nrows):
        row = []
        for cell in sheet.row(r):
            if cell.ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK):
                row.append(None)
            elif cell.ctype == xlrd.XL_CELL_DATE:
                row.append(xlrd.xldate_as_datetime(cell.value, book.datemode))
            elif cell.ctype == xlrd.XL_CELL_BOOLEAN:
                row.append(bool(cell.value))
            elif cell.ctype == xlrd.XL_CELL_NUMBER and float(cell.value).is_integer():
                # xlrd reports every number as float; openpyxl keeps ints as ints
                row.append(int(cell.value))
            else:
                row.append(cell.value)
        grid.append(row)
    return grid


def _read_xlsx(content: bytes) -> list[list]:
    try:
        wb = openpyxl.load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    except Exception as exc:
        raise FormatError(f"Could not parse .xlsx file: {exc}") from exc
    try:
        if not wb.worksheets:
            raise FormatError("Workbook has no sheets")
        ws = wb.worksheets[0]
        return [list(row) for row in ws.iter_rows(values_only=True)]
    finally:
        wb.close()


def read_grid(content: bytes, filename: str | None = None, content_type: str | None = None) -> list[list]:
    """Parse the first sheet of ``content`` into a list of rows."""
    kind = _detect_kind(filename, content_type)
    if kind == "csv":
        grid = _read_csv(content)
    elif kind == "xls":
        grid = _read_xls(content)
    else:
        grid = _read_xlsx(content)
    return [[_normalize_cell(c) for c in row] for row in grid]


def drop_empty_rows(grid: list[list]) -> list[list]:
    return [row for row in grid if any(not _is_blank(c) for c in row)]


def rows_to_records(grid: list[list]) -> list[Record]:
    """Key every data row by the header row.

    A cell that is blank, or missing because the row is shorter than the
    header, leaves its key out of the record. Columns with a blank header
    are skipped.
    """
    if len(grid) < 2:
        return []
    headers = grid[0]
    records = []
    for row in grid[1:]:
        record = {}
        for i, header in enumerate(headers):
            if _is_blank(header) or i >= len(row) or _is_blank(row[i]):
                continue
            record[str(header)] = row[i]
        records.append(record)
    return records


def build_chart_config(chart_type: str, x_axis: str | None, y_axis: str | None, bubble_size: str | None = None) -> dict:
    config = {"xAxis": x_axis, "yAxis": y_axis}
    if chart_type == "bubble" and bubble_size:
        config["bubbleSize"] = bubble_size
    return config


def axis_keys(chart_config: dict | None) -> list[str]:
    if not chart_config:
        return []
    keys = []
    for name in ("xAxis", "yAxis", "bubbleSize"):
        value = chart_config.get(name)
        if isinstance(value, str) and value and value not in keys:
            keys.append(value)
    return keys


def project_records(records: list[Record], chart_config: dict | None) -> list[Record]:
    """Keep only the configured axis fields of every record.

    Axis names are not checked against the headers; a field the record does
    not have is simply absent from its projection.
    """
    keys = axis_keys(chart_config)
    return [{k: record[k] for k in keys if k in record} for record in records]


def ingest(
    content: bytes,
    filename: str | None,
    content_type: str | None,
    chart_type: str,
    x_axis: str | None,
    y_axis: str | None,
    bubble_size: str | None = None,
) -> IngestResult:
    grid = drop_empty_rows(read_grid(content, filename, content_type))
    records = rows_to_records(grid)
    chart_config = build_chart_config(chart_type, x_axis, y_axis, bubble_size)
    data = project_records(records, chart_config)
    logger.debug("Parsed %s: %d records, axes %s", filename, len(records), axis_keys(chart_config))
    return IngestResult(data=data, preview=records[:PREVIEW_ROWS], chart_config=chart_config)
