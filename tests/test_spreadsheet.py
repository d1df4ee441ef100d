import io
from datetime import datetime, timedelta

import pytest
from openpyxl import Workbook

from conftest import csv_bytes, xlsx_bytes
from core.errors import FormatError
from core.spreadsheet import (
    build_chart_config,
    drop_empty_rows,
    ingest,
    project_records,
    read_grid,
    rows_to_records,
)


def test_line_chart_from_xlsx():
    content = xlsx_bytes([["x", "y"], [1, 2], [3, 4]])

    result = ingest(content, "data.xlsx", None, "line", "x", "y")

    assert result.data == [{"x": 1, "y": 2}, {"x": 3, "y": 4}]
    assert result.preview == [{"x": 1, "y": 2}, {"x": 3, "y": 4}]
    assert result.chart_config == {"xAxis": "x", "yAxis": "y"}


def test_csv_cells_are_not_coerced():
    content = csv_bytes([["x", "y"], ["1", "2"]])

    result = ingest(content, "data.csv", "text/csv", "bar", "x", "y")

    assert result.data == [{"x": "1", "y": "2"}]


def test_csv_detected_by_mime_type_without_extension():
    grid = read_grid(b"a,b\n1,2\n", "upload", "text/csv")
    assert grid == [["a", "b"], ["1", "2"]]


def test_short_row_leaves_trailing_keys_out():
    records = rows_to_records([["a", "b", "c"], [1, 2]])

    assert records == [{"a": 1, "b": 2}]
    assert project_records(records, {"xAxis": "a", "yAxis": "c"}) == [{"a": 1}]


def test_blank_rows_are_dropped():
    grid = [["a", "b"], [None, ""], [1, None], []]

    assert drop_empty_rows(grid) == [["a", "b"], [1, None]]


def test_blank_cells_and_blank_headers_are_skipped():
    records = rows_to_records([["a", None, "c"], [1, 2, ""]])
    assert records == [{"a": 1}]


def test_header_only_sheet_has_no_records():
    assert rows_to_records([["a", "b"]]) == []
    assert rows_to_records([]) == []


def test_unknown_axis_is_not_an_error():
    content = xlsx_bytes([["x", "y"], [1, 2]])

    result = ingest(content, "data.xlsx", None, "bar", "nope", "y")

    assert result.data == [{"y": 2}]
    assert result.chart_config == {"xAxis": "nope", "yAxis": "y"}


def test_bubble_size_only_for_bubble_charts():
    assert build_chart_config("bubble", "x", "y", "r") == {"xAxis": "x", "yAxis": "y", "bubbleSize": "r"}
    assert build_chart_config("scatter", "x", "y", "r") == {"xAxis": "x", "yAxis": "y"}
    assert build_chart_config("bubble", "x", "y", None) == {"xAxis": "x", "yAxis": "y"}


def test_bubble_projection_keeps_three_fields():
    content = xlsx_bytes([["x", "y", "r", "label"], [1, 2, 3, "a"]])

    result = ingest(content, "data.xlsx", None, "bubble", "x", "y", "r")

    assert result.data == [{"x": 1, "y": 2, "r": 3}]
    assert result.preview == [{"x": 1, "y": 2, "r": 3, "label": "a"}]


def test_preview_is_first_five_full_rows():
    rows = [["n", "sq", "extra"]] + [[i, i * i, "e"] for i in range(8)]

    result = ingest(xlsx_bytes(rows), "data.xlsx", None, "line", "n", "sq")

    assert len(result.data) == 8
    assert result.preview == [{"n": i, "sq": i * i, "extra": "e"} for i in range(5)]


def test_date_cells_become_iso_strings():
    content = xlsx_bytes([["day", "v"], [datetime(2024, 1, 2), 7]])

    result = ingest(content, "data.xlsx", None, "line", "day", "v")

    assert result.data == [{"day": "2024-01-02T00:00:00", "v": 7}]


def test_only_first_sheet_is_read():
    wb = Workbook()
    wb.active.append(["a"])
    wb.active.append([1])
    second = wb.create_sheet("other")
    second.append(["b"])
    second.append([2])
    buf = io.BytesIO()
    wb.save(buf)

    assert read_grid(buf.getvalue(), "book.xlsx") == [["a"], [1]]


@pytest.mark.parametrize("filename", ["broken.xlsx", "broken.xls"])
def test_unparseable_upload_raises_format_error(filename):
    with pytest.raises(FormatError):
        ingest(b"this is not a spreadsheet", filename, None, "bar", "x", "y")


def test_duration_cells_become_seconds():
    wb = Workbook()
    ws = wb.active
    ws.append(["task", "took"])
    ws.append(["build", timedelta(hours=30)])
    ws["B2"].number_format = "[h]:mm:ss"
    buf = io.BytesIO()
    wb.save(buf)

    result = ingest(buf.getvalue(), "durations.xlsx", None, "bar", "task", "took")

    assert result.data == [{"task": "build", "took": 108000.0}]
