"""
Tests for WorkbookStorage (openpyxl).

Workbooks are built in tmp_path, reconciled, saved and reopened so the
assertions read what Excel would read.
"""

import pytest
from openpyxl import Workbook, load_workbook

from rawsync.application.reconcile import ReconcileService
from rawsync.domain.errors import TableNotFoundError
from rawsync.domain.job_registry import COMMITMENTS
from rawsync.domain.storage import ColumnSpan
from rawsync.infrastructure.excel_storage import WorkbookStorage, used_bounds
from tests.shared.builders import SOURCE_HEADER, TARGET_HEADER, build_workbook, make_job


@pytest.fixture
def workbook_path(tmp_path):
    return build_workbook(
        tmp_path / "tracker.xlsx",
        {
            "Target": [TARGET_HEADER, ["A-1", "old", "Yes"], ["A-2", "old", "Yes"]],
            "RAW Target": [SOURCE_HEADER, ["A-1", "new", "x"], ["A-3", "new", "y"]],
        },
    )


def _sheet_values(path, sheet):
    wb = load_workbook(path)
    try:
        return [list(r) for r in wb[sheet].iter_rows(values_only=True)]
    finally:
        wb.close()


class TestReadTable:
    def test_reads_header_and_rows(self, workbook_path):
        storage = WorkbookStorage.open(workbook_path)
        snapshot = storage.read_table("Target")

        assert snapshot.header == TARGET_HEADER
        assert snapshot.rows == [["A-1", "old", "Yes"], ["A-2", "old", "Yes"]]
        assert snapshot.first_data_position == 2
        assert snapshot.column_span == ColumnSpan(1, 3)
        storage.close()

    def test_missing_sheet_returns_none(self, workbook_path):
        storage = WorkbookStorage.open(workbook_path)
        assert storage.read_table("Nope") is None
        storage.close()

    def test_table_offset_from_a1(self, tmp_path):
        wb = Workbook()
        ws = wb.active
        ws.title = "Offset"
        ws["C3"] = "Key"
        ws["D3"] = " Value "
        ws["C4"] = "K-1"
        ws["D4"] = 5
        path = tmp_path / "offset.xlsx"
        wb.save(path)

        storage = WorkbookStorage.open(path)
        snapshot = storage.read_table("Offset")

        assert used_bounds(storage.workbook["Offset"]) == (3, 3, 4, 4)
        assert snapshot.header == ["Key", "Value"]
        assert snapshot.rows == [["K-1", 5]]
        assert snapshot.first_data_position == 4
        assert list(snapshot.column_span) == [3, 4]
        assert storage.read_column("Offset", 1) == [5]

        assert storage.write_cell("Offset", 4, 1, 6) is True
        assert storage.workbook["Offset"]["D4"].value == 6
        storage.close()

    def test_blank_sheet_has_no_header(self, tmp_path):
        path = build_workbook(tmp_path / "blank.xlsx", {"Empty": []})
        storage = WorkbookStorage.open(path)
        assert storage.read_table("Empty").header == []
        storage.close()

    def test_column_outside_used_range(self, workbook_path):
        storage = WorkbookStorage.open(workbook_path)
        with pytest.raises(IndexError):
            storage.read_column("Target", 3)
        storage.close()

    def test_open_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            WorkbookStorage.open(tmp_path / "missing.xlsx")


class TestWriteCell:
    def test_unchanged_value_is_not_rewritten(self, workbook_path):
        storage = WorkbookStorage.open(workbook_path)
        storage.read_table("Target")

        assert storage.write_cell("Target", 2, 1, "old") is False
        assert storage.write_cell("Target", 2, 1, "new") is True
        assert storage.workbook["Target"]["B2"].value == "new"
        storage.close()

    def test_empty_string_clears_cell(self, workbook_path):
        storage = WorkbookStorage.open(workbook_path)
        storage.write_cell("Target", 2, 1, "")
        assert storage.workbook["Target"]["B2"].value is None
        storage.close()

    def test_unknown_sheet(self, workbook_path):
        storage = WorkbookStorage.open(workbook_path)
        with pytest.raises(TableNotFoundError):
            storage.write_cell("Nope", 2, 1, 1)
        storage.close()


class TestReconcileWorkbook:
    def test_scenario_saved_to_disk(self, workbook_path, tmp_path):
        storage = WorkbookStorage.open(workbook_path)
        summary = ReconcileService(storage).run(make_job())
        out = storage.save(tmp_path / "out.xlsx")
        storage.close()

        assert summary.rows_appended == 1
        assert _sheet_values(out, "Target") == [
            TARGET_HEADER,
            ["A-1", "new", "Yes"],
            ["A-2", "old", "No"],
            ["A-3", "new", "Yes"],
        ]
        assert _sheet_values(out, "RAW Target") == _sheet_values(workbook_path, "RAW Target")

        wb = load_workbook(out)
        ws = wb["Target"]
        for col in "ABC":
            border = ws[f"{col}4"].border
            assert border.top.style == "thin"
            assert border.bottom.style == "thin"
            assert border.left.style == "thin"
            assert border.right.style == "thin"
        assert ws["A3"].border.top.style is None
        wb.close()

    def test_commitments_split_key(self, tmp_path):
        target_header = [
            "Project Number - Activity ID",
            "Project Name",
            "Activity Name",
            "Finish",
            "Commit. Date",
            "Variance",
            "OE",
            "PCS",
            "Commit. Type",
            "Status",
            "In Raw?",
        ]
        raw_header = [
            "Project Name",
            "Activity ID",
            "Activity Name",
            "Finish",
            "Commit. Date",
            "Variance",
            "OE",
            "PCS",
            "Commit. Type",
            "Status",
        ]
        path = build_workbook(
            tmp_path / "commitments.xlsx",
            {
                "Commitments": [
                    target_header,
                    ["100-A10", "Old Name", "Pour", None, None, 0, None, None, None, "Open", "Yes"],
                    ["200-B20", "Gone", "Weld", None, None, 0, None, None, None, "Open", "Yes"],
                ],
                "RAW Commitments": [
                    raw_header,
                    ["100: Widget Line", "A10", "Pour", None, None, 3, "Lee", "P1", "Hard", "Late"],
                    ["300: Pump Room: East", "C30", "Test", None, None, 0, "Kim", "P2", "Soft", "Open"],
                ],
            },
        )

        storage = WorkbookStorage.open(path)
        summary = ReconcileService(storage).run(COMMITMENTS)
        storage.save()
        storage.close()

        rows = _sheet_values(path, "Commitments")
        assert summary.rows_updated == 1
        assert summary.rows_appended == 1
        assert rows[1][:3] == ["100-A10", "Widget Line", "Pour"]
        assert rows[1][5] == 3
        assert rows[1][-1] == "Yes"
        assert rows[2][0] == "200-B20"
        assert rows[2][-1] == "No"
        assert rows[3][:3] == ["300-C30", "Pump Room: East", "Test"]
        assert rows[3][-1] == "Yes"
