"""Tests for CSV export."""

from datetime import date, datetime

import pytest

from quickbill.export import (
    CSV_MIME_TYPE,
    NothingToExportError,
    build_export,
    export_filename,
    to_csv,
    write_export,
)
from quickbill.models.expense import ExpenseCategory

from tests.conftest import make_expense


class TestToCsv:
    """Tests for to_csv."""

    def test_header_and_rows(self):
        """Test the header and row layout."""
        records = [
            make_expense(2, "Coffee", "2.50", ExpenseCategory.FOOD, date(2024, 6, 10)),
            make_expense(1, "Bus", "1.20", ExpenseCategory.TRANSPORT, date(2024, 6, 9)),
        ]
        assert to_csv(records) == (
            "Title,Amount,Category,Date\n"
            '"Coffee",2.50,Food,2024-06-10\n'
            '"Bus",1.20,Transport,2024-06-09'
        )

    def test_quotes_in_title_are_doubled(self):
        """Test embedded double quotes are escaped by doubling."""
        record = make_expense(1, 'She said "hi"')
        line = to_csv([record]).split("\n")[1]
        assert line.startswith('"She said ""hi""",')

    def test_commas_in_title_stay_in_one_field(self):
        """Test a comma inside the title is protected by the quotes."""
        record = make_expense(1, "Milk, eggs", "4.00")
        assert to_csv([record]).split("\n")[1] == '"Milk, eggs",4.00,Food,2024-06-10'

    def test_no_trailing_newline(self):
        """Test rows are joined without a trailing newline."""
        assert not to_csv([make_expense(1)]).endswith("\n")

    def test_empty_raises(self):
        """Test exporting nothing is refused."""
        with pytest.raises(NothingToExportError):
            to_csv([])


class TestExportFile:
    """Tests for naming and saving exports."""

    def test_export_filename(self):
        """Test the file is named after the date."""
        assert export_filename(date(2024, 6, 10)) == "QuickBill_Expenses_2024-06-10.csv"
        assert export_filename(datetime(2024, 1, 2, 15, 0)) == "QuickBill_Expenses_2024-01-02.csv"
        assert export_filename(date(2024, 6, 10), prefix="Mine") == "Mine_2024-06-10.csv"

    def test_build_export(self):
        """Test the packaged export."""
        export = build_export([make_expense(1), make_expense(2)], date(2024, 6, 10))
        assert export.filename == "QuickBill_Expenses_2024-06-10.csv"
        assert export.mime_type == CSV_MIME_TYPE
        assert export.row_count == 2
        assert export.content.startswith("Title,Amount,Category,Date\n")

    def test_build_export_empty_raises(self):
        """Test no export object is produced for an empty view."""
        with pytest.raises(NothingToExportError):
            build_export([], date(2024, 6, 10))

    def test_write_export(self, tmp_path):
        """Test the export is written byte for byte."""
        export = build_export([make_expense(1, "Café")], date(2024, 6, 10))
        path = write_export(export, tmp_path / "exports")
        assert path == tmp_path / "exports" / "QuickBill_Expenses_2024-06-10.csv"
        assert path.read_bytes() == export.to_bytes()
