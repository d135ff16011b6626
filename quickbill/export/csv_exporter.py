"""
CSV Export

Serializes the rows currently on screen into the QuickBill CSV dialect:

    Title,Amount,Category,Date
    "Coffee",2.50,Food,2024-06-10

Only the title is quoted (with embedded quotes doubled); amount, category
and date never contain commas or quotes so they are written as-is. Rows
are separated by "\\n" with no trailing newline.

The stdlib csv writer is not used because it cannot quote a single column
while leaving the others bare.
"""

from datetime import date, datetime
from pathlib import Path
from typing import Iterable, Optional, Union

from quickbill.errors import QuickBillError
from quickbill.models.expense import CsvExport, Expense


CSV_HEADERS = ("Title", "Amount", "Category", "Date")
CSV_MIME_TYPE = "text/csv;charset=utf-8;"
DEFAULT_EXPORT_PREFIX = "QuickBill_Expenses"


class NothingToExportError(QuickBillError):
    """Export was requested while no expenses are visible."""

    def __init__(self, message: str = "No expenses to export!"):
        super().__init__(message)


def quote_field(value: str) -> str:
    """Wrap in double quotes, doubling any embedded double quote."""
    return '"' + value.replace('"', '""') + '"'


def to_csv(records: Iterable[Expense]) -> str:
    """
    Render records as CSV in the given order.

    Raises:
        NothingToExportError: If there are no records
    """
    records = list(records)
    if not records:
        raise NothingToExportError()

    rows = [",".join(CSV_HEADERS)]
    for expense in records:
        rows.append(",".join([
            quote_field(expense.title),
            expense.amount,
            expense.category.value,
            expense.date.isoformat(),
        ]))
    return "\n".join(rows)


def export_filename(
    today: Union[date, datetime],
    prefix: str = DEFAULT_EXPORT_PREFIX,
) -> str:
    """E.g. QuickBill_Expenses_2024-06-10.csv"""
    if isinstance(today, datetime):
        today = today.date()
    return f"{prefix}_{today.isoformat()}.csv"


def build_export(
    records: Iterable[Expense],
    today: Union[date, datetime],
    prefix: str = DEFAULT_EXPORT_PREFIX,
) -> CsvExport:
    """
    Package records as a named CSV file.

    Raises:
        NothingToExportError: If there are no records
    """
    records = list(records)
    return CsvExport(
        filename=export_filename(today, prefix),
        mime_type=CSV_MIME_TYPE,
        content=to_csv(records),
        row_count=len(records),
    )


def write_export(export: CsvExport, directory: Optional[Union[Path, str]] = None) -> Path:
    """
    Save an export to disk and return its path.

    Existing files with the same name are overwritten.
    """
    target_dir = Path(directory) if directory is not None else Path.cwd()
    target_dir.mkdir(parents=True, exist_ok=True)
    path = target_dir / export.filename
    # newline="" keeps "\n" separators on every platform
    with path.open("w", encoding="utf-8", newline="") as fh:
        fh.write(export.content)
    return path
