"""CSV export package."""

from quickbill.export.csv_exporter import (
    CSV_HEADERS,
    CSV_MIME_TYPE,
    NothingToExportError,
    build_export,
    export_filename,
    to_csv,
    write_export,
)

__all__ = [
    "CSV_HEADERS",
    "CSV_MIME_TYPE",
    "NothingToExportError",
    "build_export",
    "export_filename",
    "to_csv",
    "write_export",
]
