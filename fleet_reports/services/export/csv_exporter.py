"""CSV exporter."""
from __future__ import annotations

import csv
import io

from fleet_reports.schemas.common.enums import ExportFormat
from fleet_reports.schemas.export import ExportDocument
from fleet_reports.utils.formatters import cell_text

from .base import ReportExporter


class CsvExporter(ReportExporter):
    """Writes the detail table: header row, then one line per row."""

    format = ExportFormat.CSV
    content_type = "text/csv"
    extension = "csv"

    def _render(self, document: ExportDocument) -> bytes:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(document.table.columns)
        for row in document.table.rows:
            writer.writerow([cell_text(value) for value in row])
        return buffer.getvalue().encode("utf-8")
