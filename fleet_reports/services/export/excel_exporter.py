"""Excel exporter backed by openpyxl."""
from __future__ import annotations

from fleet_reports.schemas.common.enums import ExportFormat
from fleet_reports.schemas.export import ExportDocument
from fleet_reports.utils.excel_utils import ExcelReportGenerator

from .base import ReportExporter


class ExcelExporter(ReportExporter):
    format = ExportFormat.EXCEL
    content_type = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    extension = "xlsx"

    def _render(self, document: ExportDocument) -> bytes:
        return ExcelReportGenerator().render(document)
