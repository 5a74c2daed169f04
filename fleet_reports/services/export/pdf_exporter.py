"""PDF exporter backed by reportlab."""
from __future__ import annotations

from typing import Optional

from fleet_reports.config.settings import get_settings
from fleet_reports.schemas.common.enums import ExportFormat
from fleet_reports.schemas.export import ExportDocument
from fleet_reports.utils.pdf_utils import PDFReportGenerator

from .base import ReportExporter


class PdfExporter(ReportExporter):
    format = ExportFormat.PDF
    content_type = "application/pdf"
    extension = "pdf"

    def __init__(self, page_size: Optional[str] = None) -> None:
        self.page_size = page_size or get_settings().PDF_PAGE_SIZE

    def _render(self, document: ExportDocument) -> bytes:
        return PDFReportGenerator(page_size=self.page_size).render(document)
