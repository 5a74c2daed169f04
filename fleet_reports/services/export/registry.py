"""
Exporter registry keyed by ExportFormat.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from fleet_reports.schemas.common.enums import ExportFormat
from fleet_reports.services.common.errors import BadRequestError

from .base import ReportExporter
from .csv_exporter import CsvExporter
from .excel_exporter import ExcelExporter
from .json_exporter import JsonExporter
from .pdf_exporter import PdfExporter


class ExporterRegistry:
    """
    Holds one exporter per format.

    Usage:
        >>> registry = ExporterRegistry.default()
        >>> registry.get(ExportFormat.CSV).export(document)
    """

    def __init__(self, exporters: Optional[Iterable[ReportExporter]] = None) -> None:
        self._exporters: Dict[ExportFormat, ReportExporter] = {}
        for exporter in exporters or ():
            self.register(exporter)

    @classmethod
    def default(cls, page_size: Optional[str] = None) -> "ExporterRegistry":
        return cls([JsonExporter(), CsvExporter(), PdfExporter(page_size), ExcelExporter()])

    def register(self, exporter: ReportExporter) -> None:
        """Add or replace the exporter for ``exporter.format``."""
        self._exporters[exporter.format] = exporter

    def get(self, export_format: ExportFormat) -> ReportExporter:
        try:
            return self._exporters[ExportFormat(export_format)]
        except (KeyError, ValueError) as exc:
            raise BadRequestError(
                f"Unsupported export format: {export_format}",
                field="format",
                details={"supported": [f.value for f in self.formats()]},
            ) from exc

    def formats(self) -> List[ExportFormat]:
        return list(self._exporters)
