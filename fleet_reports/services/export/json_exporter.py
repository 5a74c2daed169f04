"""JSON exporter."""
from __future__ import annotations

import json

from fleet_reports.schemas.common.enums import ExportFormat
from fleet_reports.schemas.export import ExportDocument

from .base import ReportExporter


class JsonExporter(ReportExporter):
    """Serialises the document payload unchanged."""

    format = ExportFormat.JSON
    content_type = "application/json"
    extension = "json"

    def __init__(self, indent: int = 2) -> None:
        self.indent = indent

    def _render(self, document: ExportDocument) -> bytes:
        return json.dumps(document.payload, indent=self.indent, ensure_ascii=False).encode("utf-8")
