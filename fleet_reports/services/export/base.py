"""
Exporter strategy interface.

Each export format is one ReportExporter subclass; the registry maps
ExportFormat values to instances.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from fleet_reports.schemas.common.enums import ExportFormat
from fleet_reports.schemas.export import ExportDocument
from fleet_reports.services.common.errors import RenderError

logger = logging.getLogger(__name__)


class ReportExporter(ABC):
    """Renders an ExportDocument into bytes of one format."""

    format: ExportFormat
    content_type: str
    extension: str

    def export(self, document: ExportDocument) -> bytes:
        """
        Render the document.

        Returns:
            The complete rendered bytes

        Raises:
            RenderError: Any failure inside the renderer
        """
        try:
            return self._render(document)
        except RenderError:
            raise
        except Exception as exc:
            logger.error(
                "Rendering failed",
                exc_info=True,
                extra={"export_format": self.format.value, "title": document.title},
            )
            raise RenderError(
                f"Failed to render {self.format.value} export: {exc}",
                export_format=self.format.value,
                details={"error_type": type(exc).__name__},
            ) from exc

    @abstractmethod
    def _render(self, document: ExportDocument) -> bytes:
        ...
