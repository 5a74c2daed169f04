"""
Report generation facade.

Validates the request, resolves access, assembles the report and renders
it in the requested format.
"""
from __future__ import annotations

from typing import Callable, Optional

from sqlalchemy.orm import Session

from fleet_reports.config.settings import Settings, get_settings
from fleet_reports.core.logging import get_logger
from fleet_reports.schemas.common.enums import ExportFormat
from fleet_reports.schemas.reports import ReportRequest, ReportResponse
from fleet_reports.services.access import AccessContext, AccessFilter
from fleet_reports.services.common.errors import ServiceError
from fleet_reports.services.export import ExporterRegistry, ExportRunner

from .report_assembler import ReportAssembler
from .validation import validate_report_request

logger = get_logger(__name__)

# Formats rendered on the worker pool
POOLED_FORMATS = frozenset({ExportFormat.PDF, ExportFormat.EXCEL})


def build_filename(request: ReportRequest, extension: str) -> str:
    """``{report-type}-{deviceId|plantId|all}-{start}-to-{end}.{ext}``"""
    if request.device_id is not None:
        scope = str(request.device_id)
    elif request.plant_id is not None:
        scope = str(request.plant_id)
    else:
        scope = "all"
    return (
        f"{request.report_type.slug}-{scope}-"
        f"{request.start_date.isoformat()}-to-{request.end_date.isoformat()}.{extension}"
    )


class ReportService:
    """
    Entry point for report generation.

    Usage:
        >>> service = ReportService(session_factory)
        >>> response = service.generate(request)
        >>> response.filename
        'plant-performance-1-2024-01-01-to-2024-01-31.json'
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        settings: Optional[Settings] = None,
        assembler: Optional[ReportAssembler] = None,
        registry: Optional[ExporterRegistry] = None,
        runner: Optional[ExportRunner] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self.access_filter = AccessFilter(session_factory, self._settings)
        self.assembler = assembler or ReportAssembler(
            session_factory, self._settings, access_filter=self.access_filter
        )
        self.registry = registry or ExporterRegistry.default(self._settings.PDF_PAGE_SIZE)
        self._runner = runner
        self._owns_runner = runner is None

    @property
    def runner(self) -> ExportRunner:
        if self._runner is None:
            self._runner = ExportRunner(self._settings)
        return self._runner

    def generate(self, request: ReportRequest, context: Optional[AccessContext] = None) -> ReportResponse:
        """
        Generate and render one report.

        Args:
            request: Report request
            context: Optional access cache shared across calls of one request

        Returns:
            ReportResponse with rendered bytes and suggested filename

        Raises:
            BadRequestError: Invalid request, raised before any data access
            ForbiddenError: Scope not accessible to the requester
            NotFoundError: Admin requested a missing plant or device
            RenderError: Rendering failed or timed out
        """
        export_format = validate_report_request(request)
        exporter = self.registry.get(export_format)
        context = context or self.access_filter.new_context(request.requester_id)
        log = logger.bind(
            requester_id=request.requester_id,
            report_type=request.report_type.value,
            format=export_format.value,
        )

        try:
            report = self.assembler.assemble(request, context)
            document = report.to_export_document()

            if export_format in POOLED_FORMATS:
                content = self.runner.run(exporter, document)
            else:
                content = exporter.export(document)
        except ServiceError as exc:
            log.warning(
                f"Report generation failed: {exc.message}",
                extra={"error_type": type(exc).__name__},
            )
            raise

        filename = build_filename(request, exporter.extension)
        log.info("Report generated", extra={"report_filename": filename, "bytes": len(content)})
        return ReportResponse(
            report_type=request.report_type,
            format=export_format,
            content=content,
            content_type=exporter.content_type,
            filename=filename,
            payload=document.payload if export_format == ExportFormat.JSON else None,
        )

    def close(self) -> None:
        """Shut down the worker pool if this service created it."""
        if self._owns_runner and self._runner is not None:
            self._runner.shutdown()
            self._runner = None
