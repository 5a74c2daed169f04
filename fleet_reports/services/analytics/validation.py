"""
Report request validation, run before any data access.
"""
from __future__ import annotations

from fleet_reports.schemas.common.enums import ExportFormat, ReportType
from fleet_reports.schemas.reports import ReportRequest
from fleet_reports.services.common.errors import BadRequestError


def check_report_scope(request: ReportRequest) -> None:
    """
    Validate the date range and the scope required by the report type.

    Raises:
        BadRequestError: On an inverted range or a missing plant/device
    """
    if request.end_date < request.start_date:
        raise BadRequestError(
            "End date must not be before start date",
            field="end_date",
            details={
                "start_date": request.start_date.isoformat(),
                "end_date": request.end_date.isoformat(),
            },
        )
    if request.report_type == ReportType.PLANT_PERFORMANCE and request.plant_id is None:
        raise BadRequestError("Plant ID is required for plant performance reports", field="plant_id")
    if request.report_type == ReportType.DEVICE_PERFORMANCE and request.device_id is None:
        raise BadRequestError("Device ID is required for device performance reports", field="device_id")


def parse_export_format(value) -> ExportFormat:
    try:
        return ExportFormat(str(value).lower())
    except ValueError as exc:
        raise BadRequestError(
            f"Unsupported export format: {value}",
            field="format",
            details={"supported": [f.value for f in ExportFormat]},
        ) from exc


def validate_report_request(request: ReportRequest) -> ExportFormat:
    """Full validation; returns the parsed export format."""
    export_format = parse_export_format(request.format)
    check_report_scope(request)
    return export_format
