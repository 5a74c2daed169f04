"""
Report request, report payload and response schemas.
"""

from __future__ import annotations

import datetime as dt
from abc import abstractmethod
from typing import Any, Dict, List, Optional

from pydantic import Field

from fleet_reports.schemas.common.base import BaseSchema, CamelSchema
from fleet_reports.schemas.common.enums import (
    AlarmSeverity,
    AlarmStatus,
    DeviceStatus,
    ExportFormat,
    ReportType,
    UserRole,
)
from fleet_reports.schemas.export import (
    ALARM_COLUMNS,
    DEVICE_PERFORMANCE_COLUMNS,
    ENERGY_COLUMNS,
    ExportDocument,
    ExportSection,
    ExportTable,
)

__all__ = [
    "ReportRequest",
    "ReportResponse",
    "DailyAggregate",
    "AggregationResult",
    "ResolutionStats",
    "AlarmTypeCount",
    "AlarmStatistics",
    "AlarmSummary",
    "UptimeStats",
    "DowntimeStats",
    "ReportPeriod",
    "ReportFilters",
    "PlantInfo",
    "DeviceInfo",
    "TagPerformance",
    "AlarmItem",
    "PlantEnergy",
    "DeviceTypeEnergy",
    "BaseReport",
    "PlantPerformanceReport",
    "DevicePerformanceReport",
    "AlarmReport",
    "EnergyProductionReport",
]


# ------------------------------------------------------------------ #
# Request / response
# ------------------------------------------------------------------ #


class ReportRequest(BaseSchema):
    """
    Ephemeral report request.

    ``format`` stays a plain string so an unknown value surfaces as a
    service-level bad request rather than a schema error.
    """

    report_type: ReportType
    start_date: dt.date
    end_date: dt.date
    requester_id: int
    requester_role: UserRole
    format: str = Field(default=ExportFormat.JSON.value)
    plant_id: Optional[int] = None
    device_id: Optional[int] = None
    severity: Optional[AlarmSeverity] = None
    status: Optional[AlarmStatus] = None


class ReportResponse(BaseSchema):
    """Rendered report ready to hand to a transport."""

    report_type: ReportType
    format: ExportFormat
    content: bytes
    content_type: str
    filename: str
    payload: Optional[Dict[str, Any]] = None


# ------------------------------------------------------------------ #
# Building blocks
# ------------------------------------------------------------------ #


class DailyAggregate(CamelSchema):
    """Statistics of one UTC day; an empty day has count 0 and null stats."""

    date: dt.date
    count: int = 0
    sum: float = 0.0
    avg: Optional[float] = None
    min: Optional[float] = None
    max: Optional[float] = None
    unit: str

    def as_row(self) -> List[Any]:
        return [self.date.isoformat(), self.count, self.sum, self.avg, self.min, self.max, self.unit]


class AggregationResult(CamelSchema):
    count: int = 0
    sum: float = 0.0
    avg: Optional[float] = None
    min: Optional[float] = None
    max: Optional[float] = None
    unit: str
    daily_data: Optional[List[DailyAggregate]] = None

    def summary_rows(self) -> List[tuple]:
        return [
            ("Samples", self.count),
            ("Total", self.sum),
            ("Average", self.avg),
            ("Minimum", self.min),
            ("Maximum", self.max),
            ("Unit", self.unit),
        ]


class ResolutionStats(CamelSchema):
    avg_minutes: Optional[float] = None
    min_minutes: Optional[float] = None
    max_minutes: Optional[float] = None
    total_resolved: int = 0


class AlarmTypeCount(CamelSchema):
    message: str
    count: int
    severity: AlarmSeverity


class AlarmStatistics(CamelSchema):
    total: int = 0
    by_severity: Dict[str, int] = Field(default_factory=dict)
    by_status: Dict[str, int] = Field(default_factory=dict)
    resolution_time: ResolutionStats = Field(default_factory=ResolutionStats)
    top_alarm_types: List[AlarmTypeCount] = Field(default_factory=list)


class AlarmSummary(CamelSchema):
    total: int = 0
    resolved: int = 0
    pending: int = 0


class UptimeStats(CamelSchema):
    total: int = 0
    online: int = 0
    offline: int = 0
    error: int = 0
    maintenance: int = 0
    uptime_percentage: Optional[float] = None


class DowntimeStats(CamelSchema):
    total_hours: float = 0.0
    alarm_count: int = 0
    critical_count: int = 0


class ReportPeriod(CamelSchema):
    start_date: dt.date
    end_date: dt.date
    days: int


class ReportFilters(CamelSchema):
    plant_id: Optional[int] = None
    device_id: Optional[int] = None
    severity: Optional[AlarmSeverity] = None
    status: Optional[AlarmStatus] = None


class PlantInfo(CamelSchema):
    id: int
    name: str
    location: Optional[Any] = None
    capacity: Optional[float] = None
    status: Optional[str] = None
    installation_date: Optional[dt.date] = None
    device_count: int = 0


class DeviceInfo(CamelSchema):
    id: int
    name: str
    device_type: str
    status: DeviceStatus
    serial_number: Optional[str] = None
    plant_id: int
    plant_name: Optional[str] = None


class TagPerformance(CamelSchema):
    tag_id: int
    tag_name: str
    unit: str
    statistics: AggregationResult


class AlarmItem(CamelSchema):
    id: int
    plant_id: int
    plant_name: Optional[str] = None
    device_id: Optional[int] = None
    device_name: Optional[str] = None
    device_type: Optional[str] = None
    severity: AlarmSeverity
    status: AlarmStatus
    message: str
    triggered_at: dt.datetime
    acknowledged_at: Optional[dt.datetime] = None
    resolved_at: Optional[dt.datetime] = None

    def as_row(self) -> List[Any]:
        return [
            self.id,
            self.plant_name,
            self.device_name,
            self.device_type,
            self.severity.value,
            self.status.value,
            self.message,
            self.triggered_at,
            self.acknowledged_at,
            self.resolved_at,
        ]


class PlantEnergy(CamelSchema):
    plant_id: int
    plant_name: str
    statistics: AggregationResult


class DeviceTypeEnergy(CamelSchema):
    device_type: str
    device_count: int
    statistics: AggregationResult


def _alarm_statistics_sections(stats: AlarmStatistics) -> List[ExportSection]:
    return [
        ExportSection("Alarms by Severity", list(stats.by_severity.items())),
        ExportSection("Alarms by Status", list(stats.by_status.items())),
        ExportSection(
            "Resolution Time (minutes)",
            [
                ("Resolved", stats.resolution_time.total_resolved),
                ("Average", stats.resolution_time.avg_minutes),
                ("Minimum", stats.resolution_time.min_minutes),
                ("Maximum", stats.resolution_time.max_minutes),
            ],
        ),
        ExportSection(
            "Top Alarm Types",
            [(f"{t.message} ({t.severity.value})", t.count) for t in stats.top_alarm_types],
        ),
    ]


# ------------------------------------------------------------------ #
# Reports
# ------------------------------------------------------------------ #


class BaseReport(CamelSchema):
    """
    Common report envelope.

    Concrete reports implement ``to_export_document``; the base class
    cannot be instantiated.
    """

    report_type: ReportType
    generated_at: dt.datetime
    period: ReportPeriod

    def payload(self) -> Dict[str, Any]:
        """JSON-ready camelCase structure of the whole report."""
        return self.model_dump(mode="json", by_alias=True)

    def header_lines(self) -> List[str]:
        return [
            f"Period: {self.period.start_date.isoformat()} to {self.period.end_date.isoformat()}",
            f"Generated: {self.generated_at.isoformat()}",
        ]

    @abstractmethod
    def to_export_document(self) -> ExportDocument:
        """Format-neutral document: header, summary sections, detail table, payload."""


class PlantPerformanceReport(BaseReport):
    report_type: ReportType = ReportType.PLANT_PERFORMANCE
    plant: PlantInfo
    energy_generation: AggregationResult
    device_uptime: UptimeStats
    alarm_statistics: AlarmStatistics

    def to_export_document(self) -> ExportDocument:
        sections = [
            ExportSection(
                "Plant",
                [
                    ("Name", self.plant.name),
                    ("Capacity", self.plant.capacity),
                    ("Status", self.plant.status),
                    ("Devices", self.plant.device_count),
                ],
            ),
            ExportSection("Energy Generation", self.energy_generation.summary_rows()),
            ExportSection(
                "Device Uptime",
                [
                    ("Total", self.device_uptime.total),
                    ("Online", self.device_uptime.online),
                    ("Offline", self.device_uptime.offline),
                    ("Error", self.device_uptime.error),
                    ("Maintenance", self.device_uptime.maintenance),
                    ("Uptime %", self.device_uptime.uptime_percentage),
                ],
            ),
            *_alarm_statistics_sections(self.alarm_statistics),
        ]
        table = ExportTable(
            columns=list(ENERGY_COLUMNS),
            rows=[day.as_row() for day in self.energy_generation.daily_data or []],
            title="Daily Energy",
        )
        return ExportDocument(
            title=f"Plant Performance Report - {self.plant.name}",
            payload=self.payload(),
            header=self.header_lines(),
            sections=sections,
            table=table,
        )


class DevicePerformanceReport(BaseReport):
    report_type: ReportType = ReportType.DEVICE_PERFORMANCE
    device: DeviceInfo
    tag_performance: List[TagPerformance] = Field(default_factory=list)
    downtime: DowntimeStats
    alarm_statistics: AlarmStatistics
    recent_alarms: List[AlarmItem] = Field(default_factory=list)

    def to_export_document(self) -> ExportDocument:
        sections = [
            ExportSection(
                "Device",
                [
                    ("Name", self.device.name),
                    ("Type", self.device.device_type),
                    ("Status", self.device.status.value),
                    ("Serial Number", self.device.serial_number),
                    ("Plant", self.device.plant_name),
                ],
            ),
        ]
        for tag in self.tag_performance:
            sections.append(ExportSection(f"Tag {tag.tag_name}", tag.statistics.summary_rows()))
        sections.append(
            ExportSection(
                "Downtime",
                [
                    ("Total Hours", self.downtime.total_hours),
                    ("Alarms", self.downtime.alarm_count),
                    ("Critical Alarms", self.downtime.critical_count),
                ],
            )
        )
        sections.extend(_alarm_statistics_sections(self.alarm_statistics))

        rows = []
        for tag in self.tag_performance:
            for day in tag.statistics.daily_data or []:
                rows.append([tag.tag_name, *day.as_row()])

        return ExportDocument(
            title=f"Device Performance Report - {self.device.name}",
            payload=self.payload(),
            header=self.header_lines(),
            sections=sections,
            table=ExportTable(columns=list(DEVICE_PERFORMANCE_COLUMNS), rows=rows, title="Daily Tag Values"),
        )


class AlarmReport(BaseReport):
    report_type: ReportType = ReportType.ALARM_REPORT
    filters: ReportFilters
    summary: AlarmSummary
    statistics: AlarmStatistics
    alarms: List[AlarmItem] = Field(default_factory=list)

    def to_export_document(self) -> ExportDocument:
        sections = [
            ExportSection(
                "Summary",
                [
                    ("Total", self.summary.total),
                    ("Resolved", self.summary.resolved),
                    ("Pending", self.summary.pending),
                ],
            ),
            *_alarm_statistics_sections(self.statistics),
        ]
        return ExportDocument(
            title="Alarm Report",
            payload=self.payload(),
            header=self.header_lines(),
            sections=sections,
            table=ExportTable(
                columns=list(ALARM_COLUMNS),
                rows=[alarm.as_row() for alarm in self.alarms],
                title="Alarms",
            ),
        )


class EnergyProductionReport(BaseReport):
    report_type: ReportType = ReportType.ENERGY_PRODUCTION
    filters: ReportFilters
    overall: AggregationResult
    by_plant: List[PlantEnergy] = Field(default_factory=list)
    by_device_type: List[DeviceTypeEnergy] = Field(default_factory=list)

    def to_export_document(self) -> ExportDocument:
        sections = [
            ExportSection("Overall Production", self.overall.summary_rows()),
            ExportSection(
                "By Plant",
                [(p.plant_name, p.statistics.sum) for p in self.by_plant],
            ),
            ExportSection(
                "By Device Type",
                [(d.device_type, d.statistics.sum) for d in self.by_device_type],
            ),
        ]
        return ExportDocument(
            title="Energy Production Report",
            payload=self.payload(),
            header=self.header_lines(),
            sections=sections,
            table=ExportTable(
                columns=list(ENERGY_COLUMNS),
                rows=[day.as_row() for day in self.overall.daily_data or []],
                title="Daily Energy",
            ),
        )
