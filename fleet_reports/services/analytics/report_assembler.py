"""
Report assembly: one pipeline per report type.

Each pipeline resolves access first, then fetches samples and alarms for
the allowed scope only and feeds them through the calculators.
"""
from __future__ import annotations

import logging
from collections import OrderedDict
from datetime import datetime
from typing import Callable, Dict, List, Optional

from sqlalchemy.orm import Session

from fleet_reports.config.settings import Settings, get_settings
from fleet_reports.models import Alarm
from fleet_reports.repositories import (
    AlarmRepository,
    DeviceRepository,
    PlantRepository,
    TelemetryRepository,
)
from fleet_reports.schemas.common.enums import ReportType
from fleet_reports.schemas.reports import (
    AlarmItem,
    AlarmReport,
    BaseReport,
    DeviceInfo,
    DevicePerformanceReport,
    DeviceTypeEnergy,
    EnergyProductionReport,
    PlantEnergy,
    PlantInfo,
    PlantPerformanceReport,
    ReportFilters,
    ReportPeriod,
    ReportRequest,
    TagPerformance,
)
from fleet_reports.services.access import AccessContext, AccessFilter
from fleet_reports.services.common.unit_of_work import UnitOfWork
from fleet_reports.utils.date_utils import day_window, utcnow

from .alarm_stats_calculator import AlarmStatsCalculator
from .time_window_aggregator import TimeWindowAggregator
from .uptime_calculator import UptimeCalculator
from .validation import check_report_scope

logger = logging.getLogger(__name__)


def _alarm_item(alarm: Alarm) -> AlarmItem:
    return AlarmItem(
        id=alarm.id,
        plant_id=alarm.plant_id,
        plant_name=alarm.plant.name if alarm.plant is not None else None,
        device_id=alarm.device_id,
        device_name=alarm.device.name if alarm.device is not None else None,
        device_type=alarm.device.device_type if alarm.device is not None else None,
        severity=alarm.severity,
        status=alarm.status,
        message=alarm.message,
        triggered_at=alarm.triggered_at,
        acknowledged_at=alarm.acknowledged_at,
        resolved_at=alarm.resolved_at,
    )


class ReportAssembler:
    """
    Builds typed report objects.

    Usage:
        >>> assembler = ReportAssembler(session_factory)
        >>> report = assembler.assemble(request)
        >>> document = report.to_export_document()
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        settings: Optional[Settings] = None,
        access_filter: Optional[AccessFilter] = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._session_factory = session_factory
        self._settings = settings or get_settings()
        self._access = access_filter or AccessFilter(session_factory, self._settings)
        self._clock = clock

        self.aggregator = TimeWindowAggregator(self._settings)
        self.alarm_stats = AlarmStatsCalculator(self._settings)
        self.uptime = UptimeCalculator()

        self._pipelines: Dict[ReportType, Callable[[ReportRequest, Optional[AccessContext]], BaseReport]] = {
            ReportType.PLANT_PERFORMANCE: self.plant_performance,
            ReportType.DEVICE_PERFORMANCE: self.device_performance,
            ReportType.ALARM_REPORT: self.alarm_report,
            ReportType.ENERGY_PRODUCTION: self.energy_production,
        }

    def assemble(self, request: ReportRequest, context: Optional[AccessContext] = None) -> BaseReport:
        """
        Build the report named by ``request.report_type``.

        Raises:
            BadRequestError: Invalid range or missing required scope
            ForbiddenError: Scope outside the requester's plants
            NotFoundError: Admin requested a missing plant or device
        """
        check_report_scope(request)
        report = self._pipelines[request.report_type](request, context)
        logger.info(
            "Report assembled",
            extra={
                "report_type": request.report_type.value,
                "requester_id": request.requester_id,
                "plant_id": request.plant_id,
                "device_id": request.device_id,
            },
        )
        return report

    # ------------------------------------------------------------------ #
    # Pipelines
    # ------------------------------------------------------------------ #

    def plant_performance(
        self, request: ReportRequest, context: Optional[AccessContext] = None
    ) -> PlantPerformanceReport:
        (plant_id,) = self._resolve(request, context, device_scope=False)
        lower, upper = day_window(request.start_date, request.end_date)

        with UnitOfWork(self._session_factory, auto_commit=False) as uow:
            plant = uow.get_repo(PlantRepository).find_by_id(plant_id)
            devices = uow.get_repo(DeviceRepository).find_by_plants([plant_id])
            samples = uow.get_repo(TelemetryRepository).find_samples(
                lower, upper, plant_ids=[plant_id], tag_names=self._settings.ENERGY_TAG_NAMES
            )
            alarms = uow.get_repo(AlarmRepository).find_alarms(lower, upper, plant_ids=[plant_id])

            return PlantPerformanceReport(
                generated_at=self._clock(),
                period=self._period(request),
                plant=PlantInfo(
                    id=plant.id,
                    name=plant.name,
                    location=plant.location,
                    capacity=plant.capacity,
                    status=plant.status,
                    installation_date=plant.installation_date,
                    device_count=len(devices),
                ),
                energy_generation=self.aggregator.aggregate(samples, request.start_date, request.end_date),
                device_uptime=self.uptime.calculate(device.status for device in devices),
                alarm_statistics=self.alarm_stats.statistics(alarms),
            )

    def device_performance(
        self, request: ReportRequest, context: Optional[AccessContext] = None
    ) -> DevicePerformanceReport:
        self._resolve(request, context)
        lower, upper = day_window(request.start_date, request.end_date)

        with UnitOfWork(self._session_factory, auto_commit=False) as uow:
            device = uow.get_repo(DeviceRepository).find_by_id(request.device_id)
            telemetry = uow.get_repo(TelemetryRepository)
            alarm_repo = uow.get_repo(AlarmRepository)

            tag_performance: List[TagPerformance] = []
            for tag in telemetry.tags_for_device(device.id, lower, upper):
                samples = telemetry.find_samples(lower, upper, device_id=device.id, tag_id=tag.id)
                statistics = self.aggregator.aggregate(
                    samples, request.start_date, request.end_date, unit=tag.unit
                )
                tag_performance.append(
                    TagPerformance(tag_id=tag.id, tag_name=tag.name, unit=statistics.unit, statistics=statistics)
                )

            alarms = alarm_repo.find_alarms(lower, upper, device_id=device.id)
            recent = alarm_repo.find_alarms(
                lower,
                upper,
                device_id=device.id,
                newest_first=True,
                limit=self._settings.RECENT_ALARMS_LIMIT,
            )

            return DevicePerformanceReport(
                generated_at=self._clock(),
                period=self._period(request),
                device=DeviceInfo(
                    id=device.id,
                    name=device.name,
                    device_type=device.device_type,
                    status=device.status,
                    serial_number=device.serial_number,
                    plant_id=device.plant_id,
                    plant_name=device.plant.name if device.plant is not None else None,
                ),
                tag_performance=tag_performance,
                downtime=self.alarm_stats.downtime(alarms),
                alarm_statistics=self.alarm_stats.statistics(alarms),
                recent_alarms=[_alarm_item(alarm) for alarm in recent],
            )

    def alarm_report(self, request: ReportRequest, context: Optional[AccessContext] = None) -> AlarmReport:
        plant_ids = self._resolve(request, context)
        lower, upper = day_window(request.start_date, request.end_date)

        with UnitOfWork(self._session_factory, auto_commit=False) as uow:
            alarms = uow.get_repo(AlarmRepository).find_alarms(
                lower,
                upper,
                plant_ids=sorted(plant_ids),
                device_id=request.device_id,
                severity=request.severity,
                status=request.status,
                newest_first=True,
            )

            return AlarmReport(
                generated_at=self._clock(),
                period=self._period(request),
                filters=self._filters(request),
                summary=self.alarm_stats.summary(alarms),
                statistics=self.alarm_stats.statistics(alarms),
                alarms=[_alarm_item(alarm) for alarm in alarms],
            )

    def energy_production(
        self, request: ReportRequest, context: Optional[AccessContext] = None
    ) -> EnergyProductionReport:
        plant_ids = self._resolve(request, context)
        lower, upper = day_window(request.start_date, request.end_date)

        with UnitOfWork(self._session_factory, auto_commit=False) as uow:
            samples = uow.get_repo(TelemetryRepository).find_samples(
                lower,
                upper,
                plant_ids=sorted(plant_ids),
                device_id=request.device_id,
                tag_names=self._settings.ENERGY_TAG_NAMES,
            )
            overall = self.aggregator.aggregate(samples, request.start_date, request.end_date)

            by_plant_values: "OrderedDict[int, List[float]]" = OrderedDict()
            by_type_values: Dict[str, List[float]] = {}
            by_type_devices: Dict[str, set] = {}

            device_types = uow.get_repo(DeviceRepository).types_by_id(
                sorted({sample.device_id for sample in samples})
            )
            for sample in samples:
                if not lower <= sample.timestamp < upper:
                    continue
                by_plant_values.setdefault(sample.plant_id, []).append(sample.value)
                device_type = device_types.get(sample.device_id, "unknown")
                by_type_values.setdefault(device_type, []).append(sample.value)
                by_type_devices.setdefault(device_type, set()).add(sample.device_id)

            plants = {p.id: p for p in uow.get_repo(PlantRepository).find_by_ids(by_plant_values)}

            by_plant = [
                PlantEnergy(
                    plant_id=plant_id,
                    plant_name=plants[plant_id].name,
                    statistics=self.aggregator.summarize(by_plant_values[plant_id], overall.unit),
                )
                for plant_id in sorted(by_plant_values)
            ]
            by_device_type = [
                DeviceTypeEnergy(
                    device_type=device_type,
                    device_count=len(by_type_devices[device_type]),
                    statistics=self.aggregator.summarize(by_type_values[device_type], overall.unit),
                )
                for device_type in sorted(by_type_values)
            ]

            return EnergyProductionReport(
                generated_at=self._clock(),
                period=self._period(request),
                filters=self._filters(request),
                overall=overall,
                by_plant=by_plant,
                by_device_type=by_device_type,
            )

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    def _resolve(
        self,
        request: ReportRequest,
        context: Optional[AccessContext],
        device_scope: bool = True,
    ):
        return self._access.resolve_scope(
            request.requester_id,
            request.requester_role,
            plant_id=request.plant_id,
            device_id=request.device_id if device_scope else None,
            context=context,
        )

    @staticmethod
    def _period(request: ReportRequest) -> ReportPeriod:
        return ReportPeriod(
            start_date=request.start_date,
            end_date=request.end_date,
            days=(request.end_date - request.start_date).days + 1,
        )

    @staticmethod
    def _filters(request: ReportRequest) -> ReportFilters:
        return ReportFilters(
            plant_id=request.plant_id,
            device_id=request.device_id,
            severity=request.severity,
            status=request.status,
        )
