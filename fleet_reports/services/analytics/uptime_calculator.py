"""Device uptime from status snapshots."""
from __future__ import annotations

from typing import Iterable, Union

from fleet_reports.schemas.common.enums import DeviceStatus
from fleet_reports.schemas.reports import UptimeStats


class UptimeCalculator:
    """Share of devices currently ONLINE."""

    def calculate(self, statuses: Iterable[Union[DeviceStatus, str]]) -> UptimeStats:
        counts = {status: 0 for status in DeviceStatus}
        for status in statuses:
            counts[DeviceStatus(status)] += 1

        total = sum(counts.values())
        online = counts[DeviceStatus.ONLINE]
        return UptimeStats(
            total=total,
            online=online,
            offline=counts[DeviceStatus.OFFLINE],
            error=counts[DeviceStatus.ERROR],
            maintenance=counts[DeviceStatus.MAINTENANCE],
            # No devices means no measurement, not zero uptime
            uptime_percentage=(online / total * 100.0) if total > 0 else None,
        )
