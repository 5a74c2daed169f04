"""
Alarm statistics: counts by severity and status, resolution times, most
frequent alarm types and device downtime.
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Sequence

from fleet_reports.config.settings import Settings, get_settings
from fleet_reports.schemas.common.enums import AlarmSeverity, AlarmStatus
from fleet_reports.schemas.reports import (
    AlarmStatistics,
    AlarmSummary,
    AlarmTypeCount,
    DowntimeStats,
    ResolutionStats,
)


class AlarmStatsCalculator:
    """
    Pure computations over alarm rows.

    Alarm objects only need ``severity``, ``status``, ``message``,
    ``triggered_at`` and ``resolved_at``.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings or get_settings()

    def by_severity(self, alarms: Sequence[Any]) -> Dict[str, int]:
        counts = {severity.value: 0 for severity in AlarmSeverity}
        for alarm in alarms:
            counts[AlarmSeverity(alarm.severity).value] += 1
        return counts

    def by_status(self, alarms: Sequence[Any]) -> Dict[str, int]:
        counts = {status.value: 0 for status in AlarmStatus}
        for alarm in alarms:
            counts[AlarmStatus(alarm.status).value] += 1
        return counts

    def resolution_time(self, alarms: Iterable[Any]) -> ResolutionStats:
        """
        Resolution time in minutes over RESOLVED alarms with a resolution
        timestamp; all statistics are None when there are none.
        """
        minutes = [
            (alarm.resolved_at - alarm.triggered_at).total_seconds() / 60.0
            for alarm in alarms
            if AlarmStatus(alarm.status) == AlarmStatus.RESOLVED and alarm.resolved_at is not None
        ]
        if not minutes:
            return ResolutionStats(total_resolved=0)
        return ResolutionStats(
            avg_minutes=sum(minutes) / len(minutes),
            min_minutes=min(minutes),
            max_minutes=max(minutes),
            total_resolved=len(minutes),
        )

    def top_alarm_types(self, alarms: Iterable[Any], limit: Optional[int] = None) -> List[AlarmTypeCount]:
        """
        Most frequent alarm messages.

        Groups by exact message; a group's severity is the most severe one
        seen. Ordered by count desc, severity rank, then message.
        """
        limit = limit if limit is not None else self._settings.TOP_ALARM_TYPES_LIMIT
        groups: Dict[str, Dict[str, Any]] = {}
        for alarm in alarms:
            severity = AlarmSeverity(alarm.severity)
            group = groups.setdefault(alarm.message, {"count": 0, "severity": severity})
            group["count"] += 1
            if severity.rank < group["severity"].rank:
                group["severity"] = severity

        ordered = sorted(
            groups.items(),
            key=lambda item: (-item[1]["count"], item[1]["severity"].rank, item[0]),
        )
        return [
            AlarmTypeCount(message=message, count=group["count"], severity=group["severity"])
            for message, group in ordered[:limit]
        ]

    def summary(self, alarms: Sequence[Any]) -> AlarmSummary:
        statuses = [AlarmStatus(alarm.status) for alarm in alarms]
        return AlarmSummary(
            total=len(statuses),
            resolved=statuses.count(AlarmStatus.RESOLVED),
            pending=statuses.count(AlarmStatus.ACTIVE),
        )

    def statistics(self, alarms: Sequence[Any], limit: Optional[int] = None) -> AlarmStatistics:
        alarms = list(alarms)
        return AlarmStatistics(
            total=len(alarms),
            by_severity=self.by_severity(alarms),
            by_status=self.by_status(alarms),
            resolution_time=self.resolution_time(alarms),
            top_alarm_types=self.top_alarm_types(alarms, limit),
        )

    def downtime(self, alarms: Iterable[Any], severities: Optional[Iterable[str]] = None) -> DowntimeStats:
        """
        Hours between trigger and resolution of resolved alarms whose
        severity counts as downtime (CRITICAL and HIGH by default).
        """
        wanted = {
            AlarmSeverity(s) for s in (severities if severities is not None else self._settings.DOWNTIME_SEVERITIES)
        }
        relevant = [alarm for alarm in alarms if AlarmSeverity(alarm.severity) in wanted]

        total_hours = 0.0
        for alarm in relevant:
            if AlarmStatus(alarm.status) == AlarmStatus.RESOLVED and alarm.resolved_at is not None:
                total_hours += (alarm.resolved_at - alarm.triggered_at).total_seconds() / 3600.0

        return DowntimeStats(
            total_hours=total_hours,
            alarm_count=len(relevant),
            critical_count=sum(
                1 for alarm in relevant if AlarmSeverity(alarm.severity) == AlarmSeverity.CRITICAL
            ),
        )
