"""
Analytics services: aggregation, alarm and uptime statistics, report
assembly and the report facade.
"""
from .alarm_stats_calculator import AlarmStatsCalculator
from .report_assembler import ReportAssembler
from .report_service import ReportService, build_filename
from .time_window_aggregator import TimeWindowAggregator
from .uptime_calculator import UptimeCalculator
from .validation import validate_report_request

__all__ = [
    "AlarmStatsCalculator",
    "ReportAssembler",
    "ReportService",
    "TimeWindowAggregator",
    "UptimeCalculator",
    "build_filename",
    "validate_report_request",
]
