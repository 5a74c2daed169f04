"""
Time-window aggregation of metric samples into overall and per-day
statistics.
"""
from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable, List, Optional

from fleet_reports.config.settings import Settings, get_settings
from fleet_reports.schemas.reports import AggregationResult, DailyAggregate
from fleet_reports.utils.date_utils import DateLike, as_date, daterange, to_utc_naive


@dataclass
class _Bucket:
    values: List[float] = field(default_factory=list)

    def add(self, value: float) -> None:
        self.values.append(value)

    @property
    def count(self) -> int:
        return len(self.values)

    @property
    def total(self) -> float:
        return float(sum(self.values))

    def stats(self) -> dict:
        if not self.values:
            return {"count": 0, "sum": 0.0, "avg": None, "min": None, "max": None}
        total = self.total
        return {
            "count": self.count,
            "sum": total,
            "avg": total / self.count,
            "min": float(min(self.values)),
            "max": float(max(self.values)),
        }


class TimeWindowAggregator:
    """
    Aggregates ``(timestamp, value)`` samples over whole UTC days.

    Every sample inside the window counts, duplicates included. Days
    without samples still get an entry with ``count == 0`` and null
    statistics. Values are never rounded here.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings or get_settings()

    def aggregate(
        self,
        samples: Iterable[Any],
        start_date: DateLike,
        end_date: DateLike,
        unit: Optional[str] = None,
    ) -> AggregationResult:
        """
        Aggregate samples into overall and daily statistics.

        Args:
            samples: Objects exposing ``timestamp``, ``value`` and
                optionally ``unit``, in non-decreasing timestamp order
            start_date: First day of the window
            end_date: Last day of the window (inclusive)
            unit: Unit override

        Returns:
            AggregationResult with one ``daily_data`` entry per day
        """
        first_day = as_date(start_date)
        last_day = as_date(end_date)

        days: "OrderedDict[date, _Bucket]" = OrderedDict(
            (day, _Bucket()) for day in daterange(first_day, last_day)
        )
        overall = _Bucket()
        first_unit: Optional[str] = None

        for sample in samples:
            day = to_utc_naive(sample.timestamp).date()
            bucket = days.get(day)
            if bucket is None:
                continue
            value = float(sample.value)
            bucket.add(value)
            overall.add(value)
            if first_unit is None:
                first_unit = getattr(sample, "unit", None)

        resolved_unit = unit or first_unit or self._settings.DEFAULT_ENERGY_UNIT

        daily = [
            DailyAggregate(date=day, unit=resolved_unit, **bucket.stats())
            for day, bucket in days.items()
        ]
        return AggregationResult(unit=resolved_unit, daily_data=daily, **overall.stats())

    def summarize(self, values: Iterable[float], unit: Optional[str] = None) -> AggregationResult:
        """Overall statistics of plain values, without daily breakdown."""
        bucket = _Bucket()
        for value in values:
            bucket.add(float(value))
        return AggregationResult(
            unit=unit or self._settings.DEFAULT_ENERGY_UNIT,
            **bucket.stats(),
        )
