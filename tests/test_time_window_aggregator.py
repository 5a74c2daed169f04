from collections import namedtuple
from datetime import date, datetime, timedelta, timezone

import pytest

from fleet_reports.services.analytics import TimeWindowAggregator

Sample = namedtuple("Sample", ["timestamp", "value", "unit"])


@pytest.fixture
def aggregator(settings):
    return TimeWindowAggregator(settings)


def test_one_entry_per_day_without_gaps(aggregator):
    start, end = date(2024, 2, 27), date(2024, 3, 2)  # leap year span
    result = aggregator.aggregate([], start, end)

    days = [entry.date for entry in result.daily_data]
    assert len(days) == (end - start).days + 1
    assert days == [start + timedelta(days=i) for i in range(len(days))]
    assert len(set(days)) == len(days)


def test_daily_sums_match_overall_sum(aggregator):
    samples = [
        Sample(datetime(2024, 1, 1, hour), value, "kWh")
        for hour, value in ((0, 0.1), (1, 0.2), (23, 0.3))
    ] + [Sample(datetime(2024, 1, 2, 5), 1e6 / 3, "kWh"), Sample(datetime(2024, 1, 3, 7), 2.0 / 3, "kWh")]

    result = aggregator.aggregate(samples, date(2024, 1, 1), date(2024, 1, 3))

    daily_total = sum(entry.sum for entry in result.daily_data)
    assert daily_total == pytest.approx(result.sum, rel=1e-6)
    assert result.count == 5


def test_duplicates_are_kept_and_out_of_window_samples_ignored(aggregator):
    samples = [
        Sample(datetime(2023, 12, 31, 23, 59, 59), 50.0, "kWh"),
        Sample(datetime(2024, 1, 1, 12), 5.0, "kWh"),
        Sample(datetime(2024, 1, 1, 12), 5.0, "kWh"),
        Sample(datetime(2024, 1, 2, 0), 1.0, "kWh"),
    ]
    result = aggregator.aggregate(samples, date(2024, 1, 1), date(2024, 1, 1))

    assert result.count == 2
    assert result.sum == 10.0
    assert result.avg == 5.0
    assert len(result.daily_data) == 1


def test_midnight_belongs_to_the_day_it_starts(aggregator):
    samples = [Sample(datetime(2024, 1, 2, 0, 0, 0), 4.0, "kWh")]
    result = aggregator.aggregate(samples, date(2024, 1, 1), date(2024, 1, 2))

    first, second = result.daily_data
    assert first.count == 0
    assert second.count == 1
    assert second.sum == 4.0


def test_aware_timestamps_are_bucketed_in_utc(aggregator):
    plus_two = timezone(timedelta(hours=2))
    # 01:00 local on Jan 2 is 23:00 UTC on Jan 1
    samples = [Sample(datetime(2024, 1, 2, 1, 0, tzinfo=plus_two), 3.0, "kWh")]
    result = aggregator.aggregate(samples, date(2024, 1, 1), date(2024, 1, 2))

    assert [entry.count for entry in result.daily_data] == [1, 0]


def test_empty_days_carry_no_data_marker(aggregator):
    result = aggregator.aggregate([], date(2024, 1, 1), date(2024, 1, 2))

    assert result.count == 0
    assert result.sum == 0.0
    assert result.avg is None and result.min is None and result.max is None
    for entry in result.daily_data:
        assert entry.count == 0
        assert entry.sum == 0.0
        assert entry.avg is None and entry.min is None and entry.max is None


def test_statistics_are_not_rounded(aggregator):
    samples = [Sample(datetime(2024, 1, 1, 1), 1.0, "kWh"), Sample(datetime(2024, 1, 1, 2), 2.0, "kWh"),
               Sample(datetime(2024, 1, 1, 3), 2.0, "kWh")]
    result = aggregator.aggregate(samples, date(2024, 1, 1), date(2024, 1, 1))

    assert result.avg == 5.0 / 3
    assert result.min == 1.0
    assert result.max == 2.0


def test_unit_resolution_order(aggregator):
    samples = [Sample(datetime(2024, 1, 1, 1), 1.0, "MWh")]

    assert aggregator.aggregate(samples, date(2024, 1, 1), date(2024, 1, 1), unit="Wh").unit == "Wh"
    assert aggregator.aggregate(samples, date(2024, 1, 1), date(2024, 1, 1)).unit == "MWh"
    assert aggregator.aggregate([], date(2024, 1, 1), date(2024, 1, 1)).unit == "kWh"


def test_summarize_has_no_daily_breakdown(aggregator):
    result = aggregator.summarize([1.0, 3.0], unit="kWh")

    assert result.daily_data is None
    assert result.sum == 4.0
    assert result.avg == 2.0
    assert aggregator.summarize([]).avg is None
