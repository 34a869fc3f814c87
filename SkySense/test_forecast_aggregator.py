"""Tests for daily forecast aggregation."""
from datetime import date, datetime, timedelta, timezone

from forecast_aggregator import MAX_FORECAST_DAYS, aggregate, bucket_date
from weather_data import ConditionCode, WeatherSnapshot

START = datetime(2024, 5, 1, 0, 0, tzinfo=timezone.utc)


def snap(hours, temp, condition=ConditionCode.CLEAR, pop=0.0, description="clear sky"):
    """Snapshot `hours` after START."""
    return WeatherSnapshot(
        timestamp_utc=START + timedelta(hours=hours),
        temperature_c=temp,
        condition=condition,
        precipitation_probability=pop,
        description=description,
        icon_id="01d",
    )


def test_empty_input():
    """Test that no samples means no days, without error."""
    assert aggregate([]) == []


def test_single_sample_min_equals_max():
    days = aggregate([snap(12, 21.4)])

    assert len(days) == 1
    assert days[0].temperature_min == days[0].temperature_max == 21


def test_min_max_over_same_day():
    """Test min/max cover every sample of the day and are rounded."""
    temps = [10.4, 15.6, 12.0, 13.2, 11.7, 14.9, 9.6, 12.3]
    days = aggregate([snap(i * 3, t) for i, t in enumerate(temps)])

    assert len(days) == 1
    day = days[0]
    assert day.date == date(2024, 5, 1)
    assert day.temperature_min == 10
    assert day.temperature_max == 16
    assert day.temperature_min <= min(temps) + 0.5
    assert day.temperature_max >= max(temps) - 0.5


def test_first_sample_sets_condition_and_precipitation():
    """Test that the day's condition and rain chance come from its first sample."""
    samples = [
        snap(0, 12.0, ConditionCode.RAIN, pop=0.35, description="light rain"),
        snap(3, 14.0, ConditionCode.CLEAR, pop=0.9),
        snap(6, 16.0, ConditionCode.CLOUDS, pop=0.0),
    ]
    day = aggregate(samples)[0]

    assert day.condition is ConditionCode.RAIN
    assert day.precipitation_chance_percent == 35
    assert day.description == "light rain"


def test_at_most_five_days_in_order():
    """Test that a week of samples is cut to five ascending, unique dates."""
    samples = [snap(h, 10.0 + h / 24) for h in range(0, 7 * 24, 3)]
    days = aggregate(samples)

    assert len(days) == MAX_FORECAST_DAYS
    dates = [d.date for d in days]
    assert dates == sorted(dates)
    assert len(set(dates)) == len(dates)
    assert dates[0] == date(2024, 5, 1)
    assert dates[-1] == date(2024, 5, 5)


def test_days_split_at_utc_midnight():
    days = aggregate([snap(-1, 5.0), snap(1, 7.0)])

    assert [d.date for d in days] == [date(2024, 4, 30), date(2024, 5, 1)]


def test_bucket_date_converts_to_utc():
    """Test that a non-UTC timestamp is filed under its UTC date."""
    jst = timezone(timedelta(hours=9))
    sample = WeatherSnapshot(
        timestamp_utc=datetime(2024, 5, 1, 1, 0, tzinfo=jst),
        temperature_c=20.0,
        condition=ConditionCode.CLEAR,
        precipitation_probability=0.0,
    )
    assert bucket_date(sample) == date(2024, 4, 30)


def test_halves_round_up():
    """Test that .5 temperatures and precipitation chances round up, not to even."""
    day = aggregate([snap(0, 18.5, pop=0.125), snap(3, 20.5)])[0]

    assert day.temperature_min == 19
    assert day.temperature_max == 21
    assert day.precipitation_chance_percent == 13
