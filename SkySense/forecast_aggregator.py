"""Collapse 3-hourly forecast samples into daily summaries."""
from dataclasses import dataclass, field
from datetime import date, timezone
from typing import Dict, Iterable, List

from weather_data import DailyForecast, WeatherSnapshot, round_half_up

MAX_FORECAST_DAYS = 5


@dataclass
class _DayBucket:
    first: WeatherSnapshot
    temperatures: List[float] = field(default_factory=list)


def bucket_date(snapshot: WeatherSnapshot) -> date:
    """Calendar date (UTC) a sample is filed under."""
    ts = snapshot.timestamp_utc
    if ts.tzinfo is not None:
        ts = ts.astimezone(timezone.utc)
    return ts.date()


def aggregate(samples: Iterable[WeatherSnapshot], max_days: int = MAX_FORECAST_DAYS) -> List[DailyForecast]:
    """
    Reduce forecast samples to at most `max_days` daily summaries.

    Samples must be ordered by ascending timestamp. Each day's condition,
    description, icon and precipitation chance come from the first sample
    seen for that day; min/max are taken over every sample of the day.

    Args:
        samples: Forecast samples, oldest first
        max_days: Maximum number of days to return

    Returns:
        Daily summaries in first-seen date order (empty for empty input)
    """
    buckets: Dict[date, _DayBucket] = {}
    for sample in samples:
        key = bucket_date(sample)
        bucket = buckets.get(key)
        if bucket is None:
            bucket = buckets[key] = _DayBucket(first=sample)
        bucket.temperatures.append(sample.temperature_c)

    daily = []
    for day, bucket in list(buckets.items())[:max_days]:
        first = bucket.first
        daily.append(
            DailyForecast(
                date=day,
                temperature_min=round_half_up(min(bucket.temperatures)),
                temperature_max=round_half_up(max(bucket.temperatures)),
                condition=first.condition,
                precipitation_chance_percent=round_half_up(first.precipitation_probability * 100),
                description=first.description,
                icon_id=first.icon_id,
            )
        )
    return daily
