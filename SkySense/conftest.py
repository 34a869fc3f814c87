"""Shared fixtures: in-memory providers and a sample weather result."""
from datetime import date, datetime, timezone

import pytest

from suggestion_provider import SuggestionProviderBase
from weather_data import (
    ActivitySuggestion,
    ConditionCode,
    CurrentWeather,
    DailyForecast,
    Location,
    SuggestionCategory,
    SuggestionSet,
    WeatherResult,
)
from weather_provider import WeatherProviderBase


class MockWeatherProvider(WeatherProviderBase):
    """Mock weather provider for testing."""

    def __init__(self, result=None, raise_error=None, configured=True):
        self.result = result
        self.raise_error = raise_error
        self.configured = configured
        self.calls = []

    def is_configured(self):
        return self.configured

    def get_current_by_name(self, name):
        self.calls.append(("name", name))
        if self.raise_error:
            raise self.raise_error
        return self.result

    def get_current_by_coordinates(self, lat, lon):
        self.calls.append(("coords", lat, lon))
        if self.raise_error:
            raise self.raise_error
        return self.result


class MockSuggestionProvider(SuggestionProviderBase):
    """Mock generative-language provider for testing."""

    def __init__(self, suggestions=None, reply="Happy to help!", raise_error=None, configured=True):
        self.suggestions = suggestions
        self.reply = reply
        self.raise_error = raise_error
        self.configured = configured
        self.generate_calls = []
        self.conversational_calls = []

    def is_configured(self):
        return self.configured

    def generate(self, weather, user_query, language="en"):
        self.generate_calls.append((weather, user_query, language))
        if self.raise_error:
            raise self.raise_error
        return self.suggestions

    def generate_conversational(self, text, context=None, language="en"):
        self.conversational_calls.append((text, context, language))
        if self.raise_error:
            raise self.raise_error
        return self.reply


@pytest.fixture
def sample_result():
    """Weather result for Paris, as a provider would build it."""
    return WeatherResult(
        location=Location(name="Paris", country="FR", lat=48.8534, lon=2.3488),
        current=CurrentWeather(
            temperature_c=18.3,
            feels_like_c=17.6,
            condition=ConditionCode.CLOUDS,
            description="broken clouds",
            humidity_percent=72,
            wind_speed_ms=4.1,
            visibility_km=10.0,
            icon_id="04d",
        ),
        forecast=[
            DailyForecast(
                date=date(2024, 5, 1),
                temperature_min=12,
                temperature_max=19,
                condition=ConditionCode.CLOUDS,
                precipitation_chance_percent=20,
                description="broken clouds",
                icon_id="04d",
            )
        ],
        fetched_at=datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc),
    )


@pytest.fixture
def sample_suggestions():
    return SuggestionSet(
        suggestions=[
            ActivitySuggestion(
                category=SuggestionCategory.OUTDOOR,
                title="Walk along the Seine",
                description="Mild and dry enough for a long walk.",
                reasoning="18°C with clouds and low rain chance.",
                icon="🚶",
                priority=4,
            )
        ],
        explanation="A mild, cloudy day.",
        tips=["Bring a light jacket"],
        conversational_reply="Paris looks pleasant today!",
    )


@pytest.fixture
def weather_provider(sample_result):
    return MockWeatherProvider(result=sample_result)


@pytest.fixture
def suggestion_provider(sample_suggestions):
    return MockSuggestionProvider(suggestions=sample_suggestions)
