"""Integration tests - can optionally hit real APIs (disabled by default)."""
import os
import pytest
from gemini_provider import GeminiProvider
from openweather_provider import OpenWeatherProvider
from weather_service import WeatherService


@pytest.mark.skipif(
    not os.environ.get("OPENWEATHER_API_KEY"),
    reason="OPENWEATHER_API_KEY not set - skipping integration test"
)
def test_openweather_integration():
    """
    Integration test that hits the real OpenWeather API.

    Set OPENWEATHER_API_KEY environment variable to run this test.
    """
    provider = OpenWeatherProvider(api_key=os.environ.get("OPENWEATHER_API_KEY"), units="metric")

    result = provider.get_current_by_coordinates(35.6895, 139.6917)

    assert result.location.name
    assert -60 < result.current.temperature_c < 60
    assert len(result.forecast) <= 5


@pytest.mark.skipif(
    not (os.environ.get("OPENWEATHER_API_KEY") and os.environ.get("GEMINI_API_KEY")),
    reason="OPENWEATHER_API_KEY / GEMINI_API_KEY not set - skipping integration test"
)
def test_weather_chat_integration():
    """Integration test for the combined weather + suggestions flow."""
    service = WeatherService(
        OpenWeatherProvider(api_key=os.environ.get("OPENWEATHER_API_KEY")),
        GeminiProvider(api_key=os.environ.get("GEMINI_API_KEY")),
    )

    result = service.weather_chat(message="What should I do in London today?")

    assert result.weather.location.name == "London"
    if result.ai_error is None:
        assert result.ai.conversational_reply
