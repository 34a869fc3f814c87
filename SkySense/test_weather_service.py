"""Tests for weather service."""
import pytest
from conftest import MockSuggestionProvider, MockWeatherProvider
from errors import (
    ConfigurationError,
    InvalidPayloadError,
    ParseError,
    UpstreamError,
    UpstreamErrorKind,
    ValidationError,
)
from weather_service import DEFAULT_CHAT_MESSAGE, WeatherService, parse_coordinates


@pytest.fixture
def service(weather_provider, suggestion_provider):
    return WeatherService(weather_provider, suggestion_provider)


def test_get_weather_by_name(service, weather_provider, sample_result):
    result = service.get_weather(location="  Paris ")

    assert result is sample_result
    assert weather_provider.calls == [("name", "Paris")]


def test_get_weather_coordinates_take_precedence(service, weather_provider):
    """Test that a full coordinate pair wins over a location name."""
    service.get_weather(location="Paris", lat="35.68", lon="139.69")

    assert weather_provider.calls == [("coords", 35.68, 139.69)]


def test_get_weather_half_coordinates_falls_back_to_name(service, weather_provider):
    service.get_weather(location="Paris", lat="35.68")

    assert weather_provider.calls == [("name", "Paris")]


def test_get_weather_missing_params(service, weather_provider):
    with pytest.raises(ValidationError):
        service.get_weather()

    assert weather_provider.calls == []


def test_get_weather_unconfigured_makes_no_call(sample_result, suggestion_provider):
    """Test that an unconfigured provider is never called."""
    provider = MockWeatherProvider(result=sample_result, configured=False)
    service = WeatherService(provider, suggestion_provider)

    with pytest.raises(ConfigurationError):
        service.get_weather(location="Paris")

    assert provider.calls == []


def test_get_weather_propagates_upstream_error(suggestion_provider):
    provider = MockWeatherProvider(raise_error=UpstreamError(UpstreamErrorKind.NOT_FOUND))
    service = WeatherService(provider, suggestion_provider)

    with pytest.raises(UpstreamError) as exc_info:
        service.get_weather(location="Atlantis")

    assert exc_info.value.kind is UpstreamErrorKind.NOT_FOUND


@pytest.mark.parametrize("lat,lon", [("abc", "1"), ("91", "0"), ("0", "-181")])
def test_parse_coordinates_rejects_bad_values(lat, lon):
    with pytest.raises(ValidationError):
        parse_coordinates(lat, lon)


def test_chat_with_weather_generates_suggestions(service, suggestion_provider, sample_result, sample_suggestions):
    result = service.chat("What should I do?", sample_result.to_dict(), "en")

    assert result is sample_suggestions
    weather, query, language = suggestion_provider.generate_calls[0]
    assert weather.location.name == "Paris"
    assert query == "What should I do?"
    assert language == "en"


def test_chat_without_weather_is_conversational(service, suggestion_provider):
    result = service.chat("Hello!", None, "en")

    assert result.conversational_reply == "Happy to help!"
    assert result.suggestions == []
    assert result.tips == []
    assert suggestion_provider.conversational_calls == [("Hello!", None, "en")]


def test_chat_japanese_adds_context(service, suggestion_provider):
    """Test that Japanese chat input is analysed and passed on as context."""
    service.chat("東京の天気はどう？", None, "ja")

    _, context, language = suggestion_provider.conversational_calls[0]
    assert language == "ja"
    assert "Location mentioned: Tokyo." in context


def test_chat_requires_message(service):
    with pytest.raises(ValidationError):
        service.chat("   ", None, "en")


def test_chat_rejects_bad_weather_payload(service):
    with pytest.raises(InvalidPayloadError):
        service.chat("Ideas?", {"location": {}}, "en")


def test_chat_rejects_unknown_language(service):
    with pytest.raises(ValidationError):
        service.chat("Bonjour", None, "fr")


def test_chat_unconfigured(weather_provider):
    service = WeatherService(weather_provider, MockSuggestionProvider(configured=False))

    with pytest.raises(ConfigurationError):
        service.chat("Hello", None, "en")


def test_weather_chat_extracts_location_from_message(service, weather_provider, sample_suggestions):
    result = service.weather_chat(message="Planning a trip to Bangalore", language="en")

    assert weather_provider.calls == [("name", "Bangalore")]
    assert result.ai is sample_suggestions
    assert result.ai_error is None


def test_weather_chat_default_message(service, suggestion_provider):
    service.weather_chat(location="Paris")

    assert suggestion_provider.generate_calls[0][1] == DEFAULT_CHAT_MESSAGE


def test_weather_chat_without_any_location(service):
    with pytest.raises(ValidationError):
        service.weather_chat(message="I like walking")


def test_weather_chat_keeps_weather_when_suggestions_fail(weather_provider, sample_result):
    """Test that a suggestion failure does not drop the weather result."""
    suggestion_provider = MockSuggestionProvider(raise_error=ParseError())
    service = WeatherService(weather_provider, suggestion_provider)

    result = service.weather_chat(message="Ideas?", location="Paris")

    assert result.weather is sample_result
    assert result.ai is None
    assert result.ai_error.kind is UpstreamErrorKind.MALFORMED_RESPONSE


def test_weather_chat_requires_both_services(weather_provider):
    service = WeatherService(weather_provider, MockSuggestionProvider(configured=False))

    with pytest.raises(ConfigurationError):
        service.weather_chat(location="Paris")

    assert weather_provider.calls == []
