"""Request-level orchestration of the weather and suggestion providers."""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple
from errors import ConfigurationError, InvalidPayloadError, UpstreamError, ValidationError
from location_extractor import extract_location
from speech_processor import generate_context, process_japanese_input
from suggestion_provider import LANGUAGES, SuggestionProviderBase
from weather_data import SuggestionSet, WeatherResult
from weather_provider import WeatherProviderBase

DEFAULT_CHAT_MESSAGE = "What should I do today?"


@dataclass
class WeatherChatResult:
    """Weather plus suggestions; `ai_error` is set when only the weather came back."""
    weather: WeatherResult
    ai: Optional[SuggestionSet] = None
    ai_error: Optional[UpstreamError] = None


def parse_coordinates(lat: Any, lon: Any) -> Tuple[float, float]:
    """
    Validate a latitude/longitude pair from request input.

    Raises:
        ValidationError: If either value is not a number or is out of range
    """
    try:
        lat_val = float(lat)
        lon_val = float(lon)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"Invalid coordinates: {exc}") from exc

    if not -90 <= lat_val <= 90 or not -180 <= lon_val <= 180:
        raise ValidationError(f"Coordinates out of range: lat={lat_val}, lon={lon_val}")
    return lat_val, lon_val


def _is_present(value: Any) -> bool:
    return value is not None and str(value).strip() != ""


class WeatherService:
    """
    Stateless service behind the HTTP handlers.

    Holds one weather provider and one suggestion provider for the lifetime of
    the process. Nothing is cached between requests and nothing is retried;
    upstream failures go straight back to the caller.
    """

    def __init__(
        self,
        weather_provider: WeatherProviderBase,
        suggestion_provider: SuggestionProviderBase,
    ):
        """
        Initialize weather service.

        Args:
            weather_provider: Weather provider to use
            suggestion_provider: Generative-language provider to use
        """
        self.weather_provider = weather_provider
        self.suggestion_provider = suggestion_provider

    def get_weather(
        self,
        location: Optional[str] = None,
        lat: Any = None,
        lon: Any = None,
    ) -> WeatherResult:
        """
        Look up weather by coordinates (preferred when both given) or by name.

        Raises:
            ConfigurationError: If the weather provider has no API key
            ValidationError: If neither a location nor a full coordinate pair is given
            UpstreamError: If the current-weather call fails
        """
        if not self.weather_provider.is_configured():
            raise ConfigurationError("Please set OPENWEATHER_API_KEY in environment variables")

        if _is_present(lat) and _is_present(lon):
            lat_val, lon_val = parse_coordinates(lat, lon)
            logging.info(f"Weather lookup by coordinates: {lat_val}, {lon_val}")
            return self.weather_provider.get_current_by_coordinates(lat_val, lon_val)

        if _is_present(location):
            logging.info(f"Weather lookup by name: {location}")
            return self.weather_provider.get_current_by_name(str(location).strip())

        raise ValidationError("Please provide either location name or coordinates (lat, lon)")

    def chat(
        self,
        message: str,
        weather_data: Optional[Dict[str, Any]] = None,
        language: str = "en",
    ) -> SuggestionSet:
        """
        Answer a chat message, grounded on weather when the client sends it.

        Without weather data the reply is conversational only, wrapped in an
        otherwise empty SuggestionSet.
        """
        message = (message or "").strip()
        if not message:
            raise ValidationError("Please provide a message in the request body")
        language = self._check_language(language)
        if not self.suggestion_provider.is_configured():
            raise ConfigurationError("Please set GEMINI_API_KEY in environment variables")

        if weather_data:
            try:
                weather = WeatherResult.from_dict(weather_data)
            except ValueError as exc:
                raise InvalidPayloadError(str(exc)) from exc
            return self.suggestion_provider.generate(weather, message, language)

        context = None
        if language == "ja":
            context = generate_context(process_japanese_input(message))
        reply = self.suggestion_provider.generate_conversational(message, context, language)
        return SuggestionSet(conversational_reply=reply)

    def weather_chat(
        self,
        message: Optional[str] = None,
        language: str = "en",
        location: Optional[str] = None,
        lat: Any = None,
        lon: Any = None,
    ) -> WeatherChatResult:
        """
        Fetch weather, then suggestions, in one call.

        If no location or coordinates are given, the location is extracted
        from the message. A suggestion failure does not discard the weather.
        """
        language = self._check_language(language)
        if not self.weather_provider.is_configured() or not self.suggestion_provider.is_configured():
            raise ConfigurationError(
                "Please set both OPENWEATHER_API_KEY and GEMINI_API_KEY in environment variables"
            )

        message = (message or "").strip() or DEFAULT_CHAT_MESSAGE
        if not (_is_present(lat) and _is_present(lon)) and not _is_present(location):
            location = extract_location(message)
            if location is None:
                raise ValidationError("Please provide either location name or coordinates")
            logging.info(f"Location extracted from message: {location}")

        weather = self.get_weather(location=location, lat=lat, lon=lon)

        try:
            suggestions = self.suggestion_provider.generate(weather, message, language)
        except UpstreamError as e:
            logging.warning(f"Suggestions unavailable, returning weather only: {e}")
            return WeatherChatResult(weather=weather, ai_error=e)

        return WeatherChatResult(weather=weather, ai=suggestions)

    @staticmethod
    def _check_language(language: Optional[str]) -> str:
        language = language or "en"
        if language not in LANGUAGES:
            raise ValidationError(f"Unsupported language '{language}' (expected one of: {', '.join(LANGUAGES)})")
        return language
