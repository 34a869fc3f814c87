"""Error taxonomy shared by the gateways and the HTTP layer."""
from enum import Enum
from typing import Optional


class SkySenseError(Exception):
    """Base class for all errors raised by SkySense."""
    pass


class ConfigurationError(SkySenseError):
    """A required credential or setting is missing."""
    pass


class ValidationError(SkySenseError):
    """Request parameters are missing or malformed."""
    pass


class InvalidPayloadError(ValidationError):
    """A structured request field (such as echoed weather data) cannot be read."""
    pass


class UpstreamErrorKind(str, Enum):
    INVALID_CREDENTIALS = "InvalidCredentials"
    NOT_FOUND = "NotFound"
    RATE_LIMITED = "RateLimited"
    TIMEOUT = "Timeout"
    MALFORMED_RESPONSE = "MalformedResponse"
    UNKNOWN = "Unknown"


WEATHER_ERROR_MESSAGES = {
    UpstreamErrorKind.INVALID_CREDENTIALS: "Invalid API key. Please check your OpenWeatherMap API key.",
    UpstreamErrorKind.NOT_FOUND: "Location not found. Please try a different city name.",
    UpstreamErrorKind.RATE_LIMITED: "API rate limit exceeded. Please try again later.",
    UpstreamErrorKind.TIMEOUT: "Request timeout. Please check your internet connection.",
    UpstreamErrorKind.MALFORMED_RESPONSE: "Weather service returned an unexpected response.",
    UpstreamErrorKind.UNKNOWN: "Unable to fetch weather data. Please try again later.",
}

AI_ERROR_MESSAGES = {
    UpstreamErrorKind.INVALID_CREDENTIALS: "Invalid API key. Please check your Gemini API key.",
    UpstreamErrorKind.NOT_FOUND: "AI model not found. Please check the configured model name.",
    UpstreamErrorKind.RATE_LIMITED: "AI rate limit exceeded. Please try again later.",
    UpstreamErrorKind.TIMEOUT: "AI request timeout. Please try again in a moment.",
    UpstreamErrorKind.MALFORMED_RESPONSE: "AI returned a response that could not be understood.",
    UpstreamErrorKind.UNKNOWN: "Unable to generate suggestions. Please try again later.",
}


def kind_for_status(status_code: int) -> UpstreamErrorKind:
    """Map an upstream HTTP status onto an error kind."""
    if status_code in (401, 403):
        return UpstreamErrorKind.INVALID_CREDENTIALS
    if status_code == 404:
        return UpstreamErrorKind.NOT_FOUND
    if status_code == 429:
        return UpstreamErrorKind.RATE_LIMITED
    return UpstreamErrorKind.UNKNOWN


class UpstreamError(SkySenseError):
    """A third-party provider failed (network, timeout, 4xx/5xx)."""

    def __init__(
        self,
        kind: UpstreamErrorKind,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        self.kind = kind
        self.status_code = status_code
        self.message = message or WEATHER_ERROR_MESSAGES[kind]
        super().__init__(self.message)


class ParseError(UpstreamError):
    """The provider answered, but its content could not be parsed."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(
            UpstreamErrorKind.MALFORMED_RESPONSE,
            message or AI_ERROR_MESSAGES[UpstreamErrorKind.MALFORMED_RESPONSE],
        )
