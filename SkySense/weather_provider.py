"""Weather provider abstraction - allows swapping different weather APIs."""
from abc import ABC, abstractmethod
from weather_data import WeatherResult


class WeatherProviderBase(ABC):
    """Abstract base class for weather data providers."""

    @abstractmethod
    def is_configured(self) -> bool:
        """Return True if the provider has the credentials it needs."""
        pass

    @abstractmethod
    def get_current_by_name(self, name: str) -> WeatherResult:
        """
        Fetch current weather and a short daily forecast for a place name.

        Returns:
            WeatherResult: Current conditions plus up to 5 forecast days

        Raises:
            ConfigurationError: If the provider has no API credential
            UpstreamError: If the current-weather call fails
        """
        pass

    @abstractmethod
    def get_current_by_coordinates(self, lat: float, lon: float) -> WeatherResult:
        """Same as get_current_by_name, keyed by latitude/longitude."""
        pass
