"""OpenWeather 2.5 provider: current weather plus a 5-day daily forecast."""
import logging
import requests
from datetime import datetime, timezone
from typing import Any, Dict, List
from errors import ConfigurationError, UpstreamError, UpstreamErrorKind, kind_for_status
from forecast_aggregator import aggregate
from weather_data import (
    ConditionCode,
    CurrentWeather,
    DailyForecast,
    Location,
    WeatherResult,
    WeatherSnapshot,
)
from weather_provider import WeatherProviderBase


class OpenWeatherProvider(WeatherProviderBase):
    """
    Weather provider using the free OpenWeather 2.5 API.

    Two calls per lookup:
      - /weather  (current conditions, mandatory)
      - /forecast (3-hourly samples for 5 days, best-effort)

    See https://openweathermap.org/current and https://openweathermap.org/forecast5
    """

    BASE_URL = "https://api.openweathermap.org/data/2.5"

    def __init__(
        self,
        api_key: str,
        units: str = "metric",
        lang: str = "en",
        timeout: int = 10
    ):
        """
        Initialize OpenWeather provider.

        Args:
            api_key: OpenWeather API key (may be empty; see is_configured)
            units: Temperature units ("metric", "imperial", or "standard")
            lang: Language code for descriptions (e.g., "en", "ja")
            timeout: HTTP request timeout in seconds, per call
        """
        self.api_key = api_key or ""
        self.units = units
        self.lang = lang
        self.timeout = timeout

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def get_current_by_name(self, name: str) -> WeatherResult:
        return self._fetch_result({"q": name})

    def get_current_by_coordinates(self, lat: float, lon: float) -> WeatherResult:
        return self._fetch_result({"lat": lat, "lon": lon})

    def _fetch_result(self, query: Dict[str, Any]) -> WeatherResult:
        if not self.is_configured():
            raise ConfigurationError("Weather service not configured: OPENWEATHER_API_KEY is missing")

        current = self._request("weather", query)
        forecast = self._fetch_forecast(query)
        result = self.parse_current(current, forecast)
        logging.info(
            f"Weather ready for {result.location.name}: "
            f"{result.current.temperature_c}°C, {result.current.condition.value}, "
            f"{len(forecast)} forecast days"
        )
        return result

    def _fetch_forecast(self, query: Dict[str, Any]) -> List[DailyForecast]:
        """Forecast is best-effort: any failure yields an empty list."""
        try:
            data = self._request("forecast", query)
            return aggregate(self.parse_forecast(data))
        except UpstreamError as e:
            logging.warning(f"Forecast unavailable, continuing without it: {e}")
            return []
        except Exception as e:
            logging.warning(f"Forecast could not be summarised, continuing without it: {e}", exc_info=True)
            return []

    def _request(self, endpoint: str, query: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.BASE_URL}/{endpoint}"
        params = dict(query)
        params.update({"appid": self.api_key, "units": self.units, "lang": self.lang})

        try:
            logging.info(f"Making OpenWeather API request: {url}")
            logging.debug(f"Request parameters: {query}, units={self.units}, lang={self.lang}")

            response = requests.get(url, params=params, timeout=self.timeout)

            logging.info(f"API response status: {response.status_code}")
            if not response.ok:
                logging.error(f"API request failed with status {response.status_code}")
                self._handle_error_response(response)

            data = response.json()
            logging.debug(f"API response (truncated): {str(data)[:500]}...")
            return data

        except requests.exceptions.Timeout as e:
            logging.error(f"OpenWeather request timed out after {self.timeout}s: {e}")
            raise UpstreamError(UpstreamErrorKind.TIMEOUT)
        except requests.exceptions.JSONDecodeError as e:
            logging.error(f"OpenWeather returned non-JSON body: {e}")
            raise UpstreamError(UpstreamErrorKind.MALFORMED_RESPONSE)
        except requests.exceptions.RequestException as e:
            logging.error(f"Network error during API request: {e}")
            raise UpstreamError(UpstreamErrorKind.UNKNOWN)
        except ValueError as e:
            logging.error(f"OpenWeather returned non-JSON body: {e}")
            raise UpstreamError(UpstreamErrorKind.MALFORMED_RESPONSE)

    def _handle_error_response(self, response: requests.Response) -> None:
        """Log the provider's error body and raise the matching UpstreamError."""
        try:
            error_data = response.json()
            logging.error(
                f"OpenWeather API error {error_data.get('cod', response.status_code)}: "
                f"{error_data.get('message', 'Unknown error')}"
            )
        except ValueError:
            logging.error(f"Non-JSON error response: HTTP {response.status_code}, body: {response.text[:500]}")

        raise UpstreamError(kind_for_status(response.status_code), status_code=response.status_code)

    @staticmethod
    def parse_current(data: Dict[str, Any], forecast: List[DailyForecast]) -> WeatherResult:
        """
        Map a /weather response onto a WeatherResult.

        Raises:
            UpstreamError: (MalformedResponse) if mandatory blocks are missing
        """
        try:
            weather_array = data.get("weather", [])
            if not weather_array:
                logging.error("Response missing 'weather' array")
                raise UpstreamError(UpstreamErrorKind.MALFORMED_RESPONSE, "Response missing 'weather' array")
            weather = weather_array[0]

            main_data = data.get("main", {})
            if not main_data:
                raise UpstreamError(UpstreamErrorKind.MALFORMED_RESPONSE, "Response missing 'main' block")

            coord = data.get("coord", {})
            wind_data = data.get("wind", {})
            # Visibility arrives in metres and is sometimes omitted
            visibility_m = data.get("visibility") or 0

            location = Location(
                name=data.get("name", ""),
                country=data.get("sys", {}).get("country", ""),
                lat=float(coord.get("lat", 0.0)),
                lon=float(coord.get("lon", 0.0)),
            )
            current = CurrentWeather(
                temperature_c=float(main_data["temp"]),
                feels_like_c=float(main_data.get("feels_like", main_data["temp"])),
                condition=ConditionCode.from_provider(weather.get("main")),
                description=weather.get("description", ""),
                humidity_percent=main_data.get("humidity", 0),
                wind_speed_ms=wind_data.get("speed", 0.0) if wind_data else 0.0,
                visibility_km=visibility_m / 1000,
                icon_id=weather.get("icon", ""),
            )
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            logging.error(f"Failed to parse API response: {e}", exc_info=True)
            raise UpstreamError(UpstreamErrorKind.MALFORMED_RESPONSE, f"Failed to parse response: {e}")

        return WeatherResult(location=location, current=current, forecast=forecast)

    @staticmethod
    def parse_forecast(data: Dict[str, Any]) -> List[WeatherSnapshot]:
        """Map a /forecast response onto snapshots, oldest first."""
        try:
            snapshots = []
            for item in data["list"]:
                weather = (item.get("weather") or [{}])[0]
                snapshots.append(
                    WeatherSnapshot(
                        timestamp_utc=datetime.fromtimestamp(item["dt"], tz=timezone.utc),
                        temperature_c=float(item["main"]["temp"]),
                        condition=ConditionCode.from_provider(weather.get("main")),
                        precipitation_probability=float(item.get("pop", 0.0)),
                        description=weather.get("description", ""),
                        icon_id=weather.get("icon", ""),
                    )
                )
        except (KeyError, ValueError, TypeError, AttributeError, OverflowError, OSError) as e:
            logging.error(f"Failed to parse forecast response: {e}")
            raise UpstreamError(UpstreamErrorKind.MALFORMED_RESPONSE, f"Failed to parse forecast: {e}")

        snapshots.sort(key=lambda s: s.timestamp_utc)
        return snapshots
