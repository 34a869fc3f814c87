"""Weather domain model - pure data structures independent of any API."""
import math
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (18.5 -> 19, -2.5 -> -2)."""
    return math.floor(value + 0.5)


class ConditionCode(str, Enum):
    """Coarse weather condition, as reported in the provider's 'main' field."""
    CLEAR = "Clear"
    CLOUDS = "Clouds"
    RAIN = "Rain"
    DRIZZLE = "Drizzle"
    SNOW = "Snow"
    MIST = "Mist"
    FOG = "Fog"
    OTHER = "Other"

    @classmethod
    def from_provider(cls, value: Optional[str]) -> "ConditionCode":
        """Map a provider condition string onto a known code (Other if unknown)."""
        for code in cls:
            if value and code.value.lower() == value.strip().lower():
                return code
        return cls.OTHER


@dataclass(frozen=True)
class WeatherSnapshot:
    """One 3-hour forecast sample from the provider."""
    timestamp_utc: datetime
    temperature_c: float
    condition: ConditionCode
    precipitation_probability: float  # 0..1
    description: str = ""
    icon_id: str = ""


@dataclass(frozen=True)
class DailyForecast:
    """Daily summary derived from a bucket of snapshots sharing a calendar date."""
    date: date
    temperature_min: int
    temperature_max: int
    condition: ConditionCode
    precipitation_chance_percent: int
    description: str = ""
    icon_id: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "temperature": {"min": self.temperature_min, "max": self.temperature_max},
            "condition": self.condition.value,
            "description": self.description,
            "precipitationChance": self.precipitation_chance_percent,
            "icon": self.icon_id,
        }


@dataclass(frozen=True)
class Location:
    """Resolved place as reported back by the weather provider."""
    name: str
    country: str
    lat: float
    lon: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "country": self.country,
            "coordinates": {"lat": self.lat, "lon": self.lon},
        }


@dataclass(frozen=True)
class CurrentWeather:
    """Current conditions. Temperatures are kept raw and rounded on output."""
    temperature_c: float
    feels_like_c: float
    condition: ConditionCode
    description: str  # e.g., "broken clouds", "light rain"
    humidity_percent: float
    wind_speed_ms: float
    visibility_km: float
    icon_id: str
    uv_index: float = 0.0  # not supplied by the current-weather endpoint

    def to_dict(self) -> Dict[str, Any]:
        return {
            "temperature": round_half_up(self.temperature_c),
            "feelsLike": round_half_up(self.feels_like_c),
            "condition": self.condition.value,
            "description": self.description,
            "humidity": self.humidity_percent,
            "windSpeed": self.wind_speed_ms,
            "visibility": self.visibility_km,
            "uvIndex": self.uv_index,
            "icon": self.icon_id,
        }


@dataclass
class WeatherResult:
    """Everything returned for one weather request. Built fresh per request."""
    location: Location
    current: CurrentWeather
    forecast: List[DailyForecast] = field(default_factory=list)
    fetched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "location": self.location.to_dict(),
            "current": self.current.to_dict(),
            "forecast": [day.to_dict() for day in self.forecast],
            "timestamp": self.fetched_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WeatherResult":
        """
        Rebuild a result from its wire form (as echoed back by the chat client).

        Raises:
            ValueError: If required fields are missing or have the wrong type
        """
        try:
            loc = data["location"]
            coords = loc.get("coordinates") or {}
            cur = data["current"]
            location = Location(
                name=str(loc["name"]),
                country=str(loc.get("country", "")),
                lat=float(coords.get("lat", 0.0)),
                lon=float(coords.get("lon", 0.0)),
            )
            current = CurrentWeather(
                temperature_c=float(cur["temperature"]),
                feels_like_c=float(cur.get("feelsLike", cur["temperature"])),
                condition=ConditionCode.from_provider(cur.get("condition")),
                description=str(cur.get("description", "")),
                humidity_percent=float(cur.get("humidity", 0)),
                wind_speed_ms=float(cur.get("windSpeed", 0)),
                visibility_km=float(cur.get("visibility", 0)),
                icon_id=str(cur.get("icon", "")),
                uv_index=float(cur.get("uvIndex", 0)),
            )
            forecast = [
                DailyForecast(
                    date=date.fromisoformat(str(day["date"])[:10]),
                    temperature_min=int(day["temperature"]["min"]),
                    temperature_max=int(day["temperature"]["max"]),
                    condition=ConditionCode.from_provider(day.get("condition")),
                    precipitation_chance_percent=int(day.get("precipitationChance", 0)),
                    description=str(day.get("description", "")),
                    icon_id=str(day.get("icon", "")),
                )
                for day in data.get("forecast") or []
            ]
        except (KeyError, TypeError, AttributeError) as exc:
            raise ValueError(f"Invalid weather data: {exc}") from exc

        return cls(location=location, current=current, forecast=forecast)


class SuggestionCategory(str, Enum):
    TRAVEL = "travel"
    OUTDOOR = "outdoor"
    INDOOR = "indoor"
    CLOTHING = "clothing"
    FOOD = "food"


@dataclass(frozen=True)
class ActivitySuggestion:
    """One activity card produced by the language model."""
    category: SuggestionCategory
    title: str
    description: str
    reasoning: str
    icon: str
    priority: int  # expected 1-5

    @property
    def priority_level(self) -> str:
        """Bucket priority the way the chat client displays it."""
        if self.priority >= 4:
            return "high"
        if self.priority >= 3:
            return "medium"
        return "low"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category.value,
            "title": self.title,
            "description": self.description,
            "reasoning": self.reasoning,
            "icon": self.icon,
            "priority": self.priority,
        }


@dataclass
class SuggestionSet:
    """Parsed language-model answer for a weather-grounded question."""
    suggestions: List[ActivitySuggestion] = field(default_factory=list)
    explanation: str = ""
    tips: List[str] = field(default_factory=list)
    conversational_reply: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "suggestions": [s.to_dict() for s in self.suggestions],
            "explanation": self.explanation,
            "additionalTips": list(self.tips),
            "conversationalResponse": self.conversational_reply,
        }
