"""Suggestion provider abstraction plus the prompt and response format it shares."""
import json
import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
from errors import ParseError
from weather_data import ActivitySuggestion, SuggestionCategory, SuggestionSet, WeatherResult, round_half_up

LANGUAGES = ("en", "ja")
DEFAULT_PRIORITY = 3

_CODE_FENCE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)

_LANGUAGE_INSTRUCTIONS = {
    "en": "Answer in English.",
    "ja": "日本語で回答してください。JSONのキー名は英語のままにしてください。",
}

_RESPONSE_FORMAT = """Respond with a single JSON object and nothing else, using exactly this shape:
{
  "suggestions": [
    {
      "category": "travel" | "outdoor" | "indoor" | "clothing" | "food",
      "title": "short title",
      "description": "one or two sentences",
      "reasoning": "why this fits the weather",
      "icon": "a single emoji",
      "priority": 1-5 (5 = most recommended)
    }
  ],
  "explanation": "short summary of how the weather shapes the day",
  "additionalTips": ["practical tip", "..."],
  "conversationalResponse": "a friendly reply to the user's message"
}
Give 3 to 5 suggestions."""


class SuggestionProviderBase(ABC):
    """Abstract base class for generative-language providers."""

    @abstractmethod
    def is_configured(self) -> bool:
        pass

    @abstractmethod
    def generate(self, weather: WeatherResult, user_query: str, language: str = "en") -> SuggestionSet:
        """
        Ask the model for activity suggestions grounded on a weather result.

        Raises:
            ConfigurationError: If the provider has no API credential
            UpstreamError: On provider failure
            ParseError: If the provider's answer holds no usable JSON payload
        """
        pass

    @abstractmethod
    def generate_conversational(self, text: str, context: Optional[str] = None, language: str = "en") -> str:
        """Plain chat reply, used before any weather data is available."""
        pass


def describe_weather(weather: WeatherResult) -> str:
    """Render a weather result as prompt text."""
    loc = weather.location
    cur = weather.current
    lines = [
        f"Location: {loc.name}, {loc.country}".rstrip(", "),
        f"Current: {round_half_up(cur.temperature_c)}°C (feels like {round_half_up(cur.feels_like_c)}°C), "
        f"{cur.condition.value} - {cur.description}",
        f"Humidity: {cur.humidity_percent}%, wind: {cur.wind_speed_ms} m/s, visibility: {cur.visibility_km} km",
    ]
    if weather.forecast:
        lines.append("Forecast:")
        for day in weather.forecast:
            lines.append(
                f"- {day.date.isoformat()}: {day.temperature_min}-{day.temperature_max}°C, "
                f"{day.condition.value}, {day.precipitation_chance_percent}% chance of rain"
            )
    return "\n".join(lines)


def build_suggestion_prompt(weather: WeatherResult, user_query: str, language: str = "en") -> str:
    return (
        "You are SkySense, a friendly weather assistant that suggests activities.\n\n"
        f"Weather data:\n{describe_weather(weather)}\n\n"
        f"User message: {user_query}\n\n"
        f"{_RESPONSE_FORMAT}\n"
        f"{_LANGUAGE_INSTRUCTIONS.get(language, _LANGUAGE_INSTRUCTIONS['en'])}"
    )


def build_conversational_prompt(text: str, context: Optional[str] = None, language: str = "en") -> str:
    prompt = (
        "You are SkySense, a friendly weather assistant. The user has not picked a location yet. "
        "Reply briefly and, if it helps, ask which city they are interested in.\n\n"
    )
    if context:
        prompt += f"Context: {context}\n\n"
    prompt += f"User message: {text}\n\n"
    prompt += _LANGUAGE_INSTRUCTIONS.get(language, _LANGUAGE_INSTRUCTIONS["en"])
    return prompt


def extract_json_object(text: str) -> Dict[str, Any]:
    """
    Pull the JSON object out of free model text.

    Handles fenced ```json blocks and prose around the object.

    Raises:
        ParseError: If no JSON object can be decoded
    """
    if not text or not text.strip():
        raise ParseError("AI returned an empty response")

    fenced = _CODE_FENCE.search(text)
    candidate = fenced.group(1) if fenced else text
    start = candidate.find("{")
    end = candidate.rfind("}")
    if start == -1 or end <= start:
        raise ParseError("AI response did not contain a JSON object")

    try:
        payload = json.loads(candidate[start:end + 1])
    except json.JSONDecodeError as e:
        logging.error(f"AI response JSON could not be decoded: {e}")
        raise ParseError(f"AI response JSON could not be decoded: {e.msg}")

    if not isinstance(payload, dict):
        raise ParseError("AI response JSON was not an object")
    return payload


def _parse_suggestion(item: Any) -> Optional[ActivitySuggestion]:
    if not isinstance(item, dict):
        return None
    try:
        category = SuggestionCategory(str(item.get("category", "")).strip().lower())
    except ValueError:
        logging.warning(f"Dropping suggestion with unknown category: {item.get('category')!r}")
        return None

    try:
        priority = int(item.get("priority", DEFAULT_PRIORITY))
    except (TypeError, ValueError):
        priority = DEFAULT_PRIORITY

    title = str(item.get("title", "")).strip()
    if not title:
        return None
    return ActivitySuggestion(
        category=category,
        title=title,
        description=str(item.get("description", "")),
        reasoning=str(item.get("reasoning", "")),
        icon=str(item.get("icon", "")),
        priority=priority,
    )


def parse_suggestion_set(text: str) -> SuggestionSet:
    """
    Parse model output into a SuggestionSet.

    Individual malformed suggestions are dropped; a response without a JSON
    object, or whose "suggestions" field is not a list, raises ParseError.
    """
    payload = extract_json_object(text)

    raw_suggestions = payload.get("suggestions", [])
    if not isinstance(raw_suggestions, list):
        raise ParseError("AI response 'suggestions' field was not a list")

    suggestions: List[ActivitySuggestion] = []
    for item in raw_suggestions:
        suggestion = _parse_suggestion(item)
        if suggestion is not None:
            suggestions.append(suggestion)

    tips = payload.get("additionalTips") or payload.get("tips") or []
    if not isinstance(tips, list):
        tips = [tips]

    return SuggestionSet(
        suggestions=suggestions,
        explanation=str(payload.get("explanation", "")),
        tips=[str(tip) for tip in tips],
        conversational_reply=str(payload.get("conversationalResponse", "")),
    )
