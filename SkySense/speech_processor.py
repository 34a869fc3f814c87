"""Lightweight intent analysis for Japanese (typed or spoken) chat input."""
from dataclasses import dataclass, field
from typing import List, Optional

from location_extractor import JAPANESE_PLACE_NAMES
from text_normalizer import clean_text

WEATHER_VOCABULARY = (
    # conditions
    ("晴れ", "sunny"),
    ("曇り", "cloudy"),
    ("雨", "rain"),
    ("雪", "snow"),
    ("風", "wind"),
    ("嵐", "storm"),
    ("霧", "fog"),
    # temperature
    ("暑い", "hot"),
    ("寒い", "cold"),
    ("涼しい", "cool"),
    ("暖かい", "warm"),
    ("気温", "temperature"),
    # questions and time
    ("天気", "weather"),
    ("予報", "forecast"),
    ("どう", "how"),
    ("今日", "today"),
    ("明日", "tomorrow"),
    ("週末", "weekend"),
    # activities
    ("散歩", "walk"),
    ("旅行", "travel"),
    ("外出", "go out"),
    ("運動", "exercise"),
    ("買い物", "shopping"),
)

WEATHER_TERMS = {"weather", "forecast", "sunny", "cloudy", "rain", "snow", "hot", "cold"}
ACTIVITY_TERMS = {"walk", "travel", "go out", "exercise", "shopping"}

WEATHER_QUERY = "weather_query"
ACTIVITY_REQUEST = "activity_request"
GENERAL_CHAT = "general_chat"


@dataclass
class JapaneseInputAnalysis:
    original_text: str
    translated_terms: List[str] = field(default_factory=list)
    detected_location: Optional[str] = None
    intent: str = GENERAL_CHAT
    confidence: float = 0.5


def process_japanese_input(text: str) -> JapaneseInputAnalysis:
    """
    Translate known Japanese terms and guess what the user wants.

    Any weather or condition term makes it a weather query (0.8); otherwise
    an activity term makes it an activity request (0.7).
    """
    normalized = clean_text(text)
    analysis = JapaneseInputAnalysis(original_text=text)

    for japanese, english in WEATHER_VOCABULARY:
        if japanese in normalized:
            analysis.translated_terms.append(english)

    # first listed place wins, as in extract_location ("東京都" also contains "京都")
    for japanese, english in JAPANESE_PLACE_NAMES:
        if japanese in normalized:
            analysis.translated_terms.append(english)
            if analysis.detected_location is None:
                analysis.detected_location = english

    terms = set(analysis.translated_terms)
    if terms & WEATHER_TERMS:
        analysis.intent = WEATHER_QUERY
        analysis.confidence = 0.8
    elif terms & ACTIVITY_TERMS:
        analysis.intent = ACTIVITY_REQUEST
        analysis.confidence = 0.7
    return analysis


def generate_context(analysis: JapaneseInputAnalysis) -> str:
    """One-line English summary handed to the language model as context."""
    context = "User spoke in Japanese. "
    if analysis.detected_location:
        context += f"Location mentioned: {analysis.detected_location}. "
    if analysis.translated_terms:
        context += f"Key terms: {', '.join(analysis.translated_terms)}. "
    context += f"Intent: {analysis.intent} (confidence: {round(analysis.confidence * 100)}%)."
    return context


def is_weather_related(text: str) -> bool:
    analysis = process_japanese_input(text)
    return analysis.intent == WEATHER_QUERY or analysis.confidence > 0.6
