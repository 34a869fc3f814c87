"""Tests for suggestion prompt building and response parsing."""
import json

import pytest

from errors import ParseError, UpstreamErrorKind
from suggestion_provider import (
    build_conversational_prompt,
    build_suggestion_prompt,
    extract_json_object,
    parse_suggestion_set,
)
from weather_data import SuggestionCategory


@pytest.fixture
def model_payload():
    return {
        "suggestions": [
            {
                "category": "outdoor",
                "title": "Picnic in the park",
                "description": "Light clouds, no rain expected.",
                "reasoning": "18°C is ideal for sitting outside.",
                "icon": "🧺",
                "priority": 5,
            },
            {
                "category": "Food",
                "title": "Café terrace lunch",
                "description": "",
                "reasoning": "",
                "icon": "☕",
                "priority": "3",
            },
        ],
        "explanation": "Mild and cloudy.",
        "additionalTips": ["Bring sunglasses"],
        "conversationalResponse": "Great day to be outside!",
    }


def test_parse_plain_json(model_payload):
    result = parse_suggestion_set(json.dumps(model_payload))

    assert len(result.suggestions) == 2
    assert result.suggestions[0].category is SuggestionCategory.OUTDOOR
    assert result.suggestions[0].priority == 5
    assert result.suggestions[1].category is SuggestionCategory.FOOD
    assert result.suggestions[1].priority == 3
    assert result.explanation == "Mild and cloudy."
    assert result.tips == ["Bring sunglasses"]
    assert result.conversational_reply == "Great day to be outside!"


def test_parse_fenced_json_with_prose(model_payload):
    """Test JSON wrapped in a markdown fence and surrounded by prose."""
    text = "Here you go!\n```json\n" + json.dumps(model_payload, ensure_ascii=False) + "\n```\nEnjoy."

    result = parse_suggestion_set(text)

    assert [s.title for s in result.suggestions] == ["Picnic in the park", "Café terrace lunch"]


def test_parse_drops_unusable_suggestions(model_payload):
    """Test that unknown categories and untitled entries are dropped, not fatal."""
    model_payload["suggestions"].append({"category": "nightlife", "title": "Club", "priority": 2})
    model_payload["suggestions"].append({"category": "indoor", "title": "", "priority": 2})
    model_payload["suggestions"].append("not an object")

    result = parse_suggestion_set(json.dumps(model_payload))

    assert len(result.suggestions) == 2


def test_parse_bad_priority_defaults(model_payload):
    model_payload["suggestions"][0]["priority"] = "very high"

    result = parse_suggestion_set(json.dumps(model_payload))

    assert result.suggestions[0].priority == 3


@pytest.mark.parametrize(
    "text",
    [
        "",
        "Sorry, I cannot help with that.",
        '{"suggestions": [ {"category": "outdoor", ',
        "[1, 2, 3]",
        '{"suggestions": "none"}',
    ],
)
def test_parse_errors(text):
    """Test that unusable model output raises ParseError instead of returning an empty set."""
    with pytest.raises(ParseError) as exc_info:
        parse_suggestion_set(text)

    assert exc_info.value.kind is UpstreamErrorKind.MALFORMED_RESPONSE


def test_extract_json_object_ignores_trailing_text():
    assert extract_json_object('Result: {"a": 1} -- end') == {"a": 1}


def test_suggestion_prompt_is_grounded(sample_result):
    prompt = build_suggestion_prompt(sample_result, "Can I go cycling?", "en")

    assert "Paris, FR" in prompt
    assert "18°C" in prompt
    assert "2024-05-01: 12-19°C" in prompt
    assert "Can I go cycling?" in prompt
    assert '"conversationalResponse"' in prompt
    assert "Answer in English." in prompt


def test_suggestion_prompt_japanese(sample_result):
    prompt = build_suggestion_prompt(sample_result, "散歩できますか", "ja")

    assert "日本語で回答してください" in prompt


def test_conversational_prompt_includes_context():
    prompt = build_conversational_prompt("こんにちは", context="User spoke in Japanese.", language="ja")

    assert "Context: User spoke in Japanese." in prompt
    assert "こんにちは" in prompt
