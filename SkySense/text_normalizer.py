"""Punctuation and whitespace clean-up for typed or voice-transcribed input."""
import re

_JAPANESE_PUNCTUATION = re.compile(r"[。、！？]")
_WHITESPACE = re.compile(r"\s+")
_EDGE_PUNCTUATION = ".,;:!?'\"()[]。、！？「」"


def clean_text(text: str) -> str:
    """
    Normalize a raw utterance for vocabulary matching.

    Drops Japanese sentence punctuation, collapses runs of whitespace and
    lowercases the result.
    """
    if not text:
        return ""
    text = _JAPANESE_PUNCTUATION.sub("", text.strip())
    return collapse_whitespace(text).lower()


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def strip_edge_punctuation(token: str) -> str:
    """Remove punctuation stuck to either end of a token ("Paris," -> "Paris")."""
    return token.strip().strip(_EDGE_PUNCTUATION).strip()
