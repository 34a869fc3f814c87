"""Google Gemini (Generative Language REST API) suggestion provider."""
import logging
import requests
from typing import Any, Dict, Optional
from errors import (
    AI_ERROR_MESSAGES,
    ConfigurationError,
    ParseError,
    UpstreamError,
    UpstreamErrorKind,
    kind_for_status,
)
from suggestion_provider import (
    SuggestionProviderBase,
    build_conversational_prompt,
    build_suggestion_prompt,
    parse_suggestion_set,
)
from weather_data import SuggestionSet, WeatherResult


class GeminiProvider(SuggestionProviderBase):
    """
    Suggestion provider using the Gemini generateContent endpoint.

    https://ai.google.dev/api/generate-content
    """

    BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.0-flash",
        timeout: int = 30,
        temperature: float = 0.7
    ):
        """
        Initialize Gemini provider.

        Args:
            api_key: Gemini API key (may be empty; see is_configured)
            model: Model name, e.g. "gemini-2.0-flash"
            timeout: HTTP request timeout in seconds (generous for cold starts)
            temperature: Sampling temperature
        """
        self.api_key = api_key or ""
        self.model = model
        self.timeout = timeout
        self.temperature = temperature

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def generate(self, weather: WeatherResult, user_query: str, language: str = "en") -> SuggestionSet:
        prompt = build_suggestion_prompt(weather, user_query, language)
        text = self._generate_text(prompt, json_output=True)
        suggestions = parse_suggestion_set(text)
        logging.info(f"Gemini returned {len(suggestions.suggestions)} suggestions for {weather.location.name}")
        return suggestions

    def generate_conversational(self, text: str, context: Optional[str] = None, language: str = "en") -> str:
        prompt = build_conversational_prompt(text, context, language)
        return self._generate_text(prompt).strip()

    def _generate_text(self, prompt: str, json_output: bool = False) -> str:
        if not self.is_configured():
            raise ConfigurationError("AI service not configured: GEMINI_API_KEY is missing")

        url = f"{self.BASE_URL}/models/{self.model}:generateContent"
        generation_config: Dict[str, Any] = {"temperature": self.temperature}
        if json_output:
            generation_config["responseMimeType"] = "application/json"
        body = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": generation_config,
        }

        try:
            logging.info(f"Making Gemini API request: model={self.model}")
            logging.debug(f"Prompt (truncated): {prompt[:300]}...")

            response = requests.post(
                url,
                json=body,
                headers={"x-goog-api-key": self.api_key},
                timeout=self.timeout,
            )

            logging.info(f"Gemini response status: {response.status_code}")
            if not response.ok:
                self._handle_error_response(response)

            data = response.json()
        except requests.exceptions.Timeout as e:
            logging.error(f"Gemini request timed out after {self.timeout}s: {e}")
            raise UpstreamError(UpstreamErrorKind.TIMEOUT, AI_ERROR_MESSAGES[UpstreamErrorKind.TIMEOUT])
        except requests.exceptions.JSONDecodeError as e:
            logging.error(f"Gemini returned non-JSON body: {e}")
            raise ParseError()
        except requests.exceptions.RequestException as e:
            logging.error(f"Network error during Gemini request: {e}")
            raise UpstreamError(UpstreamErrorKind.UNKNOWN, AI_ERROR_MESSAGES[UpstreamErrorKind.UNKNOWN])
        except ValueError as e:
            logging.error(f"Gemini returned non-JSON body: {e}")
            raise ParseError()

        return self._extract_text(data)

    def _handle_error_response(self, response: requests.Response) -> None:
        status = response.status_code
        kind = kind_for_status(status)
        try:
            error = response.json().get("error", {})
            logging.error(f"Gemini API error {status}: {error.get('message', 'Unknown error')}")
            # An invalid key comes back as 400 with reason API_KEY_INVALID
            if "API_KEY_INVALID" in str(error):
                kind = UpstreamErrorKind.INVALID_CREDENTIALS
        except (ValueError, AttributeError):
            logging.error(f"Non-JSON Gemini error response: HTTP {status}, body: {response.text[:500]}")

        raise UpstreamError(kind, AI_ERROR_MESSAGES[kind], status_code=status)

    @staticmethod
    def _extract_text(data: Dict[str, Any]) -> str:
        """Concatenate the text parts of the first candidate."""
        try:
            candidates = data.get("candidates") or []
            if not candidates:
                block_reason = (data.get("promptFeedback") or {}).get("blockReason")
                raise ParseError(f"AI returned no candidates (block reason: {block_reason or 'none'})")
            parts = candidates[0].get("content", {}).get("parts", [])
            text = "".join(part.get("text", "") for part in parts)
        except (AttributeError, TypeError) as e:
            raise ParseError(f"Unexpected Gemini response shape: {e}")

        if not text.strip():
            raise ParseError("AI returned an empty response")
        return text
