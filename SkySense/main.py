"""SkySense API server entry point."""
import argparse
import logging
import sys
from dataclasses import replace
from typing import Optional

import uvicorn

from app import create_app
from config import Settings, load_config
from gemini_provider import GeminiProvider
from openweather_provider import OpenWeatherProvider
from weather_service import WeatherService


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser("SkySense weather chat API")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=None, help="Defaults to $PORT or 3001")
    parser.add_argument("--log-file", default=None)
    parser.add_argument("--timeout", type=int, default=None, help="Weather HTTP timeout in seconds")
    parser.add_argument("--ai-timeout", type=int, default=None, help="Gemini HTTP timeout in seconds")
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args(argv)


def setup_logging(log_file: Optional[str], verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.INFO
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    overrides = {}
    if args.port is not None:
        overrides["port"] = args.port
    if args.timeout is not None:
        overrides["weather_timeout"] = args.timeout
    if args.ai_timeout is not None:
        overrides["ai_timeout"] = args.ai_timeout
    return replace(settings, **overrides)


def build_weather_service(settings: Settings) -> WeatherService:
    weather_provider = OpenWeatherProvider(
        api_key=settings.openweather_api_key,
        units=settings.units,
        lang=settings.lang,
        timeout=settings.weather_timeout,
    )
    suggestion_provider = GeminiProvider(
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
        timeout=settings.ai_timeout,
    )
    service = WeatherService(weather_provider, suggestion_provider)
    weather_state = "configured" if weather_provider.is_configured() else "missing API key"
    ai_state = "configured" if suggestion_provider.is_configured() else "missing API key"
    logging.info(f"Services ready: weather={weather_state} ai={ai_state}")
    return service


def main(argv=None) -> None:
    args = parse_args(argv)
    setup_logging(args.log_file, args.verbose)
    settings = apply_overrides(load_config(), args)

    app = create_app(build_weather_service(settings), settings)

    logging.info(f"Server running on {args.host}:{settings.port} (environment: {settings.environment})")
    uvicorn.run(app, host=args.host, port=settings.port, log_level="debug" if args.verbose else "info")


if __name__ == "__main__":
    main()
