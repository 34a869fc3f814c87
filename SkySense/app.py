"""FastAPI application exposing the SkySense weather and chat API."""
import logging
import resource
import sys
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import VERSION, Settings
from errors import ConfigurationError, InvalidPayloadError, SkySenseError, ValidationError
from weather_service import WeatherService

DEV_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000", "http://localhost:5173"]
PRODUCTION_ORIGIN_REGEX = r"https://.*\.vercel\.app"


class ChatRequest(BaseModel):
    message: Optional[str] = None
    weatherData: Optional[Dict[str, Any]] = Field(default=None, description="WeatherResult as returned by /api/weather")
    language: str = "en"


class WeatherChatRequest(BaseModel):
    location: Optional[str] = None
    lat: Optional[Union[float, str]] = None
    lon: Optional[Union[float, str]] = None
    message: Optional[str] = None
    language: str = "en"


def error_response(status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error, "message": message})


def _handle_service_error(exc: SkySenseError, titles: Dict[type, str], default_title: str) -> JSONResponse:
    """Translate a service error into the {error, message} body with the right status."""
    status_code = 400 if isinstance(exc, ValidationError) else 500
    for exc_type, title in titles.items():
        if isinstance(exc, exc_type):
            return error_response(status_code, title, str(exc))
    return error_response(status_code, default_title, str(exc))


def _memory_mb() -> float:
    # ru_maxrss is kilobytes on Linux, bytes on macOS
    rss = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
    divisor = 1024 * 1024 if sys.platform == "darwin" else 1024
    return round(rss / divisor, 1)


def _human_uptime(seconds: float) -> str:
    seconds = int(seconds)
    return f"{seconds // 3600}h {(seconds % 3600) // 60}m {seconds % 60}s"


def create_app(service: WeatherService, settings: Settings) -> FastAPI:
    """Build the app around an already constructed service."""
    started_at = time.monotonic()
    app = FastAPI(title="SkySense API", version=VERSION)

    if settings.is_production:
        origins = [settings.frontend_url] if settings.frontend_url else []
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_origin_regex=PRODUCTION_ORIGIN_REGEX,
            allow_credentials=True,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
        )
    else:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=DEV_ORIGINS,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

        @app.middleware("http")
        async def log_requests(request: Request, call_next):
            logging.info(f"{request.method} {request.url.path}")
            return await call_next(request)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return error_response(400, "Invalid request", str(exc.errors()))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return error_response(404, "Not found", f"Route {request.url.path} not found")
        return error_response(exc.status_code, str(exc.detail), str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logging.exception(f"Unhandled error: {exc}")
        return error_response(500, "Internal server error", "Something went wrong on the server")

    @app.get("/api/health")
    def health():
        weather_ok = service.weather_provider.is_configured()
        ai_ok = service.suggestion_provider.is_configured()
        uptime = time.monotonic() - started_at

        body = {
            "status": "healthy" if weather_ok and ai_ok else "degraded",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "uptime": uptime,
            "environment": settings.environment,
            "version": VERSION,
            "services": {
                "weather": {
                    "status": "operational" if weather_ok else "misconfigured",
                    "configured": weather_ok,
                    "message": "OpenWeather API ready" if weather_ok else "Missing OPENWEATHER_API_KEY",
                },
                "ai": {
                    "status": "operational" if ai_ok else "misconfigured",
                    "configured": ai_ok,
                    "message": "Gemini AI API ready" if ai_ok else "Missing GEMINI_API_KEY",
                },
            },
            "system": {
                "memory": {"maxRssMb": _memory_mb()},
                "uptime": {"seconds": int(uptime), "human": _human_uptime(uptime)},
            },
        }
        return JSONResponse(status_code=200 if weather_ok and ai_ok else 503, content=body)

    @app.get("/api/weather")
    def weather(location: Optional[str] = None, lat: Optional[str] = None, lon: Optional[str] = None):
        try:
            result = service.get_weather(location=location, lat=lat, lon=lon)
        except SkySenseError as exc:
            logging.error(f"Weather API error: {exc}")
            return _handle_service_error(
                exc,
                {ConfigurationError: "Weather service not configured", ValidationError: "Missing parameters"},
                "Weather fetch failed",
            )
        return {"success": True, "data": result.to_dict()}

    @app.post("/api/chat")
    def chat(request: ChatRequest):
        try:
            suggestions = service.chat(request.message, request.weatherData, request.language)
        except SkySenseError as exc:
            logging.error(f"Chat API error: {exc}")
            return _handle_service_error(
                exc,
                {
                    ConfigurationError: "AI service not configured",
                    InvalidPayloadError: "Invalid weatherData",
                    ValidationError: "Missing message",
                },
                "AI response failed",
            )
        return {"success": True, "data": suggestions.to_dict()}

    @app.post("/api/weather-chat")
    def weather_chat(request: WeatherChatRequest):
        try:
            result = service.weather_chat(
                message=request.message,
                language=request.language,
                location=request.location,
                lat=request.lat,
                lon=request.lon,
            )
        except SkySenseError as exc:
            logging.error(f"Weather-chat API error: {exc}")
            return _handle_service_error(
                exc,
                {ConfigurationError: "Services not configured", ValidationError: "Missing location"},
                "Request failed",
            )

        data: Dict[str, Any] = {
            "weather": result.weather.to_dict(),
            "ai": result.ai.to_dict() if result.ai else None,
        }
        if result.ai_error is not None:
            data["aiError"] = {"error": "AI response failed", "message": str(result.ai_error)}
        return {"success": True, "data": data}

    return app
