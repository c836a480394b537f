"""
Weather lookup against wttr.in.

Fetches the ``format=j1`` JSON document for a city with httpx and
validates the part we print with pydantic.
"""

from __future__ import annotations

from urllib.parse import quote

import httpx
import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from order.config import OrderSettings, get_settings
from order.exceptions import WeatherError

logger = structlog.get_logger(__name__)


class WeatherDescription(BaseModel):
    value: str


class CurrentCondition(BaseModel):
    """The ``current_condition[0]`` entry of a wttr.in j1 payload."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    weather_desc: list[WeatherDescription] = Field(alias="weatherDesc", min_length=1)
    temp_c: str = Field(alias="temp_C")
    temp_f: str = Field(alias="temp_F")
    feels_like_c: str = Field(alias="FeelsLikeC")
    feels_like_f: str = Field(alias="FeelsLikeF")
    windspeed_kmph: str = Field(alias="windspeedKmph")
    windspeed_miles: str = Field(alias="windspeedMiles")
    winddir: str = Field(alias="winddir16Point")
    humidity: str
    pressure: str

    @property
    def description(self) -> str:
        return self.weather_desc[0].value


class WeatherPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    current_condition: list[CurrentCondition] = Field(min_length=1)


def parse_weather(payload: object, city: str | None = None) -> CurrentCondition:
    """Extract current conditions from a decoded j1 payload.

    Raises:
        WeatherError: If the payload does not have the expected shape
    """
    try:
        return WeatherPayload.model_validate(payload).current_condition[0]
    except ValidationError as e:
        logger.debug("weather_payload_invalid", city=city, errors=e.error_count())
        raise WeatherError("Could not parse weather data.", stage="parse", city=city) from e


async def fetch_weather(
    city: str,
    client: httpx.AsyncClient | None = None,
    settings: OrderSettings | None = None,
) -> CurrentCondition:
    """Fetch current conditions for a city.

    Args:
        city: City name, sent URL-encoded
        client: HTTP client to use (a short-lived one is created if None)
        settings: Settings for base URL and timeout

    Raises:
        WeatherError: On HTTP failure (stage "fetch") or bad payload (stage "parse")
    """
    settings = settings or get_settings()
    url = f"{settings.weather_url.rstrip('/')}/{quote(city)}"
    owns_client = client is None
    if client is None:
        client = httpx.AsyncClient(timeout=settings.http_timeout, follow_redirects=True)

    logger.debug("weather_fetch", city=city, url=url)
    try:
        response = await client.get(url, params={"format": "j1"})
        response.raise_for_status()
    except httpx.HTTPError as e:
        logger.debug("weather_fetch_failed", city=city, error=str(e))
        raise WeatherError("Failed to fetch weather data.", stage="fetch", city=city) from e
    finally:
        if owns_client:
            await client.aclose()

    try:
        payload = response.json()
    except ValueError as e:
        raise WeatherError("Could not parse weather data.", stage="parse", city=city) from e
    return parse_weather(payload, city)


def format_weather(city: str, current: CurrentCondition, imperial: bool = False) -> list[str]:
    """Lines printed by ``order weather``."""
    lines = [
        f"Weather for {city}:",
        f"  Condition: {current.description}",
    ]
    if imperial:
        lines += [
            f"  Temperature: {current.temp_f}°F",
            f"  Feels like: {current.feels_like_f}°F",
            f"  Wind: {current.windspeed_miles} mph {current.winddir}",
        ]
    else:
        lines += [
            f"  Temperature: {current.temp_c}°C",
            f"  Feels like: {current.feels_like_c}°C",
            f"  Wind: {current.windspeed_kmph} km/h {current.winddir}",
        ]
    lines += [
        f"  Humidity: {current.humidity}%",
        f"  Pressure: {current.pressure} hPa",
    ]
    return lines
