"""Tests for the weather command module."""

import httpx
import pytest

from order.config import OrderSettings
from order.exceptions import WeatherError
from order.weather import fetch_weather, format_weather, parse_weather


@pytest.fixture
def j1_payload() -> dict:
    """Trimmed wttr.in j1 response."""
    return {
        "current_condition": [
            {
                "FeelsLikeC": "18",
                "FeelsLikeF": "64",
                "humidity": "72",
                "pressure": "1015",
                "temp_C": "19",
                "temp_F": "66",
                "weatherDesc": [{"value": "Partly cloudy"}],
                "winddir16Point": "WSW",
                "windspeedKmph": "13",
                "windspeedMiles": "8",
                "visibility": "10",
            }
        ],
        "nearest_area": [],
    }


@pytest.fixture
def settings() -> OrderSettings:
    return OrderSettings(weather_url="https://weather.test")


def client_for(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestParseWeather:
    """Tests for parse_weather."""

    def test_parses_current_condition(self, j1_payload):
        """Test the fields we print are extracted."""
        current = parse_weather(j1_payload)
        assert current.description == "Partly cloudy"
        assert current.temp_c == "19"
        assert current.windspeed_miles == "8"
        assert current.winddir == "WSW"

    def test_missing_condition(self):
        """Test an empty condition list is a parse error."""
        with pytest.raises(WeatherError) as exc_info:
            parse_weather({"current_condition": []}, city="Nowhere")
        assert exc_info.value.stage == "parse"
        assert exc_info.value.city == "Nowhere"
        assert str(exc_info.value) == "Could not parse weather data."

    def test_not_an_object(self):
        """Test a non-object payload is a parse error."""
        with pytest.raises(WeatherError):
            parse_weather(["nope"])


class TestFetchWeather:
    """Tests for fetch_weather."""

    @pytest.mark.asyncio
    async def test_requests_j1_for_encoded_city(self, j1_payload, settings):
        """Test the URL path and format parameter."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = request.url
            return httpx.Response(200, json=j1_payload)

        async with client_for(handler) as client:
            current = await fetch_weather("New York", client=client, settings=settings)

        assert current.temp_f == "66"
        assert seen["url"].raw_path.startswith(b"/New%20York")
        assert seen["url"].params["format"] == "j1"

    @pytest.mark.asyncio
    async def test_http_error_is_fetch_error(self, settings):
        """Test a server error surfaces as a fetch failure."""

        def handler(request):
            return httpx.Response(503)

        async with client_for(handler) as client:
            with pytest.raises(WeatherError) as exc_info:
                await fetch_weather("Paris", client=client, settings=settings)

        assert exc_info.value.stage == "fetch"
        assert str(exc_info.value) == "Failed to fetch weather data."

    @pytest.mark.asyncio
    async def test_connection_error_is_fetch_error(self, settings):
        """Test a transport failure surfaces as a fetch failure."""

        def handler(request):
            raise httpx.ConnectError("unreachable", request=request)

        async with client_for(handler) as client:
            with pytest.raises(WeatherError) as exc_info:
                await fetch_weather("Paris", client=client, settings=settings)

        assert exc_info.value.stage == "fetch"

    @pytest.mark.asyncio
    async def test_invalid_json_is_parse_error(self, settings):
        """Test a non-JSON body is a parse failure."""

        def handler(request):
            return httpx.Response(200, text="Unknown location")

        async with client_for(handler) as client:
            with pytest.raises(WeatherError) as exc_info:
                await fetch_weather("Atlantis", client=client, settings=settings)

        assert exc_info.value.stage == "parse"


class TestFormatWeather:
    """Tests for format_weather."""

    def test_metric(self, j1_payload):
        """Test metric output lines."""
        lines = format_weather("Los Angeles", parse_weather(j1_payload))
        assert lines == [
            "Weather for Los Angeles:",
            "  Condition: Partly cloudy",
            "  Temperature: 19°C",
            "  Feels like: 18°C",
            "  Wind: 13 km/h WSW",
            "  Humidity: 72%",
            "  Pressure: 1015 hPa",
        ]

    def test_imperial(self, j1_payload):
        """Test imperial output switches units."""
        lines = format_weather("Los Angeles", parse_weather(j1_payload), imperial=True)
        assert "  Temperature: 66°F" in lines
        assert "  Feels like: 64°F" in lines
        assert "  Wind: 8 mph WSW" in lines
