"""
Tests for HTTP weather providers using httpx.MockTransport
"""

import asyncio
import time
from typing import Any, Callable, Dict, List

import httpx
import pytest

from lib.context import RequestCancelledError, RequestContext
from lib.weather.errors import CityNotFoundError, InternalServerError
from lib.weather.models import WeatherResult

from .chain import ProviderChain
from .openweathermap import OpenWeatherMapProvider
from .weatherapi import WeatherApiProvider

WEATHERAPI_BODY: Dict[str, Any] = {
    "location": {"name": "London"},
    "current": {"temp_c": 18.5, "humidity": 70, "condition": {"text": "Partly cloudy", "code": 1003}},
}
OPENWEATHERMAP_BODY: Dict[str, Any] = {
    "name": "London",
    "main": {"temp": 17.2, "feels_like": 16.8, "humidity": 72},
    "weather": [{"id": 803, "main": "Clouds", "description": "broken clouds", "icon": "04d"}],
}


class RecordingTransport(httpx.MockTransport):
    """MockTransport remembering all requests"""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: List[httpx.Request] = []

        def recordingHandler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(recordingHandler)


def respond(status: int, body: Any = None, text: str | None = None) -> Callable[[httpx.Request], httpx.Response]:
    def handler(request: httpx.Request) -> httpx.Response:
        if text is not None:
            return httpx.Response(status, text=text)
        return httpx.Response(status, json=body)

    return handler


def fail(error: type[httpx.RequestError]) -> Callable[[httpx.Request], httpx.Response]:
    def handler(request: httpx.Request) -> httpx.Response:
        raise error("simulated failure", request=request)

    return handler


@pytest.fixture
def ctx() -> RequestContext:
    return RequestContext.new()


class TestWeatherApiProvider:

    @pytest.mark.asyncio
    async def test_success(self, ctx):
        transport = RecordingTransport(respond(200, WEATHERAPI_BODY))
        provider = WeatherApiProvider(apiKey="wa-key", transport=transport)

        result = await provider.getWeather(ctx, "London")

        assert result == WeatherResult(temperature=18.5, humidity=70, description="Partly cloudy")
        request = transport.requests[0]
        assert request.method == "GET"
        assert request.url.host == "api.weatherapi.com"
        assert request.url.path == "/v1/current.json"
        assert dict(request.url.params) == {"key": "wa-key", "q": "London", "aqi": "no"}

    @pytest.mark.asyncio
    async def test_not_found_404(self, ctx):
        provider = WeatherApiProvider(apiKey="wa-key", transport=RecordingTransport(respond(404, {})))

        with pytest.raises(CityNotFoundError):
            await provider.getWeather(ctx, "Atlantis")

    @pytest.mark.asyncio
    async def test_not_found_error_code(self, ctx):
        body = {"error": {"code": 1006, "message": "No matching location found."}}
        provider = WeatherApiProvider(apiKey="wa-key", transport=RecordingTransport(respond(400, body)))

        with pytest.raises(CityNotFoundError):
            await provider.getWeather(ctx, "Atlantis")

    @pytest.mark.asyncio
    async def test_other_bad_request_is_transient(self, ctx):
        body = {"error": {"code": 9999, "message": "Internal application error."}}
        provider = WeatherApiProvider(apiKey="wa-key", transport=RecordingTransport(respond(400, body)))

        with pytest.raises(InternalServerError):
            await provider.getWeather(ctx, "London")

    @pytest.mark.asyncio
    async def test_custom_base_url_and_name(self, ctx):
        transport = RecordingTransport(respond(200, WEATHERAPI_BODY))
        provider = WeatherApiProvider(
            apiKey="wa-key", baseUrl="http://weather.local/current", name="Primary", transport=transport
        )

        await provider.getWeather(ctx, "London")

        assert provider.getName() == "Primary"
        assert transport.requests[0].url.host == "weather.local"

    def test_invalid_timeout(self):
        with pytest.raises(ValueError):
            WeatherApiProvider(apiKey="wa-key", requestTimeout=0)


class TestOpenWeatherMapProvider:

    @pytest.mark.asyncio
    async def test_success(self, ctx):
        transport = RecordingTransport(respond(200, OPENWEATHERMAP_BODY))
        provider = OpenWeatherMapProvider(apiKey="owm-key", transport=transport)

        result = await provider.getWeather(ctx, "London")

        assert result == WeatherResult(temperature=17.2, humidity=72, description="broken clouds")
        request = transport.requests[0]
        assert request.url.host == "api.openweathermap.org"
        assert dict(request.url.params) == {"q": "London", "appid": "owm-key", "units": "metric"}

    @pytest.mark.asyncio
    async def test_empty_conditions(self, ctx):
        body = {"main": {"temp": 0, "humidity": 33}, "weather": []}
        provider = OpenWeatherMapProvider(apiKey="owm-key", transport=RecordingTransport(respond(200, body)))

        result = await provider.getWeather(ctx, "Reykjavik")

        assert result == WeatherResult(temperature=0.0, humidity=33, description="")

    @pytest.mark.asyncio
    async def test_not_found(self, ctx):
        body = {"cod": "404", "message": "city not found"}
        provider = OpenWeatherMapProvider(apiKey="owm-key", transport=RecordingTransport(respond(404, body)))

        with pytest.raises(CityNotFoundError):
            await provider.getWeather(ctx, "Atlantis")


class TestProviderFailures:
    """Transient failures fall through to the next provider"""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "handler",
        [
            respond(500, {"error": "boom"}),
            respond(503, {}),
            respond(401, {"error": "invalid key"}),
            respond(429, {"error": "too many requests"}),
            respond(200, text="<html>not json</html>"),
            respond(200, {"current": {"humidity": 70}}),
            respond(200, {"current": {"temp_c": "hot", "humidity": 70, "condition": {"text": "Sunny"}}}),
            respond(200, [1, 2, 3]),
            fail(httpx.ConnectError),
            fail(httpx.ReadTimeout),
        ],
    )
    async def test_transient_failure_falls_through(self, ctx, handler):
        primary = WeatherApiProvider(apiKey="wa-key", transport=RecordingTransport(handler))
        fallbackTransport = RecordingTransport(respond(200, OPENWEATHERMAP_BODY))
        fallback = OpenWeatherMapProvider(apiKey="owm-key", transport=fallbackTransport)
        ProviderChain([primary, fallback])

        result = await primary.getWeather(ctx, "London")

        assert result.description == "broken clouds"
        assert len(fallbackTransport.requests) == 1

    @pytest.mark.asyncio
    async def test_tail_failure_is_internal_error(self, ctx):
        provider = OpenWeatherMapProvider(apiKey="owm-key", transport=RecordingTransport(fail(httpx.ConnectError)))

        with pytest.raises(InternalServerError) as excInfo:
            await provider.getWeather(ctx, "London")

        assert excInfo.value.toDict() == {"code": 500, "message": "Internal server error"}

    @pytest.mark.asyncio
    async def test_not_found_does_not_fall_through(self, ctx):
        primary = WeatherApiProvider(apiKey="wa-key", transport=RecordingTransport(respond(404, {})))
        fallbackTransport = RecordingTransport(respond(200, OPENWEATHERMAP_BODY))
        ProviderChain([primary, OpenWeatherMapProvider(apiKey="owm-key", transport=fallbackTransport)])

        with pytest.raises(CityNotFoundError):
            await primary.getWeather(ctx, "Atlantis")

        assert fallbackTransport.requests == []


class TestProviderDeadline:

    @pytest.mark.asyncio
    async def test_expired_context_is_not_sent_upstream(self):
        transport = RecordingTransport(respond(200, WEATHERAPI_BODY))
        fallbackTransport = RecordingTransport(respond(200, OPENWEATHERMAP_BODY))
        primary = WeatherApiProvider(apiKey="wa-key", transport=transport)
        ProviderChain([primary, OpenWeatherMapProvider(apiKey="owm-key", transport=fallbackTransport)])
        ctx = RequestContext.new(timeout=0)

        with pytest.raises(RequestCancelledError):
            await primary.getWeather(ctx, "London")

        assert transport.requests == []
        assert fallbackTransport.requests == []

    @pytest.mark.asyncio
    async def test_timeout_bounded_by_deadline(self):
        transport = RecordingTransport(respond(200, WEATHERAPI_BODY))
        provider = WeatherApiProvider(apiKey="wa-key", requestTimeout=5.0, transport=transport)

        await provider.getWeather(RequestContext.new(timeout=1.0), "London")

        timeouts = transport.requests[0].extensions["timeout"]
        assert 0 < timeouts["read"] <= 1.0

    @pytest.mark.asyncio
    async def test_default_timeout(self, ctx):
        transport = RecordingTransport(respond(200, WEATHERAPI_BODY))
        provider = WeatherApiProvider(apiKey="wa-key", transport=transport)

        await provider.getWeather(ctx, "London")

        assert transport.requests[0].extensions["timeout"]["read"] == 5.0



def slow(delay: float, body: Any) -> httpx.MockTransport:
    """Transport answering after given delay, httpx per-step timeouts never fire on it"""

    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(delay)
        return httpx.Response(200, json=body)

    return httpx.MockTransport(handler)


class TestProviderTotalTimeout:

    @pytest.mark.asyncio
    async def test_slow_upstream_falls_through(self, ctx):
        primary = WeatherApiProvider(apiKey="wa-key", requestTimeout=0.2, transport=slow(2.0, WEATHERAPI_BODY))
        fallbackTransport = RecordingTransport(respond(200, OPENWEATHERMAP_BODY))
        chain = ProviderChain([primary, OpenWeatherMapProvider(apiKey="owm-key", transport=fallbackTransport)])

        start = time.monotonic()
        result = await chain.getWeather(ctx, "London")

        assert time.monotonic() - start < 1.0
        assert result.description == "broken clouds"
        assert len(fallbackTransport.requests) == 1

    @pytest.mark.asyncio
    async def test_slow_upstream_cancelled_at_deadline(self):
        primary = WeatherApiProvider(apiKey="wa-key", requestTimeout=5.0, transport=slow(2.0, WEATHERAPI_BODY))
        fallbackTransport = RecordingTransport(respond(200, OPENWEATHERMAP_BODY))
        ProviderChain([primary, OpenWeatherMapProvider(apiKey="owm-key", transport=fallbackTransport)])

        start = time.monotonic()
        with pytest.raises(RequestCancelledError):
            await primary.getWeather(RequestContext.new(timeout=0.2), "London")

        assert time.monotonic() - start < 1.0
        assert fallbackTransport.requests == []
