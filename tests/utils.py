"""
Test utilities for weather resolver tests.
"""

import asyncio
from collections import Counter
from typing import Any, Dict

import httpx

WEATHERAPI_HOST = "api.weatherapi.com"
OPENWEATHERMAP_HOST = "api.openweathermap.org"


class FakeWeatherUpstream:
    """
    Fake upstream weather APIs.

    Attributes:
        weather: city (case-folded) -> (temperature, humidity, description)
        failingHosts: hosts answering with HTTP 503
        delay: seconds to wait before answering
        calls: number of requests per host
    """

    def __init__(self):
        self.weather: Dict[str, tuple[float, int, str]] = {
            "london": (18.5, 70, "Partly cloudy"),
            "reykjavik": (0.0, 33, "Cloudy"),
        }
        self.failingHosts: set[str] = set()
        self.delay = 0.0
        self.calls: Counter[str] = Counter()

    async def handle(self, request: httpx.Request) -> httpx.Response:
        host = request.url.host
        self.calls[host] += 1
        if self.delay:
            await asyncio.sleep(self.delay)

        if host in self.failingHosts:
            return httpx.Response(503, json={"error": "service unavailable"})

        city = str(request.url.params.get("q", "")).casefold()
        if city not in self.weather:
            return httpx.Response(404, json={"error": {"code": 1006, "message": "No matching location found."}})

        temperature, humidity, description = self.weather[city]
        body: Dict[str, Any]
        if host == WEATHERAPI_HOST:
            body = {"current": {"temp_c": temperature, "humidity": humidity, "condition": {"text": description}}}
        else:
            body = {"main": {"temp": temperature, "humidity": humidity}, "weather": [{"description": description}]}
        return httpx.Response(200, json=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)
