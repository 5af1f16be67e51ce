"""
Base class for HTTP+JSON weather providers
"""

import asyncio
from abc import abstractmethod
from typing import Any, Dict, Optional

import httpx

from lib.context import RequestCancelledError, RequestContext

from ..errors import CityNotFoundError, UpstreamUnavailableError
from ..models import WeatherResult
from .abstract import WeatherProviderInterface


DEFAULT_REQUEST_TIMEOUT = 5.0


class BaseHttpWeatherProvider(WeatherProviderInterface):
    """
    Weather provider doing single GET request and decoding JSON body.

    Creates a new HTTP session for each request to support proper concurrent requests.
    Subclasses define request parameters and response parsing.
    """

    DEFAULT_NAME: str = "HttpWeatherProvider"
    DEFAULT_BASE_URL: str = ""

    def __init__(
        self,
        apiKey: str,
        baseUrl: Optional[str] = None,
        name: Optional[str] = None,
        requestTimeout: float = DEFAULT_REQUEST_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize provider

        Args:
            apiKey: Upstream API key
            baseUrl: Endpoint URL (DEFAULT_BASE_URL if None)
            name: Provider name for logs (DEFAULT_NAME if None)
            requestTimeout: Per-call timeout in seconds, shortened to request deadline
            transport: Optional httpx transport (for tests and custom networking)
        """
        if requestTimeout <= 0:
            raise ValueError("requestTimeout must be positive")

        self.apiKey = apiKey
        self.baseUrl = baseUrl or self.DEFAULT_BASE_URL
        self.requestTimeout = requestTimeout
        self.transport = transport
        self._name = name or self.DEFAULT_NAME
        self._next = None

    def getName(self) -> str:
        return self._name

    async def getWeather(self, ctx: RequestContext, city: str) -> WeatherResult:
        try:
            return await self._fetchWeather(ctx, city)
        except UpstreamUnavailableError as e:
            return await self.tryNext(ctx, city, e)

    @abstractmethod
    def _buildParams(self, city: str) -> Dict[str, Any]:
        """Build query parameters for upstream request"""
        pass

    @abstractmethod
    def _parseResponse(self, data: Any) -> WeatherResult:
        """
        Convert decoded JSON body to WeatherResult

        Raises:
            AttributeError, KeyError, IndexError, TypeError, ValueError: If body has unexpected format
        """
        pass

    def _checkResponse(self, response: httpx.Response) -> None:
        """
        Check upstream response status

        Raises:
            CityNotFoundError: On 404
            UpstreamUnavailableError: On any other non-200 status
        """
        match response.status_code:
            case 200:
                return
            case 404:
                raise CityNotFoundError()
            case 401:
                raise UpstreamUnavailableError(self.getName(), "invalid API key")
            case 429:
                raise UpstreamUnavailableError(self.getName(), "rate limit exceeded")
            case _:
                raise UpstreamUnavailableError(self.getName(), f"bad API response: {response.status_code}")

    async def _fetchWeather(self, ctx: RequestContext, city: str) -> WeatherResult:
        """Make single upstream request, no fallback"""
        log = ctx.logger(__name__)
        if ctx.isExpired():
            raise RequestCancelledError(ctx.traceId)

        timeout = ctx.boundTimeout(self.requestTimeout)
        deadlineBound = timeout < self.requestTimeout
        params = self._buildParams(city)
        log.debug(f"{self.getName()}: requesting {self.baseUrl} for city {city!r}, timeout {timeout:.3f}s")

        # httpx timeout limits each connect/read/write step, asyncio.timeout bounds the whole call
        try:
            async with asyncio.timeout(timeout):
                async with httpx.AsyncClient(timeout=timeout, transport=self.transport) as session:
                    response = await session.get(self.baseUrl, params=params)
        except (httpx.TimeoutException, TimeoutError) as e:
            if deadlineBound or ctx.isExpired():
                raise RequestCancelledError(ctx.traceId) from e
            raise UpstreamUnavailableError(self.getName(), "request timeout", e) from e
        except httpx.RequestError as e:
            raise UpstreamUnavailableError(self.getName(), f"network error: {e}", e) from e

        self._checkResponse(response)

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamUnavailableError(self.getName(), f"failed to parse JSON response: {e}", e) from e

        try:
            result = self._parseResponse(data)
        except (AttributeError, KeyError, IndexError, TypeError, ValueError) as e:
            raise UpstreamUnavailableError(self.getName(), f"failed to decode response: {e!r}", e) from e

        log.debug(f"{self.getName()}: got {result} for city {city!r}")
        return result
