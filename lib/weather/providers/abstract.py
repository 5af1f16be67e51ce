"""
Abstract weather provider interface

This module defines the abstract base class all weather providers
must implement. Providers are chainable: a provider which can't answer
for transient reason delegates the request to the next one.
"""

from abc import ABC, abstractmethod
from typing import Optional

from lib.context import RequestContext

from ..errors import InternalServerError, UpstreamUnavailableError
from ..models import WeatherResult


class WeatherProviderInterface(ABC):
    """
    Abstract base class for chained weather providers.

    Implementations must implement getWeather() and getName(). Transient
    upstream failures should be passed to tryNext(), while authoritative
    answers (like "city not found") should be raised directly.
    """

    _next: Optional["WeatherProviderInterface"] = None

    @abstractmethod
    async def getWeather(self, ctx: RequestContext, city: str) -> WeatherResult:
        """
        Get current weather for city.

        Args:
            ctx: Request context
            city: City name

        Returns:
            WeatherResult from this provider or one of the next ones

        Raises:
            CityNotFoundError: If provider reports unknown city
            InternalServerError: If no provider in chain could answer
            RequestCancelledError: If request deadline passed
        """
        pass

    @abstractmethod
    def getName(self) -> str:
        """Get provider name (used in logs)"""
        pass

    def setNext(self, provider: Optional["WeatherProviderInterface"]) -> None:
        """Set provider to delegate to on transient failure"""
        self._next = provider

    def getNext(self) -> Optional["WeatherProviderInterface"]:
        return self._next

    async def tryNext(self, ctx: RequestContext, city: str, error: UpstreamUnavailableError) -> WeatherResult:
        """
        Log failure and delegate request to the next provider.

        Raises:
            InternalServerError: If this provider is the last one in chain
        """
        log = ctx.logger(__name__)
        log.error(f"{self.getName()}: Provider failed: {error.reason}")

        nextProvider = self.getNext()
        if nextProvider is not None:
            log.info(f"{self.getName()}: falling back to {nextProvider.getName()}")
            return await nextProvider.getWeather(ctx, city)

        log.error(f"{self.getName()}: no next provider available")
        raise InternalServerError()
