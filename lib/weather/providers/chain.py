"""
Provider chain: fixed ordered fallback sequence of weather providers
"""

import logging
from typing import Any, Dict, List, NotRequired, Optional, Sequence, TypedDict

import httpx

import lib.utils as utils
from lib.context import RequestContext

from ..errors import ProviderChainConfigError
from ..models import WeatherResult
from .abstract import WeatherProviderInterface
from .base import DEFAULT_REQUEST_TIMEOUT
from .openweathermap import OpenWeatherMapProvider
from .weatherapi import WeatherApiProvider

logger = logging.getLogger(__name__)


ProviderConfig = TypedDict(
    "ProviderConfig",
    {
        "type": str,  # Provider variant ("weatherapi" or "openweathermap")
        "api-key": str,
        "name": NotRequired[str],  # Name for logs
        "base-url": NotRequired[str],  # Endpoint URL override
        "request-timeout": NotRequired[str | float],  # Per-call timeout (seconds or duration string)
    },
)


class ProviderChain:
    """
    Singly linked chain of weather providers, wired once at construction.

    Every request starts at the first provider. Each provider delegates
    to the next one on transient failure, so the chain order is the
    fallback order. Chain is never modified after construction and can
    be shared between concurrent requests without synchronization.

    Example:
        >>> chain = ProviderChain([
        ...     WeatherApiProvider(apiKey="key1"),
        ...     OpenWeatherMapProvider(apiKey="key2"),
        ... ])
        >>> weather = await chain.getWeather(RequestContext.new(), "Kyiv")
    """

    def __init__(self, providers: Sequence[WeatherProviderInterface]):
        """
        Wire providers into chain.

        Raises:
            ProviderChainConfigError: If no providers given or same provider given twice
        """
        if not providers:
            raise ProviderChainConfigError("At least one weather provider is required")
        # Each provider holds a single next link, reusing instance would loop or cut the chain
        if len({id(provider) for provider in providers}) != len(providers):
            raise ProviderChainConfigError("Same provider instance can't appear in chain twice")

        self._providers: tuple[WeatherProviderInterface, ...] = tuple(providers)
        for current, nextProvider in zip(self._providers, self._providers[1:]):
            current.setNext(nextProvider)
        self._providers[-1].setNext(None)

        logger.info(f"Provider chain: {' -> '.join(self.listNames())}")

    @property
    def head(self) -> WeatherProviderInterface:
        return self._providers[0]

    def listNames(self) -> List[str]:
        return [provider.getName() for provider in self._providers]

    def __len__(self) -> int:
        return len(self._providers)

    async def getWeather(self, ctx: RequestContext, city: str) -> WeatherResult:
        """Resolve city weather starting from first provider"""
        return await self.head.getWeather(ctx, city)


def createProvider(
    config: ProviderConfig, transport: Optional[httpx.AsyncBaseTransport] = None
) -> WeatherProviderInterface:
    """
    Create provider from configuration.

    Raises:
        ProviderChainConfigError: If provider type is unknown or configuration is invalid
    """
    providerType = str(config.get("type", "")).lower()
    apiKey = config.get("api-key")
    if not apiKey:
        raise ProviderChainConfigError(f"Provider '{providerType}' has no api-key")

    try:
        requestTimeout = utils.parseDuration(config.get("request-timeout", DEFAULT_REQUEST_TIMEOUT))
    except ValueError as e:
        raise ProviderChainConfigError(f"Provider '{providerType}' has invalid request-timeout: {e}") from e

    kwargs: Dict[str, Any] = {
        "apiKey": apiKey,
        "baseUrl": config.get("base-url"),
        "name": config.get("name"),
        "requestTimeout": requestTimeout,
        "transport": transport,
    }

    providerClass: type[WeatherApiProvider] | type[OpenWeatherMapProvider]
    match providerType:
        case "weatherapi":
            providerClass = WeatherApiProvider
        case "openweathermap":
            providerClass = OpenWeatherMapProvider
        case _:
            raise ProviderChainConfigError(f"Unknown weather provider type '{config.get('type')}'")

    try:
        return providerClass(**kwargs)
    except ValueError as e:
        raise ProviderChainConfigError(f"Invalid configuration of provider '{providerType}': {e}") from e


def createProviderChain(
    configs: Sequence[ProviderConfig], transport: Optional[httpx.AsyncBaseTransport] = None
) -> ProviderChain:
    """
    Create provider chain from ordered list of provider configurations.

    Raises:
        ProviderChainConfigError: If list is empty or some provider is misconfigured
    """
    return ProviderChain([createProvider(config, transport) for config in configs])
