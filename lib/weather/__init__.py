"""
Weather Providers Library

This module provides async clients for upstream weather APIs chained into
an ordered fallback sequence.

Example usage:
    from lib.context import RequestContext
    from lib.weather.providers import OpenWeatherMapProvider, ProviderChain, WeatherApiProvider

    chain = ProviderChain([
        WeatherApiProvider(apiKey="your_weatherapi_key"),
        OpenWeatherMapProvider(apiKey="your_openweathermap_key"),
    ])

    result = await chain.getWeather(RequestContext.new(timeout=10), "Kyiv")
    print(f"Temperature: {result.temperature}°C, {result.description}")
"""

from .errors import (
    AppError,
    CityNotFoundError,
    InternalServerError,
    InvalidRequestError,
    ProviderChainConfigError,
    UpstreamUnavailableError,
)
from .models import WeatherResult

__all__ = [
    "WeatherResult",
    "AppError",
    "CityNotFoundError",
    "InvalidRequestError",
    "InternalServerError",
    "UpstreamUnavailableError",
    "ProviderChainConfigError",
]
