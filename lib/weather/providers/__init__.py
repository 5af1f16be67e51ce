"""
Weather providers

Chainable upstream weather sources. Each provider wraps one external API
and falls back to the next provider in chain on transient failures.
"""

from .abstract import WeatherProviderInterface
from .base import BaseHttpWeatherProvider
from .chain import ProviderChain, ProviderConfig, createProvider, createProviderChain
from .openweathermap import OpenWeatherMapProvider
from .weatherapi import WeatherApiProvider

__all__ = [
    "WeatherProviderInterface",
    "BaseHttpWeatherProvider",
    "WeatherApiProvider",
    "OpenWeatherMapProvider",
    "ProviderChain",
    "ProviderConfig",
    "createProvider",
    "createProviderChain",
]
