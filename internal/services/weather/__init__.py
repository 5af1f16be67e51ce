"""
Weather service package

Cache-aside resolution of current weather over the upstream provider chain.
"""

from .service import WeatherService

__all__ = ["WeatherService"]
