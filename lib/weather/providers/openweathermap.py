"""
OpenWeatherMap provider
"""

from typing import Any, Dict

from ..models import OpenWeatherMapResponse, WeatherResult
from .base import BaseHttpWeatherProvider


class OpenWeatherMapProvider(BaseHttpWeatherProvider):
    """
    Provider for OpenWeatherMap current weather API

    Uses: https://api.openweathermap.org/data/2.5/weather
    """

    DEFAULT_NAME = "OpenWeatherMap"
    DEFAULT_BASE_URL = "https://api.openweathermap.org/data/2.5/weather"

    def _buildParams(self, city: str) -> Dict[str, Any]:
        return {"q": city, "appid": self.apiKey, "units": "metric"}

    def _parseResponse(self, data: OpenWeatherMapResponse) -> WeatherResult:
        main = data["main"]
        weatherList = data.get("weather") or []
        description = weatherList[0].get("description", "") if weatherList else ""

        return WeatherResult(
            temperature=float(main["temp"]),
            humidity=int(main["humidity"]),
            description=str(description),
        )
