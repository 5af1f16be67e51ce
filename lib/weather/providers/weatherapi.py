"""
weatherapi.com provider
"""

from typing import Any, Dict

import httpx

from ..errors import CityNotFoundError
from ..models import WeatherApiResponse, WeatherResult
from .base import BaseHttpWeatherProvider

# https://www.weatherapi.com/docs/#intro-error-codes
NO_LOCATION_FOUND_ERROR_CODE = 1006


class WeatherApiProvider(BaseHttpWeatherProvider):
    """
    Provider for https://www.weatherapi.com realtime API

    Example:
        >>> provider = WeatherApiProvider(apiKey="your_key")
        >>> weather = await provider.getWeather(RequestContext.new(), "Kyiv")
    """

    DEFAULT_NAME = "WeatherAPI"
    DEFAULT_BASE_URL = "https://api.weatherapi.com/v1/current.json"

    def _buildParams(self, city: str) -> Dict[str, Any]:
        return {"key": self.apiKey, "q": city, "aqi": "no"}

    def _checkResponse(self, response: httpx.Response) -> None:
        # weatherapi.com reports unknown location as 400 with own error code
        if response.status_code == 400:
            try:
                errorCode = response.json().get("error", {}).get("code")
            except (ValueError, AttributeError):
                errorCode = None
            if errorCode == NO_LOCATION_FOUND_ERROR_CODE:
                raise CityNotFoundError()

        super()._checkResponse(response)

    def _parseResponse(self, data: WeatherApiResponse) -> WeatherResult:
        current = data["current"]
        return WeatherResult(
            temperature=float(current["temp_c"]),
            humidity=int(current["humidity"]),
            description=str(current["condition"]["text"]),
        )
