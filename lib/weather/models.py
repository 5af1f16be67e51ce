"""
Data models for weather providers

This module defines the WeatherResult value returned to callers and
TypedDict classes for upstream API responses.
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, List, TypedDict


@dataclass(frozen=True)
class WeatherResult:
    """Current weather in a city, cached verbatim"""

    temperature: float  # Temperature (Celsius)
    humidity: int  # Humidity percentage
    description: str  # Human-readable conditions

    def toDict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def fromDict(cls, data: Dict[str, Any]) -> "WeatherResult":
        """
        Build WeatherResult from dictionary

        Raises:
            KeyError: If some field is missing
            TypeError, ValueError: If some field has wrong type
        """
        return cls(
            temperature=float(data["temperature"]),
            humidity=int(data["humidity"]),
            description=str(data["description"]),
        )


# API Response Models


class WeatherApiCondition(TypedDict):
    text: str


class WeatherApiCurrent(TypedDict):
    """Current weather block of weatherapi.com response"""

    # https://www.weatherapi.com/docs/#apis-realtime

    temp_c: float  # Temperature (Celsius)
    humidity: int  # Humidity percentage
    condition: WeatherApiCondition


class WeatherApiResponse(TypedDict):
    """weatherapi.com /current.json response (fields we use)"""

    current: WeatherApiCurrent


class OpenWeatherMapMain(TypedDict):
    temp: float  # Temperature (Celsius, units=metric)
    feels_like: float  # Feels like temperature (Celsius)
    humidity: int  # Humidity percentage


class OpenWeatherMapCondition(TypedDict):
    # https://openweathermap.org/weather-conditions
    id: int  # Weather condition ID
    main: str  # Weather group (Rain, Snow, Clear, etc.)
    description: str  # Weather description
    icon: str


class OpenWeatherMapResponse(TypedDict):
    """OpenWeatherMap /data/2.5/weather response (fields we use)"""

    main: OpenWeatherMapMain
    weather: List[OpenWeatherMapCondition]
