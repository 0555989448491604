"""OpenWeatherMap client used as the default fetcher for SDK instances."""

from .api import WEATHER_PATH, OpenWeatherClient
from .schemas import SunTimes, Temperature, WeatherCondition, WeatherData, Wind

__all__ = [
    "OpenWeatherClient",
    "SunTimes",
    "Temperature",
    "WEATHER_PATH",
    "WeatherCondition",
    "WeatherData",
    "Wind",
]
