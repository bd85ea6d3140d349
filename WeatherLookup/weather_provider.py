"""Weather provider abstraction - allows swapping different weather APIs."""
from abc import ABC, abstractmethod
from typing import Optional

from weather_data import WeatherSnapshot


class WeatherProviderBase(ABC):
    """Abstract base class for weather data providers."""

    @abstractmethod
    def get_current(self, city: str) -> WeatherSnapshot:
        """
        Fetch current weather for a city.

        Args:
            city: Free-text city name as typed by the user

        Returns:
            WeatherSnapshot: Current weather information

        Raises:
            WeatherProviderError: If the provider fails to fetch data
        """
        pass


class WeatherProviderError(Exception):
    """Exception raised when a weather provider fails."""
    pass


class ProviderHTTPError(WeatherProviderError):
    """The provider answered with a non-success HTTP status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ProviderNetworkError(WeatherProviderError):
    """The request never produced a response."""
    pass


class ProviderPayloadError(WeatherProviderError):
    """The response body could not be parsed or lacked expected fields."""
    pass
