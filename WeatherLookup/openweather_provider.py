"""OpenWeather Current Weather API provider implementation."""
import logging
import math
import requests
from typing import Optional
from weather_provider import (
    WeatherProviderBase,
    WeatherProviderError,
    ProviderHTTPError,
    ProviderNetworkError,
    ProviderPayloadError,
)
from weather_data import WeatherSnapshot


def _finite(block, key: str) -> float:
    """Read a numeric field, rejecting the NaN and Infinity that json accepts."""
    value = float(block[key])
    if not math.isfinite(value):
        raise ValueError(f"non-finite '{key}': {value}")
    return value


class OpenWeatherProvider(WeatherProviderBase):
    """
    Weather provider using OpenWeather Current Weather API.

    Uses the free Current Weather API: https://openweathermap.org/current
    and looks cities up by name (the ``q`` parameter).
    """

    BASE_URL = "https://api.openweathermap.org/data/2.5/weather"

    def __init__(
        self,
        api_key: str,
        units: str = "metric",
        lang: str = "en",
        timeout: Optional[float] = None
    ):
        """
        Initialize OpenWeather provider.

        Args:
            api_key: OpenWeather API key
            units: Temperature units ("metric", "imperial", or "standard")
            lang: Language code for descriptions (e.g., "en", "de")
            timeout: HTTP request timeout in seconds, None waits indefinitely
        """
        self.api_key = api_key
        self.units = units
        self.lang = lang
        self.timeout = timeout

    def get_current(self, city: str) -> WeatherSnapshot:
        """
        Fetch current weather for a city from OpenWeather Current Weather API.

        Returns:
            WeatherSnapshot: Current weather information

        Raises:
            ProviderHTTPError: If the API answers with a non-success status
            ProviderNetworkError: If the request fails in transport
            ProviderPayloadError: If the response cannot be parsed
        """
        params = {
            "q": city,
            "units": self.units,
            "appid": self.api_key,
            "lang": self.lang,
        }

        try:
            logging.info(f"Making OpenWeather API request: {self.BASE_URL}")
            logging.debug(f"Request parameters: q={city!r}, units={self.units}, lang={self.lang}")

            response = requests.get(self.BASE_URL, params=params, timeout=self.timeout)

            logging.info(f"API response status: {response.status_code}")

            if not response.ok:
                logging.error(f"API request failed with status {response.status_code}")
                self._handle_error_response(response)
        except requests.exceptions.RequestException as e:
            logging.error(f"Network error during API request: {e}")
            raise ProviderNetworkError(f"Network error: {e}")

        # requests' JSONDecodeError subclasses RequestException too
        try:
            data = response.json()
        except ValueError as e:
            logging.error(f"Response body is not valid JSON: {e}")
            raise ProviderPayloadError("Failed to parse weather data")
        logging.debug(f"API response (truncated): {str(data)[:500]}...")

        return self._parse(data)

    def _parse(self, data) -> WeatherSnapshot:
        """Map a Current Weather API payload onto a WeatherSnapshot."""
        try:
            weather_array = data.get("weather", [])
            if not weather_array:
                logging.error("Response missing 'weather' array")
                raise ProviderPayloadError("Response missing 'weather' array")
            weather = weather_array[0]
            logging.debug(f"Weather condition: {weather.get('main')} - {weather.get('description')}")

            main_data = data.get("main", {})
            if not main_data:
                raise ProviderPayloadError("Response missing 'main' block")

            wind_data = data.get("wind", {})
            if not wind_data:
                raise ProviderPayloadError("Response missing 'wind' block")

            # Country is cosmetic; some small places come back without it
            sys_data = data.get("sys") or {}

            snapshot = WeatherSnapshot(
                name=data["name"],
                country=sys_data.get("country", ""),
                condition_main=weather["main"],
                condition_description=weather.get("description", ""),
                temp=_finite(main_data, "temp"),
                feels_like=_finite(main_data, "feels_like"),
                humidity=_finite(main_data, "humidity"),
                wind_speed=_finite(wind_data, "speed"),
            )
        except WeatherProviderError:
            raise
        except (KeyError, IndexError, ValueError, TypeError, AttributeError) as e:
            logging.error(f"Failed to parse API response: {e!r}", exc_info=True)
            raise ProviderPayloadError(f"Failed to parse response: missing or invalid {e}")

        logging.info(f"Successfully parsed weather data: {snapshot.location} {snapshot.temp}°C, {snapshot.condition_main}")
        return snapshot

    def _handle_error_response(self, response: requests.Response) -> None:
        """Parse and raise error from OpenWeather error response."""
        try:
            error_data = response.json()
            message = str(error_data.get("message", "")).strip()
        except (ValueError, AttributeError):
            # Not a JSON object, use HTTP status
            logging.error(f"Non-JSON error response: HTTP {response.status_code}, body: {response.text[:500]}")
            raise ProviderHTTPError(f"HTTP {response.status_code}", response.status_code)

        logging.error(f"OpenWeather API error response: {error_data}")
        # OpenWeather sends lowercase messages such as "city not found"
        raise ProviderHTTPError(message[:1].upper() + message[1:], response.status_code)
