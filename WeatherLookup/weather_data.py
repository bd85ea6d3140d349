"""Weather domain model - pure data structures independent of any API."""
from dataclasses import dataclass


@dataclass
class WeatherSnapshot:
    """Current conditions for one resolved location, as shown on screen."""
    name: str  # resolved location name, e.g. "Paris"
    country: str  # ISO country code, e.g. "FR"
    condition_main: str  # e.g., "Clouds", "Rain", "Clear"
    condition_description: str  # e.g., "broken clouds", "light rain"
    temp: float  # degrees Celsius
    feels_like: float  # degrees Celsius
    humidity: float  # percentage
    wind_speed: float  # meters per second

    @property
    def location(self) -> str:
        if self.country:
            return f"{self.name}, {self.country}"
        return self.name
