"""Weather dashboard state: query, fetch, snapshot and notifications."""
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from layout import DrawOp, calculate_layout, setup_notice_lines
from preferences import PreferenceStore
from weather_data import WeatherSnapshot
from weather_provider import WeatherProviderBase, WeatherProviderError

GENERIC_ERROR_MESSAGE = "Failed to fetch weather data"


@dataclass
class Notification:
    """A transient message for the user."""
    title: str
    description: str
    variant: str = "default"  # "default" or "destructive"

    @property
    def is_error(self) -> bool:
        return self.variant == "destructive"


class WeatherDashboard:
    """
    Headless weather lookup component.

    Holds the search query, the last successful snapshot and the loading
    flag. Rendering layers call ``set_query``/``submit_search`` and read the
    state back; nothing here touches the terminal.

    Every fetch takes a generation number when it starts. Only the most
    recently started fetch may change the snapshot, the saved city or the
    loading flag, so a slow earlier lookup can never overwrite a newer one.
    """

    def __init__(
        self,
        provider: Optional[WeatherProviderBase],
        preferences: PreferenceStore,
        notifier: Optional[Callable[[Notification], None]] = None
    ):
        """
        Args:
            provider: Weather provider, or None when no API key is configured
            preferences: Store holding the last searched city
            notifier: Called with every Notification as it is raised
        """
        self.provider = provider
        self.preferences = preferences
        self.notifier = notifier

        self.query = ""
        self.snapshot: Optional[WeatherSnapshot] = None
        self.loading = False
        self.notifications: List[Notification] = []

        self._generation = 0
        self._mounted = False

    @property
    def has_credential(self) -> bool:
        return self.provider is not None

    def _notify(self, title: str, description: str, variant: str = "default") -> None:
        notification = Notification(title, description, variant)
        self.notifications.append(notification)
        log = logging.warning if notification.is_error else logging.info
        log("Notification [%s] %s: %s", variant, title, description)
        if self.notifier is not None:
            self.notifier(notification)

    def set_query(self, text: str) -> None:
        self.query = text

    def submit_search(self) -> Optional[WeatherSnapshot]:
        """Search for whatever is currently in the query."""
        return self.fetch_weather(self.query)

    def mount(self) -> Optional[WeatherSnapshot]:
        """
        Preload the last searched city, once.

        Does nothing when no city was saved or no API key is configured.
        """
        if self._mounted:
            return None
        self._mounted = True

        saved_city = self.preferences.get_last_city()
        if not saved_city:
            logging.debug("No saved city to preload")
            return None
        if not self.has_credential:
            logging.info("Saved city %r not preloaded: no API key configured", saved_city)
            return None

        logging.info("Preloading saved city %r", saved_city)
        self.query = saved_city
        return self.fetch_weather(saved_city)

    def fetch_weather(self, city: str) -> Optional[WeatherSnapshot]:
        """
        Look up current weather for a city and update the dashboard.

        Returns:
            The new snapshot, or None when validation, configuration or the
            provider failed (a notification says why) or when a newer fetch
            superseded this one.
        """
        city = (city or "").strip()
        if not city:
            self._notify("Error", "Please enter a city name", "destructive")
            return None

        if not self.has_credential:
            self._notify(
                "API Key Required",
                "Please set WEATHER_API_KEY in your environment or .env file",
                "destructive",
            )
            return None

        self._generation += 1
        generation = self._generation
        self.loading = True
        logging.info("Fetching weather for %r (generation %s)", city, generation)
        try:
            try:
                snapshot = self.provider.get_current(city)
            except WeatherProviderError as err:
                if generation != self._generation:
                    logging.info("Dropping failed result for %r: superseded by generation %s", city, self._generation)
                    return None
                logging.error("Weather fetch for %r failed: %s", city, err)
                self.snapshot = None
                self._notify("Error", str(err) or GENERIC_ERROR_MESSAGE, "destructive")
                return None

            if generation != self._generation:
                logging.info("Dropping result for %r: superseded by generation %s", city, self._generation)
                return None

            self.snapshot = snapshot
            try:
                self.preferences.set_last_city(city)
            except OSError as exc:
                logging.warning("Could not save last searched city: %s", exc)
            self._notify("Success", f"Weather data loaded for {snapshot.name}")
            return snapshot
        finally:
            if generation == self._generation:
                self.loading = False

    def render(self) -> List[DrawOp]:
        """Drawing operations for the current state."""
        ops: List[DrawOp] = []
        if self.snapshot is not None:
            ops.extend(calculate_layout(self.snapshot))
        if not self.has_credential:
            if ops:
                ops.append(DrawOp("blank"))
            ops.extend(setup_notice_lines())
        return ops
