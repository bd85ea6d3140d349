"""Environment-driven settings for the weather lookup."""
import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

API_KEY_PLACEHOLDER = "YOUR_API_KEY_HERE"
DEFAULT_STATE_FILE = os.path.join(os.path.expanduser("~"), ".weather-lookup.json")


@dataclass
class AppConfig:
    api_key: Optional[str]
    lang: str = "en"
    timeout: Optional[float] = None
    state_file: str = DEFAULT_STATE_FILE

    @property
    def has_api_key(self) -> bool:
        return self.api_key is not None


def normalize_api_key(raw: Optional[str]) -> Optional[str]:
    """Return the key, or None when it is unset, blank or still the placeholder."""
    if raw is None:
        return None
    key = raw.strip()
    if not key or key == API_KEY_PLACEHOLDER:
        return None
    return key


def load_config(state_file: Optional[str] = None) -> AppConfig:
    load_dotenv()
    api_key = normalize_api_key(os.getenv("WEATHER_API_KEY"))
    lang = os.getenv("WEATHER_LANG", "en")
    timeout_raw = os.getenv("WEATHER_TIMEOUT")

    timeout = None
    if timeout_raw:
        try:
            timeout = float(timeout_raw)
        except ValueError as exc:
            raise SystemExit(f"Invalid WEATHER_TIMEOUT: {exc}") from exc
        if timeout <= 0:
            raise SystemExit("Invalid WEATHER_TIMEOUT: must be a positive number of seconds")

    state_file = os.path.expanduser(state_file or os.getenv("WEATHER_STATE_FILE") or DEFAULT_STATE_FILE)

    if api_key is None:
        logging.warning("WEATHER_API_KEY is not configured; lookups are disabled")
    logging.info("Configuration loaded: lang=%s timeout=%s state_file=%s", lang, timeout, state_file)
    return AppConfig(api_key=api_key, lang=lang, timeout=timeout, state_file=state_file)
