"""Small persistent key/value store for user preferences."""
import json
import logging
import os
from typing import Dict, Optional

LAST_CITY_KEY = "lastSearchedCity"


class PreferenceStore:
    """
    String key/value pairs kept in a JSON object file.

    Values never expire. A missing or unreadable file behaves like an empty
    store so a damaged preference never blocks the app from starting.
    """

    def __init__(self, path: str):
        self.path = path

    def _load(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as handle:
                data = json.load(handle)
        except (OSError, ValueError) as exc:
            logging.warning("Ignoring unreadable preference file %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logging.warning("Ignoring preference file %s: expected a JSON object", self.path)
            return {}
        return data

    def get(self, key: str) -> Optional[str]:
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as handle:
            json.dump(data, handle, ensure_ascii=False, indent=2)
        logging.debug("Saved preference %s=%r to %s", key, value, self.path)

    def get_last_city(self) -> Optional[str]:
        return self.get(LAST_CITY_KEY)

    def set_last_city(self, city: str) -> None:
        self.set(LAST_CITY_KEY, city)
