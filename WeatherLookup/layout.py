"""Layout and rendering logic for weather display - pure functions for testability."""
import math
from dataclasses import dataclass
from typing import List, Optional, Tuple
from weather_data import WeatherSnapshot

ICON_SUN = "sun"
ICON_RAIN = "cloud-rain"
ICON_SNOW = "cloud-snow"
ICON_CLOUD = "cloud"

# glyph, color
ICON_STYLES = {
    ICON_SUN: ("☀", (234, 179, 8)),
    ICON_RAIN: ("🌧", (59, 130, 246)),
    ICON_SNOW: ("❄", (191, 219, 254)),
    ICON_CLOUD: ("☁", (150, 150, 150)),
}

_CONDITION_ICONS = {
    "clear": ICON_SUN,
    "rain": ICON_RAIN,
    "drizzle": ICON_RAIN,
    "snow": ICON_SNOW,
}

LABEL_COLOR = (200, 200, 200)
MUTED_COLOR = (140, 140, 140)
NOTICE_COLOR = (202, 138, 4)
HUMIDITY_COLOR = (59, 130, 246)

MS_TO_KMH = 3.6


class DrawOp:
    """Represents a drawing operation (for testing/layout calculation)."""
    def __init__(self, op_type: str, **kwargs):
        self.op_type = op_type
        self.kwargs = kwargs


@dataclass
class WeatherDisplay:
    """Display-ready strings derived from a snapshot."""
    title: str
    description: str
    icon: str
    temperature: str
    feels_like: str
    humidity: str
    wind: str


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (21.5 -> 22, -0.5 -> 0)."""
    return int(math.floor(value + 0.5))


def get_weather_icon(condition: Optional[str]) -> str:
    """
    Map a condition label to an icon name.

    Matching is case-insensitive and total: any label that is not clear,
    rain, drizzle or snow (including an empty or missing one) gets the
    generic cloud icon.
    """
    if not condition:
        return ICON_CLOUD
    return _CONDITION_ICONS.get(condition.strip().lower(), ICON_CLOUD)


def get_temperature_color(temp_c: float) -> Tuple[int, int, int]:
    """
    Get RGB color for temperature using a simple gradient.

    Cold (< 0°C) = blue
    Cool (0-15°C) = cyan
    Mild (15-25°C) = green/yellow
    Warm (25-35°C) = yellow/orange
    Hot (> 35°C) = red
    """
    if temp_c < 0:
        return (0, 0, 255)
    elif temp_c < 15:
        ratio = temp_c / 15.0
        return (0, int(255 * ratio), 255)
    elif temp_c < 25:
        ratio = (temp_c - 15) / 10.0
        return (int(255 * ratio), 255, int(255 * (1 - ratio)))
    elif temp_c < 35:
        ratio = (temp_c - 25) / 10.0
        return (255, int(255 * (1 - ratio * 0.5)), 0)
    else:
        ratio = min((temp_c - 35) / 10.0, 1.0)
        return (255, int(255 * (1 - ratio)), 0)


def format_temperature(temp_c: float) -> str:
    return f"{round_half_up(temp_c)}°C"


def format_wind_speed(speed_ms: float) -> str:
    return f"{round_half_up(speed_ms * MS_TO_KMH)} km/h"


def format_humidity(humidity: float) -> str:
    return f"{int(humidity)}%"


def display_case(text: str) -> str:
    """Capitalize the first letter of every word, leaving the rest untouched."""
    return " ".join(word[:1].upper() + word[1:] for word in text.split(" "))


def build_display(weather: WeatherSnapshot) -> WeatherDisplay:
    return WeatherDisplay(
        title=weather.location,
        description=display_case(weather.condition_description),
        icon=get_weather_icon(weather.condition_main),
        temperature=format_temperature(weather.temp),
        feels_like=f"Feels like {format_temperature(weather.feels_like)}",
        humidity=format_humidity(weather.humidity),
        wind=format_wind_speed(weather.wind_speed),
    )


def _text(text: str, color: Tuple[int, int, int], bold: bool = False) -> DrawOp:
    return DrawOp("text", text=text, r=color[0], g=color[1], b=color[2], bold=bold)


def calculate_layout(weather: WeatherSnapshot) -> List[DrawOp]:
    """
    Calculate the ordered drawing operations for a weather card.

    This is a pure function that returns drawing operations,
    making it easy to test without actual rendering.
    """
    display = build_display(weather)
    glyph, icon_color = ICON_STYLES[display.icon]

    return [
        _text(display.title, LABEL_COLOR, bold=True),
        _text(display.description, MUTED_COLOR),
        DrawOp("blank"),
        _text(glyph, icon_color),
        _text(display.temperature, get_temperature_color(weather.temp), bold=True),
        _text(display.feels_like, MUTED_COLOR),
        DrawOp("blank"),
        _text(f"Humidity    {display.humidity}", HUMIDITY_COLOR),
        _text(f"Wind Speed  {display.wind}", MUTED_COLOR),
    ]


def setup_notice_lines() -> List[DrawOp]:
    """Instructions shown while no API key is configured."""
    return [
        _text("API Key Required", NOTICE_COLOR, bold=True),
        _text("To use this weather lookup, you need a free API key from OpenWeatherMap:", MUTED_COLOR),
        _text("  1. Visit https://openweathermap.org/api", MUTED_COLOR),
        _text("  2. Sign up for a free account", MUTED_COLOR),
        _text("  3. Get your API key", MUTED_COLOR),
        _text("  4. Set WEATHER_API_KEY in your environment or .env file", MUTED_COLOR),
    ]


def render_lines(ops: List[DrawOp], use_color: bool = False) -> List[str]:
    """Turn drawing operations into terminal lines, with 24-bit ANSI color if asked."""
    lines = []
    for op in ops:
        if op.op_type == "blank":
            lines.append("")
            continue
        text = op.kwargs["text"]
        if use_color:
            prefix = "\033[1m" if op.kwargs.get("bold") else ""
            text = f"{prefix}\033[38;2;{op.kwargs['r']};{op.kwargs['g']};{op.kwargs['b']}m{text}\033[0m"
        lines.append(text)
    return lines
