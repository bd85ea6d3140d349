"""Interactive terminal weather lookup."""
import argparse
import logging
import os
import signal
import sys
from typing import List, Optional

from config import AppConfig, load_config
from layout import DrawOp, render_lines
from openweather_provider import OpenWeatherProvider
from preferences import PreferenceStore
from weather_dashboard import Notification, WeatherDashboard

DEFAULT_LOG_FILE = os.path.join(os.path.expanduser("~"), ".weather-lookup.log")
QUIT_WORDS = {"quit", "exit", "q"}


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser("weather-lookup", description="Look up current weather by city name")
    parser.add_argument("--city", help="Look up one city, print it and exit")
    parser.add_argument("--state-file", help="Where the last searched city is kept")
    parser.add_argument("--log-file", default=DEFAULT_LOG_FILE)
    parser.add_argument("--no-color", action="store_true", help="Disable ANSI colors")
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args(argv)


def setup_logging(log_file: str, verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.INFO
    # The screen belongs to the prompt; only problems go to stderr
    console = logging.StreamHandler(sys.stderr)
    console.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[
            console,
            logging.FileHandler(os.path.expanduser(log_file))
        ]
    )


def build_provider(config: AppConfig) -> Optional[OpenWeatherProvider]:
    if not config.has_api_key:
        return None
    return OpenWeatherProvider(
        api_key=config.api_key,
        units="metric",
        lang=config.lang,
        timeout=config.timeout,
    )


def build_dashboard(config: AppConfig, notifier=None) -> WeatherDashboard:
    dashboard = WeatherDashboard(
        provider=build_provider(config),
        preferences=PreferenceStore(config.state_file),
        notifier=notifier,
    )
    logging.info("Dashboard ready (api key configured=%s)", config.has_api_key)
    return dashboard


def print_notification(notification: Notification) -> None:
    marker = "!" if notification.is_error else "*"
    print(f"[{marker}] {notification.title}: {notification.description}")


def draw(ops: List[DrawOp], use_color: bool) -> None:
    if not ops:
        return
    print()
    for line in render_lines(ops, use_color=use_color):
        print(f"  {line}")
    print()


def prompt_loop(dashboard: WeatherDashboard, use_color: bool) -> None:
    while True:
        try:
            text = input("Enter city name (or 'quit' to exit): ")
        except EOFError:
            print()
            return
        if text.strip().lower() in QUIT_WORDS:
            return

        dashboard.set_query(text)
        if text.strip() and dashboard.has_credential:
            print("Loading...")
        dashboard.submit_search()
        draw(dashboard.render(), use_color)


def signal_handler(signum, frame):
    logging.info("Received signal %s, shutting down", signum)
    raise KeyboardInterrupt()


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_file, args.verbose)
    config = load_config(args.state_file)
    use_color = not args.no_color and sys.stdout.isatty()

    dashboard = build_dashboard(config, notifier=print_notification)

    if args.city is not None:
        snapshot = dashboard.fetch_weather(args.city)
        draw(dashboard.render(), use_color)
        return 0 if snapshot is not None else 1

    signal.signal(signal.SIGTERM, signal_handler)

    print("Weather Dashboard")
    print("Search for any city to get real-time weather information")
    dashboard.mount()
    draw(dashboard.render(), use_color)

    try:
        prompt_loop(dashboard, use_color)
    except KeyboardInterrupt:
        print()
        logging.info("Stopping weather lookup")
    return 0


if __name__ == "__main__":
    sys.exit(main())
