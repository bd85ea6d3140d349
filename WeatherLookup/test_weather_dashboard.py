"""Tests for the weather dashboard component."""
import pytest
from unittest.mock import Mock, patch
from config import AppConfig
from main import build_dashboard
from preferences import PreferenceStore
from weather_dashboard import GENERIC_ERROR_MESSAGE, WeatherDashboard
from weather_data import WeatherSnapshot
from weather_provider import (
    WeatherProviderBase,
    ProviderHTTPError,
    ProviderNetworkError,
    ProviderPayloadError,
)


class MockProvider(WeatherProviderBase):
    """Mock weather provider for testing."""

    def __init__(self, return_data=None, raise_error=None):
        self.return_data = return_data
        self.raise_error = raise_error
        self.calls = []

    def get_current(self, city):
        self.calls.append(city)
        if self.raise_error:
            raise self.raise_error
        return self.return_data


@pytest.fixture
def sample_weather():
    """Sample weather data."""
    return WeatherSnapshot(
        name="Paris",
        country="FR",
        condition_main="Clear",
        condition_description="clear sky",
        temp=21.6,
        feels_like=20.1,
        humidity=40.0,
        wind_speed=10.0
    )


@pytest.fixture
def preferences(tmp_path):
    return PreferenceStore(str(tmp_path / "prefs.json"))


def test_fetch_success(sample_weather, preferences):
    """A successful lookup stores the snapshot and the city."""
    provider = MockProvider(return_data=sample_weather)
    notifier = Mock()
    dashboard = WeatherDashboard(provider, preferences, notifier=notifier)

    result = dashboard.fetch_weather("Paris")

    assert result is sample_weather
    assert dashboard.snapshot == sample_weather
    assert dashboard.loading is False
    assert provider.calls == ["Paris"]
    assert preferences.get_last_city() == "Paris"

    notification = dashboard.notifications[-1]
    assert notification.title == "Success"
    assert notification.description == "Weather data loaded for Paris"
    assert notification.is_error is False
    notifier.assert_called_once_with(notification)


def test_fetch_strips_whitespace(sample_weather, preferences):
    provider = MockProvider(return_data=sample_weather)
    dashboard = WeatherDashboard(provider, preferences)

    dashboard.fetch_weather("  Paris ")

    assert provider.calls == ["Paris"]
    assert preferences.get_last_city() == "Paris"


@pytest.mark.parametrize("city", ["", "   ", "\t\n"])
def test_fetch_empty_city(city, sample_weather, preferences):
    """Blank input never reaches the provider."""
    provider = MockProvider(return_data=sample_weather)
    dashboard = WeatherDashboard(provider, preferences)

    assert dashboard.fetch_weather(city) is None

    assert provider.calls == []
    assert dashboard.loading is False
    assert dashboard.notifications[-1].title == "Error"
    assert dashboard.notifications[-1].description == "Please enter a city name"
    assert dashboard.notifications[-1].is_error is True


def test_fetch_without_credential_makes_no_request(preferences, tmp_path):
    """With no API key configured nothing goes over the network."""
    config = AppConfig(api_key=None, state_file=str(tmp_path / "prefs.json"))
    with patch('openweather_provider.requests.get') as mock_get:
        dashboard = build_dashboard(config)

        for city in ["Paris", "", "Tokyo"]:
            assert dashboard.fetch_weather(city) is None

        mock_get.assert_not_called()

    assert dashboard.has_credential is False
    assert dashboard.notifications[0].title == "API Key Required"
    assert dashboard.notifications[2].title == "API Key Required"


def test_fetch_not_found_clears_snapshot(sample_weather, preferences):
    """A failed lookup must not leave the previous result on screen."""
    provider = MockProvider(return_data=sample_weather)
    dashboard = WeatherDashboard(provider, preferences)
    dashboard.fetch_weather("Paris")
    assert dashboard.snapshot is not None

    provider.raise_error = ProviderHTTPError("City not found", 404)
    result = dashboard.fetch_weather("Atlantis")

    assert result is None
    assert dashboard.snapshot is None
    assert dashboard.loading is False
    assert dashboard.notifications[-1].title == "Error"
    assert dashboard.notifications[-1].description == "City not found"
    # the last good city stays saved
    assert preferences.get_last_city() == "Paris"


def test_fetch_404_through_http_layer(preferences, tmp_path):
    """A mocked 404 from the real provider ends in an error notification."""
    config = AppConfig(api_key="test_key", state_file=str(tmp_path / "prefs.json"))
    with patch('openweather_provider.requests.get') as mock_get:
        mock_response = Mock()
        mock_response.ok = False
        mock_response.status_code = 404
        mock_response.json.return_value = {"cod": "404", "message": "city not found"}
        mock_get.return_value = mock_response

        dashboard = build_dashboard(config)
        dashboard.fetch_weather("Atlantis")

    assert dashboard.snapshot is None
    assert dashboard.notifications[-1].description == "City not found"


@pytest.mark.parametrize("error", [
    ProviderNetworkError("Network error: Connection refused"),
    ProviderPayloadError("Response missing 'main' block"),
])
def test_fetch_other_failures(error, preferences):
    provider = MockProvider(raise_error=error)
    dashboard = WeatherDashboard(provider, preferences)

    dashboard.fetch_weather("Paris")

    assert dashboard.snapshot is None
    assert dashboard.loading is False
    assert dashboard.notifications[-1].description == str(error)
    assert preferences.get_last_city() is None


def test_fetch_error_without_message_uses_generic_text(preferences):
    dashboard = WeatherDashboard(MockProvider(raise_error=ProviderHTTPError("", 500)), preferences)

    dashboard.fetch_weather("Paris")

    assert dashboard.notifications[-1].description == GENERIC_ERROR_MESSAGE


def test_loading_flag_during_fetch(sample_weather, preferences):
    seen = []

    class ObservingProvider(WeatherProviderBase):
        def get_current(self, city):
            seen.append(dashboard.loading)
            return sample_weather

    dashboard = WeatherDashboard(ObservingProvider(), preferences)
    dashboard.fetch_weather("Paris")

    assert seen == [True]
    assert dashboard.loading is False


def test_loading_flag_reset_on_unexpected_error(preferences):
    """Even an unexpected exception must not leave the dashboard loading."""
    dashboard = WeatherDashboard(MockProvider(raise_error=RuntimeError("boom")), preferences)

    with pytest.raises(RuntimeError):
        dashboard.fetch_weather("Paris")

    assert dashboard.loading is False


def test_save_failure_does_not_fail_fetch(sample_weather):
    preferences = Mock()
    preferences.set_last_city.side_effect = OSError("read-only file system")
    dashboard = WeatherDashboard(MockProvider(return_data=sample_weather), preferences)

    assert dashboard.fetch_weather("Paris") is sample_weather
    assert dashboard.notifications[-1].title == "Success"


def test_submit_search_uses_query(sample_weather, preferences):
    provider = MockProvider(return_data=sample_weather)
    dashboard = WeatherDashboard(provider, preferences)

    dashboard.set_query("Paris")
    dashboard.submit_search()

    assert provider.calls == ["Paris"]
    # the query is left as typed
    assert dashboard.query == "Paris"


def test_mount_preloads_saved_city(sample_weather, preferences):
    """A saved city is fetched once on startup without user input."""
    preferences.set_last_city("Paris")
    provider = MockProvider(return_data=sample_weather)
    dashboard = WeatherDashboard(provider, preferences)

    dashboard.mount()
    dashboard.mount()

    assert provider.calls == ["Paris"]
    assert dashboard.snapshot == sample_weather
    assert dashboard.query == "Paris"


def test_mount_without_saved_city(sample_weather, preferences):
    provider = MockProvider(return_data=sample_weather)
    dashboard = WeatherDashboard(provider, preferences)

    assert dashboard.mount() is None
    assert provider.calls == []
    assert dashboard.notifications == []


def test_mount_without_credential(preferences):
    preferences.set_last_city("Paris")
    dashboard = WeatherDashboard(None, preferences)

    assert dashboard.mount() is None
    assert dashboard.notifications == []


def test_overlapping_fetch_keeps_newest_result(sample_weather, preferences):
    """A fetch that finishes after a newer one started is discarded."""
    tokyo = WeatherSnapshot("Tokyo", "JP", "Rain", "light rain", 18.0, 17.0, 90.0, 2.0)

    class SlowProvider(WeatherProviderBase):
        def get_current(self, city):
            if city == "Paris":
                # the user submits again before Paris comes back
                dashboard.fetch_weather("Tokyo")
                return sample_weather
            return tokyo

    dashboard = WeatherDashboard(SlowProvider(), preferences)

    assert dashboard.fetch_weather("Paris") is None

    assert dashboard.snapshot == tokyo
    assert dashboard.loading is False
    assert preferences.get_last_city() == "Tokyo"
    assert [n.description for n in dashboard.notifications] == ["Weather data loaded for Tokyo"]


def test_overlapping_fetch_stale_error_is_dropped(sample_weather, preferences):
    class SlowProvider(WeatherProviderBase):
        def get_current(self, city):
            if city == "Atlantis":
                dashboard.fetch_weather("Paris")
                raise ProviderHTTPError("City not found", 404)
            return sample_weather

    dashboard = WeatherDashboard(SlowProvider(), preferences)
    dashboard.fetch_weather("Atlantis")

    assert dashboard.snapshot == sample_weather
    assert all(not n.is_error for n in dashboard.notifications)


def test_render_with_snapshot(sample_weather, preferences):
    dashboard = WeatherDashboard(MockProvider(return_data=sample_weather), preferences)
    assert dashboard.render() == []

    dashboard.fetch_weather("Paris")
    texts = [op.kwargs["text"] for op in dashboard.render() if op.op_type == "text"]

    assert texts[0] == "Paris, FR"
    assert "22°C" in texts


def test_render_setup_notice_without_credential(preferences):
    dashboard = WeatherDashboard(None, preferences)
    texts = [op.kwargs["text"] for op in dashboard.render() if op.op_type == "text"]

    assert texts[0] == "API Key Required"


def test_fetch_non_finite_reading_keeps_display_usable(tmp_path):
    """A NaN temperature is reported as an error and render() still works."""
    config = AppConfig(api_key="test_key", state_file=str(tmp_path / "prefs.json"))
    response = Mock()
    response.ok = True
    response.status_code = 200
    response.json.return_value = {
        "name": "Paris",
        "sys": {"country": "FR"},
        "weather": [{"main": "Clear", "description": "clear sky"}],
        "main": {"temp": float("nan"), "feels_like": 20.0, "humidity": 50},
        "wind": {"speed": float("inf")},
    }
    with patch('openweather_provider.requests.get', return_value=response):
        dashboard = build_dashboard(config)
        assert dashboard.fetch_weather("Paris") is None

    assert dashboard.snapshot is None
    assert dashboard.notifications[-1].is_error is True
    assert dashboard.render() == []
    assert PreferenceStore(config.state_file).get_last_city() is None
