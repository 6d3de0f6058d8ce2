import pytest

from wifilogger.data_models import NetworkObservation
from wifilogger.wifi_scanner import ScanCompletion, ScanProvider


class FakeProvider(ScanProvider):
    """Scriptable provider: each trigger_scan() pops the next queued result."""

    def __init__(self, enabled=True):
        self.enabled = enabled
        self.results = []
        self.cached = []
        self.trigger_count = 0

    def is_scanning_enabled(self):
        return self.enabled

    def trigger_scan(self):
        self.trigger_count += 1
        if self.results:
            return self.results.pop(0)
        return ScanCompletion(success=True, observations=list(self.cached))

    def get_cached_observations(self):
        return list(self.cached)


class FakeClock:
    def __init__(self, now=1_700_000_000_000):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += ms


@pytest.fixture
def observations():
    return [
        NetworkObservation("Office", "aa:bb:cc:00:00:01", -48, 2437, "[WPA2-PSK-CCMP][ESS]"),
        NetworkObservation("Office", "aa:bb:cc:00:00:02", -61, 5180, "[WPA2-PSK-CCMP][ESS]"),
        NetworkObservation("Guest", "aa:bb:cc:00:00:03", -72, 2462, "[ESS]"),
    ]


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def clock():
    return FakeClock()
