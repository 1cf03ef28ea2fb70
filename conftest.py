import os

import pytest

os.environ.setdefault("CHECK_INTERVAL_SECONDS", "0")
os.environ.setdefault("ZONE_TAG", "")
os.environ.setdefault("TRIGGER_TOKEN", "")

from trafficwatch.config import Settings
from trafficwatch.errors import NotificationSendError, TransportError
from trafficwatch.schemas.window import TrafficObservation


class FakeNotifier:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent = []

    async def send(self, sender, recipient, message):
        if self.fail:
            raise NotificationSendError("mail relay unavailable")
        self.sent.append((sender, recipient, message))


class FakeSource:
    def __init__(self, count: int = 0, error: Exception | None = None):
        self.count = count
        self.error = error
        self.calls = []

    async def fetch_request_count(self, window, target_host):
        self.calls.append((window, target_host))
        if self.error is not None:
            raise self.error
        return TrafficObservation(request_count=self.count)


def make_settings(**overrides) -> Settings:
    values = {
        "cloudflare_api_token": "cf-test-token",
        "zone_tag": "zone-abc123",
        "target_host": "f1.example.com",
        "sender_email": "alerts@example.com",
        "recipient_email": "oncall@example.com",
        "check_interval_seconds": 0,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def failing_notifier():
    return FakeNotifier(fail=True)


@pytest.fixture
def quiet_source():
    return FakeSource(count=0)


@pytest.fixture
def broken_source():
    return FakeSource(error=TransportError("connection reset"))
