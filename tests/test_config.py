from datetime import timedelta

import pytest

from conftest import make_settings
from trafficwatch.config import Settings
from trafficwatch.errors import ConfigurationError


def test_defaults():
    config = Settings(_env_file=None)
    assert config.graphql_url == "https://api.cloudflare.com/client/v4/graphql"
    assert config.group_limit == 10000
    assert config.lookback_minutes == 15
    assert config.lookback == timedelta(minutes=15)
    assert config.sender_name == "Cloudflare Alert"
    assert config.alert_on_query_failure is False


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("ZONE_TAG", "zone-from-env")
    monkeypatch.setenv("LOOKBACK_MINUTES", "30")
    monkeypatch.setenv("ALERT_ON_QUERY_FAILURE", "true")
    config = Settings(_env_file=None)
    assert config.zone_tag == "zone-from-env"
    assert config.lookback == timedelta(minutes=30)
    assert config.alert_on_query_failure is True


def test_complete_settings_validate():
    make_settings().validate_for_check()


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"zone_tag": ""}, "ZONE_TAG"),
        ({"cloudflare_api_token": ""}, "CLOUDFLARE_API_TOKEN"),
        ({"target_host": ""}, "TARGET_HOST"),
        ({"sender_email": ""}, "SENDER_EMAIL"),
        ({"recipient_email": ""}, "RECIPIENT_EMAIL"),
        ({"lookback_minutes": 0}, "LOOKBACK_MINUTES"),
    ],
)
def test_missing_required_settings(overrides, message):
    with pytest.raises(ConfigurationError, match=message):
        make_settings(**overrides).validate_for_check()
