from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from conftest import make_settings
from trafficwatch.main import app
from trafficwatch.routers.checks import get_settings
from trafficwatch.schemas.check import CheckResult, CheckStatus
from trafficwatch.services.window_evaluator import compute_window


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def _use_settings(**overrides):
    config = make_settings(**overrides)
    app.dependency_overrides[get_settings] = lambda: config
    return config


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_trigger_disabled_without_token(client):
    _use_settings(trigger_token="")
    r = client.post("/api/checks/run", headers={"Authorization": "Bearer anything"})
    assert r.status_code == 404


def test_trigger_requires_token(client):
    _use_settings(trigger_token="cron-secret")
    assert client.post("/api/checks/run").status_code == 401
    r = client.post("/api/checks/run", headers={"Authorization": "Bearer wrong"})
    assert r.status_code == 401


def test_trigger_runs_check(client):
    config = _use_settings(trigger_token="cron-secret")
    window = compute_window(datetime(2024, 1, 1, 0, 15, tzinfo=timezone.utc), timedelta(minutes=15))
    result = CheckResult(status=CheckStatus.alerted, window=window, request_count=0, alert_sent=True)
    with patch("trafficwatch.routers.checks.run_check", new=AsyncMock(return_value=result)) as run:
        r = client.post("/api/checks/run", headers={"Authorization": "Bearer cron-secret"})

    assert r.status_code == 200
    run.assert_awaited_once_with(config)
    body = r.json()
    assert body["status"] == "alerted"
    assert body["window_start"] == "2024-01-01T00:00:00.000Z"
    assert body["window_end"] == "2024-01-01T00:15:00.000Z"
    assert body["request_count"] == 0
    assert body["alert_sent"] is True


def test_trigger_reports_config_error_without_failing(client):
    _use_settings(trigger_token="cron-secret", zone_tag="")
    r = client.post("/api/checks/run", headers={"Authorization": "Bearer cron-secret"})
    assert r.status_code == 200
    assert r.json()["status"] == "config_error"


@pytest.mark.asyncio
async def test_check_loop_survives_unexpected_errors():
    import asyncio

    from trafficwatch import main

    sleeps = []

    async def fake_sleep(seconds):
        sleeps.append(seconds)
        if len(sleeps) > 2:
            raise asyncio.CancelledError

    run = AsyncMock(side_effect=[RuntimeError("boom"), CheckResult(status=CheckStatus.quiet)])
    with patch.object(main.asyncio, "sleep", fake_sleep), patch("trafficwatch.main.run_check", run):
        with pytest.raises(asyncio.CancelledError):
            await main._check_loop(900)

    assert sleeps == [900, 900, 900]
    assert run.await_count == 2
