"""Compute the lookback window and fetch its traffic count."""
from datetime import datetime, timedelta, timezone
from typing import Protocol

from trafficwatch.errors import ConfigurationError
from trafficwatch.schemas.window import TimeWindow, TrafficObservation


class TrafficSource(Protocol):
    async def fetch_request_count(self, window: TimeWindow, target_host: str) -> TrafficObservation: ...


def compute_window(now: datetime, lookback: timedelta) -> TimeWindow:
    if lookback <= timedelta(0):
        raise ConfigurationError("lookback must be positive")
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    else:
        now = now.astimezone(timezone.utc)
    return TimeWindow(start=now - lookback, end=now)


async def evaluate(
    now: datetime,
    lookback: timedelta,
    target_host: str,
    source: TrafficSource,
) -> tuple[TimeWindow, TrafficObservation]:
    window = compute_window(now, lookback)
    observation = await source.fetch_request_count(window, target_host)
    return window, observation
