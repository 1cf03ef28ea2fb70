from trafficwatch.schemas.check import CheckResponse, CheckResult, CheckStatus
from trafficwatch.schemas.system import HealthResponse
from trafficwatch.schemas.window import TimeWindow, TrafficObservation, format_iso

__all__ = [
    "CheckResponse", "CheckResult", "CheckStatus",
    "HealthResponse",
    "TimeWindow", "TrafficObservation", "format_iso",
]
