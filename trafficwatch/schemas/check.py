from enum import Enum
from typing import Optional

from pydantic import BaseModel

from trafficwatch.schemas.window import TimeWindow


class CheckStatus(str, Enum):
    quiet = "quiet"  # traffic seen, nothing sent
    alerted = "alerted"
    alert_failed = "alert_failed"
    config_error = "config_error"
    query_failed = "query_failed"


class CheckResult(BaseModel):
    status: CheckStatus
    window: Optional[TimeWindow] = None
    request_count: Optional[int] = None
    alert_sent: bool = False
    error: Optional[str] = None


class CheckResponse(BaseModel):
    status: CheckStatus
    window_start: Optional[str] = None
    window_end: Optional[str] = None
    request_count: Optional[int] = None
    alert_sent: bool = False
    error: Optional[str] = None

    @classmethod
    def from_result(cls, result: CheckResult) -> "CheckResponse":
        return cls(
            status=result.status,
            window_start=result.window.start_iso if result.window else None,
            window_end=result.window.end_iso if result.window else None,
            request_count=result.request_count,
            alert_sent=result.alert_sent,
            error=result.error,
        )
