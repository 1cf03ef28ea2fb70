from datetime import datetime, timezone

from pydantic import BaseModel, Field, model_validator


def format_iso(value: datetime) -> str:
    """UTC ISO 8601 with millisecond precision and a Z suffix."""
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


class TimeWindow(BaseModel):
    start: datetime
    end: datetime

    @model_validator(mode="after")
    def _check_order(self) -> "TimeWindow":
        if self.start.tzinfo is None or self.end.tzinfo is None:
            raise ValueError("window bounds must be timezone-aware")
        if self.start >= self.end:
            raise ValueError("window start must be before end")
        return self

    @property
    def start_iso(self) -> str:
        return format_iso(self.start)

    @property
    def end_iso(self) -> str:
        return format_iso(self.end)

    @property
    def minutes(self) -> int:
        return int((self.end - self.start).total_seconds() // 60)


class TrafficObservation(BaseModel):
    request_count: int = Field(0, ge=0)
