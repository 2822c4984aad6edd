"""A single weight reading reported by a scale driver."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Optional


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Reading:
    """One observation from a scale: weight, stability, raw frame or error."""

    source: str
    port: str
    baud: int
    weight: Optional[float] = None
    unit: str = ""
    stable: Optional[bool] = None
    raw: str = ""
    error: str = ""
    updated_at: datetime = field(default_factory=_now)

    @classmethod
    def from_source(cls, source: str, port: str, baud: int, unit: str) -> "Reading":
        """Create an empty reading for the given source and port."""
        return cls(source=source.strip(), port=port.strip(), baud=baud, unit=unit)

    @classmethod
    def serial(cls, port: str, baud: int, unit: str) -> "Reading":
        """Create an empty reading from a serial scale."""
        return cls.from_source("serial", port, baud, unit)

    def with_weight(self, weight: float, stable: Optional[bool], raw: str) -> "Reading":
        """Return a copy carrying a weight, its stability and the raw frame."""
        return replace(self, weight=weight, stable=stable, raw=raw, updated_at=_now())

    def with_raw(self, raw: str) -> "Reading":
        """Return a copy carrying only the raw frame."""
        return replace(self, raw=raw, updated_at=_now())

    def with_error(self, error: str) -> "Reading":
        """Return a copy carrying an error message."""
        return replace(self, error=error, updated_at=_now())