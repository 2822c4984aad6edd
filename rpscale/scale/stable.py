"""Tracking of how long a scale has held a steady weight."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional

from rpscale.scale.reading import Reading


class StableState(Enum):
    """Where a weight stands on its way to being ready."""

    NO_WEIGHT = "no_weight"
    MOVING = "moving"
    HOLDING = "holding"
    READY = "ready"
    ERROR = "error"


@dataclass(frozen=True)
class StableConfig:
    """How long a weight must hold, and how far it may drift while holding."""

    hold_duration: timedelta = timedelta(milliseconds=800)
    tolerance_kg: float = 0.005


@dataclass(frozen=True)
class StableSnapshot:
    """The tracker's view after the latest reading."""

    state: StableState
    weight: Optional[float]
    unit: str
    stable_since: Optional[datetime]
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


def _normalize_unit(unit: str) -> str:
    return unit.strip().lower() or "kg"


class StableTracker:
    """Turns a stream of readings into hold/ready states."""

    def __init__(self, config: Optional[StableConfig] = None) -> None:
        self._config = config if config is not None else StableConfig()
        self._candidate_weight: Optional[float] = None
        self._stable_since: Optional[datetime] = None
        self._last = StableSnapshot(
            state=StableState.NO_WEIGHT, weight=None, unit="kg", stable_since=None
        )

    def apply(self, reading: Reading) -> StableSnapshot:
        """Feed a reading and return the resulting snapshot."""
        now = reading.updated_at
        unit = _normalize_unit(reading.unit)

        if reading.error.strip():
            return self._reset(StableState.ERROR, None, unit, now)
        if reading.weight is None:
            return self._reset(StableState.NO_WEIGHT, None, unit, now)
        weight = reading.weight
        if reading.stable is not True:
            return self._reset(StableState.MOVING, weight, unit, now)

        if self._candidate_changed(weight):
            self._candidate_weight = weight
            self._stable_since = now
            return self._snapshot(StableState.HOLDING, weight, unit, now)

        since = self._stable_since if self._stable_since is not None else now
        elapsed = now - since
        ready = elapsed >= timedelta(0) and elapsed >= self._config.hold_duration
        state = StableState.READY if ready else StableState.HOLDING
        return self._snapshot(state, weight, unit, now)

    def last(self) -> StableSnapshot:
        """The most recent snapshot."""
        return self._last

    def _reset(
        self, state: StableState, weight: Optional[float], unit: str, now: datetime
    ) -> StableSnapshot:
        self._candidate_weight = None
        self._stable_since = None
        return self._snapshot(state, weight, unit, now)

    def _snapshot(
        self, state: StableState, weight: Optional[float], unit: str, now: datetime
    ) -> StableSnapshot:
        self._last = StableSnapshot(
            state=state,
            weight=weight,
            unit=unit,
            stable_since=self._stable_since,
            updated_at=now,
        )
        return self._last

    def _candidate_changed(self, weight: float) -> bool:
        if self._candidate_weight is None:
            return True
        return abs(self._candidate_weight - weight) > self._config.tolerance_kg