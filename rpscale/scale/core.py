"""Scale state shared between drivers."""

from __future__ import annotations

from dataclasses import replace

from rpscale.scale.reading import Reading


def _normalize_unit(unit: str) -> str:
    return unit.strip().lower() or "kg"


class ScaleCoreState:
    """Keeps the latest reading and fills in a unit when a driver omits it."""

    def __init__(self, default_unit: str) -> None:
        self._last = Reading.from_source("core", "", 0, _normalize_unit(default_unit))

    def apply_reading(self, reading: Reading) -> Reading:
        """Store a reading, inheriting the previous unit if it has none."""
        if not reading.unit.strip():
            reading = replace(reading, unit=self._last.unit)
        self._last = reading
        return self._last

    def last(self) -> Reading:
        """The most recently applied reading."""
        return self._last