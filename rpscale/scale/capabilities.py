"""Description of what a scale driver offers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ScaleTransport(Enum):
    """How a scale is connected."""

    SERIAL = "serial"
    USB = "usb"
    WIFI = "wifi"
    BLUETOOTH = "bluetooth"
    VENDOR_SDK = "vendor_sdk"
    SIMULATED = "simulated"


def _normalize_unit(unit: str) -> str:
    return unit.strip().lower() or "kg"


@dataclass(frozen=True)
class ScaleCapabilities:
    """Features and connection details of a scale driver."""

    driver_id: str
    display_name: str
    transport: ScaleTransport
    realtime_weight: bool
    stability_flag: bool
    raw_diagnostics: bool
    default_unit: str
    connection: str

    @classmethod
    def serial(cls, port: str, baud: int, default_unit: str) -> "ScaleCapabilities":
        """Capabilities of the serial scale driver on the given port."""
        return cls(
            driver_id="serial-scale",
            display_name="Serial Scale",
            transport=ScaleTransport.SERIAL,
            realtime_weight=True,
            stability_flag=True,
            raw_diagnostics=True,
            default_unit=_normalize_unit(default_unit),
            connection=f"{port.strip()}@{baud}",
        )