"""Finding the serial port a scale is attached to."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Set, Union


@dataclass(frozen=True)
class DetectedScalePort:
    """A device path and baud rate chosen for the scale."""

    device: str
    baud: int


@dataclass(frozen=True)
class ProbeOutcome:
    """What a probe saw on a port."""

    parsed_weight: bool
    has_data: bool

    @classmethod
    def empty(cls) -> "ProbeOutcome":
        """Nothing was received."""
        return cls(parsed_weight=False, has_data=False)

    @classmethod
    def with_data(cls) -> "ProbeOutcome":
        """Data arrived but no weight was recognised."""
        return cls(parsed_weight=False, has_data=True)

    @classmethod
    def with_parsed_weight(cls) -> "ProbeOutcome":
        """A weight was recognised."""
        return cls(parsed_weight=True, has_data=True)


class ScaleProbe(ABC):
    """Listens on a port for a while to see whether a scale talks there."""

    @abstractmethod
    def probe(self, device: str, baud: int) -> ProbeOutcome:
        """Probe a device at a baud rate; raise ``OSError`` when it cannot be read."""


class DetectError(Exception):
    """The scale port could not be determined."""


class EmptyBaudListError(DetectError):
    """No baud rates were given."""

    def __init__(self) -> None:
        super().__init__("empty baud list")


class NoCandidatesError(DetectError):
    """No serial devices were found."""

    def __init__(self) -> None:
        super().__init__("serial device topilmadi (/dev/ttyUSB* yoki /dev/ttyACM*)")


class PortBusyError(DetectError):
    """A candidate port exists but is held by something else."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"serial port band: {detail}")
        self.detail = detail


def detect_scale_port_with_probe(
    explicit_device: str,
    bauds: Sequence[int],
    candidates: Sequence[str],
    probe: ScaleProbe,
) -> DetectedScalePort:
    """Pick the scale port: the explicit device, the first that talks, or the first candidate."""
    if not bauds:
        raise EmptyBaudListError()
    first_baud = bauds[0]

    explicit_device = explicit_device.strip()
    if explicit_device:
        return DetectedScalePort(device=explicit_device, baud=first_baud)

    if not candidates:
        raise NoCandidatesError()

    last_busy: Optional[str] = None
    for device in candidates:
        for baud in bauds:
            try:
                outcome = probe.probe(device, baud)
            except OSError as err:
                if is_busy_error(str(err)):
                    last_busy = f"{device} band: {err}"
                continue
            if outcome.parsed_weight or outcome.has_data:
                return DetectedScalePort(device=device, baud=baud)

    if last_busy is not None:
        raise PortBusyError(last_busy)

    return DetectedScalePort(device=candidates[0], baud=first_baud)


def list_serial_candidates() -> List[str]:
    """Serial devices under ``/dev`` that may be a scale."""
    return collect_serial_candidates(Path("/dev"))


def collect_serial_candidates(dev_root: Union[str, Path]) -> List[str]:
    """Serial devices under ``dev_root``: by-id links first, then ttyUSB*, then ttyACM*."""
    root = Path(dev_root)
    seen: Set[str] = set()
    out: List[str] = []

    _extend_unique(out, seen, (_canonical(p) for p in _sorted_entries(root / "serial" / "by-id")))

    entries = _sorted_entries(root)
    for prefix in ("ttyUSB", "ttyACM"):
        _extend_unique(out, seen, (p for p in entries if p.name.startswith(prefix)))

    return out


def is_busy_error(err: str) -> bool:
    """Whether an error message says the port is busy or not accessible."""
    msg = err.lower()
    return (
        "resource busy" in msg
        or "device or resource busy" in msg
        or "permission denied" in msg
    )


def _sorted_entries(path: Path) -> List[Path]:
    try:
        return sorted(path.iterdir())
    except OSError:
        return []


def _canonical(path: Path) -> Path:
    try:
        return path.resolve(strict=True)
    except (OSError, RuntimeError):
        return path


def _extend_unique(out: List[str], seen: Set[str], paths: Iterable[Path]) -> None:
    for path in paths:
        value = str(path).strip()
        if not value or value in seen:
            continue
        seen.add(value)
        out.append(value)