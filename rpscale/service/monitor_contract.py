"""Monitor and batch state bodies of the mobile API."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from rpscale.scale.reading import Reading
from rpscale.service.mobile_contract import ServiceIdentity

GODEX = "godex"


def printer_id(active_printer: Any) -> str:
    """The lower-case identifier of a printer kind given as text or as an enum member."""
    value = getattr(active_printer, "value", active_printer)
    return str(value).strip().lower()


def _normalize_unit(unit: str) -> str:
    return unit.strip().lower() or "kg"


@dataclass(frozen=True)
class MonitorProfile:
    """The operator profile shown on the phone."""

    role: str
    display_name: str
    legal_name: str
    profile_ref: str
    phone: str = ""
    avatar_url: str = ""

    @classmethod
    def from_identity(cls, identity: ServiceIdentity) -> "MonitorProfile":
        """Profile taken from the service identity."""
        return cls(
            role=identity.role,
            display_name=identity.display_name,
            legal_name=identity.display_name,
            profile_ref=identity.server_ref,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "role": self.role,
            "display_name": self.display_name,
            "legal_name": self.legal_name,
            "ref": self.profile_ref,
            "phone": self.phone,
            "avatar_url": self.avatar_url,
        }


@dataclass(frozen=True)
class ScaleSnapshot:
    """The latest scale reading as seen by the phone."""

    source: str = ""
    port: str = ""
    weight: Optional[float] = None
    unit: str = "kg"
    stable: Optional[bool] = None
    error: str = ""
    updated_at: str = ""

    @classmethod
    def disconnected(cls) -> "ScaleSnapshot":
        """No scale reading yet."""
        return cls()

    @classmethod
    def from_reading(cls, reading: Reading) -> "ScaleSnapshot":
        """Snapshot of a reading, with its unit normalised."""
        return cls(
            source=reading.source,
            port=reading.port,
            weight=reading.weight,
            unit=_normalize_unit(reading.unit),
            stable=reading.stable,
            error=reading.error,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ZebraSnapshot:
    """State of an RFID printer; always disconnected in driver scope."""

    connected: bool = False
    device_path: str = ""
    name: str = ""
    device_state: str = ""
    media_state: str = ""
    read_line1: str = ""
    read_line2: str = ""
    last_epc: str = ""
    verify: str = "idle"
    action: str = "printer state"
    error: str = ""
    updated_at: str = ""

    @classmethod
    def disconnected(cls) -> "ZebraSnapshot":
        """The idle, disconnected state."""
        return cls()

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class MonitorPrinter:
    """Whether the active printer's device is present."""

    ok: bool
    connected: bool
    kind: str
    label: str
    device_paths: List[str] = field(default_factory=list)
    error: str = ""
    updated_at: str = ""

    @classmethod
    def connected_to(cls, active_printer: Any, device_path: str) -> "MonitorPrinter":
        """The printer is present at ``device_path``."""
        return cls(
            ok=True,
            connected=True,
            kind=printer_id(active_printer),
            label="ulangan",
            device_paths=[device_path],
        )

    @classmethod
    def disconnected(cls, active_printer: Any, error: str = "") -> "MonitorPrinter":
        """The printer is absent, optionally with the reason."""
        return cls(
            ok=False,
            connected=False,
            kind=printer_id(active_printer),
            label="ulanmagan",
            error=error,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class BatchSnapshot:
    """A printing batch; inactive in driver scope."""

    active: bool
    chat_id: int
    item_code: str
    item_name: str
    warehouse: str
    print_mode: str
    printer: str
    quantity_source: str
    manual_qty_kg: float
    tare: bool
    tare_kg: float
    total_qty: float
    updated_at: str

    @classmethod
    def inactive(cls, active_printer: Any) -> "BatchSnapshot":
        """No batch running; label mode for Godex, RFID mode otherwise."""
        printer = printer_id(active_printer)
        return cls(
            active=False,
            chat_id=0,
            item_code="",
            item_name="",
            warehouse="",
            print_mode="label" if printer == GODEX else "rfid",
            printer=printer,
            quantity_source="scale",
            manual_qty_kg=0.0,
            tare=False,
            tare_kg=0.0,
            total_qty=0.0,
            updated_at="",
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class PrintRequestSnapshot:
    """The latest print request; idle in driver scope."""

    epc: str = ""
    qty: Optional[float] = None
    gross_qty: Optional[float] = None
    unit: str = "kg"
    item_code: str = ""
    item_name: str = ""
    mode: str = ""
    printer: str = ""
    tare: bool = False
    tare_kg: float = 0.0
    status: str = "idle"
    error: str = ""
    requested_at: str = ""
    updated_at: str = ""

    @classmethod
    def idle(cls) -> "PrintRequestSnapshot":
        """No print request."""
        return cls()

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ArchivePrintSnapshot:
    """The latest archive reprint; idle in driver scope."""

    request_id: str = ""
    session_id: str = ""
    item_code: str = ""
    item_name: str = ""
    total_qty: float = 0.0
    unit: str = "kg"
    batch_time: str = ""
    printer: str = ""
    status: str = "idle"
    error: str = ""
    requested_at: str = ""
    updated_at: str = ""

    @classmethod
    def idle(cls) -> "ArchivePrintSnapshot":
        """No archive reprint."""
        return cls()

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class MonitorState:
    """Everything the phone's monitor screen shows."""

    scale: ScaleSnapshot
    zebra: ZebraSnapshot
    printer: MonitorPrinter
    batch: BatchSnapshot
    print_request: PrintRequestSnapshot = field(default_factory=PrintRequestSnapshot.idle)
    archive_print: ArchivePrintSnapshot = field(default_factory=ArchivePrintSnapshot.idle)
    updated_at: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scale": self.scale.to_dict(),
            "zebra": self.zebra.to_dict(),
            "printer": self.printer.to_dict(),
            "batch": self.batch.to_dict(),
            "print_request": self.print_request.to_dict(),
            "archive_print": self.archive_print.to_dict(),
            "updated_at": self.updated_at,
        }


@dataclass(frozen=True)
class MonitorResponse:
    """Body of the monitor state endpoint."""

    profile: MonitorProfile
    state: MonitorState
    printer: MonitorPrinter
    ok: bool = True

    @classmethod
    def _build(
        cls,
        identity: ServiceIdentity,
        active_printer: Any,
        scale: ScaleSnapshot,
        batch: Optional[BatchSnapshot],
        printer: Optional[MonitorPrinter],
    ) -> "MonitorResponse":
        if batch is None:
            batch = BatchSnapshot.inactive(active_printer)
        if printer is None:
            printer = MonitorPrinter.disconnected(active_printer)
        state = MonitorState(
            scale=scale,
            zebra=ZebraSnapshot.disconnected(),
            printer=printer,
            batch=batch,
        )
        return cls(profile=MonitorProfile.from_identity(identity), state=state, printer=printer)

    @classmethod
    def driver_idle(
        cls,
        identity: ServiceIdentity,
        active_printer: Any,
        batch: Optional[BatchSnapshot] = None,
        printer: Optional[MonitorPrinter] = None,
    ) -> "MonitorResponse":
        """Monitor state with no scale reading; batch and printer default to inactive/absent."""
        return cls._build(identity, active_printer, ScaleSnapshot.disconnected(), batch, printer)

    @classmethod
    def driver_with_scale(
        cls,
        identity: ServiceIdentity,
        active_printer: Any,
        reading: Reading,
        batch: Optional[BatchSnapshot] = None,
        printer: Optional[MonitorPrinter] = None,
    ) -> "MonitorResponse":
        """Monitor state showing a scale reading."""
        return cls._build(
            identity, active_printer, ScaleSnapshot.from_reading(reading), batch, printer
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.ok,
            "profile": self.profile.to_dict(),
            "state": self.state.to_dict(),
            "printer": self.printer.to_dict(),
        }


@dataclass(frozen=True)
class BatchStateResponse:
    """Body of the batch state endpoint."""

    batch: BatchSnapshot
    ok: bool = True

    @classmethod
    def inactive(cls, active_printer: Any) -> "BatchStateResponse":
        """No batch running on the active printer."""
        return cls(batch=BatchSnapshot.inactive(active_printer))

    def to_dict(self) -> Dict[str, Any]:
        return {"ok": self.ok, "batch": self.batch.to_dict()}