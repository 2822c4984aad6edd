"""Response bodies of the mobile API that the phone application expects."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List

from rpscale.service.config import (
    DEFAULT_DISCOVERY_PORT,
    DEFAULT_MOBILE_API_PORTS,
    default_mobile_api_port,
)

APP_ID = "gscale-zebra"
SERVICE_ID = "mobileapi"


def _normalize(value: str, fallback: str) -> str:
    value = value.strip()
    if not value:
        return fallback
    return value.replace("\n", " ").replace("\r", " ")


def _normalize_port(port: int) -> int:
    return port if port != 0 else default_mobile_api_port()


def _normalize_candidate_ports(candidate_ports: Iterable[int]) -> List[int]:
    ports = list(candidate_ports)
    if not ports:
        return list(DEFAULT_MOBILE_API_PORTS)
    return [port for port in ports if port > 0]


@dataclass(frozen=True)
class ServiceIdentity:
    """How the service names itself and its operator; blanks fall back to defaults."""

    server_name: str
    server_ref: str
    display_name: str
    role: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "server_name", _normalize(self.server_name, APP_ID))
        object.__setattr__(self, "server_ref", _normalize(self.server_ref, "unknown"))
        object.__setattr__(self, "display_name", _normalize(self.display_name, "Operator"))
        object.__setattr__(self, "role", _normalize(self.role, "operator"))


@dataclass(frozen=True)
class HealthResponse:
    """Body of the health check."""

    ok: bool = True
    service: str = SERVICE_ID

    def to_dict(self) -> Dict[str, Any]:
        return {"ok": self.ok, "service": self.service}


@dataclass(frozen=True)
class HandshakeResponse:
    """Body of the handshake a phone performs after discovering the service."""

    server_name: str
    server_ref: str
    display_name: str
    role: str
    http_port: int
    candidate_ports: List[int]
    ok: bool = True
    service: str = SERVICE_ID
    app: str = APP_ID
    phone: str = ""
    discovery_port: int = DEFAULT_DISCOVERY_PORT
    monitor_path: str = "/v1/mobile/monitor/state"
    profile_path: str = "/v1/mobile/profile"
    items_path: str = "/v1/mobile/items"
    batch_state_path: str = "/v1/mobile/batch/state"
    requires_auth: bool = False

    @classmethod
    def build(
        cls, identity: ServiceIdentity, http_port: int, candidate_ports: Iterable[int]
    ) -> "HandshakeResponse":
        """Handshake for the given identity and ports."""
        return cls(
            server_name=identity.server_name,
            server_ref=identity.server_ref,
            display_name=identity.display_name,
            role=identity.role,
            http_port=_normalize_port(http_port),
            candidate_ports=_normalize_candidate_ports(candidate_ports),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.ok,
            "service": self.service,
            "app": self.app,
            "server_name": self.server_name,
            "server_ref": self.server_ref,
            "display_name": self.display_name,
            "role": self.role,
            "phone": self.phone,
            "http_port": self.http_port,
            "discovery_port": self.discovery_port,
            "candidate_ports": list(self.candidate_ports),
            "monitor_path": self.monitor_path,
            "profile_path": self.profile_path,
            "items_path": self.items_path,
            "batch_state_path": self.batch_state_path,
            "requires_auth": self.requires_auth,
        }


@dataclass(frozen=True)
class DiscoveryAnnouncement:
    """The UDP announcement that lets phones find the service."""

    server_name: str
    server_ref: str
    display_name: str
    role: str
    http_port: int
    candidate_ports: List[int]
    announcement_type: str = "gscale_announce_v1"
    app: str = APP_ID
    service: str = SERVICE_ID

    @classmethod
    def build(
        cls, identity: ServiceIdentity, http_port: int, candidate_ports: Iterable[int]
    ) -> "DiscoveryAnnouncement":
        """Announcement for the given identity and ports."""
        return cls(
            server_name=identity.server_name,
            server_ref=identity.server_ref,
            display_name=identity.display_name,
            role=identity.role,
            http_port=_normalize_port(http_port),
            candidate_ports=_normalize_candidate_ports(candidate_ports),
        )

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "type": self.announcement_type,
            "app": self.app,
            "service": self.service,
            "server_name": self.server_name,
            "server_ref": self.server_ref,
            "display_name": self.display_name,
            "role": self.role,
            "http_port": self.http_port,
        }
        if self.candidate_ports:
            body["candidate_ports"] = list(self.candidate_ports)
        return body

    def to_json_bytes(self) -> bytes:
        """Compact JSON encoding of the announcement."""
        return json.dumps(self.to_dict(), separators=(",", ":")).encode("utf-8")


@dataclass(frozen=True)
class SetupStatusResponse:
    """Setup status; the driver owns no ERP connection."""

    ok: bool
    erp_write_configured: bool
    erp_write_simulated: bool
    erp_read_configured: bool
    batch_actions_ready: bool
    erp_url: str
    erp_read_url: str
    warehouse_mode: str
    default_warehouse: str
    warehouse_default_configured: bool
    warehouse_default_active: bool

    @classmethod
    def driver_scope(cls) -> "SetupStatusResponse":
        """Status reported by the driver: nothing configured, manual warehouse."""
        return cls(
            ok=True,
            erp_write_configured=False,
            erp_write_simulated=False,
            erp_read_configured=False,
            batch_actions_ready=False,
            erp_url="",
            erp_read_url="",
            warehouse_mode="manual",
            default_warehouse="",
            warehouse_default_configured=False,
            warehouse_default_active=False,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.ok,
            "erp_write_configured": self.erp_write_configured,
            "erp_write_simulated": self.erp_write_simulated,
            "erp_read_configured": self.erp_read_configured,
            "batch_actions_ready": self.batch_actions_ready,
            "erp_url": self.erp_url,
            "erp_read_url": self.erp_read_url,
            "warehouse_mode": self.warehouse_mode,
            "default_warehouse": self.default_warehouse,
            "warehouse_default_configured": self.warehouse_default_configured,
            "warehouse_default_active": self.warehouse_default_active,
        }


@dataclass(frozen=True)
class EmptyItemsResponse:
    """Item catalogue; always empty in driver scope."""

    ok: bool = True
    items: List[Any] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"ok": self.ok, "items": list(self.items)}


@dataclass(frozen=True)
class EmptyWarehousesResponse:
    """Warehouse list; always empty in driver scope."""

    ok: bool = True
    warehouses: List[Any] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"ok": self.ok, "warehouses": list(self.warehouses)}


@dataclass(frozen=True)
class ItemWarehousesResponse:
    """Warehouses holding one item; always empty in driver scope."""

    item_code: str = ""
    ok: bool = True
    warehouses: List[Any] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.ok,
            "item_code": self.item_code,
            "warehouses": list(self.warehouses),
        }


@dataclass(frozen=True)
class EmptyArchiveResponse:
    """Print archive; always empty in driver scope."""

    ok: bool = True
    archive: List[Any] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"ok": self.ok, "archive": list(self.archive)}