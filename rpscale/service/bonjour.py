"""Bonjour (DNS-SD) description of the mobile API service."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Tuple

from rpscale.service.mobile_contract import APP_ID, SERVICE_ID, ServiceIdentity

BONJOUR_SERVICE_TYPE = "_gscale-mobileapi._tcp.local."


class BonjourError(Exception):
    """The Bonjour service description is invalid or could not be registered."""


@dataclass(frozen=True)
class BonjourServiceConfig:
    """Instance name, host, port and TXT properties of the advertised service."""

    instance_name: str
    host_name: str
    port: int
    properties: List[Tuple[str, str]] = field(default_factory=list)


def normalize_bonjour_text(value: str, fallback: str) -> str:
    """Trim a value, fall back when blank, and flatten line breaks."""
    value = value.strip()
    if not value:
        return fallback
    return value.replace("\n", " ").replace("\r", " ")


def _strip_suffix_repeatedly(value: str, suffix: str) -> str:
    while value.endswith(suffix):
        value = value[: -len(suffix)]
    return value


def trim_bonjour_host_name(value: str) -> str:
    """Strip ``.local`` suffixes and dots from a host name, defaulting to the app id."""
    value = _strip_suffix_repeatedly(value.strip(), ".local.")
    value = _strip_suffix_repeatedly(value, ".local").strip(".")
    return value or APP_ID


def bonjour_config(identity: ServiceIdentity, server_name: str, port: int) -> BonjourServiceConfig:
    """Build the advertisement for a service identity listening on ``port``."""
    properties = [
        ("service", SERVICE_ID),
        ("app", APP_ID),
        ("server_name", normalize_bonjour_text(identity.server_name, APP_ID)),
        ("server_ref", normalize_bonjour_text(identity.server_ref, "unknown")),
        ("display_name", normalize_bonjour_text(identity.display_name, "Operator")),
        ("role", normalize_bonjour_text(identity.role, "operator")),
        ("http_port", str(port)),
    ]
    return BonjourServiceConfig(
        instance_name=normalize_bonjour_text(server_name, APP_ID),
        host_name=f"{trim_bonjour_host_name(server_name)}.local.",
        port=port,
        properties=properties,
    )


def txt_record_bytes(properties: Iterable[Tuple[str, str]]) -> bytes:
    """Encode properties as a DNS-SD TXT record of length-prefixed ``key=value`` items."""
    out = bytearray()
    for key, value in properties:
        if "=" in key or not key.isascii():
            raise BonjourError(f"invalid TXT key: {key}")
        item = f"{key}={value}".encode("utf-8")
        if len(item) > 0xFF:
            raise BonjourError(f"TXT item too long: {key}")
        out.append(len(item))
        out.extend(item)
    return bytes(out)