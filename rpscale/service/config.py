"""Addresses and ports of the mobile API service."""

from __future__ import annotations

import os
import re
import socket
from dataclasses import dataclass, field
from itertools import groupby
from typing import Iterable, List, Optional

DEFAULT_DISCOVERY_PORT = 18081
DEFAULT_MOBILE_API_PORTS = (39117, 41257, 43391, 45533, 47681)

_PORT_RE = re.compile(r"\+?[0-9]+")


def default_mobile_api_port() -> int:
    """The first default mobile API port."""
    return DEFAULT_MOBILE_API_PORTS[0]


def _parse_port(text: str) -> Optional[int]:
    if not _PORT_RE.fullmatch(text):
        return None
    value = int(text)
    return value if value <= 0xFFFF else None


def _normalize_candidate_ports(ports: Iterable[int]) -> List[int]:
    ports = list(ports)
    if not ports:
        return list(DEFAULT_MOBILE_API_PORTS)
    kept = [port for port, _ in groupby(p for p in ports if p > 0)]
    return kept or list(DEFAULT_MOBILE_API_PORTS)


def _normalize_listen_host(raw: str) -> str:
    return raw.strip() or "0.0.0.0"


def _normalize_server_name(raw: str) -> str:
    return raw.strip() or "gscale-zebra"


def parse_candidate_ports(raw: str) -> List[int]:
    """Parse a comma separated port list, skipping bad, zero and repeated entries."""
    out: List[int] = []
    for part in raw.split(","):
        port = _parse_port(part.strip())
        if port is None or port == 0 or port in out:
            continue
        out.append(port)
    return _normalize_candidate_ports(out)


def _is_tcp_listen_addr_available(host: str, port: int) -> bool:
    try:
        infos = socket.getaddrinfo(host.strip("[]"), port, type=socket.SOCK_STREAM)
    except (OSError, UnicodeError):
        return False
    for family, kind, proto, _, address in infos:
        try:
            with socket.socket(family, kind, proto) as sock:
                if os.name != "nt":
                    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
                sock.bind(address)
                sock.listen()
                return True
        except OSError:
            continue
    return False


def select_listen_addr(explicit_addr: str, bind_host: str, candidate_ports: Iterable[int]) -> str:
    """The explicit address, else the first candidate port free to listen on, else the first."""
    explicit_addr = explicit_addr.strip()
    if explicit_addr:
        return explicit_addr

    host = _normalize_listen_host(bind_host)
    candidates = _normalize_candidate_ports(candidate_ports)
    for port in candidates:
        if _is_tcp_listen_addr_available(host, port):
            return f"{host}:{port}"
    return f"{host}:{candidates[0]}"


def port_from_listen_addr(addr: str) -> Optional[int]:
    """The non-zero port at the end of ``host:port`` or ``:port``, if any."""
    addr = addr.strip()
    if not addr:
        return None
    if ":" not in addr:
        return None
    port = _parse_port(addr.rpartition(":")[2])
    return port if port else None


def server_ref_for_port(server_name: str, http_port: int, candidate_ports: Iterable[int]) -> str:
    """``name_N`` where N is the 1-based position of the port among candidates, else the port."""
    name = _normalize_server_name(server_name)
    ports = list(candidate_ports)
    suffix = ports.index(http_port) + 1 if http_port in ports else http_port
    return f"{name}_{suffix}"


@dataclass(frozen=True)
class MobileServiceConfig:
    """Where the mobile API listens and how it names itself."""

    listen_host: str
    listen_addr: str
    discovery_addr: str
    candidate_ports: List[int] = field(default_factory=list)
    server_name: str = "gscale-zebra"

    @classmethod
    def create(
        cls,
        listen_host: str,
        explicit_listen_addr: str,
        candidate_ports: Iterable[int],
        server_name: str,
    ) -> "MobileServiceConfig":
        """Normalise inputs and choose the listen address."""
        ports = _normalize_candidate_ports(candidate_ports)
        host = _normalize_listen_host(listen_host)
        return cls(
            listen_host=host,
            listen_addr=select_listen_addr(explicit_listen_addr, host, ports),
            discovery_addr=f"0.0.0.0:{DEFAULT_DISCOVERY_PORT}",
            candidate_ports=ports,
            server_name=_normalize_server_name(server_name),
        )

    def http_port(self) -> int:
        """The port of the listen address, or the default mobile API port."""
        port = port_from_listen_addr(self.listen_addr)
        return port if port is not None else default_mobile_api_port()

    def default_server_ref(self) -> str:
        """The server reference derived from the HTTP port's position."""
        return server_ref_for_port(self.server_name, self.http_port(), self.candidate_ports)