"""UDP discovery: answering probes and broadcasting announcements."""

from __future__ import annotations

import ipaddress
import os
import socket
import sys
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple, Union

import psutil

from rpscale.service.config import DEFAULT_DISCOVERY_PORT
from rpscale.service.mobile_contract import DiscoveryAnnouncement, ServiceIdentity

DISCOVERY_PROBE_V1 = "GSCALE_DISCOVER_V1"
DISCOVERY_ANNOUNCE_INTERVAL_MS = 250

_BROADCAST_IP = "255.255.255.255"

IPv4Like = Union[str, int, ipaddress.IPv4Address]
SocketAddr = Tuple[str, int]


def _ip(value: IPv4Like) -> str:
    return str(ipaddress.IPv4Address(value))


def _port_or_default(port: int) -> int:
    return port if port != 0 else DEFAULT_DISCOVERY_PORT


def _dedupe(targets: Iterable[SocketAddr]) -> List[SocketAddr]:
    out: List[SocketAddr] = []
    for target in targets:
        if target not in out:
            out.append(target)
    return out


def _normalize_announce_targets(targets: Sequence[IPv4Like], port: int) -> List[SocketAddr]:
    if not targets:
        return [(_BROADCAST_IP, port)]
    return _dedupe((_ip(target), port) for target in targets)


@dataclass(frozen=True)
class DiscoverySocketConfig:
    """Where the discovery socket binds and where announcements go (timeout in seconds)."""

    bind_addr: SocketAddr
    announce_targets: List[SocketAddr] = field(default_factory=list)
    read_timeout: float = 0.25

    @classmethod
    def create(
        cls,
        bind_ip: IPv4Like,
        discovery_port: int,
        announce_targets: Sequence[IPv4Like],
    ) -> "DiscoverySocketConfig":
        """Config announcing to the given IPs on the discovery port (broadcast if none)."""
        port = _port_or_default(discovery_port)
        return cls(
            bind_addr=(_ip(bind_ip), port),
            announce_targets=_normalize_announce_targets(list(announce_targets), port),
        )

    @classmethod
    def with_socket_targets(
        cls,
        bind_ip: IPv4Like,
        discovery_port: int,
        announce_targets: Sequence[Tuple[IPv4Like, int]],
    ) -> "DiscoverySocketConfig":
        """Config announcing to explicit ``(ip, port)`` targets (broadcast if none)."""
        port = _port_or_default(discovery_port)
        targets = list(announce_targets)
        if targets:
            normalized = _dedupe((_ip(ip), int(target_port)) for ip, target_port in targets)
        else:
            normalized = _normalize_announce_targets([], port)
        return cls(bind_addr=(_ip(bind_ip), port), announce_targets=normalized)


def is_discovery_probe(packet: bytes) -> bool:
    """Whether a packet is the discovery probe, ignoring surrounding whitespace."""
    try:
        text = bytes(packet).decode("utf-8")
    except UnicodeDecodeError:
        return False
    return text.strip() == DISCOVERY_PROBE_V1


def discovery_response_for_packet(
    packet: bytes,
    identity: ServiceIdentity,
    http_port: int,
    candidate_ports: Iterable[int],
) -> Optional[bytes]:
    """The announcement to send back for a probe packet, or ``None`` for anything else."""
    if not is_discovery_probe(packet):
        return None
    return DiscoveryAnnouncement.build(identity, http_port, candidate_ports).to_json_bytes()


def _set_reuse(sock: socket.socket) -> None:
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    reuse_port = getattr(socket, "SO_REUSEPORT", None)
    if reuse_port is not None and sys.platform.startswith(("linux", "darwin")):
        sock.setsockopt(socket.SOL_SOCKET, reuse_port, 1)


def bind_discovery_socket(config: DiscoverySocketConfig) -> socket.socket:
    """Bind a reusable broadcast-capable UDP socket with the configured read timeout."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        if os.name == "posix":
            _set_reuse(sock)
        sock.bind(config.bind_addr)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)
        sock.settimeout(config.read_timeout)
    except OSError:
        sock.close()
        raise
    return sock


def bind_announcement_socket() -> socket.socket:
    """Bind a broadcast-capable UDP socket on an ephemeral port."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        sock.bind(("0.0.0.0", 0))
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)
    except OSError:
        sock.close()
        raise
    return sock


def send_discovery_announcement(
    sock: socket.socket,
    config: DiscoverySocketConfig,
    identity: ServiceIdentity,
    http_port: int,
    candidate_ports: Iterable[int],
) -> int:
    """Send the announcement to every target; return how many were sent."""
    payload = DiscoveryAnnouncement.build(identity, http_port, candidate_ports).to_json_bytes()
    sent = 0
    for target in config.announce_targets:
        sock.sendto(payload, target)
        sent += 1
    return sent


def _is_private_ipv4(ip: ipaddress.IPv4Address) -> bool:
    first, second = ip.packed[0], ip.packed[1]
    return first == 10 or (first == 172 and 16 <= second <= 31) or (first == 192 and second == 168)


def _ipv4_broadcast(ip: ipaddress.IPv4Address, mask: ipaddress.IPv4Address) -> ipaddress.IPv4Address:
    return ipaddress.IPv4Address(int(ip) | (~int(mask) & 0xFFFFFFFF))


def broadcast_targets_from_ipv4_networks(
    networks: Iterable[Tuple[IPv4Like, IPv4Like]],
    discovery_port: int,
) -> List[SocketAddr]:
    """Limited broadcast plus the subnet broadcast of every private network."""
    port = _port_or_default(discovery_port)
    targets: List[SocketAddr] = [(_BROADCAST_IP, port)]
    for ip_value, mask_value in networks:
        ip = ipaddress.IPv4Address(ip_value)
        if not _is_private_ipv4(ip):
            continue
        target = (str(_ipv4_broadcast(ip, ipaddress.IPv4Address(mask_value))), port)
        if target not in targets:
            targets.append(target)
    return targets


def _collect_interface_ipv4_networks() -> Optional[List[Tuple[ipaddress.IPv4Address, ipaddress.IPv4Address]]]:
    try:
        addresses = psutil.net_if_addrs()
        stats = psutil.net_if_stats()
    except (OSError, RuntimeError, NotImplementedError):
        return None

    out = []
    for name, entries in addresses.items():
        status = stats.get(name)
        if status is None or not status.isup:
            continue
        for entry in entries:
            if entry.family != socket.AF_INET or not entry.netmask:
                continue
            try:
                ip = ipaddress.IPv4Address(entry.address)
                mask = ipaddress.IPv4Address(entry.netmask)
            except ValueError:
                continue
            if ip.is_loopback:
                continue
            out.append((ip, mask))
    return out


def collect_discovery_broadcast_targets(discovery_port: int) -> List[SocketAddr]:
    """Broadcast targets for the host's up, non-loopback interfaces."""
    networks = _collect_interface_ipv4_networks()
    if networks is None:
        return [(_BROADCAST_IP, _port_or_default(discovery_port))]
    return broadcast_targets_from_ipv4_networks(networks, discovery_port)