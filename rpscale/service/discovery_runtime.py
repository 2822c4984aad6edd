"""The discovery loop: periodic announcements and answers to probes."""

from __future__ import annotations

import contextlib
import socket
import time
from dataclasses import dataclass, field
from typing import List

from rpscale.service.config import MobileServiceConfig
from rpscale.service.discovery import (
    DISCOVERY_ANNOUNCE_INTERVAL_MS,
    DiscoverySocketConfig,
    bind_announcement_socket,
    bind_discovery_socket,
    discovery_response_for_packet,
    send_discovery_announcement,
)
from rpscale.service.mobile_contract import ServiceIdentity

_BUFFER_SIZE = 2048
_ANNOUNCE_INTERVAL = DISCOVERY_ANNOUNCE_INTERVAL_MS / 1000.0


@dataclass(frozen=True)
class DiscoveryRuntimeState:
    """What the discovery loop announces."""

    identity: ServiceIdentity
    http_port: int
    candidate_ports: List[int] = field(default_factory=list)

    @classmethod
    def from_config(
        cls, config: MobileServiceConfig, identity: ServiceIdentity
    ) -> "DiscoveryRuntimeState":
        """State taken from the service config's HTTP port and candidate ports."""
        return cls(
            identity=identity,
            http_port=config.http_port(),
            candidate_ports=list(config.candidate_ports),
        )


def serve_discovery(config: DiscoverySocketConfig, state: DiscoveryRuntimeState) -> None:
    """Bind the sockets and run the discovery loop until a socket error occurs."""
    with contextlib.closing(bind_discovery_socket(config)) as sock, contextlib.closing(
        bind_announcement_socket()
    ) as announce_sock:
        serve_discovery_socket(sock, announce_sock, config, state)


def serve_discovery_socket(
    sock: socket.socket,
    announce_sock: socket.socket,
    config: DiscoverySocketConfig,
    state: DiscoveryRuntimeState,
) -> None:
    """Announce periodically and answer probes; raise ``OSError`` on a receive failure."""
    last_announce = time.monotonic() - _ANNOUNCE_INTERVAL

    while True:
        if time.monotonic() - last_announce >= _ANNOUNCE_INTERVAL:
            with contextlib.suppress(OSError):
                send_discovery_announcement(
                    announce_sock,
                    config,
                    state.identity,
                    state.http_port,
                    state.candidate_ports,
                )
            last_announce = time.monotonic()

        try:
            packet, remote = sock.recvfrom(_BUFFER_SIZE)
        except (TimeoutError, socket.timeout, BlockingIOError, InterruptedError):
            continue

        response = discovery_response_for_packet(
            packet, state.identity, state.http_port, state.candidate_ports
        )
        if response is not None:
            with contextlib.suppress(OSError):
                sock.sendto(response, remote)