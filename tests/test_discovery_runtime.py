import json
import socket
import threading

import pytest

from rpscale.service.config import MobileServiceConfig
from rpscale.service.discovery import (
    DISCOVERY_PROBE_V1,
    DiscoverySocketConfig,
    bind_announcement_socket,
    bind_discovery_socket,
    discovery_response_for_packet,
)
from rpscale.service.discovery_runtime import DiscoveryRuntimeState, serve_discovery_socket
from rpscale.service.mobile_contract import ServiceIdentity


def identity():
    return ServiceIdentity("rp-scale", "dev-operator", "Operator One", "admin")


def state():
    return DiscoveryRuntimeState(identity=identity(), http_port=39117, candidate_ports=[39117, 41257])


def free_udp_port():
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


def test_runtime_state_uses_config_http_port_and_candidates():
    config = MobileServiceConfig.create("127.0.0.1", "127.0.0.1:41257", [41257], "rp-scale")
    runtime = DiscoveryRuntimeState.from_config(config, identity())

    assert runtime.http_port == 41257
    assert runtime.candidate_ports == [41257]


def test_probe_response_matches_runtime_state():
    current = state()
    response = discovery_response_for_packet(
        DISCOVERY_PROBE_V1.encode(), current.identity, current.http_port, current.candidate_ports
    )
    body = json.loads(response)

    assert body["type"] == "gscale_announce_v1"
    assert body["service"] == "mobileapi"
    assert body["http_port"] == 39117
    assert body["candidate_ports"][1] == 41257


def test_loop_announces_answers_probes_and_stops_on_socket_error():
    listener = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    listener.bind(("127.0.0.1", 0))
    listener.settimeout(3.0)

    config = DiscoverySocketConfig.with_socket_targets(
        "127.0.0.1", free_udp_port(), [("127.0.0.1", listener.getsockname()[1])]
    )
    sock = bind_discovery_socket(config)
    announce_sock = bind_announcement_socket()
    errors = []

    def run():
        try:
            serve_discovery_socket(sock, announce_sock, config, state())
        except OSError as err:
            errors.append(err)

    worker = threading.Thread(target=run, daemon=True)
    worker.start()
    try:
        announcement, _ = listener.recvfrom(2048)

        client = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        client.settimeout(3.0)
        try:
            client.sendto(b"GSCALE_DISCOVER_V1\n", config.bind_addr)
            reply, _ = client.recvfrom(2048)
        finally:
            client.close()
    finally:
        sock.close()
        worker.join(timeout=3.0)
        announce_sock.close()
        listener.close()

    assert json.loads(announcement)["server_name"] == "rp-scale"
    assert json.loads(reply)["http_port"] == 39117
    assert not worker.is_alive()
    assert len(errors) == 1


@pytest.mark.parametrize("packet", [b"hello", b"GSCALE_DISCOVER_V2"])
def test_non_probe_packets_get_no_response(packet):
    current = state()
    assert (
        discovery_response_for_packet(packet, current.identity, current.http_port, current.candidate_ports)
        is None
    )