import socket

from rpscale.service.config import (
    DEFAULT_MOBILE_API_PORTS,
    MobileServiceConfig,
    default_mobile_api_port,
    parse_candidate_ports,
    port_from_listen_addr,
    select_listen_addr,
    server_ref_for_port,
)


def test_parses_candidate_ports_like_mobileapi():
    assert parse_candidate_ports("39117, 41257, bad, 41257, 0") == [39117, 41257]
    assert parse_candidate_ports("bad") == list(DEFAULT_MOBILE_API_PORTS)


def test_parse_candidate_ports_rejects_out_of_range():
    assert parse_candidate_ports("70000, 8080") == [8080]


def test_explicit_listen_addr_wins():
    assert select_listen_addr("0.0.0.0:8081", "127.0.0.1", [39117]) == "0.0.0.0:8081"


def test_chooses_first_free_candidate_port():
    busy = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    busy.bind(("127.0.0.1", 0))
    busy.listen()
    busy_port = busy.getsockname()[1]
    free = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    free.bind(("127.0.0.1", 0))
    free_port = free.getsockname()[1]
    free.close()
    try:
        chosen = select_listen_addr("", "127.0.0.1", [busy_port, free_port])
    finally:
        busy.close()

    assert chosen == f"127.0.0.1:{free_port}"


def test_config_exposes_http_and_discovery_ports():
    cfg = MobileServiceConfig.create("127.0.0.1", "127.0.0.1:41257", [], "")

    assert cfg.http_port() == 41257
    assert cfg.discovery_addr == "0.0.0.0:18081"
    assert cfg.server_name == "gscale-zebra"
    assert cfg.candidate_ports == list(DEFAULT_MOBILE_API_PORTS)
    assert cfg.default_server_ref() == "gscale-zebra_2"


def test_config_defaults_listen_host():
    cfg = MobileServiceConfig.create("  ", "0.0.0.0:39117", [39117], "rps")

    assert cfg.listen_host == "0.0.0.0"
    assert cfg.default_server_ref() == "rps_1"


def test_builds_indexed_server_ref_from_selected_candidate_port():
    assert server_ref_for_port("rps", 39117, DEFAULT_MOBILE_API_PORTS) == "rps_1"
    assert server_ref_for_port("rps", 41257, DEFAULT_MOBILE_API_PORTS) == "rps_2"
    assert server_ref_for_port("rps", 18000, DEFAULT_MOBILE_API_PORTS) == "rps_18000"


def test_port_from_listen_addr():
    assert port_from_listen_addr(":8080") == 8080
    assert port_from_listen_addr("127.0.0.1:41257") == 41257
    assert port_from_listen_addr("127.0.0.1:0") is None
    assert port_from_listen_addr("") is None
    assert port_from_listen_addr("localhost") is None


def test_default_mobile_api_port():
    assert default_mobile_api_port() == 39117