import json

from rpscale.service.mobile_contract import (
    DiscoveryAnnouncement,
    EmptyArchiveResponse,
    EmptyItemsResponse,
    EmptyWarehousesResponse,
    HandshakeResponse,
    HealthResponse,
    ItemWarehousesResponse,
    ServiceIdentity,
    SetupStatusResponse,
)


def identity():
    return ServiceIdentity("rp-scale", "dev-operator", "Operator One", "admin")


def test_builds_gscale_compatible_handshake_shape():
    handshake = HandshakeResponse.build(identity(), 39117, [39117, 41257])

    assert handshake.ok is True
    assert handshake.service == "mobileapi"
    assert handshake.app == "gscale-zebra"
    assert handshake.server_name == "rp-scale"
    assert handshake.discovery_port == 18081
    assert handshake.monitor_path == "/v1/mobile/monitor/state"
    assert handshake.requires_auth is False


def test_handshake_dict_defaults_ports():
    body = HandshakeResponse.build(identity(), 0, []).to_dict()

    assert body["http_port"] == 39117
    assert body["candidate_ports"] == [39117, 41257, 43391, 45533, 47681]
    assert body["phone"] == ""
    assert body["batch_state_path"] == "/v1/mobile/batch/state"


def test_builds_gscale_compatible_discovery_announcement_json():
    payload = DiscoveryAnnouncement.build(identity(), 39117, [39117, 41257])
    text = payload.to_json_bytes().decode("utf-8")

    assert '"type":"gscale_announce_v1"' in text
    assert '"service":"mobileapi"' in text
    assert '"app":"gscale-zebra"' in text
    assert '"http_port":39117' in text
    assert '"candidate_ports":[39117,41257]' in text


def test_announcement_omits_candidate_ports_when_all_filtered():
    decoded = json.loads(DiscoveryAnnouncement.build(identity(), 39117, [0]).to_json_bytes())

    assert "candidate_ports" not in decoded
    assert decoded["server_ref"] == "dev-operator"


def test_health_response_matches_mobile_fallback_probe():
    assert HealthResponse().to_dict() == {"ok": True, "service": "mobileapi"}


def test_identity_falls_back_and_flattens_newlines():
    ident = ServiceIdentity(" ", "", "Line\nTwo", "  ")

    assert ident.server_name == "gscale-zebra"
    assert ident.server_ref == "unknown"
    assert ident.display_name == "Line Two"
    assert ident.role == "operator"


def test_setup_status_is_driver_scope_and_does_not_claim_erp_readiness():
    status = SetupStatusResponse.driver_scope()

    assert status.ok is True
    assert status.erp_write_configured is False
    assert status.erp_read_configured is False
    assert status.batch_actions_ready is False
    assert status.warehouse_mode == "manual"
    assert status.to_dict()["default_warehouse"] == ""


def test_catalog_and_archive_stubs_are_empty_driver_scope_lists():
    assert EmptyItemsResponse().to_dict() == {"ok": True, "items": []}
    assert EmptyWarehousesResponse().to_dict() == {"ok": True, "warehouses": []}
    assert ItemWarehousesResponse("ITEM-1").to_dict() == {
        "ok": True,
        "item_code": "ITEM-1",
        "warehouses": [],
    }
    assert EmptyArchiveResponse().to_dict() == {"ok": True, "archive": []}