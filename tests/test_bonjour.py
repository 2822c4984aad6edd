import pytest

from rpscale.service.bonjour import (
    BONJOUR_SERVICE_TYPE,
    BonjourError,
    bonjour_config,
    normalize_bonjour_text,
    trim_bonjour_host_name,
    txt_record_bytes,
)
from rpscale.service.mobile_contract import ServiceIdentity


def test_builds_gscale_compatible_bonjour_config():
    identity = ServiceIdentity("rp-scale", "dev-operator", "Operator One", "admin")
    config = bonjour_config(identity, "rp-scale.local", 39117)

    assert BONJOUR_SERVICE_TYPE == "_gscale-mobileapi._tcp.local."
    assert config.instance_name == "rp-scale.local"
    assert config.host_name == "rp-scale.local."
    assert config.port == 39117
    assert ("service", "mobileapi") in config.properties
    assert ("app", "gscale-zebra") in config.properties
    assert ("role", "admin") in config.properties
    assert ("http_port", "39117") in config.properties


def test_trims_bonjour_hostname_like_gscale():
    assert trim_bonjour_host_name("gscale.local.") == "gscale"
    assert trim_bonjour_host_name("") == "gscale-zebra"
    assert trim_bonjour_host_name(".host.local") == "host"


def test_encodes_dns_sd_txt_records():
    txt = txt_record_bytes([("service", "mobileapi"), ("app", "gscale-zebra")])

    assert txt == b"\x11service=mobileapi\x10app=gscale-zebra"


def test_rejects_invalid_txt_key():
    with pytest.raises(BonjourError, match="invalid TXT key: a=b"):
        txt_record_bytes([("a=b", "x")])


def test_rejects_overlong_txt_item():
    with pytest.raises(BonjourError, match="TXT item too long: key"):
        txt_record_bytes([("key", "v" * 300)])


def test_normalize_bonjour_text_falls_back_and_flattens():
    assert normalize_bonjour_text("  ", "fallback") == "fallback"
    assert normalize_bonjour_text(" a\r\nb ", "fallback") == "a  b"


def test_blank_server_name_uses_app_id():
    identity = ServiceIdentity("", "", "", "")
    config = bonjour_config(identity, "  ", 41257)

    assert config.instance_name == "gscale-zebra"
    assert config.host_name == "gscale-zebra.local."
    assert ("server_ref", "unknown") in config.properties