from rpscale.scale.capabilities import ScaleCapabilities, ScaleTransport


def test_serial_capabilities_describe_current_driver():
    caps = ScaleCapabilities.serial("/dev/ttyUSB0", 9600, "")

    assert caps.driver_id == "serial-scale"
    assert caps.display_name == "Serial Scale"
    assert caps.transport == ScaleTransport.SERIAL
    assert caps.transport.value == "serial"
    assert caps.realtime_weight
    assert caps.stability_flag
    assert caps.raw_diagnostics
    assert caps.default_unit == "kg"
    assert caps.connection == "/dev/ttyUSB0@9600"


def test_serial_capabilities_normalize_unit_and_port():
    caps = ScaleCapabilities.serial(" /dev/ttyACM0 ", 19200, " LB ")
    assert caps.default_unit == "lb"
    assert caps.connection == "/dev/ttyACM0@19200"


def test_transport_names():
    assert ScaleTransport.VENDOR_SDK.value == "vendor_sdk"
    assert ScaleTransport("wifi") is ScaleTransport.WIFI