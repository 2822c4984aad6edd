from rpscale.scale.core import ScaleCoreState
from rpscale.scale.reading import Reading


def test_core_keeps_last_unit_when_driver_omits_unit():
    core = ScaleCoreState("kg")
    core.apply_reading(Reading.from_source("wifi", "scale.local", 0, "g"))

    applied = core.apply_reading(Reading.from_source("wifi", "scale.local", 0, ""))

    assert applied.unit == "g"
    assert core.last() is applied


def test_core_defaults_unit_to_kg():
    assert ScaleCoreState("").last().unit == "kg"


def test_core_keeps_explicit_unit():
    core = ScaleCoreState("kg")
    applied = core.apply_reading(Reading.from_source("wifi", "scale.local", 0, "lb"))
    assert applied.unit == "lb"
    assert core.last().source == "wifi"