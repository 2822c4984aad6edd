# rpscale

`rpscale` holds the building blocks of a weighing station: a structured
scale `Reading`, helpers that split and bound raw serial text, a tracker
that decides when a weight has settled, discovery of serial devices that
may be a scale, and the documents and UDP discovery a mobile client on the
local network uses to find and watch the station.

## What is inside

- `rpscale.scale.reading.Reading` — one observation from a scale: source,
  port, baud, optional weight, unit, optional stable flag, raw frame, error
  and a UTC `updated_at`. `Reading.serial(...)` and `Reading.from_source(...)`
  create an empty reading; `with_weight`, `with_raw` and `with_error` return
  updated copies.
- `rpscale.scale.frame` — `pop_serial_frame` splits off the first CR/LF
  terminated frame (consuming all contiguous line endings), `append_raw`
  appends text while keeping only a bounded suffix, and `sanitize_inline`
  escapes line breaks, trims and bounds a string.
- `rpscale.scale.capabilities` — `ScaleTransport` and `ScaleCapabilities`;
  `ScaleCapabilities.serial(port, baud, unit)` describes a serial scale.
- `rpscale.scale.core.ScaleCoreState` — keeps the latest reading and gives
  a reading without a unit the previous unit.
- `rpscale.scale.stable` — `StableTracker` turns readings into
  `StableState` values (`NO_WEIGHT`, `MOVING`, `HOLDING`, `READY`, `ERROR`)
  using the hold time and tolerance of `StableConfig` (800 ms, 0.005 by
  default).
- `rpscale.scale.serial.detect` — `collect_serial_candidates` /
  `list_serial_candidates` list devices (`serial/by-id` links resolved
  first, then `ttyUSB*`, then `ttyACM*`); `detect_scale_port_with_probe`
  picks a port using any `ScaleProbe` you supply.
- `rpscale.service.config` — `MobileServiceConfig`, candidate port parsing,
  listen address selection and server references.
- `rpscale.service.mobile_contract` — `ServiceIdentity` and the health,
  handshake, setup status, catalogue and `DiscoveryAnnouncement` bodies.
- `rpscale.service.monitor_contract` — `MonitorResponse`,
  `BatchStateResponse` and the snapshots they are made of.
- `rpscale.service.discovery` and `rpscale.service.discovery_runtime` —
  UDP `GSCALE_DISCOVER_V1` probes, announcements, broadcast targets and the
  `serve_discovery` loop.
- `rpscale.service.bonjour` — `bonjour_config` and `txt_record_bytes` build
  a DNS-SD service description and its TXT record.

Install with `pip install .`; the only runtime dependency is `psutil`,
used to list network interfaces for broadcast targets.

## Splitting serial text

```python
from rpscale.scale.frame import append_raw, pop_serial_frame

print(pop_serial_frame("-  2.05\r-  1.00\r"))   # ('-  2.05', '-  1.00\r')
print(pop_serial_frame("-  2.05"))              # None
print(append_raw("12345", "678", 5))            # '45678'
```

## Waiting for a settled weight

```python
from dataclasses import replace
from datetime import datetime, timedelta, timezone

from rpscale.scale.reading import Reading
from rpscale.scale.stable import StableConfig, StableTracker

t0 = datetime(2024, 1, 1, tzinfo=timezone.utc)
base = Reading.serial("/dev/ttyUSB0", 9600, "kg").with_weight(1.25, True, "1.250 kg ST")
tracker = StableTracker(StableConfig())

for ms in (0, 799, 800):
    snapshot = tracker.apply(replace(base, updated_at=t0 + timedelta(milliseconds=ms)))
    print(ms, snapshot.state)
# 0 StableState.HOLDING
# 799 StableState.HOLDING
# 800 StableState.READY
```

A change larger than the tolerance starts a new hold; an unstable reading,
a missing weight or an error resets the tracker.

## Finding the scale port

```python
from rpscale.scale.serial.detect import (
    ProbeOutcome, ScaleProbe, detect_scale_port_with_probe, list_serial_candidates,
)

class MyProbe(ScaleProbe):
    def probe(self, device, baud):
        # open the device, listen briefly; raise OSError if it cannot be read
        return ProbeOutcome.with_data()

port = detect_scale_port_with_probe("", [9600, 19200], list_serial_candidates(), MyProbe())
print(port.device, port.baud)
```

An explicit device always wins. If every probe fails and one failure looked
like a busy port, `PortBusyError` is raised; with no candidates,
`NoCandidatesError`; with no baud rates, `EmptyBaudListError`.

## Choosing the HTTP port

```python
from rpscale.service.config import MobileServiceConfig, parse_candidate_ports

config = MobileServiceConfig.create(
    "0.0.0.0", "", parse_candidate_ports("39117,41257"), "station-1"
)
print(config.listen_addr, config.http_port(), config.default_server_ref())
```

The first candidate port that can be bound is used, and the server
reference is the server name followed by the port's 1-based position.

## Discovery and monitor documents

```python
from rpscale.scale.reading import Reading
from rpscale.service.discovery import (
    DiscoverySocketConfig, collect_discovery_broadcast_targets, discovery_response_for_packet,
)
from rpscale.service.discovery_runtime import DiscoveryRuntimeState, serve_discovery
from rpscale.service.mobile_contract import ServiceIdentity
from rpscale.service.monitor_contract import MonitorResponse

identity = ServiceIdentity("station-1", "station-1_1", "Operator One", "operator")
print(discovery_response_for_packet(b"GSCALE_DISCOVER_V1", identity, 39117, [39117]))

reading = Reading.serial("/dev/ttyUSB0", 9600, "kg").with_weight(2.75, False, "2.750 kg US")
body = MonitorResponse.driver_with_scale(identity, "godex", reading).to_dict()
print(body["state"]["scale"]["weight"], body["state"]["batch"]["print_mode"])  # 2.75 label

config = DiscoverySocketConfig.with_socket_targets(
    "0.0.0.0", 0, collect_discovery_broadcast_targets(0)
)
serve_discovery(config, DiscoveryRuntimeState(identity, 39117, [39117]))  # runs until a socket error
```

## What this package does not do

- It does not turn raw scale frames into weights, and it does not open or
  read serial ports: `ScaleProbe` is an interface you implement, and
  readings are built by your own code with `Reading.with_weight`.
- It runs no HTTP server; the mobile documents are plain dataclasses with
  `to_dict()` for you to serve.
- It does not register a Bonjour service with the system; `bonjour`
  only builds the description and TXT record bytes.
- It drives no printers; printer state appears only as the
  `MonitorPrinter` and `BatchSnapshot` documents.
- It installs no command-line program.