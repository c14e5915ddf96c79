# usbpower/cli/commands.py
from __future__ import annotations

import sys
from typing import List, Optional, TextIO

from usbpower.app.config import UsbPowerConfig
from usbpower.app.runner import load_protocol, open_session, pump
from usbpower.app.sinks import CsvSampleSink, JsonLinesSink, StatsSink
from usbpower.interfaces.sample_sink import SampleSink


# ---------------- Printing ----------------

def print_summary(sink: StatsSink, *, out: TextIO) -> None:
    v = sink.series.voltage()
    i = sink.series.current()
    print("Statistics:", file=out)
    print(f"Samples: {v.count}", file=out)
    print(f"Voltage: {v.format('V')}", file=out)
    print(f"Current: {i.format('A')}", file=out)


# ---------------- Commands ----------------

def cmd_devices(cfg: UsbPowerConfig, *, out: Optional[TextIO] = None) -> int:
    from usbpower.transport.usbhid import list_devices

    out = out or sys.stdout
    proto = load_protocol(cfg)
    vendor_id = cfg.vendor_id if cfg.vendor_id is not None else proto.vendor_id

    devices = list_devices(vendor_id)
    if not devices:
        print(f"No HID devices with vendor_id=0x{vendor_id:04X}.", file=out)
        return 1

    for d in devices:
        path = d.get("path", b"")
        if isinstance(path, bytes):
            path = path.decode("utf-8", errors="replace")
        print(
            f"{path}  vid=0x{d.get('vendor_id', 0):04X} pid=0x{d.get('product_id', 0):04X}"
            f"  {d.get('manufacturer_string') or '-'} {d.get('product_string') or '-'}",
            file=out,
        )
    return 0


def cmd_stats(cfg: UsbPowerConfig, *, duration_s: Optional[float], out: Optional[TextIO] = None) -> int:
    out = out or sys.stdout
    stats = StatsSink()
    _run(cfg, [stats], duration_s=duration_s)
    print_summary(stats, out=out)
    return 0


def cmd_stream(
    cfg: UsbPowerConfig,
    *,
    fmt: str,
    out_path: Optional[str],
    duration_s: Optional[float],
    out: Optional[TextIO] = None,
) -> int:
    kwargs = {"path": out_path} if out_path else {"stream": out or sys.stdout}
    sink: SampleSink = CsvSampleSink(**kwargs) if fmt == "csv" else JsonLinesSink(**kwargs)
    try:
        _run(cfg, [sink], duration_s=duration_s)
    finally:
        sink.close()
    return 0


def _run(cfg: UsbPowerConfig, sinks: List[SampleSink], *, duration_s: Optional[float]) -> int:
    """Pump samples into sinks; Ctrl-C ends the run normally."""
    session = open_session(cfg)
    with session:
        try:
            return pump(session, sinks, duration_s=duration_s)
        except KeyboardInterrupt:
            return session.frames_ok
