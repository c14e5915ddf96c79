# usbpower/app/runner.py
from __future__ import annotations

import logging
from typing import Iterable, Optional

from usbpower.app.config import UsbPowerConfig
from usbpower.core.errors import ConfigError
from usbpower.interfaces.sample_sink import SampleSink
from usbpower.protocol.core.clock import WallClock
from usbpower.protocol.core.defs import Protocol
from usbpower.runtime.device_session import DeviceSession
from usbpower.transport.base import Transport


def load_protocol(cfg: UsbPowerConfig) -> Protocol:
    try:
        return Protocol.load(cfg.protocol_dir)
    except (FileNotFoundError, ValueError) as e:
        raise ConfigError(
            "Could not load protocol definition.",
            hint=str(e),
            details={"protocol_dir": cfg.protocol_dir},
        ) from None


def build_transport(cfg: UsbPowerConfig, proto: Protocol) -> Transport:
    """
    Construct (but do not open) the frame source described by cfg.
    """
    if cfg.capture_path:
        from usbpower.transport.capture import CaptureFileTransport

        return CaptureFileTransport(cfg.capture_path)

    from usbpower.transport.usbhid import HIDTransport

    vendor_id = cfg.vendor_id if cfg.vendor_id is not None else proto.vendor_id
    path = cfg.device_path.encode("utf-8") if cfg.device_path else None
    return HIDTransport(vendor_id, path=path, timeout_ms=cfg.read_timeout_ms)


def open_session(
    cfg: UsbPowerConfig,
    *,
    proto: Optional[Protocol] = None,
    transport: Optional[Transport] = None,
    clock: Optional[WallClock] = None,
) -> DeviceSession:
    """Build a DeviceSession for cfg. The caller starts/stops it."""
    proto = proto or load_protocol(cfg)
    transport = transport or build_transport(cfg, proto)
    return DeviceSession(
        proto=proto,
        transport=transport,
        on_error=cfg.on_error,
        clock=clock,
        logger=logging.getLogger("usbpower.session"),
    )


def pump(
    session: DeviceSession,
    sinks: Iterable[SampleSink],
    *,
    duration_s: Optional[float] = None,
) -> int:
    """Feed every sample to every sink; returns the number of samples."""
    sinks = list(sinks)
    n = 0
    for sample in session.samples(duration_s=duration_s):
        for sink in sinks:
            sink.on_sample(sample)
        n += 1
    return n
