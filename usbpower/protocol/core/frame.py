# usbpower/protocol/core/frame.py
from __future__ import annotations

from .checksum import header_checksum, payload_checksum
from .defs import Protocol


def build_frame(
    proto: Protocol,
    *,
    coarse: int = 0,
    ms_mod_100: int = 0,
    voltage: float = 0.0,
    current: float = 0.0,
    fill: int = 0,
) -> bytes:
    """
    Build a well-formed frame (signature + fields + both checksums).

    coarse is written to the coarse seconds/ms byte(s). fill is used for every
    byte the layout does not define.
    """
    buf = bytearray([fill & 0xFF]) * proto.frame_length
    buf[: len(proto.signature)] = proto.signature

    proto.field("coarse_seconds").pack_into(buf, coarse & 0xFF)
    proto.field("coarse_ms").pack_into(buf, coarse & 0xFF)
    proto.field("ms_mod_100").pack_into(buf, ms_mod_100 & 0xFF)
    proto.field("voltage").pack_into(buf, voltage)
    proto.field("current").pack_into(buf, current)

    return seal_frame(proto, buf)


def seal_frame(proto: Protocol, frame: bytes) -> bytes:
    """Rewrite both checksum bytes so the frame validates."""
    buf = bytearray(frame)
    p = payload_checksum(proto, buf)
    buf[proto.payload_sum_offset] = p
    buf[proto.header_sum_offset] = header_checksum(proto, buf, p)
    return bytes(buf)
