from __future__ import annotations

import math
import struct

import pytest

from usbpower.protocol.core.defs import Protocol
from usbpower.protocol.core.frame import build_frame
from usbpower.protocol.core.measurement import MeasurementDecoder


@pytest.fixture(scope="module")
def proto() -> Protocol:
    return Protocol.default()


def _frame_with_raw(proto, v_raw: bytes, i_raw: bytes) -> bytes:
    frame = bytearray(build_frame(proto))
    frame[46:50] = v_raw
    frame[50:54] = i_raw
    return bytes(frame)


@pytest.mark.parametrize("value", [0.0, 5.0, 5.1, 12.34567, 20.0, 0.001, -0.0123])
def test_decode_is_bit_exact_float32(proto, value):
    v_raw = struct.pack("<f", value)
    i_raw = struct.pack("<f", value / 10.0)

    voltage, current = MeasurementDecoder(proto).decode(_frame_with_raw(proto, v_raw, i_raw))

    assert struct.pack("<f", voltage) == v_raw
    assert struct.pack("<f", current) == i_raw


def test_decode_reads_little_endian(proto):
    # 1.0f == 0x3F800000
    frame = _frame_with_raw(proto, b"\x00\x00\x80\x3f", b"\x00\x00\x00\x40")

    assert MeasurementDecoder(proto).decode(frame) == (1.0, 2.0)


def test_decode_passes_nan_and_inf_through(proto):
    frame = _frame_with_raw(proto, struct.pack("<f", float("nan")), struct.pack("<f", float("-inf")))

    voltage, current = MeasurementDecoder(proto).decode(frame)

    assert math.isnan(voltage)
    assert math.isinf(current) and current < 0


def test_decode_ignores_other_bytes(proto):
    a = build_frame(proto, voltage=3.5, current=1.25, fill=0x00)
    b = build_frame(proto, voltage=3.5, current=1.25, fill=0xFF, coarse=200, ms_mod_100=99)

    dec = MeasurementDecoder(proto)
    assert dec.decode(a) == dec.decode(b) == (3.5, 1.25)
