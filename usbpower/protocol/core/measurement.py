# usbpower/protocol/core/measurement.py
from __future__ import annotations

from typing import Tuple

from .defs import Protocol


class MeasurementDecoder:
    """
    Extracts voltage (V) and current (A) from a validated frame.

    Both are little-endian IEEE-754 single-precision values. NaN/inf bit
    patterns are returned as-is; plausibility checks belong to the caller.
    """

    def __init__(self, proto: Protocol):
        self._voltage = proto.field("voltage")
        self._current = proto.field("current")

    def decode(self, frame: bytes) -> Tuple[float, float]:
        return self._voltage.unpack(frame), self._current.unpack(frame)
