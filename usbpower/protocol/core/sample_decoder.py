# usbpower/protocol/core/sample_decoder.py
from __future__ import annotations

import logging
from typing import Optional

from usbpower.model.sample import Sample

from .clock import ClockReconstructor, ClockState, WallClock
from .defs import Protocol
from .measurement import MeasurementDecoder
from .validator import FrameValidator
from ..errors import DecodeError, FrameError


class SampleDecoder:
    """
    Turns one raw frame into one Sample.

    The only entry point for the transport loop: a rejected frame raises
    DecodeError and leaves ClockState untouched.
    """

    def __init__(
        self,
        proto: Protocol,
        *,
        clock: Optional[WallClock] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.proto = proto
        self.validator = FrameValidator(proto)
        self.measurements = MeasurementDecoder(proto)
        self.clock = ClockReconstructor(proto, clock=clock, logger=logger)

    def decode_next(self, frame: bytes, state: ClockState) -> Sample:
        try:
            self.validator.validate(frame)
        except FrameError as e:
            raise DecodeError(e) from e

        voltage, current = self.measurements.decode(frame)
        timestamp = self.clock.reconstruct(state, frame)
        return Sample(timestamp=timestamp, voltage=voltage, current=current)
