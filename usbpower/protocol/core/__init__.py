# protocol/core/__init__.py

from .defs import Protocol
from .clock import ClockReconstructor, ClockState
from .measurement import MeasurementDecoder
from .sample_decoder import SampleDecoder
from .validator import FrameValidator

__all__ = [
    "Protocol",
    "ClockState", "ClockReconstructor",
    "FrameValidator", "MeasurementDecoder",
    "SampleDecoder",
]
