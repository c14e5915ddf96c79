# protocol/__init__.py

# Core classes
from .core import Protocol, ClockState, SampleDecoder
from .errors import (
    ProtocolError,
    FrameError,
    BadLength,
    BadSignature,
    PayloadChecksumMismatch,
    HeaderChecksumMismatch,
    DecodeError,
)

__all__ = [
    "Protocol", "ClockState", "SampleDecoder",
    "ProtocolError", "FrameError",
    "BadLength", "BadSignature",
    "PayloadChecksumMismatch", "HeaderChecksumMismatch",
    "DecodeError"]
