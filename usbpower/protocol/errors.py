# usbpower/protocol/errors.py

class ProtocolError(Exception):
    """Base for protocol-level failures (framing/integrity/decode)."""


class FrameError(ProtocolError):
    """A raw frame is malformed or corrupted."""

    #: Stable identifier of the failure kind.
    reason: str = "frame_error"


class BadLength(FrameError):
    reason = "bad_length"

    def __init__(self, length: int, expected: int):
        super().__init__(f"frame length {length} != expected {expected}")
        self.length = length
        self.expected = expected


class BadSignature(FrameError):
    reason = "bad_signature"

    def __init__(self, found: bytes, expected: bytes):
        super().__init__(f"bad frame signature {found.hex()} (expected {expected.hex()})")
        self.found = found
        self.expected = expected


class PayloadChecksumMismatch(FrameError):
    reason = "payload_checksum_mismatch"

    def __init__(self, calc: int, rx: int):
        super().__init__(f"payload checksum mismatch: calc={calc:02X} rx={rx:02X}")
        self.calc = calc
        self.rx = rx


class HeaderChecksumMismatch(FrameError):
    reason = "header_checksum_mismatch"

    def __init__(self, calc: int, rx: int):
        super().__init__(f"header checksum mismatch: calc={calc:02X} rx={rx:02X}")
        self.calc = calc
        self.rx = rx


class DecodeError(ProtocolError):
    """
    Raised by SampleDecoder.decode_next for a frame that could not be decoded.

    kind is "framing" for every validation failure; reason holds the
    underlying FrameError.
    """

    def __init__(self, reason: FrameError, kind: str = "framing"):
        super().__init__(f"{kind}: {reason}")
        self.kind = kind
        self.reason = reason
