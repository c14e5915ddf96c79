# usbpower/protocol/core/validator.py
from __future__ import annotations

from .checksum import header_checksum, payload_checksum
from .defs import Protocol
from ..errors import (
    BadLength,
    BadSignature,
    HeaderChecksumMismatch,
    PayloadChecksumMismatch,
)


class FrameValidator:
    """
    Checks that a raw frame is well-formed and uncorrupted.

    Order of checks: length, signature, payload checksum, header checksum.
    The header checksum depends on the payload checksum value, so the payload
    sum is computed first and folded in. Pure: no state, no logging.
    """

    def __init__(self, proto: Protocol):
        self.proto = proto

    def validate(self, frame: bytes) -> None:
        proto = self.proto

        if len(frame) != proto.frame_length:
            raise BadLength(len(frame), proto.frame_length)

        sig = bytes(frame[: len(proto.signature)])
        if sig != proto.signature:
            raise BadSignature(sig, proto.signature)

        payload_sum = payload_checksum(proto, frame)
        rx_payload = frame[proto.payload_sum_offset]
        if payload_sum != rx_payload:
            raise PayloadChecksumMismatch(payload_sum, rx_payload)

        hdr_sum = header_checksum(proto, frame, payload_sum)
        rx_hdr = frame[proto.header_sum_offset]
        if hdr_sum != rx_hdr:
            raise HeaderChecksumMismatch(hdr_sum, rx_hdr)
