# usbpower/protocol/core/checksum.py
def sum8(buf: bytes) -> int:
    """Sum of all bytes modulo 256."""
    return sum(buf) & 0xFF


def payload_checksum(proto, frame: bytes) -> int:
    return sum8(frame[proto.payload_sum_start: proto.payload_sum_end])


def header_checksum(proto, frame: bytes, payload_sum: int) -> int:
    # Header checksum folds in the payload checksum value, not only raw bytes.
    hdr = sum8(frame[proto.header_sum_start: proto.header_sum_end])
    return (hdr + payload_sum) & 0xFF

