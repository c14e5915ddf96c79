# usbpower/core/errors.py
from __future__ import annotations


class UsbPowerError(Exception):
    """
    Base class for all expected operational errors in usbpower.
    """

    #: Stable machine-readable identifier (for CLI exit mapping, logs, etc.)
    code: str = "unknown"

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.hint = hint
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Configuration / setup errors (no hardware access yet)
# ---------------------------------------------------------------------------

class ConfigError(UsbPowerError):
    """
    Configuration is invalid.

    Examples:
      - protocol definition missing or malformed
      - unknown error policy
    """
    code = "config_error"


# ---------------------------------------------------------------------------
# Transport / connection lifecycle errors
# ---------------------------------------------------------------------------

class DeviceNotFound(UsbPowerError):
    """
    No compatible meter is present on the USB bus.
    """
    code = "device_not_found"


class DeviceConnectError(UsbPowerError):
    """
    Device was found but could not be opened.

    Examples:
      - permission denied on the hidraw node
      - device already in use
    """
    code = "device_connect_error"


class DeviceDisconnectedError(UsbPowerError):
    """
    Device was previously connected but is no longer reachable.

    Examples:
      - USB unplugged
      - OS-level I/O error during read
    """
    code = "device_disconnected"


class ReadTimeoutError(UsbPowerError):
    """
    A bounded read returned no frame.
    """
    code = "read_timeout"


# ---------------------------------------------------------------------------
# Frame / data errors
# ---------------------------------------------------------------------------

class FrameDecodeError(UsbPowerError):
    """
    A frame was received but rejected by validation.

    Examples:
      - wrong length or signature (stream desynchronised, wrong device)
      - payload / header checksum mismatch (transmission error)
    """
    code = "frame_decode_error"


class StreamEnded(UsbPowerError):
    """
    A finite frame source (capture replay) has no more frames.
    """
    code = "stream_ended"
