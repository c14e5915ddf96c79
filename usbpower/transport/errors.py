# usbpower/transport/errors.py
from __future__ import annotations

class TransportError(Exception):
    """Base class for transport-layer failures."""

class TransportOpenError(TransportError):
    pass

class DeviceNotFoundError(TransportOpenError):
    """No HID device matched the requested vendor id / path."""

class TransportIOError(TransportError):
    pass

class TransportTimeout(TransportError):
    """A bounded read returned no data."""

class EndOfStream(TransportError):
    """A finite source (capture file) has no more data."""
