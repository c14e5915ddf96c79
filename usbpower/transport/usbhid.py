# usbpower/transport/usbhid.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

import hid

from .base import Transport
from .errors import DeviceNotFoundError, TransportIOError, TransportOpenError, TransportTimeout


def list_devices(vendor_id: int, product_id: int = 0) -> List[Dict[str, Any]]:
    """Enumerate HID devices for vendor_id (product_id=0 matches any)."""
    return list(hid.enumerate(vendor_id, product_id))


class HIDTransport(Transport):
    """
    USB HID transport implemented via hidapi.

    Notes:
      - Without an explicit path, opens the first device matching vendor_id.
      - read(n) returns one input report, waiting at most timeout_ms.
    """

    def __init__(
        self,
        vendor_id: int,
        product_id: int = 0,
        *,
        path: Optional[bytes] = None,
        timeout_ms: int = 500,
    ):
        self.vendor_id = vendor_id
        self.product_id = product_id
        self.path = path
        self.timeout_ms = timeout_ms
        self.dev: Optional[Any] = None

    @property
    def description(self) -> str:
        if self.path:
            return f"hid path={self.path!r}"
        return f"hid vendor_id=0x{self.vendor_id:04X}"

    def open(self) -> None:
        path = self.path
        if path is None:
            matches = list_devices(self.vendor_id, self.product_id)
            if not matches:
                raise DeviceNotFoundError(f"no HID device with vendor_id=0x{self.vendor_id:04X}")
            path = matches[0]["path"]

        dev = hid.device()
        try:
            dev.open_path(path)
        except (OSError, IOError) as e:
            raise TransportOpenError(f"could not open HID device {path!r}: {e}") from None
        self.dev = dev
        self.path = path

    def close(self) -> None:
        if self.dev is not None:
            try:
                self.dev.close()
            finally:
                self.dev = None

    def read(self, n: int) -> bytes:
        if self.dev is None:
            raise TransportIOError("read while transport not open")

        try:
            data = self.dev.read(n, self.timeout_ms)
        except (OSError, IOError, ValueError) as e:
            self.dev = None
            raise TransportIOError(f"HID read failed (device disconnected or unavailable): {e}") from None

        if not data:
            raise TransportTimeout(f"no report within {self.timeout_ms} ms")
        return bytes(data)
