# usbpower/app/config.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class UsbPowerConfig:
    protocol_dir: Optional[str] = None      # None = bundled definition
    vendor_id: Optional[int] = None         # None = protocol default
    device_path: Optional[str] = None       # explicit HID path, skips enumeration
    capture_path: Optional[str] = None      # replay a raw capture instead of a device
    read_timeout_ms: int = 500
    on_error: str = "skip"
