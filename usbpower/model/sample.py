# usbpower/model/sample.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Sample:
    """
    One decoded measurement.

    timestamp: absolute, timezone-aware reconstruction of the device clock
    voltage:   volts, as encoded by the device (float32)
    current:   amperes, as encoded by the device (float32)
    """
    timestamp: datetime
    voltage: float
    current: float

    def as_dict(self) -> dict:
        """Serialized shape: {"ts": RFC3339 timestamp, "v": volts, "i": amps}."""
        return {
            "ts": self.timestamp.isoformat(),
            "v": self.voltage,
            "i": self.current,
        }
