# usbpower/transport/base.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class Transport(ABC):
    """
    Abstract frame source (HID device, capture file, ...).

    Contract:
      - open()/close() manage the underlying connection.
      - read(n) blocks for at most the transport timeout and returns 1..n bytes
        (one device report). It raises TransportTimeout when nothing arrived,
        TransportIOError when the source is gone.
    """

    @abstractmethod
    def open(self) -> None: ...

    @abstractmethod
    def close(self) -> None: ...

    @abstractmethod
    def read(self, n: int) -> bytes: ...

    @property
    def description(self) -> str:
        return type(self).__name__

    def __enter__(self) -> "Transport":
        self.open()
        return self

    def __exit__(self, exc_type: type | None, exc_val: BaseException | None, exc_tb: Any) -> None:
        self.close()
