# usbpower/transport/capture.py
from __future__ import annotations

from pathlib import Path
from typing import BinaryIO, Optional

from .base import Transport
from .errors import EndOfStream, TransportIOError, TransportOpenError


class CaptureFileTransport(Transport):
    """
    Replays a raw capture: back-to-back device reports stored in a file.

    read(n) returns the next n bytes (fewer at a truncated tail). End of file
    is reported as EndOfStream.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._f: Optional[BinaryIO] = None

    @property
    def description(self) -> str:
        return f"capture path={self.path}"

    def open(self) -> None:
        try:
            self._f = open(self.path, "rb")
        except OSError as e:
            raise TransportOpenError(f"could not open capture {str(self.path)!r}: {e}") from None

    def close(self) -> None:
        f, self._f = self._f, None
        if f is not None:
            f.close()

    def read(self, n: int) -> bytes:
        if self._f is None:
            raise TransportIOError("read while transport not open")
        data = self._f.read(n)
        if not data:
            raise EndOfStream(f"end of capture {self.path}")
        return data
