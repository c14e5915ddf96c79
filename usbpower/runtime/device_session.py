# usbpower/runtime/device_session.py
from __future__ import annotations

import logging
import time
from typing import Iterator, Optional

from usbpower.core.errors import (
    ConfigError,
    DeviceConnectError,
    DeviceDisconnectedError,
    DeviceNotFound,
    FrameDecodeError,
    ReadTimeoutError,
    StreamEnded,
)
from usbpower.model.sample import Sample
from usbpower.protocol.core.clock import ClockState, WallClock
from usbpower.protocol.core.defs import Protocol
from usbpower.protocol.core.sample_decoder import SampleDecoder
from usbpower.protocol.errors import DecodeError
from usbpower.transport.base import Transport
from usbpower.transport.errors import (
    DeviceNotFoundError,
    EndOfStream,
    TransportError,
    TransportIOError,
    TransportOpenError,
    TransportTimeout,
)

ERROR_POLICIES = ("skip", "abort")


class DeviceSession:
    """
    One open meter: a transport, a SampleDecoder and its own ClockState.

    Responsibilities:
      - open/close the underlying transport
      - read one frame per call and decode it into a Sample
      - translate low-level failures into operator-safe errors
      - apply the error policy in samples(): "skip" logs and drops rejected
        frames and read timeouts, "abort" raises them
    """

    def __init__(
        self,
        *,
        proto: Protocol,
        transport: Transport,
        on_error: str = "skip",
        clock: Optional[WallClock] = None,
        logger: Optional[logging.Logger] = None,
    ):
        if on_error not in ERROR_POLICIES:
            raise ConfigError(
                f"Unknown error policy '{on_error}'.",
                hint=f"Valid policies: {', '.join(ERROR_POLICIES)}",
            )

        self._proto = proto
        self._transport = transport
        self._on_error = on_error
        self._log = logger or logging.getLogger(__name__)

        self._decoder = SampleDecoder(proto, clock=clock)
        self.state = ClockState()

        self._started = False
        self.frames_ok = 0
        self.frames_rejected = 0
        self.timeouts = 0

    @property
    def is_started(self) -> bool:
        return self._started

    def start(self) -> None:
        if self._started:
            return

        self._log.info(
            "SESSION_START transport=%s device=%s protocol_version=%d",
            self._transport.description,
            self._proto.device_name,
            self._proto.version,
        )

        try:
            self._transport.open()
        except DeviceNotFoundError as e:
            self._log.warning("DEVICE_NOT_FOUND %s", e)
            raise DeviceNotFound(
                "No compatible USB power meter found.",
                hint="Check the meter is plugged in and in PC/HID mode.",
                details={"vendor_id": self._proto.vendor_id},
            ) from None
        except TransportOpenError as e:
            self._log.exception("TRANSPORT_OPEN_FAILED")
            raise DeviceConnectError(
                "Could not open device transport.",
                hint=str(e),
                details={"transport": self._transport.description},
            ) from None
        except TransportError as e:
            self._log.exception("TRANSPORT_OPEN_ERROR")
            raise DeviceConnectError(
                "Transport error while opening device.",
                hint=str(e),
                details={"transport": self._transport.description},
            ) from None

        self.state = ClockState()
        self._started = True

    def stop(self) -> None:
        if not self._started:
            return
        self._log.info(
            "SESSION_STOP frames_ok=%d frames_rejected=%d timeouts=%d",
            self.frames_ok,
            self.frames_rejected,
            self.timeouts,
        )
        self._started = False
        try:
            self._transport.close()
        except Exception:
            self._log.exception("Failed to close transport")

    # ---------------- Data path ----------------
    def read(self) -> Sample:
        """Read and decode exactly one frame."""
        if not self._started:
            raise RuntimeError("DeviceSession not started")

        try:
            frame = self._transport.read(self._proto.frame_length)
        except TransportTimeout as e:
            self.timeouts += 1
            raise ReadTimeoutError("No frame received from device.", hint=str(e)) from None
        except EndOfStream as e:
            raise StreamEnded("Frame source exhausted.", hint=str(e)) from None
        except TransportIOError as e:
            raise DeviceDisconnectedError(
                "Device is no longer reachable.",
                hint=str(e),
                details={"transport": self._transport.description},
            ) from None

        try:
            sample = self._decoder.decode_next(frame, self.state)
        except DecodeError as e:
            self.frames_rejected += 1
            raise FrameDecodeError(
                f"Frame rejected ({e.reason.reason}).",
                hint=str(e.reason),
                details={"kind": e.kind, "reason": e.reason.reason, "frame": bytes(frame).hex()},
            ) from e

        self.frames_ok += 1
        return sample

    def samples(self, duration_s: Optional[float] = None) -> Iterator[Sample]:
        """
        Yield samples until duration_s elapses or the source ends.

        The duration is checked before each read, so skipped frames and
        timeouts count against it too.
        """
        t0 = time.monotonic()
        while self._started:
            if duration_s is not None and time.monotonic() - t0 >= duration_s:
                return

            try:
                sample = self.read()
            except (FrameDecodeError, ReadTimeoutError) as e:
                if self._on_error == "abort":
                    raise
                self._log.warning("FRAME_SKIPPED code=%s msg=%s hint=%s", e.code, e.message, e.hint)
                continue
            except StreamEnded:
                self._log.info("STREAM_ENDED")
                return

            yield sample

    def __enter__(self) -> "DeviceSession":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
