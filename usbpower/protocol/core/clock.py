# usbpower/protocol/core/clock.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from .defs import Protocol


WallClock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ClockState:
    """
    Per-session clock reconstruction state.

    One instance per open device; never shared between sessions.
    epoch is set once, on the first reconstructed frame, and then left alone.
    """
    last_coarse_seconds: int = 0
    wrap_count: int = 0
    epoch: Optional[datetime] = None


class ClockReconstructor:
    """
    Turns the device's coarse, wrapping clock bytes into an absolute timestamp.

    The device reports:
      - an 8-bit elapsed-seconds counter (wraps 255 -> 0)
      - a coarse millisecond byte (true ms mod 256)
      - a byte holding true ms mod 100

    The true sub-second value is the first of (256*j + coarse_ms) % 1000,
    j = 0..3, whose value mod 100 matches. If none matches, 0 is used.
    """

    def __init__(
        self,
        proto: Protocol,
        *,
        clock: Optional[WallClock] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.proto = proto
        self._clock = clock or utc_now
        self._log = logger or logging.getLogger(__name__)

        self._seconds = proto.field("coarse_seconds")
        self._coarse_ms = proto.field("coarse_ms")
        self._ms_mod_100 = proto.field("ms_mod_100")

    def reconstruct(self, state: ClockState, frame: bytes) -> datetime:
        coarse_seconds = int(self._seconds.unpack(frame))
        coarse_ms = int(self._coarse_ms.unpack(frame))
        ms_mod_100 = int(self._ms_mod_100.unpack(frame))

        self.advance_wrap(state, coarse_seconds)
        base_ms = self.subsecond_ms(coarse_ms, ms_mod_100)

        elapsed_ms = (coarse_seconds + state.wrap_count * self.proto.counter_period) * 1000 + base_ms
        elapsed = timedelta(milliseconds=elapsed_ms)

        if state.epoch is None:
            state.epoch = self._clock() - elapsed
            self._log.debug("CLOCK_EPOCH epoch=%s elapsed_ms=%d", state.epoch.isoformat(), elapsed_ms)

        return state.epoch + elapsed

    def advance_wrap(self, state: ClockState, coarse_seconds: int) -> None:
        """Count a wraparound when the counter drops from near-top to near-zero."""
        if coarse_seconds < self.proto.wrap_curr_below and state.last_coarse_seconds > self.proto.wrap_prev_above:
            state.wrap_count += 1
            self._log.debug(
                "CLOCK_WRAP prev=%d curr=%d wrap_count=%d",
                state.last_coarse_seconds,
                coarse_seconds,
                state.wrap_count,
            )
        state.last_coarse_seconds = coarse_seconds

    def subsecond_ms(self, coarse_ms: int, ms_mod_100: int) -> int:
        for j in range(self.proto.ms_candidates):
            candidate = (self.proto.counter_period * j + coarse_ms) % 1000
            if candidate % 100 == ms_mod_100:
                return candidate

        # No candidate matched: whole-second precision for this frame.
        self._log.debug("SUBSECOND_FALLBACK coarse_ms=%d ms_mod_100=%d", coarse_ms, ms_mod_100)
        return 0
