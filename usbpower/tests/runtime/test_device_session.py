from __future__ import annotations

import logging
from datetime import datetime, timezone

import pytest

import usbpower.runtime.device_session as ds_mod
from usbpower.core.errors import (
    ConfigError,
    DeviceConnectError,
    DeviceDisconnectedError,
    DeviceNotFound,
    FrameDecodeError,
    ReadTimeoutError,
)
from usbpower.protocol.core.defs import Protocol
from usbpower.protocol.core.frame import build_frame
from usbpower.transport.base import Transport
from usbpower.transport.errors import (
    DeviceNotFoundError,
    EndOfStream,
    TransportIOError,
    TransportOpenError,
    TransportTimeout,
)


NOW = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeTransport(Transport):
    """Each read() pops the next item: bytes are returned, exceptions raised."""

    def __init__(self, items=None, *, open_error=None):
        self.items = list(items or [])
        self.open_error = open_error
        self.open_called = 0
        self.close_called = 0
        self.read_sizes = []

    def open(self) -> None:
        self.open_called += 1
        if self.open_error is not None:
            raise self.open_error

    def close(self) -> None:
        self.close_called += 1

    def read(self, n: int) -> bytes:
        self.read_sizes.append(n)
        if not self.items:
            raise EndOfStream("no more items")
        item = self.items.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


class FakeTime:
    def __init__(self, ticks):
        self._ticks = list(ticks)

    def monotonic(self) -> float:
        if len(self._ticks) > 1:
            return self._ticks.pop(0)
        return self._ticks[0]


@pytest.fixture(scope="module")
def proto() -> Protocol:
    return Protocol.default()


def _good(proto, s: int = 5) -> bytes:
    return build_frame(proto, coarse=s, ms_mod_100=s % 100, voltage=5.0, current=0.5)


def _bad(proto) -> bytes:
    f = bytearray(_good(proto))
    f[1] = 0x00
    return bytes(f)


def _session(proto, transport, **kw) -> ds_mod.DeviceSession:
    return ds_mod.DeviceSession(proto=proto, transport=transport, clock=lambda: NOW, **kw)


def test_unknown_error_policy_is_config_error(proto):
    with pytest.raises(ConfigError):
        _session(proto, FakeTransport(), on_error="retry")


def test_start_stop_open_and_close_transport(proto):
    t = FakeTransport()
    with _session(proto, t) as s:
        assert s.is_started
        assert t.open_called == 1
    assert not s.is_started
    assert t.close_called == 1


def test_start_is_idempotent(proto):
    t = FakeTransport()
    s = _session(proto, t)
    s.start()
    s.start()
    assert t.open_called == 1


def test_start_not_found_maps_to_device_not_found(proto):
    t = FakeTransport(open_error=DeviceNotFoundError("nothing"))
    with pytest.raises(DeviceNotFound) as ei:
        _session(proto, t).start()
    assert ei.value.code == "device_not_found"
    assert ei.value.hint


def test_start_open_error_maps_to_connect_error(proto):
    t = FakeTransport(open_error=TransportOpenError("permission denied"))
    with pytest.raises(DeviceConnectError) as ei:
        _session(proto, t).start()
    assert "permission denied" in ei.value.hint


def test_read_before_start_raises(proto):
    with pytest.raises(RuntimeError):
        _session(proto, FakeTransport([_good(proto)])).read()


def test_read_decodes_one_frame(proto):
    t = FakeTransport([_good(proto)])
    with _session(proto, t) as s:
        sample = s.read()

    assert sample.voltage == 5.0
    assert sample.current == 0.5
    assert sample.timestamp == NOW
    assert t.read_sizes == [64]
    assert s.frames_ok == 1


def test_read_rejected_frame_raises_frame_decode_error(proto):
    t = FakeTransport([_bad(proto)])
    with _session(proto, t) as s:
        with pytest.raises(FrameDecodeError) as ei:
            s.read()

    assert ei.value.details["reason"] == "bad_signature"
    assert ei.value.details["kind"] == "framing"
    assert s.frames_rejected == 1
    assert s.state.epoch is None


def test_read_timeout_raises_read_timeout(proto):
    t = FakeTransport([TransportTimeout("500 ms")])
    with _session(proto, t) as s:
        with pytest.raises(ReadTimeoutError):
            s.read()
    assert s.timeouts == 1


def test_read_io_error_raises_disconnected(proto):
    t = FakeTransport([TransportIOError("unplugged")])
    with _session(proto, t) as s:
        with pytest.raises(DeviceDisconnectedError):
            s.read()
    assert t.close_called == 1


def test_samples_skip_policy_drops_bad_frames_and_timeouts(proto):
    t = FakeTransport([_good(proto, 5), _bad(proto), TransportTimeout("t"), _good(proto, 6)])
    with _session(proto, t, on_error="skip") as s:
        out = list(s.samples())

    assert len(out) == 2
    assert out[0].timestamp < out[1].timestamp
    assert (s.frames_ok, s.frames_rejected, s.timeouts) == (2, 1, 1)


def test_samples_abort_policy_raises_on_bad_frame(proto):
    t = FakeTransport([_good(proto, 5), _bad(proto), _good(proto, 6)])
    got = []
    with _session(proto, t, on_error="abort") as s:
        with pytest.raises(FrameDecodeError):
            for sample in s.samples():
                got.append(sample)

    assert len(got) == 1


def test_samples_abort_policy_raises_on_timeout(proto):
    t = FakeTransport([TransportTimeout("t")])
    with _session(proto, t, on_error="abort") as s:
        with pytest.raises(ReadTimeoutError):
            list(s.samples())


def test_samples_disconnect_always_raises(proto):
    t = FakeTransport([_good(proto), TransportIOError("gone")])
    with _session(proto, t, on_error="skip") as s:
        with pytest.raises(DeviceDisconnectedError):
            list(s.samples())


def test_samples_stops_after_duration(proto, monkeypatch):
    monkeypatch.setattr(ds_mod, "time", FakeTime([0.0, 0.0, 0.5, 2.0]))
    t = FakeTransport([_good(proto, s) for s in range(5, 10)])

    with _session(proto, t) as s:
        out = list(s.samples(duration_s=1.0))

    assert len(out) == 2


def test_restart_gives_fresh_clock_state(proto):
    t = FakeTransport([_good(proto, 255), _good(proto, 1)])
    s = _session(proto, t)
    with s:
        s.read()
    with s:
        s.read()
    assert s.state.wrap_count == 0
    assert s.state.last_coarse_seconds == 1


def test_sessions_keep_independent_clock_state(proto):
    a = _session(proto, FakeTransport([_good(proto, 255), _good(proto, 1)]))
    b = _session(proto, FakeTransport([_good(proto, 1)]))

    with a, b:
        a.read()
        a.read()
        b.read()

    assert a.state is not b.state
    assert a.state.wrap_count == 1
    assert b.state.wrap_count == 0


def test_clock_records_use_core_logger(proto, caplog):
    caplog.set_level(logging.DEBUG)
    t = FakeTransport([_good(proto, 254), _good(proto, 1)])
    s = _session(proto, t, logger=logging.getLogger("usbpower.session"))

    with s:
        list(s.samples())

    wraps = [r for r in caplog.records if r.getMessage().startswith("CLOCK_WRAP")]
    assert len(wraps) == 1
    assert wraps[0].name == "usbpower.protocol.core.clock"
    assert any(r.name == "usbpower.session" and r.getMessage().startswith("SESSION_START") for r in caplog.records)
