# usbpower/app/sinks.py
from __future__ import annotations

import json
import math
import os
from pathlib import Path
from typing import Optional, TextIO

from usbpower.app.stats import SeriesCollector
from usbpower.interfaces.sample_sink import SampleSink
from usbpower.model.sample import Sample


def _finite_or_none(value):
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


class _StreamSink:
    """Writes to an owned file (path) or a borrowed stream (left open)."""

    def __init__(self, *, path: Optional[str | Path] = None, stream: Optional[TextIO] = None):
        if (path is None) == (stream is None):
            raise ValueError("exactly one of path / stream is required")

        self._owns = path is not None
        self._path = os.fspath(path) if path is not None else None
        self._f: Optional[TextIO] = stream
        self._lines_written = 0
        if self._path is not None:
            os.makedirs(os.path.dirname(self._path) or ".", exist_ok=True)
            self._f = open(self._path, "w", buffering=1, encoding="utf-8", newline="")

    @property
    def path(self) -> Optional[str]:
        return self._path

    @property
    def lines_written(self) -> int:
        return self._lines_written

    def _write_line(self, line: str) -> None:
        if self._f is None:
            raise RuntimeError(f"{type(self).__name__} is closed")
        self._f.write(line + "\n")
        self._lines_written += 1

    def close(self) -> None:
        f, self._f = self._f, None
        if f is None:
            return
        f.flush()
        if self._owns:
            f.close()


class JsonLinesSink(_StreamSink):
    """
    One JSON object per sample: {"ts": ..., "v": ..., "i": ...}.

    NaN and infinite readings are written as null.
    """

    def on_sample(self, sample: Sample) -> None:
        d = {k: _finite_or_none(v) for k, v in sample.as_dict().items()}
        self._write_line(json.dumps(d, allow_nan=False))


class CsvSampleSink(_StreamSink):
    """Line-buffered CSV with a fixed ts,v,i column order."""

    HEADER = ("ts", "v", "i")

    def __init__(self, *, path: Optional[str | Path] = None, stream: Optional[TextIO] = None):
        super().__init__(path=path, stream=stream)
        self._write_line(",".join(self.HEADER))

    def on_sample(self, sample: Sample) -> None:
        d = sample.as_dict()
        self._write_line(",".join(str(d[k]) for k in self.HEADER))


class StatsSink(SampleSink):
    """Collects voltage/current series for the end-of-run summary."""

    def __init__(self) -> None:
        self.series = SeriesCollector()

    def on_sample(self, sample: Sample) -> None:
        self.series.add(sample.voltage, sample.current)

    def close(self) -> None:
        return None
