# usbpower/app/stats.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Sequence


def percentile(values: Sequence[float], p: int) -> float:
    """Nearest-rank-below percentile: sorted(values)[(p * (n - 1)) // 100]."""
    if p < 0 or p > 100:
        raise ValueError(f"percentile must be within 0..100 (got {p})")
    if not values:
        return 0.0
    ordered = sorted(values)
    return float(ordered[(p * (len(ordered) - 1)) // 100])


OPS: Dict[str, Callable[[Sequence[float]], float]] = {
    "min": lambda v: float(min(v)),
    "max": lambda v: float(max(v)),
    "avg": lambda v: float(sum(v) / len(v)),
    "p50": lambda v: percentile(v, 50),
    "p90": lambda v: percentile(v, 90),
}


@dataclass(frozen=True)
class Summary:
    count: int
    min: float
    max: float
    avg: float
    p50: float
    p90: float

    def format(self, unit: str) -> str:
        return (
            f"min={self.min:.2f}{unit}, max={self.max:.2f}{unit}, avg={self.avg:.2f}{unit}, "
            f"p50={self.p50:.2f}{unit}, p90={self.p90:.2f}{unit}"
        )


def summarize(values: Sequence[float]) -> Summary:
    """Descriptive statistics; every figure is 0.0 for an empty series."""
    if not values:
        return Summary(count=0, min=0.0, max=0.0, avg=0.0, p50=0.0, p90=0.0)
    out = {name: fn(values) for name, fn in OPS.items()}
    return Summary(count=len(values), **out)


class SeriesCollector:
    """Accumulates voltage and current series for a final summary."""

    def __init__(self) -> None:
        self.voltages: List[float] = []
        self.currents: List[float] = []

    def add(self, voltage: float, current: float) -> None:
        self.voltages.append(float(voltage))
        self.currents.append(float(current))

    def voltage(self) -> Summary:
        return summarize(self.voltages)

    def current(self) -> Summary:
        return summarize(self.currents)
