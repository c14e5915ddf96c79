# usbpower/interfaces/sample_sink.py
from typing import Protocol
from usbpower.model.sample import Sample


class SampleSink(Protocol):
    def on_sample(self, sample: Sample) -> None: ...
    def close(self) -> None: ...
