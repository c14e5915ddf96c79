# usbpower/protocol/core/defs.py
from __future__ import annotations

import struct
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from .types import YAML_TO_STRUCT
from ..loader import DEFAULT_PROTOCOL_FILE, ProtocolLoader, default_protocol_dir


@dataclass(frozen=True)
class FieldDef:
    name: str
    offset: int
    type: str
    codec: struct.Struct

    def unpack(self, frame: bytes) -> Any:
        return self.codec.unpack_from(frame, self.offset)[0]

    def pack_into(self, buf: bytearray, value: Any) -> None:
        self.codec.pack_into(buf, self.offset, value)


class Protocol:
    """Runtime access to the frame layout."""

    def __init__(self, loader: ProtocolLoader):
        self.version: int = loader.protocol_version()
        self.file_hashes: Dict[str, str] = dict(loader.file_hashes)

        device = loader.device
        frame = loader.frame
        clock = loader.clock

        try:
            self.device_name: str = str(device.get("name", "unknown"))
            self.vendor_id: int = int(device["vendor_id"])

            self.frame_length: int = int(frame["length"])
            self.signature: bytes = bytes(int(b) for b in frame["signature"])

            hdr = frame["header_checksum"]
            pay = frame["payload_checksum"]
            self.header_sum_start: int = int(hdr["start"])
            self.header_sum_end: int = int(hdr["end"])
            self.header_sum_offset: int = int(hdr["offset"])
            self.payload_sum_start: int = int(pay["start"])
            self.payload_sum_end: int = int(pay["end"])
            self.payload_sum_offset: int = int(pay["offset"])

            self.counter_period: int = int(clock["counter_period"])
            self.wrap_prev_above: int = int(clock["wrap_prev_above"])
            self.wrap_curr_below: int = int(clock["wrap_curr_below"])
            self.ms_candidates: int = int(clock["ms_candidates"])
        except KeyError as e:
            raise ValueError(f"Missing protocol key: {e}") from e
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid protocol definition: {e}") from e

        # Build field structs
        self.fields: Dict[str, FieldDef] = {}
        for name, fdef in loader.fields.items():
            ftype = fdef.get("type")
            if ftype not in YAML_TO_STRUCT:
                raise ValueError(f"Unknown field type '{ftype}' for field '{name}'")
            st = struct.Struct("<" + YAML_TO_STRUCT[ftype])
            offset = int(fdef["offset"])
            if offset < 0 or offset + st.size > self.frame_length:
                raise ValueError(
                    f"Field '{name}' ({offset}+{st.size}) does not fit in {self.frame_length}-byte frame"
                )
            self.fields[name] = FieldDef(name=name, offset=offset, type=ftype, codec=st)

        for required in ("coarse_seconds", "coarse_ms", "ms_mod_100", "voltage", "current"):
            if required not in self.fields:
                raise ValueError(f"Protocol is missing required field '{required}'")

        if len(self.signature) == 0 or len(self.signature) > self.frame_length:
            raise ValueError(f"Invalid frame signature length {len(self.signature)}")

        for label, start, end, offset in (
            ("header_checksum", self.header_sum_start, self.header_sum_end, self.header_sum_offset),
            ("payload_checksum", self.payload_sum_start, self.payload_sum_end, self.payload_sum_offset),
        ):
            if not 0 <= start <= end <= self.frame_length:
                raise ValueError(
                    f"{label} range {start}..{end} does not fit in {self.frame_length}-byte frame"
                )
            if not 0 <= offset < self.frame_length:
                raise ValueError(
                    f"{label} offset {offset} outside {self.frame_length}-byte frame"
                )

    @classmethod
    def load(cls, config_dir: Optional[str | Path] = None, filename: Optional[str] = None) -> "Protocol":
        loader = ProtocolLoader(config_dir or default_protocol_dir(), filename or DEFAULT_PROTOCOL_FILE)
        loader.load_all()
        return cls(loader)

    @classmethod
    def default(cls) -> "Protocol":
        """Bundled WITRN frame layout."""
        return cls.load()

    def field(self, name: str) -> FieldDef:
        if name not in self.fields:
            raise ValueError(f"Unknown field: {name}")
        return self.fields[name]

    def __repr__(self) -> str:
        return (
            f"Protocol(device='{self.device_name}', version={self.version}, "
            f"frame_length={self.frame_length})"
        )
