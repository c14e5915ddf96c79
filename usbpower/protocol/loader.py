# usbpower/protocol/loader.py
from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Any, Dict

import yaml


DEFAULT_PROTOCOL_FILE = "witrn.yml"


def sha256_file(path: Path) -> str:
    h = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(1024 * 1024), b""):
            h.update(chunk)
    return h.hexdigest()


def default_protocol_dir() -> Path:
    # <package>/metadata/protocol, based on this file's location
    return Path(__file__).resolve().parents[1] / "metadata" / "protocol"


class ProtocolLoader:
    """Load the frame-layout YAML into dicts + keep the file's SHA256 hash."""

    REQUIRED_SECTIONS = ("device", "frame", "fields", "clock")

    def __init__(self, config_dir: str | Path, filename: str = DEFAULT_PROTOCOL_FILE):
        self.config_dir = Path(config_dir)
        self.filename = filename

        # Full document
        self.doc: Dict[str, Any] = {}

        # Extracted structures used by Protocol(...)
        self.device: Dict[str, Any] = {}
        self.frame: Dict[str, Any] = {}
        self.fields: Dict[str, Dict[str, Any]] = {}
        self.clock: Dict[str, Any] = {}

        # File fingerprints (filename -> sha256 hex)
        self.file_hashes: Dict[str, str] = {}

    @property
    def path(self) -> Path:
        return self.config_dir / self.filename

    def load_all(self) -> None:
        self.file_hashes.clear()
        path = self.path
        if not path.exists():
            raise FileNotFoundError(f"Protocol file not found: {path}")
        self.file_hashes[self.filename] = sha256_file(path)

        self.doc = self._load_yaml(path)
        if not isinstance(self.doc, dict):
            raise ValueError(f"{self.filename} must be a mapping")

        for section in self.REQUIRED_SECTIONS:
            if not isinstance(self.doc.get(section), dict):
                raise ValueError(f"{self.filename} must contain '{section}' mapping")

        self.device = self.doc["device"]
        self.frame = self.doc["frame"]
        self.fields = self.doc["fields"]
        self.clock = self.doc["clock"]

    def protocol_version(self) -> int:
        """
        Version of the frame layout definition.
        Defaults to 0 if not specified.
        """
        v = self.doc.get("protocol_version", 0)
        try:
            return int(v)
        except Exception:
            raise ValueError(f"Invalid protocol version in {self.filename}: {v!r}")

    @staticmethod
    def _load_yaml(path: Path) -> Dict[str, Any]:
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
