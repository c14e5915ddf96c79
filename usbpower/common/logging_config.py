# usbpower/common/logging_config.py
from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, TextIO


@dataclass(frozen=True)
class LogDefaults:
    level: int = logging.WARNING
    verbose_level: int = logging.DEBUG
    file_level: int = logging.INFO
    fmt: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


DEFAULTS = LogDefaults()


def configure_logging(
    *,
    verbose: bool = False,
    log_file: Optional[Path] = None,
    stream: Optional[TextIO] = None,
) -> None:
    """
    Attach a stderr handler (and optionally a file handler) to the root logger.
    Idempotent: handlers already installed for the same target are reused.
    """
    root = logging.getLogger()
    formatter = logging.Formatter(DEFAULTS.fmt)
    stream = stream or sys.stderr
    level = DEFAULTS.verbose_level if verbose else DEFAULTS.level

    sh = next(
        (h for h in root.handlers
         if type(h) is logging.StreamHandler and getattr(h, "stream", None) is stream),
        None,
    )
    if sh is None:
        sh = logging.StreamHandler(stream)
        sh.setFormatter(formatter)
        root.addHandler(sh)
    sh.setLevel(level)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        target = str(log_file.resolve())
        if not any(
            isinstance(h, logging.FileHandler) and getattr(h, "baseFilename", None) == target
            for h in root.handlers
        ):
            fh = logging.FileHandler(log_file, encoding="utf-8", delay=True)
            fh.setLevel(DEFAULTS.file_level)
            fh.setFormatter(formatter)
            root.addHandler(fh)
        level = min(level, DEFAULTS.file_level)

    root.setLevel(level)
