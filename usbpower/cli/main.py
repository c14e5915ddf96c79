# usbpower/cli/main.py
from __future__ import annotations

from pathlib import Path
from typing import Optional

from usbpower.core.errors import UsbPowerError
from usbpower.common.logging_config import configure_logging

from usbpower.cli.args import config_from_args, parse_args
from usbpower.cli.commands import (
    cmd_devices,
    cmd_stats,
    cmd_stream,
)


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(
        verbose=args.verbose,
        log_file=Path(args.log_file) if args.log_file else None,
    )

    try:
        cfg = config_from_args(args)

        if args.cmd == "devices":
            return cmd_devices(cfg)
        if args.cmd == "stats":
            return cmd_stats(cfg, duration_s=args.duration)
        if args.cmd == "stream":
            return cmd_stream(cfg, fmt=args.format, out_path=args.out, duration_s=args.duration)

        return 2
    except UsbPowerError as e:
        print(f"ERROR: {e.message}")
        if e.hint:
            print(f"Hint: {e.hint}")
        return 1
