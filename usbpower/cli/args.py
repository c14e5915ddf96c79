# usbpower/cli/args.py
from __future__ import annotations

import argparse
from typing import Optional

from usbpower.app.config import UsbPowerConfig
from usbpower.runtime.device_session import ERROR_POLICIES


def _vendor_id(v: str) -> int:
    try:
        return int(v, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid vendor id '{v}' (use e.g. 0x0716)")


def _positive_float(v: str) -> float:
    f = float(v)
    if f <= 0:
        raise argparse.ArgumentTypeError(f"must be > 0 (got {v})")
    return f


def _positive_int(v: str) -> int:
    try:
        n = int(v)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: '{v}'")
    if n <= 0:
        raise argparse.ArgumentTypeError(f"must be > 0 (got {v})")
    return n


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="usbpower")
    sub = parser.add_subparsers(dest="cmd", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--protocol-dir", default=None, help="Directory holding the protocol YAML (default: bundled).")
    common.add_argument("--vendor-id", type=_vendor_id, default=None, help="USB vendor id (default: from protocol).")
    common.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr.")
    common.add_argument("--log-file", default=None, help="Also append INFO+ logs to this file.")

    sub.add_parser("devices", parents=[common], help="List matching HID devices.")

    sampling = argparse.ArgumentParser(add_help=False)
    src = sampling.add_mutually_exclusive_group()
    src.add_argument("--device-path", default=None, help="Open this HID path instead of the first match.")
    src.add_argument("--capture", default=None, help="Replay a raw capture file instead of a device.")
    sampling.add_argument(
        "--duration",
        type=_positive_float,
        default=None,
        help="Stop sampling after this many seconds (default: until interrupted).",
    )
    sampling.add_argument("--timeout-ms", type=_positive_int, default=500, help="Per-read timeout.")
    sampling.add_argument(
        "--on-error",
        choices=ERROR_POLICIES,
        default="skip",
        help="Rejected frames / read timeouts: skip and continue, or abort.",
    )

    sub.add_parser("stats", parents=[common, sampling], help="Print voltage/current statistics.")

    p_stream = sub.add_parser("stream", parents=[common, sampling], help="Stream samples as records.")
    p_stream.add_argument("--format", choices=("json", "csv"), default="json")
    p_stream.add_argument("--out", default=None, help="Write to this file instead of stdout.")

    return parser


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def config_from_args(args: argparse.Namespace) -> UsbPowerConfig:
    return UsbPowerConfig(
        protocol_dir=args.protocol_dir,
        vendor_id=args.vendor_id,
        device_path=getattr(args, "device_path", None),
        capture_path=getattr(args, "capture", None),
        read_timeout_ms=getattr(args, "timeout_ms", 500),
        on_error=getattr(args, "on_error", "skip"),
    )
