"""Decoder for WITRN-style USB power meter HID frames."""

__version__ = "0.1.0"
