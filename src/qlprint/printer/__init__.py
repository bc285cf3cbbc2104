"""Printer interface module for qlprint."""

from .interface import PrinterController
from .channel import DeviceChannel
from .ql_commands import QLCommands, CommandMode
from .status import PrinterStatus, decode_status, pixel_width

__all__ = [
    "PrinterController", "DeviceChannel", "QLCommands", "CommandMode",
    "PrinterStatus", "decode_status", "pixel_width"
]
