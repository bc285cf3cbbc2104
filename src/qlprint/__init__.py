"""Raster printing for Brother QL label printers."""

from .config.settings import LabelSettings
from .printer import PrinterController, DeviceChannel, QLCommands, PrinterStatus
from .processing import RasterPipeline
from .job import LabelJob

__version__ = "0.1.0"

__all__ = [
    "LabelSettings", "PrinterController", "DeviceChannel", "QLCommands",
    "PrinterStatus", "RasterPipeline", "LabelJob"
]
