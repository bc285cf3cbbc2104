"""Exceptions raised by the printer and raster layers."""


class QLPrinterError(RuntimeError):
    """Base class for every qlprint failure."""


class PrinterIOError(QLPrinterError):
    """Raised when the printer device cannot be opened, read or written."""


class PrinterTimeoutError(PrinterIOError):
    """Raised when a status reply does not arrive within the retry budget."""


class StatusDecodeError(QLPrinterError):
    """Raised when a status reply carries an unknown field code."""


class StatusHeaderError(StatusDecodeError):
    """Raised when a status reply is not framed by the 0x80 0x20 header."""


class InvalidImageError(QLPrinterError):
    """Raised when an image cannot be decoded or is too long to print."""
