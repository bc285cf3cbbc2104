"""Raster command set for Brother QL label printers."""

from enum import IntEnum

from .status import PrinterStatus

RASTER_LINE_BYTES = 90  # 720 dots per line


class CommandMode(IntEnum):
    """Values for the command mode switch."""

    ESCP_NORMAL = 0x00
    RASTER = 0x01
    ESCP_TEXT = 0x02       # QL-650TD
    PTOUCH_TEMPLATE = 0x03  # QL-580N/1050/1060N


class QLCommands:
    """Control codes for Brother QL-500/550/570/700 and compatible printers."""

    # Control characters
    NUL = b'\x00'
    ESC = b'\x1b'
    FF = b'\x0c'   # Print
    SUB = b'\x1a'  # Print with feeding

    # Print information: media kind, width, length, priority and recovery valid
    PRINT_INFO_FLAGS = 0x02 | 0x04 | 0x08 | 0x40 | 0x80

    # Basic printer control
    @staticmethod
    def reset() -> bytes:
        """Clear the command buffer with 200 NUL bytes."""
        return QLCommands.NUL * 200

    @staticmethod
    def invalid() -> bytes:
        """Single invalid (NUL) command."""
        return QLCommands.NUL

    @staticmethod
    def initialize() -> bytes:
        """Initialize the printer."""
        return QLCommands.ESC + b'@'

    @staticmethod
    def status_info_request() -> bytes:
        """Request a 32 byte status reply."""
        return QLCommands.ESC + b'iS'

    @staticmethod
    def set_command_mode(mode: CommandMode) -> bytes:
        """Switch command mode (QL-580N/650TD/1050/1060N).

        Args:
            mode: Target CommandMode
        """
        return QLCommands.ESC + b'ia' + bytes([CommandMode(mode)])

    # Job setup
    @staticmethod
    def set_print_information(status: PrinterStatus, line_count: int) -> bytes:
        """Describe the media and raster length of the upcoming page.

        Args:
            status: Status reply describing the loaded media
            line_count: Number of raster lines that will follow
        """
        if not 0 <= line_count <= 0xFFFFFFFF:
            raise ValueError(f"Line count out of range: {line_count}")

        return (QLCommands.ESC + b'iz'
                + bytes([QLCommands.PRINT_INFO_FLAGS,
                         int(status.media_type),
                         status.media_width,
                         status.media_length])
                + line_count.to_bytes(4, 'little')
                + b'\x01\x00')

    @staticmethod
    def set_mode(auto_cut: bool) -> bytes:
        """Set each mode; only auto cut is supported.

        Args:
            auto_cut: Cut after each label
        """
        return QLCommands.ESC + b'iM' + bytes([int(bool(auto_cut)) << 6])

    @staticmethod
    def set_page_number(page_number: int) -> bytes:
        """Cut every ``page_number`` labels when auto cut is on.

        Args:
            page_number: 1-255, 1 cuts every label
        """
        if not 1 <= page_number <= 255:
            raise ValueError("Page number must be between 1 and 255")
        return QLCommands.ESC + b'iA' + bytes([page_number])

    @staticmethod
    def set_expanded_mode(cut_at_end: bool, high_resolution: bool) -> bytes:
        """Set expanded mode.

        Args:
            cut_at_end: Cut after the last label
            high_resolution: 600 dpi vertical printing (QL-570/580N/700)
        """
        flags = int(bool(cut_at_end)) << 4 | int(bool(high_resolution)) << 6
        return QLCommands.ESC + b'iK' + bytes([flags])

    @staticmethod
    def set_margin_amount(dots: int) -> bytes:
        """Set the feed amount.

        Args:
            dots: Margin in dots (0-65535)
        """
        if not 0 <= dots <= 0xFFFF:
            raise ValueError(f"Margin out of range: {dots}")
        return QLCommands.ESC + b'id' + dots.to_bytes(2, 'little')

    @staticmethod
    def set_compression_mode() -> bytes:
        """Select uncompressed raster data."""
        return b'M\x00'

    # Raster data
    @staticmethod
    def raster_graphics_transfer(line: bytes) -> bytes:
        """Transfer one raster line.

        Args:
            line: Exactly 90 bytes of packed dots
        """
        if len(line) != RASTER_LINE_BYTES:
            raise ValueError(
                f"Raster line must be {RASTER_LINE_BYTES} bytes, got {len(line)}")
        return b'g\x00' + bytes([RASTER_LINE_BYTES]) + bytes(line)

    @staticmethod
    def zero_raster_graphics() -> bytes:
        """Blank raster line."""
        return b'Z'

    # Printing
    @staticmethod
    def print_page() -> bytes:
        """Print an intermediate page."""
        return QLCommands.FF

    @staticmethod
    def print_with_feeding() -> bytes:
        """Print the final page and feed."""
        return QLCommands.SUB

    @staticmethod
    def set_baud_rate(rate: int) -> bytes:
        """Set the serial baud rate (QL-580N/650TD/1050/1060N).

        Args:
            rate: 16 bit baud rate value, sent low byte first
        """
        if not 0 <= rate <= 0xFFFF:
            raise ValueError(f"Baud rate out of range: {rate}")
        return QLCommands.ESC + b'iB' + bytes([rate & 0xFF, rate >> 8])
