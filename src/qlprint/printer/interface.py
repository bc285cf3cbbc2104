"""Printer interface for Brother QL label printers via the usblp device."""

import logging
from typing import List, Optional, Sequence

from ..config.settings import SETTINGS, LabelSettings
from .channel import DeviceChannel
from .errors import PrinterIOError
from .ql_commands import QLCommands, CommandMode
from .status import PrinterStatus, decode_status


class PrinterController:
    """Controls a Brother QL printer in raster mode.

    Every exchange is a blocking write followed, where the protocol expects
    one, by a blocking read of the reply. Any exception leaves the printer
    mid-job; the next job starts with a reset.
    """

    def __init__(self, channel: Optional[DeviceChannel] = None):
        self.settings = SETTINGS["printer"]
        self.logger = logging.getLogger(__name__)
        self.channel = channel
        self.device_path = channel.path if channel is not None else None

    def connect(self, device_path: str = None) -> None:
        """Open the printer device.

        Args:
            device_path: Optional specific device path to use

        Raises:
            PrinterIOError: If the device cannot be opened
        """
        if self.is_connected():
            return

        path = device_path or self.settings.DEVICE_PATH
        self.channel = DeviceChannel.open(path)
        self.device_path = path
        self.logger.info(f"Connected to printer at {path}")

    def disconnect(self) -> None:
        """Close the printer device."""
        if self.channel is None:
            return
        try:
            self.channel.close()
            self.logger.info("Disconnected from printer")
        finally:
            self.channel = None

    def is_connected(self) -> bool:
        """Check if printer is connected."""
        return self.channel is not None and self.channel.is_open()

    def __enter__(self) -> "PrinterController":
        self.connect()
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.disconnect()

    def send_command(self, command: bytes) -> None:
        """Send encoded command bytes to the printer.

        Raises:
            PrinterIOError: If not connected or the write fails
        """
        if not self.is_connected():
            raise PrinterIOError("Printer not connected")
        self.channel.write(command)

    def read_status(self) -> PrinterStatus:
        """Read and decode one status reply.

        Raises:
            PrinterIOError: If not connected, or PrinterTimeoutError if no reply
            StatusDecodeError: If the reply is malformed
        """
        if not self.is_connected():
            raise PrinterIOError("Printer not connected")

        status = decode_status(self.channel.read(self.settings.STATUS_REPLY_LENGTH))
        self.logger.debug(f"Printer status: {status}")
        if status.has_errors:
            self.logger.warning(f"Printer reports: {', '.join(status.describe_errors())}")
        return status

    def request_status(self) -> PrinterStatus:
        """Send a status information request and decode the reply."""
        self.send_command(QLCommands.status_info_request())
        return self.read_status()

    def print_lines(self, lines: Sequence[bytes],
                    label_settings: LabelSettings = None) -> PrinterStatus:
        """Print a rendered label.

        Runs the full raster job: reset, initialize, status query, mode and
        media setup, one raster transfer per line, print with feeding, then
        drains the post-print notifications.

        Args:
            lines: 90 byte raster lines, top to bottom
            label_settings: Cut and resolution options

        Returns:
            The last status reply read after printing
        """
        if label_settings is None:
            label_settings = LabelSettings.from_settings()

        # Validate every line before touching the printer
        commands: List[bytes] = [QLCommands.raster_graphics_transfer(line) for line in lines]

        self.send_command(QLCommands.reset())
        self.send_command(QLCommands.initialize())

        status = self.request_status()
        self.logger.debug(f"Media {status.media_width}x{status.media_length}mm "
                          f"({status.media_type.name})")

        self.send_command(QLCommands.set_command_mode(CommandMode.RASTER))
        self.send_command(QLCommands.set_print_information(status, len(commands)))
        self.send_command(QLCommands.set_expanded_mode(
            cut_at_end=label_settings.auto_cut,
            high_resolution=label_settings.high_resolution))
        self.send_command(QLCommands.set_mode(auto_cut=label_settings.auto_cut))
        # Required for auto cut
        self.send_command(QLCommands.set_page_number(self.settings.PAGE_NUMBER))
        self.send_command(QLCommands.set_margin_amount(self.settings.MARGIN_AMOUNT))

        self.logger.debug(f"Printing {len(commands)} lines")
        for command in commands:
            self.send_command(command)

        self.send_command(QLCommands.print_with_feeding())

        for _ in range(self.settings.POST_PRINT_STATUS_READS):
            status = self.read_status()

        self.logger.info(f"Printed {len(commands)} lines")
        return status

    def get_printer_info(self) -> dict:
        """Get printer connection details.

        Returns:
            Dictionary with printer information
        """
        return {
            "connected": self.is_connected(),
            "device_path": self.device_path,
            "settings": {
                "status_reply_length": self.settings.STATUS_REPLY_LENGTH,
                "read_retries": self.settings.READ_RETRIES,
                "read_retry_delay": self.settings.READ_RETRY_DELAY,
                "page_number": self.settings.PAGE_NUMBER,
                "margin_amount": self.settings.MARGIN_AMOUNT,
            }
        }
