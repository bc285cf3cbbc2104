"""Blocking byte channel to the printer's character device."""

import os
import time
import logging
from typing import Callable, Optional, BinaryIO

from ..config.settings import SETTINGS
from .errors import PrinterIOError, PrinterTimeoutError


class DeviceChannel:
    """Exclusive read/write handle on a usblp device node.

    The QL printers answer a status request some milliseconds after the
    request is written, so reads poll the device until the full reply has
    arrived or the retry budget is spent.
    """

    def __init__(self,
                 device: BinaryIO,
                 path: Optional[str] = None,
                 retries: int = None,
                 retry_delay: float = None,
                 sleep: Callable[[float], None] = time.sleep):
        settings = SETTINGS["printer"]
        self.device = device
        self.path = path
        self.retries = settings.READ_RETRIES if retries is None else retries
        self.retry_delay = settings.READ_RETRY_DELAY if retry_delay is None else retry_delay
        self.sleep = sleep
        self.logger = logging.getLogger(__name__)

    @classmethod
    def open(cls, path: str = None, **kwargs) -> "DeviceChannel":
        """Open the device node for unbuffered reading and writing.

        Args:
            path: Device path, defaults to the configured DEVICE_PATH
            **kwargs: Passed through to the constructor

        Raises:
            PrinterIOError: If the node cannot be opened
        """
        if path is None:
            path = SETTINGS["printer"].DEVICE_PATH

        try:
            device = open(path, 'r+b', buffering=0)
        except OSError as e:
            raise PrinterIOError(f"Failed to open printer device {path}: {e}") from e

        logging.getLogger(__name__).debug(f"Opened printer device {path}")
        return cls(device, path=path, **kwargs)

    def close(self) -> None:
        """Release the device handle."""
        if self.device is None:
            return
        try:
            self.device.close()
            self.logger.debug(f"Closed printer device {self.path}")
        finally:
            self.device = None

    def __enter__(self) -> "DeviceChannel":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def is_open(self) -> bool:
        return self.device is not None

    def write(self, data: bytes) -> None:
        """Write the whole buffer to the device.

        Raises:
            PrinterIOError: If the channel is closed or the write fails
        """
        self._ensure_open()

        view = memoryview(data)
        try:
            while view:
                written = self.device.write(view)
                if not written:
                    raise PrinterIOError(
                        f"Printer accepted no data ({len(view)} of {len(data)} bytes left)")
                view = view[written:]
            self.device.flush()
        except OSError as e:
            raise PrinterIOError(f"Failed to write to printer: {e}") from e

    def read(self, length: int) -> bytes:
        """Read exactly ``length`` bytes.

        An attempt that yields no data counts as a failure and is followed by
        a ``retry_delay`` pause; partial data is kept across attempts.

        Raises:
            PrinterTimeoutError: After ``retries`` consecutive failed attempts
            PrinterIOError: If the channel is closed
        """
        self._ensure_open()

        buffer = bytearray()
        failures = 0

        while len(buffer) < length:
            try:
                chunk = self.device.read(length - len(buffer))
            except OSError as e:
                self.logger.debug(f"Read attempt failed: {e}")
                chunk = None

            if chunk:
                buffer.extend(chunk)
                failures = 0
                continue

            failures += 1
            if failures >= self.retries:
                raise PrinterTimeoutError(
                    f"Timeout reading {length} bytes from printer "
                    f"(got {len(buffer)} after {failures} attempts)")
            self.sleep(self.retry_delay)

        return bytes(buffer)

    def _ensure_open(self) -> None:
        if self.device is None:
            raise PrinterIOError("Printer channel is closed")


def device_exists(path: str) -> bool:
    """Check whether a printer device node is present."""
    return os.path.exists(path)
