"""Label job: query the loaded media, render an image and print it."""

import logging
from typing import List, Optional

from .config.settings import SETTINGS, LabelSettings
from .printer import PrinterController
from .processing import RasterPipeline


class LabelJob:
    """Prints image files on whatever media is loaded in the printer."""

    def __init__(self,
                 printer: Optional[PrinterController] = None,
                 label_settings: LabelSettings = None,
                 preview_path: str = None):
        self.logger = logging.getLogger(__name__)
        self.label_settings = label_settings or LabelSettings.from_settings()
        self.printer = printer
        self.pipeline = RasterPipeline(self.label_settings)
        if preview_path is None:
            preview_path = SETTINGS["system"].PREVIEW_PATH
        self.preview_path = preview_path

    def media_pixel_width(self) -> Optional[int]:
        """Ask the printer for the printable width of the loaded media."""
        if self.printer is None:
            return None

        status = self.printer.request_status()
        width = status.pixel_width()
        if width is None:
            self.logger.warning(f"Unknown media {status.media_width}x{status.media_length}mm, "
                                f"assuming full head width")
        else:
            self.logger.info(f"Loaded media {status.media_width}x{status.media_length}mm "
                             f"is {width} dots wide")
        return width

    def render_file(self, file_path: str, pixel_width: Optional[int] = None) -> List[bytes]:
        """Render an image file to raster lines without printing.

        Args:
            file_path: Image to render
            pixel_width: Printable width; queried from the printer when omitted

        Returns:
            List of 90 byte lines
        """
        if pixel_width is None:
            pixel_width = self.media_pixel_width()

        lines = self.pipeline.render_file(file_path, pixel_width)

        if self.preview_path:
            self.pipeline.save_preview(self.preview_path)
        return lines

    def print_file(self, file_path: str) -> None:
        """Render an image file and print it as one label.

        Raises:
            PrinterIOError: If the printer is missing or communication fails
            StatusDecodeError: If the printer answers with a malformed status
            InvalidImageError: If the image cannot be rendered
        """
        if self.printer is None:
            raise ValueError("LabelJob has no printer attached")

        lines = self.render_file(file_path)
        status = self.printer.print_lines(lines, self.label_settings)
        self.logger.info(f"Print job for {file_path} finished "
                         f"({status.status_type.name}, {status.phase_state.name})")
