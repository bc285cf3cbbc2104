"""Image to raster line pipeline coordinator."""

import os
import time
import logging
from typing import List, Dict, Optional
from PIL import Image, UnidentifiedImageError

from ..config.settings import SETTINGS, LabelSettings
from ..printer.errors import InvalidImageError
from .stages import FlattenStage, ResizeStage
from .dithering import DitheringProcessor
from .raster import pack_lines


class RasterPipeline:
    """Turns decoded images into 90 byte raster lines for the printer.

    Stages run in a fixed order: aspect ratio check, flatten to grayscale,
    resize to the printable width, monochrome conversion, bit packing.
    """

    def __init__(self, label_settings: LabelSettings = None):
        self.settings = SETTINGS["processing"]
        self.system_settings = SETTINGS["system"]
        self.logger = logging.getLogger(__name__)
        self.label_settings = label_settings or LabelSettings.from_settings()

        self.flatten = FlattenStage()
        self.resize = ResizeStage()
        self.dithering = DitheringProcessor()

        self.stage_results: Dict[str, Image.Image] = {}
        self.stage_timings: Dict[str, float] = {}

    def load_image(self, file_path: str) -> Image.Image:
        """Open and decode an image file.

        Raises:
            InvalidImageError: If the file cannot be decoded
        """
        try:
            with Image.open(file_path) as image:
                image.load()
                return image.copy()
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
            raise InvalidImageError(f"Failed to load image {file_path}: {e}") from e

    def render_file(self, file_path: str, pixel_width: Optional[int] = None) -> List[bytes]:
        """Render an image file to raster lines.

        Args:
            file_path: Path of a JPEG, PNG, GIF, WEBP, TIFF or BMP file
            pixel_width: Printable width of the loaded media, None if unknown

        Returns:
            List of 90 byte lines
        """
        self.logger.info(f"Rendering {file_path}")
        return self.render_image(self.load_image(file_path), pixel_width)

    def render_image(self, image: Image.Image, pixel_width: Optional[int] = None) -> List[bytes]:
        """Render a decoded image to raster lines.

        Args:
            image: Input PIL Image in any mode
            pixel_width: Printable width of the loaded media, None if unknown

        Returns:
            List of 90 byte lines

        Raises:
            InvalidImageError: If the image is too long for its width
        """
        monochrome = self.process_image(image, pixel_width)

        stage_start = time.time()
        lines = pack_lines(monochrome)
        self.stage_timings["pack"] = time.time() - stage_start

        self.logger.debug(f"Packed {len(lines)} raster lines")
        return lines

    def process_image(self, image: Image.Image, pixel_width: Optional[int] = None) -> Image.Image:
        """Run every stage up to monochrome conversion.

        Returns:
            Black and white 'L' PIL Image at printer resolution
        """
        self.stage_results.clear()
        self.stage_timings.clear()
        self.check_aspect_ratio(image)

        self.stage_results["original"] = image

        target_width = self._target_width(pixel_width)

        self.logger.info(f"Starting pipeline processing for image {image.size}")
        pipeline_start = time.time()

        current_image = self._run_stage("flatten", self.flatten.process, image)
        current_image = self._run_stage(
            "resize", self.resize.process, current_image,
            target_width=target_width,
            high_resolution=self.label_settings.high_resolution)
        current_image = self._run_stage(
            "dither", self.dithering.apply_dithering, current_image,
            algorithm="floyd_steinberg" if self.label_settings.dithering else "threshold")

        total_time = time.time() - pipeline_start
        self.logger.info(f"Pipeline processing completed in {total_time:.3f}s")

        return current_image

    def check_aspect_ratio(self, image: Image.Image) -> None:
        """Reject images whose height exceeds MAX_ASPECT_RATIO times the width.

        Raises:
            InvalidImageError: If the ratio is too high
        """
        width, height = image.size
        if width <= 0 or height <= 0:
            raise InvalidImageError(f"Image has no pixels: {image.size}")

        ratio = height / width
        if ratio > self.settings.MAX_ASPECT_RATIO:
            self.logger.warning(f"Ratio is too high: {ratio:.2f}")
            raise InvalidImageError(
                f"Image ratio {ratio:.2f} exceeds {self.settings.MAX_ASPECT_RATIO}")

    def _target_width(self, pixel_width: Optional[int]) -> int:
        if pixel_width is None:
            # Unknown media, assume the widest tape
            return self.settings.FALLBACK_PIXEL_WIDTH
        if pixel_width > self.settings.HEAD_WIDTH_DOTS:
            self.logger.warning(f"Media width {pixel_width} dots exceeds the "
                                f"{self.settings.HEAD_WIDTH_DOTS} dot head, clamping")
            return self.settings.HEAD_WIDTH_DOTS
        return pixel_width

    def _run_stage(self, stage_name: str, stage, image: Image.Image, **kwargs) -> Image.Image:
        self.logger.debug(f"Processing stage: {stage_name}")

        stage_start = time.time()
        result = stage(image, **kwargs)
        stage_time = time.time() - stage_start

        self.stage_timings[stage_name] = stage_time
        self.stage_results[stage_name] = result

        if self.system_settings.DISPLAY_PROCESSING_TIME:
            self.logger.debug(f"{stage_name} completed in {stage_time:.3f}s")
        return result

    def save_preview(self, file_path: str) -> None:
        """Save the last monochrome render as an image file."""
        image = self.stage_results.get("dither")
        if image is None:
            raise RuntimeError("Nothing has been rendered yet")

        directory = os.path.dirname(file_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        image.convert('1').save(file_path)
        self.logger.info(f"Saved preview: {file_path}")

    def get_stage_result(self, stage_name: str) -> Optional[Image.Image]:
        """Get the result of a specific processing stage."""
        return self.stage_results.get(stage_name)

    def get_stage_timings(self) -> Dict[str, float]:
        """Get timing information for all stages.

        Returns:
            Dictionary mapping stage names to execution times in seconds
        """
        return self.stage_timings.copy()

