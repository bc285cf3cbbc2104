"""Resize processing stage."""

import logging
from typing import Tuple
from PIL import Image

from ...config.settings import SETTINGS


class ResizeStage:
    """Scales images to the printable width of the loaded media."""

    def __init__(self):
        self.settings = SETTINGS["processing"]
        self.logger = logging.getLogger(__name__)

    def process(self, image: Image.Image, **kwargs) -> Image.Image:
        """Resize image to the target width, keeping its aspect ratio.

        Args:
            image: Input PIL Image
            **kwargs: target_width (dots), high_resolution (doubles the
                height for 600 dpi printing) and resize_algorithm overrides

        Returns:
            Resized PIL Image
        """
        target_width = kwargs.get("target_width") or self.settings.FALLBACK_PIXEL_WIDTH
        high_resolution = kwargs.get("high_resolution", self.settings.HIGH_RESOLUTION)
        algorithm = kwargs.get("resize_algorithm", self.settings.RESIZE_ALGORITHM)

        target_size = self.target_size(image.size, target_width, high_resolution)
        original_size = image.size

        self.logger.debug(f"Resizing from {original_size} to target {target_size}")

        resample_filter = self._get_resample_filter(algorithm)
        result_image = image.resize(target_size, resample_filter)

        self.logger.debug(f"Resize completed: {original_size} -> {result_image.size}")
        return result_image

    @staticmethod
    def target_size(source_size: Tuple[int, int], target_width: int,
                    high_resolution: bool = False) -> Tuple[int, int]:
        """Compute the output size for a source image.

        Args:
            source_size: (width, height) of the source
            target_width: Output width in dots
            high_resolution: Double the height for 600 dpi printing

        Returns:
            (width, height) tuple
        """
        source_width, source_height = source_size
        height = int(round(target_width * source_height / source_width))
        if high_resolution:
            height *= 2
        return target_width, max(1, height)

    def _get_resample_filter(self, algorithm: str) -> Image.Resampling:
        """Get PIL resampling filter from algorithm name.

        Args:
            algorithm: Algorithm name string

        Returns:
            PIL resampling filter
        """
        algorithm_map = {
            "NEAREST": Image.Resampling.NEAREST,
            "BILINEAR": Image.Resampling.BILINEAR,
            "BICUBIC": Image.Resampling.BICUBIC,
            "LANCZOS": Image.Resampling.LANCZOS,
            "HAMMING": Image.Resampling.HAMMING,
            "BOX": Image.Resampling.BOX
        }

        return algorithm_map.get(algorithm.upper(), Image.Resampling.LANCZOS)
