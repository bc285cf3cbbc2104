"""Monochrome conversion for 1-bit label output."""

import logging
import numpy as np
from PIL import Image

from ..config.settings import SETTINGS
from .stages import AdjustmentStage


class DitheringProcessor:
    """Converts grayscale images to pure black and white.

    Two policies are available: a flat threshold cut and gamma corrected
    Floyd-Steinberg error diffusion against a black/white palette. Both
    return an 'L' image containing only 0 and 255.
    """

    ALGORITHMS = ("floyd_steinberg", "threshold")

    # Midpoint between the two palette entries
    PALETTE_MIDPOINT = 127.5

    def __init__(self):
        self.settings = SETTINGS["processing"]
        self.logger = logging.getLogger(__name__)
        self.adjustment = AdjustmentStage()

    def apply_dithering(self,
                       image: Image.Image,
                       algorithm: str = None,
                       threshold: int = None,
                       gamma: float = None) -> Image.Image:
        """Convert an image to black and white.

        Args:
            image: Input PIL Image
            algorithm: "floyd_steinberg" or "threshold"; defaults to the
                DITHERING setting
            threshold: Cut-off for threshold mode (luminance <= threshold is black)
            gamma: Pre-correction exponent for Floyd-Steinberg mode

        Returns:
            'L' PIL Image with values 0 (black) and 255 (white)
        """
        if algorithm is None:
            algorithm = "floyd_steinberg" if self.settings.DITHERING else "threshold"
        if threshold is None:
            threshold = self.settings.THRESHOLD
        if gamma is None:
            gamma = self.settings.GAMMA

        if algorithm not in self.ALGORITHMS:
            raise ValueError(f"Unknown dithering algorithm: {algorithm}")

        # Convert to grayscale if not already
        if image.mode != 'L':
            gray_image = image.convert('L')
        else:
            gray_image = image

        self.logger.debug(f"Applying {algorithm} conversion")

        if algorithm == "floyd_steinberg":
            corrected = self.adjustment.process(gray_image, gamma=gamma)
            return self._floyd_steinberg_dithering(corrected)
        return self._threshold_dithering(gray_image, threshold)

    def _floyd_steinberg_dithering(self, image: Image.Image) -> Image.Image:
        """Apply Floyd-Steinberg error diffusion dithering.

        Args:
            image: Input grayscale PIL Image

        Returns:
            Dithered PIL Image
        """
        rows = np.array(image, dtype=np.float32).tolist()
        height = len(rows)
        width = len(rows[0]) if height else 0

        # Floyd-Steinberg error distribution matrix
        #     X  7/16
        # 3/16 5/16 1/16

        for y in range(height):
            row = rows[y]
            below = rows[y + 1] if y < height - 1 else None
            for x in range(width):
                old_pixel = row[x]
                new_pixel = 255.0 if old_pixel > self.PALETTE_MIDPOINT else 0.0
                row[x] = new_pixel

                error = old_pixel - new_pixel
                if error == 0:
                    continue

                if x < width - 1:
                    row[x + 1] += error * 7 / 16
                if below is not None:
                    if x > 0:
                        below[x - 1] += error * 3 / 16
                    below[x] += error * 5 / 16
                    if x < width - 1:
                        below[x + 1] += error * 1 / 16

        result_array = np.array(rows, dtype=np.float32).reshape(height, width)
        return Image.fromarray(result_array.astype(np.uint8))

    def _threshold_dithering(self, image: Image.Image, threshold: int) -> Image.Image:
        """Apply simple threshold conversion.

        Args:
            image: Input grayscale PIL Image
            threshold: Luminance at or below which a pixel prints black

        Returns:
            Thresholded PIL Image
        """
        img_array = np.array(image)
        result_array = np.where(img_array > threshold, 255, 0).astype(np.uint8)
        return Image.fromarray(result_array)
