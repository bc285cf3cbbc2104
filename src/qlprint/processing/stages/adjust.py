"""Gamma pre-correction stage applied before dithering."""

import logging
import numpy as np
from PIL import Image

from ...config.settings import SETTINGS


class AdjustmentStage:
    """Brightens grayscale images to match the printer's physical output."""

    def __init__(self):
        self.settings = SETTINGS["processing"]
        self.logger = logging.getLogger(__name__)

    def process(self, image: Image.Image, **kwargs) -> Image.Image:
        """Apply gamma pre-correction.

        Args:
            image: Input grayscale PIL Image
            **kwargs: Optional gamma override

        Returns:
            Adjusted grayscale PIL Image
        """
        gamma = kwargs.get("gamma", self.settings.GAMMA)

        if gamma == 1.0:
            return image.copy()

        adjusted_image = self._apply_gamma_correction(image, gamma)
        self.logger.debug(f"Applied gamma correction: {gamma}")
        return adjusted_image

    def _apply_gamma_correction(self, image: Image.Image, gamma: float) -> Image.Image:
        """Compute 255 * (v / 255) ** (1 / gamma) for every pixel.

        Args:
            image: Input grayscale PIL Image
            gamma: Correction exponent (> 1.0 brightens)

        Returns:
            Gamma-corrected PIL Image
        """
        if gamma <= 0:
            raise ValueError(f"Gamma must be positive, got {gamma}")

        img_array = np.array(image).astype(np.float32)

        # Normalize to 0-1 range
        img_array /= 255.0

        img_array = np.power(img_array, 1.0 / gamma)

        # Truncate back to 0-255 range
        img_array = (img_array * 255).astype(np.uint8)

        return Image.fromarray(img_array)
