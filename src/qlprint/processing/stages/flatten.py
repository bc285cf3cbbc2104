"""Transparency flattening and grayscale stage."""

import logging
from PIL import Image


class FlattenStage:
    """Composites the image over opaque white and converts it to luminance."""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def process(self, image: Image.Image, **kwargs) -> Image.Image:
        """Flatten transparency and convert to grayscale.

        Args:
            image: Input PIL Image in any mode

        Returns:
            Single channel ('L') PIL Image
        """
        rgba = image.convert('RGBA')
        background = Image.new('RGBA', rgba.size, (255, 255, 255, 255))
        flattened = Image.alpha_composite(background, rgba)

        self.logger.debug(f"Flattened {image.mode} image of size {image.size}")
        return flattened.convert('L')
