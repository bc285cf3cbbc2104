"""Bit packing of monochrome images into QL raster lines.

The print head is 720 dots wide and each raster line is sent as 90 bytes.
Dot ``x`` (counted from the left edge of the head) lives in byte
``89 - x // 8`` at bit ``x % 8``, so the line is filled from its last byte
backwards, least significant bit first. Images narrower than the head are
shifted right by ``720 - width`` dots to line up with the media.
"""

from typing import List, Optional

import numpy as np
from PIL import Image

LINE_BYTES = 90
HEAD_DOTS = LINE_BYTES * 8


def pack_lines(image: Image.Image, padding: Optional[int] = None) -> List[bytes]:
    """Pack a black and white image into raster lines.

    Args:
        image: 'L' or '1' image; pixels with value 0 print black
        padding: Dots skipped before the first image column, defaults to
            ``720 - image.width``

    Returns:
        One 90 byte line per image row, top to bottom

    Raises:
        ValueError: If the padded image does not fit the print head
    """
    if padding is None:
        padding = HEAD_DOTS - image.width
    if padding < 0 or padding + image.width > HEAD_DOTS:
        raise ValueError(
            f"Image width {image.width} with padding {padding} exceeds {HEAD_DOTS} dots")

    pixels = np.array(image.convert('L'))
    black = pixels == 0

    dots = np.zeros((image.height, HEAD_DOTS), dtype=bool)
    dots[:, padding:padding + image.width] = black

    # Reversing the dot order turns the layout into plain MSB-first packing
    packed = np.packbits(dots[:, ::-1], axis=1, bitorder='big')
    return [row.tobytes() for row in packed]
