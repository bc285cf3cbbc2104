"""Image processing module for qlprint."""

from .pipeline import RasterPipeline
from .dithering import DitheringProcessor
from .raster import pack_lines

__all__ = ["RasterPipeline", "DitheringProcessor", "pack_lines"]
