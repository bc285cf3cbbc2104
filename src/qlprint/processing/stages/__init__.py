"""Processing stages for the raster pipeline."""

from .flatten import FlattenStage
from .resize import ResizeStage
from .adjust import AdjustmentStage

__all__ = ["FlattenStage", "ResizeStage", "AdjustmentStage"]
