"""Configuration settings for qlprint."""

from dataclasses import dataclass
from typing import Dict, Any
import os
import logging

logger = logging.getLogger(__name__)


class PrinterSettings:
    """Printer device and protocol settings."""

    # Device settings
    DEVICE_PATH: str = "/dev/usb/lp0"  # usblp character device

    # Status replies
    STATUS_REPLY_LENGTH: int = 32
    READ_RETRIES: int = 10          # attempts before a read times out
    READ_RETRY_DELAY: float = 0.01  # seconds between attempts
    POST_PRINT_STATUS_READS: int = 3  # notifications drained after printing

    # Job defaults
    PAGE_NUMBER: int = 1    # cut every label
    MARGIN_AMOUNT: int = 0  # feed amount in dots


class ProcessingSettings:
    """Raster pipeline settings."""

    # Print head geometry (QL-500/550/570/700 family)
    HEAD_WIDTH_DOTS: int = 720
    FALLBACK_PIXEL_WIDTH: int = 720  # used when the loaded media is unknown

    # Input sanity bound (height / width)
    MAX_ASPECT_RATIO: float = 3.5

    # Resize settings
    RESIZE_ALGORITHM: str = "LANCZOS"

    # Monochrome conversion
    DITHERING: bool = True
    THRESHOLD: int = 128   # luminance <= THRESHOLD prints black
    GAMMA: float = 3.14    # brightness pre-correction before dithering

    # Job options
    HIGH_RESOLUTION: bool = False  # 600 dpi vertical
    AUTO_CUT: bool = True


class SystemSettings:
    """System and debugging settings."""

    # Debugging
    PREVIEW_PATH: str = ""  # save the monochrome render here when set
    DISPLAY_PROCESSING_TIME: bool = True

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass(frozen=True)
class LabelSettings:
    """Per-job options: vertical resolution, cutting and monochrome policy."""

    high_resolution: bool = False
    auto_cut: bool = True
    dithering: bool = True

    @classmethod
    def from_settings(cls, processing: ProcessingSettings = None) -> "LabelSettings":
        """Build job options from the global processing settings."""
        if processing is None:
            processing = SETTINGS["processing"]
        return cls(
            high_resolution=processing.HIGH_RESOLUTION,
            auto_cut=processing.AUTO_CUT,
            dithering=processing.DITHERING,
        )


def _env_flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


# Environment-specific overrides
def load_environment_settings() -> Dict[str, Any]:
    """Load settings from environment variables."""
    env_settings = {}

    # Printer device path
    if os.getenv("PRINTER_DEVICE"):
        env_settings["PRINTER_DEVICE"] = os.getenv("PRINTER_DEVICE")

    # Job options
    if os.getenv("QL_HIGH_RESOLUTION"):
        env_settings["HIGH_RESOLUTION"] = _env_flag(os.getenv("QL_HIGH_RESOLUTION"))
    if os.getenv("QL_AUTO_CUT"):
        env_settings["AUTO_CUT"] = _env_flag(os.getenv("QL_AUTO_CUT"))
    if os.getenv("QL_DITHERING"):
        env_settings["DITHERING"] = _env_flag(os.getenv("QL_DITHERING"))
    if os.getenv("QL_GAMMA"):
        try:
            gamma = float(os.getenv("QL_GAMMA"))
        except ValueError:
            gamma = None
        if gamma is not None and gamma > 0:
            env_settings["GAMMA"] = gamma
        else:
            logger.warning(f"Ignoring invalid QL_GAMMA value: {os.getenv('QL_GAMMA')!r}")

    # Debug mode
    if os.getenv("DEBUG_MODE"):
        env_settings["DEBUG_MODE"] = _env_flag(os.getenv("DEBUG_MODE"))

    return env_settings


def apply_environment_settings(settings: Dict[str, Any], env_settings: Dict[str, Any]) -> None:
    """Copy environment overrides onto the settings objects."""
    if "PRINTER_DEVICE" in env_settings:
        settings["printer"].DEVICE_PATH = env_settings["PRINTER_DEVICE"]
    for key in ("HIGH_RESOLUTION", "AUTO_CUT", "DITHERING", "GAMMA"):
        if key in env_settings:
            setattr(settings["processing"], key, env_settings[key])
    if env_settings.get("DEBUG_MODE"):
        settings["system"].LOG_LEVEL = "DEBUG"


# Global settings instance
SETTINGS = {
    "printer": PrinterSettings(),
    "processing": ProcessingSettings(),
    "system": SystemSettings(),
    "env": load_environment_settings()
}

apply_environment_settings(SETTINGS, SETTINGS["env"])
