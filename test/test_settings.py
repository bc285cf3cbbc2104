"""Tests for configuration loading."""

import unittest
from unittest import mock

from qlprint.config.settings import (
    PrinterSettings, ProcessingSettings, SystemSettings, LabelSettings,
    load_environment_settings, apply_environment_settings
)


class TestEnvironmentSettings(unittest.TestCase):
    """Environment overrides."""

    def make_settings(self):
        return {
            "printer": PrinterSettings(),
            "processing": ProcessingSettings(),
            "system": SystemSettings(),
        }

    def test_reads_environment(self):
        """Test environment variables are parsed."""
        env = {
            "PRINTER_DEVICE": "/dev/usb/lp1",
            "QL_HIGH_RESOLUTION": "true",
            "QL_AUTO_CUT": "0",
            "QL_DITHERING": "no",
            "QL_GAMMA": "5.14",
            "DEBUG_MODE": "True",
        }
        with mock.patch.dict("os.environ", env, clear=True):
            env_settings = load_environment_settings()

        self.assertEqual(env_settings, {
            "PRINTER_DEVICE": "/dev/usb/lp1",
            "HIGH_RESOLUTION": True,
            "AUTO_CUT": False,
            "DITHERING": False,
            "GAMMA": 5.14,
            "DEBUG_MODE": True,
        })

    def test_empty_environment(self):
        with mock.patch.dict("os.environ", {}, clear=True):
            self.assertEqual(load_environment_settings(), {})

    def test_apply_overrides(self):
        """Test overrides reach the settings objects."""
        settings = self.make_settings()
        apply_environment_settings(settings, {
            "PRINTER_DEVICE": "/dev/usb/lp1",
            "DITHERING": False,
            "DEBUG_MODE": True,
        })

        self.assertEqual(settings["printer"].DEVICE_PATH, "/dev/usb/lp1")
        self.assertFalse(settings["processing"].DITHERING)
        self.assertEqual(settings["system"].LOG_LEVEL, "DEBUG")

    def test_debug_mode_off_keeps_log_level(self):
        """Test DEBUG_MODE=0 keeps the log level."""
        settings = self.make_settings()
        apply_environment_settings(settings, {"DEBUG_MODE": False})
        self.assertEqual(settings["system"].LOG_LEVEL, "INFO")

    def test_invalid_gamma_ignored(self):
        """Test malformed QL_GAMMA values are ignored."""
        for value in ("bright", "-1", "0"):
            with self.subTest(value=value):
                with mock.patch.dict("os.environ", {"QL_GAMMA": value}, clear=True):
                    with self.assertLogs("qlprint.config.settings", level="WARNING"):
                        env_settings = load_environment_settings()

                self.assertNotIn("GAMMA", env_settings)

    def test_label_settings_from_processing(self):
        """Test job options built from processing settings."""
        processing = ProcessingSettings()
        processing.HIGH_RESOLUTION = True
        processing.AUTO_CUT = False
        processing.DITHERING = False

        self.assertEqual(LabelSettings.from_settings(processing),
                         LabelSettings(high_resolution=True, auto_cut=False, dithering=False))

    def test_defaults(self):
        self.assertEqual(PrinterSettings.DEVICE_PATH, "/dev/usb/lp0")
        self.assertEqual(PrinterSettings.READ_RETRIES, 10)
        self.assertEqual(PrinterSettings.READ_RETRY_DELAY, 0.01)
        self.assertEqual(ProcessingSettings.MAX_ASPECT_RATIO, 3.5)
        self.assertEqual(ProcessingSettings.GAMMA, 3.14)


if __name__ == '__main__':
    unittest.main()
