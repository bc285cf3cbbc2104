"""Tests for raster command encoding."""

import unittest

from qlprint.printer.ql_commands import QLCommands, CommandMode
from qlprint.printer.status import MediaType

from fakes import make_status


class TestBasicCommands(unittest.TestCase):
    """Fixed byte sequences."""

    def test_reset(self):
        """Test the 200 byte invalidate command."""
        self.assertEqual(QLCommands.reset(), bytes(200))

    def test_invalid(self):
        self.assertEqual(QLCommands.invalid(), b'\x00')

    def test_initialize(self):
        """Test ESC @."""
        self.assertEqual(QLCommands.initialize(), bytes([0x1B, 0x40]))

    def test_status_info_request(self):
        """Test ESC i S."""
        self.assertEqual(QLCommands.status_info_request(), bytes([0x1B, 0x69, 0x53]))

    def test_compression_mode(self):
        self.assertEqual(QLCommands.set_compression_mode(), bytes([0x4D, 0x00]))

    def test_print_commands(self):
        """Test the single byte print commands."""
        self.assertEqual(QLCommands.zero_raster_graphics(), bytes([0x5A]))
        self.assertEqual(QLCommands.print_page(), bytes([0x0C]))
        self.assertEqual(QLCommands.print_with_feeding(), bytes([0x1A]))


class TestParameterisedCommands(unittest.TestCase):
    """Commands carrying arguments."""

    def test_command_modes(self):
        """Test ESC i a for every command mode."""
        expected = {
            CommandMode.ESCP_NORMAL: 0x00,
            CommandMode.RASTER: 0x01,
            CommandMode.ESCP_TEXT: 0x02,
            CommandMode.PTOUCH_TEMPLATE: 0x03,
        }
        for mode, code in expected.items():
            with self.subTest(mode=mode):
                self.assertEqual(QLCommands.set_command_mode(mode),
                                 bytes([0x1B, 0x69, 0x61, code]))

    def test_print_information(self):
        """Test ESC i z for die-cut labels."""
        status = make_status(media_width=29, media_length=90, media_type=MediaType.DIE_CUT_LABELS)
        self.assertEqual(
            QLCommands.set_print_information(status, 0x01020304),
            bytes([0x1B, 0x69, 0x7A, 0xCE, 0x0B, 29, 90, 0x04, 0x03, 0x02, 0x01, 0x01, 0x00]))

    def test_print_information_continuous(self):
        """Test ESC i z for continuous tape."""
        command = QLCommands.set_print_information(make_status(), 100)
        self.assertEqual(command, bytes([0x1B, 0x69, 0x7A, 0xCE, 0x0A, 62, 0, 100, 0, 0, 0, 1, 0]))
        self.assertEqual(QLCommands.PRINT_INFO_FLAGS, 0xCE)

    def test_print_information_line_count_range(self):
        """Test line counts outside 32 bits are rejected."""
        with self.assertRaises(ValueError):
            QLCommands.set_print_information(make_status(), -1)
        with self.assertRaises(ValueError):
            QLCommands.set_print_information(make_status(), 1 << 32)

    def test_set_mode(self):
        """Test the auto cut bit of ESC i M."""
        self.assertEqual(QLCommands.set_mode(auto_cut=True), bytes([0x1B, 0x69, 0x4D, 0x40]))
        self.assertEqual(QLCommands.set_mode(auto_cut=False), bytes([0x1B, 0x69, 0x4D, 0x00]))

    def test_page_number(self):
        """Test ESC i A and its range check."""
        self.assertEqual(QLCommands.set_page_number(5), bytes([0x1B, 0x69, 0x41, 0x05]))
        self.assertEqual(QLCommands.set_page_number(255), bytes([0x1B, 0x69, 0x41, 0xFF]))
        for bad in (0, 256):
            with self.subTest(page_number=bad):
                with self.assertRaises(ValueError):
                    QLCommands.set_page_number(bad)

    def test_expanded_mode(self):
        """Test cut-at-end and high resolution bits of ESC i K."""
        cases = {
            (False, False): 0x00,
            (True, False): 0x10,
            (False, True): 0x40,
            (True, True): 0x50,
        }
        for (cut_at_end, high_resolution), flags in cases.items():
            with self.subTest(cut_at_end=cut_at_end, high_resolution=high_resolution):
                self.assertEqual(QLCommands.set_expanded_mode(cut_at_end, high_resolution),
                                 bytes([0x1B, 0x69, 0x4B, flags]))

    def test_margin_amount_little_endian(self):
        """Test ESC i d byte order."""
        self.assertEqual(QLCommands.set_margin_amount(256), bytes([0x1B, 0x69, 0x64, 0x00, 0x01]))
        self.assertEqual(QLCommands.set_margin_amount(0), bytes([0x1B, 0x69, 0x64, 0x00, 0x00]))
        with self.assertRaises(ValueError):
            QLCommands.set_margin_amount(0x10000)

    def test_baud_rate(self):
        """Test ESC i B byte order."""
        self.assertEqual(QLCommands.set_baud_rate(0x1234), bytes([0x1B, 0x69, 0x42, 0x34, 0x12]))
        with self.assertRaises(ValueError):
            QLCommands.set_baud_rate(-1)


class TestRasterTransfer(unittest.TestCase):
    """Raster line framing."""

    def test_zero_line(self):
        """Test a blank raster line transfer."""
        command = QLCommands.raster_graphics_transfer(bytes(90))
        self.assertEqual(command, bytes([0x67, 0x00, 0x5A]) + bytes(90))
        self.assertEqual(len(command), 93)

    def test_line_is_copied_verbatim(self):
        """Test raster data is sent unchanged."""
        line = bytes(range(90))
        self.assertEqual(QLCommands.raster_graphics_transfer(line)[3:], line)

    def test_wrong_length_rejected(self):
        """Test lines that are not 90 bytes are rejected."""
        for length in (0, 89, 91, 162):
            with self.subTest(length=length):
                with self.assertRaises(ValueError):
                    QLCommands.raster_graphics_transfer(bytes(length))


if __name__ == '__main__':
    unittest.main()
