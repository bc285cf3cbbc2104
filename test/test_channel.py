"""Tests for the blocking device channel."""

import os
import tempfile
import unittest

from qlprint.printer.channel import DeviceChannel
from qlprint.printer.errors import PrinterIOError, PrinterTimeoutError

from fakes import FakeDevice, RecordingSleep


class TestDeviceChannelRead(unittest.TestCase):
    """Exact-length reads with bounded retries."""

    def setUp(self):
        self.sleep = RecordingSleep()

    def make_channel(self, reads):
        self.device = FakeDevice(reads)
        return DeviceChannel(self.device, retries=10, retry_delay=0.01, sleep=self.sleep)

    def test_reads_exact_length(self):
        """Test a reply that arrives in one read."""
        channel = self.make_channel([bytes(range(32))])
        self.assertEqual(channel.read(32), bytes(range(32)))
        self.assertEqual(self.sleep.calls, [])

    def test_leaves_extra_data_for_next_read(self):
        """Test that surplus bytes stay buffered for the next read."""
        channel = self.make_channel([b'abcdef'])
        self.assertEqual(channel.read(4), b'abcd')
        self.assertEqual(channel.read(2), b'ef')

    def test_waits_for_late_reply(self):
        """Test empty reads are retried after a short sleep."""
        channel = self.make_channel([None, b'', b'\x80\x20' + bytes(30)])
        data = channel.read(32)

        self.assertEqual(len(data), 32)
        self.assertEqual(self.sleep.calls, [0.01, 0.01])

    def test_short_reads_are_joined(self):
        """Test fragments are joined into one reply."""
        channel = self.make_channel([b'\x80\x20', None, bytes(10), bytes(20)])
        data = channel.read(32)

        self.assertEqual(data, b'\x80\x20' + bytes(30))
        self.assertEqual(len(self.sleep.calls), 1)

    def test_os_error_counts_as_failed_attempt(self):
        """Test a transient OSError is retried."""
        channel = self.make_channel([OSError("Resource temporarily unavailable"), b'xy'])
        self.assertEqual(channel.read(2), b'xy')
        self.assertEqual(len(self.sleep.calls), 1)

    def test_times_out_after_ten_failures(self):
        """Test the read gives up after ten empty attempts."""
        channel = self.make_channel([])

        with self.assertRaises(PrinterTimeoutError):
            channel.read(32)

        self.assertEqual(self.device.read_calls, 10)
        self.assertTrue(all(delay == 0.01 for delay in self.sleep.calls))
        self.assertLessEqual(sum(self.sleep.calls), 0.1 + 1e-9)

    def test_timeout_is_an_io_error(self):
        channel = self.make_channel([])
        with self.assertRaises(PrinterIOError):
            channel.read(1)

    def test_progress_resets_failure_count(self):
        """Test partial data restarts the retry budget."""
        reads = [None] * 9 + [b'a'] + [None] * 9 + [b'b']
        channel = self.make_channel(reads)

        self.assertEqual(channel.read(2), b'ab')
        self.assertEqual(len(self.sleep.calls), 18)


class TestDeviceChannelWrite(unittest.TestCase):
    """Whole-buffer writes and handle lifecycle."""

    def test_write_whole_buffer(self):
        """Test a single write reaches the device."""
        device = FakeDevice()
        channel = DeviceChannel(device)
        channel.write(b'\x1b@')
        self.assertEqual(bytes(device.written), b'\x1b@')

    def test_partial_writes_are_completed(self):
        """Test short writes are continued until done."""
        device = FakeDevice(max_write=7)
        channel = DeviceChannel(device)
        payload = bytes(range(50))

        channel.write(payload)

        self.assertEqual(bytes(device.written), payload)
        self.assertEqual(len(device.writes), 8)

    def test_write_error_is_wrapped(self):
        """Test OSError on write becomes PrinterIOError."""
        class BrokenDevice(FakeDevice):
            def write(self, data):
                raise OSError("No such device")

        channel = DeviceChannel(BrokenDevice())
        with self.assertRaises(PrinterIOError):
            channel.write(b'\x00')

    def test_closed_channel_rejects_io(self):
        """Test I/O after close fails."""
        device = FakeDevice()
        with DeviceChannel(device) as channel:
            pass

        self.assertTrue(device.closed)
        self.assertFalse(channel.is_open())
        with self.assertRaises(PrinterIOError):
            channel.write(b'\x00')
        with self.assertRaises(PrinterIOError):
            channel.read(1)

    def test_open_missing_device(self):
        """Test opening a missing device path."""
        with self.assertRaises(PrinterIOError):
            DeviceChannel.open("/nonexistent/usb/lp9")

    def test_open_regular_file(self):
        """Test opening a plain file as the device."""
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = os.path.join(tmp_dir, "lp0")
            with open(path, 'wb') as f:
                f.write(b'\x80\x20')

            with DeviceChannel.open(path) as channel:
                self.assertEqual(channel.path, path)
                self.assertEqual(channel.read(2), b'\x80\x20')


if __name__ == '__main__':
    unittest.main()
