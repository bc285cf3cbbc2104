#!/usr/bin/env python3
"""Command line entry point for qlprint."""

import os
import sys
import logging
import argparse
from dataclasses import replace

from .config.settings import SETTINGS, LabelSettings
from .printer import PrinterController
from .printer.channel import device_exists
from .printer.errors import QLPrinterError
from .job import LabelJob

logger = logging.getLogger("qlprint")


def setup_logging(args: argparse.Namespace) -> None:
    """Configure logging from settings and the global flags."""
    system_settings = SETTINGS["system"]
    level = system_settings.LOG_LEVEL

    if args.debug or args.verbose:
        level = "DEBUG"

    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO),
                        format=system_settings.LOG_FORMAT)


def label_settings_from_args(args: argparse.Namespace) -> LabelSettings:
    """Apply command line switches on top of the configured job options."""
    label_settings = LabelSettings.from_settings()
    if getattr(args, "high_resolution", False):
        label_settings = replace(label_settings, high_resolution=True)
    if getattr(args, "no_auto_cut", False):
        label_settings = replace(label_settings, auto_cut=False)
    if getattr(args, "threshold", False):
        label_settings = replace(label_settings, dithering=False)
    return label_settings


def cmd_print(args: argparse.Namespace) -> None:
    """Print an image file as a label."""
    if not os.path.exists(args.input_file):
        print(f"Input file not found: {args.input_file}", file=sys.stderr)
        sys.exit(1)

    label_settings = label_settings_from_args(args)
    logger.info(f"Settings: {label_settings}")

    printer = PrinterController()
    printer.connect(args.device_path)
    try:
        job = LabelJob(printer, label_settings, preview_path=args.preview)
        job.print_file(args.input_file)
    finally:
        printer.disconnect()

    print("Print job completed successfully!")


def cmd_render(args: argparse.Namespace) -> None:
    """Render an image to a 1-bit PNG without printing."""
    if not os.path.exists(args.input_file):
        print(f"Input file not found: {args.input_file}", file=sys.stderr)
        sys.exit(1)

    job = LabelJob(None, label_settings_from_args(args), preview_path=args.output)
    lines = job.render_file(args.input_file, pixel_width=args.width)

    print(f"Rendered {len(lines)} raster lines to {args.output}")


def cmd_status(args: argparse.Namespace) -> None:
    """Query and display the printer status."""
    printer = PrinterController()
    printer.connect(args.device_path)
    try:
        status = printer.request_status()
    finally:
        printer.disconnect()

    width = status.pixel_width()
    print(f"Media: {status.media_width}x{status.media_length}mm ({status.media_type.name})")
    print(f"Printable width: {width if width is not None else 'unknown'} dots")
    print(f"Status: {status.status_type.name}, phase {status.phase_state.name}")
    errors = status.describe_errors()
    print(f"Errors: {', '.join(errors) if errors else 'none'}")


def cmd_info(args: argparse.Namespace) -> None:
    """Display configuration."""
    print("qlprint Configuration")
    print("=" * 30)

    printer_settings = SETTINGS["printer"]
    print("\nPrinter Configuration:")
    print(f"  Device Path: {printer_settings.DEVICE_PATH}")
    print(f"  Read Retries: {printer_settings.READ_RETRIES} x {printer_settings.READ_RETRY_DELAY}s")

    processing_settings = SETTINGS["processing"]
    print("\nProcessing Configuration:")
    print(f"  Fallback Width: {processing_settings.FALLBACK_PIXEL_WIDTH} dots")
    print(f"  Max Aspect Ratio: {processing_settings.MAX_ASPECT_RATIO}")
    print(f"  Resize Algorithm: {processing_settings.RESIZE_ALGORITHM}")
    print(f"  Dithering: {processing_settings.DITHERING} (gamma {processing_settings.GAMMA})")
    print(f"  Threshold: {processing_settings.THRESHOLD}")
    print(f"  High Resolution: {processing_settings.HIGH_RESOLUTION}")
    print(f"  Auto Cut: {processing_settings.AUTO_CUT}")

    print("\nSystem Status:")
    if device_exists(printer_settings.DEVICE_PATH):
        print(f"  Printer device: {printer_settings.DEVICE_PATH} found")
    else:
        print(f"  Printer device: {printer_settings.DEVICE_PATH} not found")


def add_job_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('--high-resolution', action='store_true',
                        help='Print at 600 dpi vertical resolution')
    parser.add_argument('--threshold', action='store_true',
                        help='Use a flat threshold instead of dithering')


def create_parser() -> argparse.ArgumentParser:
    """Create and configure argument parser."""
    parser = argparse.ArgumentParser(
        description='qlprint - Print images on Brother QL label printers'
    )

    # Global options
    parser.add_argument('--debug', action='store_true', help='Enable debug mode')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable verbose output')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Print command
    print_parser = subparsers.add_parser('print', help='Print an image file as a label')
    print_parser.add_argument('input_file', help='Input image file path')
    print_parser.add_argument('--device-path', help='Specific printer device path')
    print_parser.add_argument('--no-auto-cut', action='store_true',
                              help='Do not cut after the label')
    print_parser.add_argument('--preview', help='Save the monochrome render to this file')
    add_job_options(print_parser)
    print_parser.set_defaults(func=cmd_print)

    # Render command
    render_parser = subparsers.add_parser('render', help='Render an image to a 1-bit PNG without printing')
    render_parser.add_argument('input_file', help='Input image file path')
    render_parser.add_argument('output', help='Output PNG path')
    render_parser.add_argument('--width', type=int, default=None,
                               help='Printable width in dots (default: 720)')
    add_job_options(render_parser)
    render_parser.set_defaults(func=cmd_render)

    # Status command
    status_parser = subparsers.add_parser('status', help='Show printer and media status')
    status_parser.add_argument('--device-path', help='Specific printer device path')
    status_parser.set_defaults(func=cmd_status)

    # Info command
    info_parser = subparsers.add_parser('info', help='Display configuration')
    info_parser.set_defaults(func=cmd_info)

    return parser


def main(argv=None) -> None:
    """Main application entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return

    setup_logging(args)

    try:
        args.func(args)
    except QLPrinterError as e:
        logger.error(f"{args.command} failed: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
