"""Status reply decoding for Brother QL printers.

A status reply is a fixed 32 byte block starting with ``80 20``. Only the
fields below are interpreted; the remaining offsets are reserved.

    offset  field
    ------  ---------------------
       8    error information 1
       9    error information 2
      10    media width (mm)
      11    media type
      17    media length (mm, 0 for continuous tape)
      18    status type
      19    phase state
"""

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List, Optional, Tuple

from .errors import StatusDecodeError, StatusHeaderError

logger = logging.getLogger(__name__)

STATUS_LENGTH = 32
STATUS_HEADER = b'\x80\x20'

# Byte offsets
ERROR_INFO_1 = 8
ERROR_INFO_2 = 9
MEDIA_WIDTH = 10
MEDIA_TYPE = 11
MEDIA_LENGTH = 17
STATUS_TYPE = 18
PHASE_STATE = 19


class MediaType(IntEnum):
    NO_MEDIA = 0x00
    CONTINUOUS = 0x0A
    DIE_CUT_LABELS = 0x0B


class StatusType(IntEnum):
    REPLY_TO_STATUS_REQUEST = 0x00
    PRINTING_COMPLETED = 0x01
    ERROR = 0x02
    NOTIFICATION = 0x05
    PHASE_CHANGE = 0x06


class PhaseState(IntEnum):
    WAITING = 0x00
    PRINTING = 0x01


@dataclass(frozen=True)
class ErrorInformation1:
    """First error byte of the status reply."""

    no_media_when_printing: bool = False
    end_of_media: bool = False
    tape_cutter_jam: bool = False
    main_unit_in_use: bool = False
    fan_doesnt_work: bool = False

    NO_MEDIA_WHEN_PRINTING = 0x01
    END_OF_MEDIA = 0x02
    TAPE_CUTTER_JAM = 0x04
    MAIN_UNIT_IN_USE = 0x10
    FAN_DOESNT_WORK = 0x80

    @classmethod
    def from_bits(cls, bits: int) -> "ErrorInformation1":
        return cls(
            no_media_when_printing=bool(bits & cls.NO_MEDIA_WHEN_PRINTING),
            end_of_media=bool(bits & cls.END_OF_MEDIA),
            tape_cutter_jam=bool(bits & cls.TAPE_CUTTER_JAM),
            main_unit_in_use=bool(bits & cls.MAIN_UNIT_IN_USE),
            fan_doesnt_work=bool(bits & cls.FAN_DOESNT_WORK),
        )

    def to_bits(self) -> int:
        return ((self.NO_MEDIA_WHEN_PRINTING if self.no_media_when_printing else 0)
                | (self.END_OF_MEDIA if self.end_of_media else 0)
                | (self.TAPE_CUTTER_JAM if self.tape_cutter_jam else 0)
                | (self.MAIN_UNIT_IN_USE if self.main_unit_in_use else 0)
                | (self.FAN_DOESNT_WORK if self.fan_doesnt_work else 0))


@dataclass(frozen=True)
class ErrorInformation2:
    """Second error byte of the status reply."""

    transmission_error: bool = False
    cover_opened_while_printing: bool = False
    cannot_feed: bool = False
    system_error: bool = False

    TRANSMISSION_ERROR = 0x04
    COVER_OPENED_WHILE_PRINTING = 0x10
    CANNOT_FEED = 0x40
    SYSTEM_ERROR = 0x80

    @classmethod
    def from_bits(cls, bits: int) -> "ErrorInformation2":
        return cls(
            transmission_error=bool(bits & cls.TRANSMISSION_ERROR),
            cover_opened_while_printing=bool(bits & cls.COVER_OPENED_WHILE_PRINTING),
            cannot_feed=bool(bits & cls.CANNOT_FEED),
            system_error=bool(bits & cls.SYSTEM_ERROR),
        )

    def to_bits(self) -> int:
        return ((self.TRANSMISSION_ERROR if self.transmission_error else 0)
                | (self.COVER_OPENED_WHILE_PRINTING if self.cover_opened_while_printing else 0)
                | (self.CANNOT_FEED if self.cannot_feed else 0)
                | (self.SYSTEM_ERROR if self.system_error else 0))


ERROR_DESCRIPTIONS = {
    "no_media_when_printing": "No media when printing",
    "end_of_media": "End of media (die-cut size only)",
    "tape_cutter_jam": "Tape cutter jam",
    "main_unit_in_use": "Main unit in use",
    "fan_doesnt_work": "Fan doesn't work",
    "transmission_error": "Transmission error",
    "cover_opened_while_printing": "Cover opened while printing",
    "cannot_feed": "Media cannot be fed",
    "system_error": "System error",
}


# Printable width in dots per (media width, media length) in mm.
# Values are total dots minus the right offset of the media.
MEDIA_PIXEL_WIDTHS: Dict[Tuple[int, int], int] = {
    # Continuous tape
    (12, 0): 142 - 29,
    (18, 0): 256 - 171,
    (29, 0): 342 - 6,
    (38, 0): 449 - 12,
    (50, 0): 590 - 12,
    (54, 0): 636 - 0,
    (62, 0): 732 - 12,
    (102, 0): 1200 - 12,
    (104, 0): 1224 - 12,

    # Die-cut labels
    (17, 54): 201 - 0,
    (17, 87): 201 - 0,
    (23, 23): 272 - 42,
    (29, 42): 342 - 6,
    (29, 90): 342 - 6,
    (38, 90): 449 - 12,
    (39, 48): 461 - 6,
    (52, 29): 614 - 0,
    (54, 29): 630 - 60,
    (60, 87): 708 - 18,
    (62, 29): 732 - 12,
    (62, 100): 732 - 12,
    (102, 51): 1200 - 12,
    (102, 153): 1200 - 12,
    (104, 164): 1224 - 12,

    # Round die-cut labels
    (24, 24): 284 - 42,
    (58, 58): 688 - 51,
}


@dataclass(frozen=True)
class PrinterStatus:
    """Snapshot of one status reply."""

    media_width: int
    media_length: int
    media_type: MediaType
    error1: ErrorInformation1
    error2: ErrorInformation2
    status_type: StatusType
    phase_state: PhaseState

    def pixel_width(self) -> Optional[int]:
        """Printable width in dots for the loaded media, None if unknown."""
        return pixel_width(self)

    @property
    def has_errors(self) -> bool:
        return bool(self.error1.to_bits() or self.error2.to_bits())

    def describe_errors(self) -> List[str]:
        """Names of the asserted error flags."""
        messages = []
        for flags in (self.error1, self.error2):
            for name, description in ERROR_DESCRIPTIONS.items():
                if getattr(flags, name, False):
                    messages.append(description)
        return messages


def pixel_width(status: PrinterStatus) -> Optional[int]:
    """Look up the printable width of the media reported in ``status``."""
    return MEDIA_PIXEL_WIDTHS.get((status.media_width, status.media_length))


def _lookup(enum_type, code: int, field: str):
    try:
        return enum_type(code)
    except ValueError:
        raise StatusDecodeError(f"Unknown {field} code 0x{code:02X}") from None


def decode_status(data: bytes) -> PrinterStatus:
    """Decode a 32 byte status reply.

    Args:
        data: Raw reply as read from the printer

    Returns:
        Decoded PrinterStatus

    Raises:
        StatusHeaderError: If the reply is not 32 bytes or lacks the 80 20 header
        StatusDecodeError: If media type, status type or phase state is unknown
    """
    if len(data) != STATUS_LENGTH:
        raise StatusHeaderError(
            f"Status reply must be {STATUS_LENGTH} bytes, got {len(data)}")
    if data[0:2] != STATUS_HEADER:
        raise StatusHeaderError(
            f"Bad status header {data[0]:02X} {data[1]:02X}")

    logger.debug(f"Status reply: {data.hex(' ')}")

    return PrinterStatus(
        media_width=data[MEDIA_WIDTH],
        media_length=data[MEDIA_LENGTH],
        media_type=_lookup(MediaType, data[MEDIA_TYPE], "media type"),
        error1=ErrorInformation1.from_bits(data[ERROR_INFO_1]),
        error2=ErrorInformation2.from_bits(data[ERROR_INFO_2]),
        status_type=_lookup(StatusType, data[STATUS_TYPE], "status type"),
        phase_state=_lookup(PhaseState, data[PHASE_STATE], "phase state"),
    )


def encode_status(status: PrinterStatus) -> bytes:
    """Build a status reply carrying the fields of ``status``.

    Reserved offsets are zero. Used to script replies for fake devices.
    """
    reply = bytearray(STATUS_LENGTH)
    reply[0:2] = STATUS_HEADER
    reply[ERROR_INFO_1] = status.error1.to_bits()
    reply[ERROR_INFO_2] = status.error2.to_bits()
    reply[MEDIA_WIDTH] = status.media_width
    reply[MEDIA_TYPE] = int(status.media_type)
    reply[MEDIA_LENGTH] = status.media_length
    reply[STATUS_TYPE] = int(status.status_type)
    reply[PHASE_STATE] = int(status.phase_state)
    return bytes(reply)
