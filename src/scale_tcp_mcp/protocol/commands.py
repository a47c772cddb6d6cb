"""Control byte constants and the command builder.

The terminal is driven by a single request byte; it answers with one
STX/ETX framed reading.
"""

from __future__ import annotations

from enum import IntEnum


class ControlByte(IntEnum):
    """ASCII control characters used on the wire."""

    STX = 0x02
    ETX = 0x03
    ENQ = 0x05
    ACK = 0x06
    NAK = 0x15


class Command(IntEnum):
    """Known request bytes."""

    REQUEST_READING = ControlByte.ENQ


def parse_byte(value: int | str) -> int:
    """Convert ``5``, ``"5"``, ``"0x05"`` or ``"05h"`` into a byte value.

    Raises:
        ValueError: If the value is not a number in 0-255.
    """
    if isinstance(value, str):
        text = value.strip().lower()
        if text.endswith("h"):
            text = "0x" + text[:-1]
        number = int(text, 16) if text.startswith("0x") else int(text, 10)
    else:
        number = int(value)
    if not 0 <= number <= 0xFF:
        raise ValueError(f"Byte value must be 0-255, got {value!r}")
    return number


def build_command(command: int | str = Command.REQUEST_READING) -> bytes:
    """Build the one-byte request sent to the terminal."""
    return bytes([parse_byte(command)])


def describe_byte(value: int) -> str:
    """Render a byte as ``0x05 (ENQ)`` for logs and banners."""
    try:
        return f"0x{value:02X} ({ControlByte(value).name})"
    except ValueError:
        return f"0x{value:02X}"
