"""Payload decoding for reading frames.

The payload is ASCII text holding three integers separated by spaces
and/or tabs. A field that is not a valid integer decodes as zero; a
missing field is an error.
"""

from __future__ import annotations

import re

from ..errors import DecodeFieldMissing
from ..models.reading import DecodedReading
from .commands import ControlByte
from .framing import Frame

FIELD_SEPARATORS = re.compile(r"[ \t]+")
INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")

# Whitespace allowed around a number: TAB through CR, and SPACE
FIELD_PADDING = " \t\n\v\f\r"

# Fields are signed 32-bit on the terminal side
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1


def extract_payload(
    data: bytes,
    start: int = ControlByte.STX,
    end: int = ControlByte.ETX,
) -> bytes:
    """Return the bytes strictly between the first start marker and the
    first end marker after it, or ``data`` unchanged if there is no such
    pair.
    """
    start_index = data.find(bytes([start]))
    if start_index < 0:
        return data
    end_index = data.find(bytes([end]), start_index + 1)
    if end_index < 0:
        return data
    return data[start_index + 1 : end_index]


def tokenize(payload: bytes) -> list[str]:
    """Split payload text on runs of spaces and tabs."""
    text = payload.decode("ascii", errors="replace")
    return [token for token in FIELD_SEPARATORS.split(text) if token]


def parse_field(token: str) -> int:
    """Parse one integer field, returning 0 if it is not a valid int32."""
    text = token.strip(FIELD_PADDING)
    if not INTEGER_PATTERN.fullmatch(text):
        return 0
    value = int(text)
    if not INT32_MIN <= value <= INT32_MAX:
        return 0
    return value


class PayloadDecoder:
    """Maps frame bytes to a :class:`DecodedReading` or a display line."""

    def __init__(
        self,
        start: int = ControlByte.STX,
        end: int = ControlByte.ETX,
        currency: str = "",
    ) -> None:
        self.start = start
        self.end = end
        self.currency = currency

    def decode_reading(self, data: bytes | Frame) -> DecodedReading:
        """Decode a frame (or undelimited partial data) into a reading.

        Raises:
            DecodeFieldMissing: If fewer than three fields are present.
        """
        if isinstance(data, Frame):
            data = data.data
        tokens = tokenize(extract_payload(data, self.start, self.end))
        if len(tokens) < DecodedReading.FIELD_COUNT:
            raise DecodeFieldMissing(tokens)
        return DecodedReading.from_fields(
            [parse_field(token) for token in tokens[: DecodedReading.FIELD_COUNT]]
        )

    def decode(self, data: bytes | Frame) -> str:
        """Decode and render as a single display line."""
        return self.decode_reading(data).render(self.currency)


def decode_frame(data: bytes | Frame, currency: str = "") -> str:
    """Decode using the default STX/ETX markers."""
    return PayloadDecoder(currency=currency).decode(data)
