"""Error taxonomy for a scale session.

Every failure carries a stable ``code`` label so that callers (the MCP
server, the command line) can report it without inspecting types.
"""

from __future__ import annotations


class ScaleError(Exception):
    """Base class for all session failures.

    ``data`` holds whatever response bytes had been received when the
    failure occurred.
    """

    code = "error"
    data = b""


class ConnectError(ScaleError, ConnectionError):
    """The TCP connection could not be established."""

    code = "connection_error"


class WriteError(ScaleError, ConnectionError):
    """Sending the command byte failed."""

    code = "write_error"


class ReadError(ScaleError, ConnectionError):
    """Reading the response failed mid-operation."""

    code = "read_error"


class ResponseTimeout(ScaleError, TimeoutError):
    """No complete frame arrived before the read deadline."""

    code = "timeout"


class StreamEndedWithoutFrame(ScaleError):
    """The peer closed the stream before an end marker was seen."""

    code = "stream_ended"

    def __init__(self, data: bytes) -> None:
        super().__init__(
            f"Stream closed before a complete frame ({len(data)} bytes received)"
        )
        self.data = data


class FrameTooLarge(ScaleError):
    """The receive buffer grew past its limit without completing a frame."""

    code = "frame_too_large"

    def __init__(self, size: int, limit: int, data: bytes = b"") -> None:
        super().__init__(f"Frame buffer reached {size} bytes (limit {limit})")
        self.size = size
        self.limit = limit
        self.data = data


class DecodeFieldMissing(ScaleError, ValueError):
    """The payload holds fewer than three fields."""

    code = "decode_field_missing"

    def __init__(self, tokens: list[str]) -> None:
        super().__init__(f"Expected 3 fields in payload, got {len(tokens)}")
        self.tokens = tokens
