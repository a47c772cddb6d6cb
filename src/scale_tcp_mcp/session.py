"""One request/response exchange with a terminal.

A session owns its connection from open to close: the socket is released
on every exit path, and every failure comes back as a labeled
:class:`SessionResult` instead of an exception.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from .config import SessionConfig
from .errors import ScaleError, StreamEndedWithoutFrame
from .models.reading import DecodedReading
from .protocol.commands import build_command
from .protocol.framing import Complete, FrameStatus, StreamEnded
from .protocol.parser import PayloadDecoder
from .transport.tcp_connection import TCPConnection

logger = logging.getLogger(__name__)


@dataclass
class SessionResult:
    """Outcome of a session: a reading, or an error label and message."""

    ok: bool
    display: str = ""
    reading: DecodedReading | None = None
    frame: bytes = b""
    partial: bool = False
    error: str = ""
    message: str = ""

    @classmethod
    def failure(cls, err: ScaleError, frame: bytes = b"") -> SessionResult:
        return cls(ok=False, error=err.code, message=str(err), frame=frame)

    def to_dict(self) -> dict:
        if not self.ok:
            result = {"error": self.error, "message": self.message}
            if self.frame:
                result["received"] = self.frame.decode("ascii", errors="replace")
            return result
        result = {
            "display": self.display,
            "partial": self.partial,
            "frame": self.frame.decode("ascii", errors="replace"),
        }
        if self.reading is not None:
            result.update(self.reading.to_dict())
        return result


def decode_status(status: FrameStatus, config: SessionConfig) -> SessionResult:
    """Turn the assembler's final status into a result.

    Raises:
        StreamEndedWithoutFrame: If no frame completed and partial data is
            not accepted (or nothing was received at all).
        DecodeFieldMissing: If the payload has fewer than three fields.
    """
    decoder = PayloadDecoder(
        start=config.start_marker,
        end=config.end_marker,
        currency=config.currency,
    )

    if isinstance(status, Complete):
        data = status.frame.data
        partial = False
    elif isinstance(status, StreamEnded):
        if not status.data or not config.accept_partial:
            raise StreamEndedWithoutFrame(status.data)
        logger.warning(
            "Stream ended without a complete frame, decoding %d raw bytes",
            len(status.data),
        )
        data = status.data
        partial = True
    else:
        raise TypeError(f"Unexpected frame status: {status!r}")

    reading = decoder.decode_reading(data)
    return SessionResult(
        ok=True,
        display=reading.render(config.currency),
        reading=reading,
        frame=data,
        partial=partial,
    )


def request_reading(
    config: SessionConfig,
    connection_factory: Callable[..., TCPConnection] = TCPConnection,
) -> SessionResult:
    """Connect, send the command, receive one frame, decode it.

    Never raises :class:`ScaleError`; failures are returned labeled.
    """
    received = b""
    try:
        with connection_factory(
            config.host,
            config.port,
            connect_timeout=config.connect_timeout,
            read_timeout=config.read_timeout,
        ) as conn:
            status = conn.send_and_receive(
                build_command(config.command),
                start=config.start_marker,
                end=config.end_marker,
                chunk_size=config.chunk_size,
                max_frame_bytes=config.max_frame_bytes,
            )
        if isinstance(status, Complete):
            received = status.frame.data
        elif isinstance(status, StreamEnded):
            received = status.data
        result = decode_status(status, config)
    except ScaleError as e:
        logger.error("Session failed: %s", e)
        return SessionResult.failure(e, frame=e.data or received)

    logger.info("Reading: %s", result.display)
    return result
