"""TCP connection to a weighing terminal.

One connection carries one request: a command byte is written, then the
response is read chunk by chunk until the frame assembler reports a
complete frame or the peer closes the stream.
"""

from __future__ import annotations

import logging
import socket
import time
from dataclasses import dataclass

from ..errors import ConnectError, ReadError, ResponseTimeout, WriteError
from ..protocol.commands import ControlByte
from ..protocol.framing import DEFAULT_MAX_FRAME_BYTES, FrameAssembler, FrameStatus

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0
READ_CHUNK_SIZE = 4096


@dataclass
class PeerInfo:
    """Addresses of an open connection."""

    host: str = ""
    port: int = 0
    local_address: str = ""


class TCPConnection:
    """Manages the socket to the terminal.

    Usage::

        with TCPConnection(host, port) as conn:
            status = conn.send_and_receive(b"\\x05")

    or explicitly::

        conn = TCPConnection(host, port)
        conn.open()
        conn.write(b"\\x05")
        chunk = conn.read()
        conn.close()
    """

    def __init__(
        self,
        host: str,
        port: int,
        connect_timeout: float = DEFAULT_TIMEOUT,
        read_timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._host = host
        self._port = port
        self._connect_timeout = connect_timeout
        self._read_timeout = read_timeout
        self._sock: socket.socket | None = None
        self._peer_info = PeerInfo(host=host, port=port)

    @property
    def connected(self) -> bool:
        return self._sock is not None

    @property
    def peer_info(self) -> PeerInfo:
        return self._peer_info

    def __enter__(self) -> TCPConnection:
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def open(self) -> PeerInfo:
        """Connect to the terminal.

        Raises:
            ConnectError: If the connection cannot be established.
        """
        logger.info("Connecting to %s:%d", self._host, self._port)
        try:
            sock = socket.create_connection(
                (self._host, self._port), timeout=self._connect_timeout
            )
        except (OSError, UnicodeError) as e:
            raise ConnectError(
                f"Could not connect to {self._host}:{self._port}: {e}"
            ) from e

        self._sock = sock
        try:
            local = sock.getsockname()
            self._peer_info.local_address = f"{local[0]}:{local[1]}"
        except OSError:
            self._peer_info.local_address = ""

        logger.info("Connected to %s:%d", self._host, self._port)
        return self._peer_info

    def close(self) -> None:
        """Close the socket. Never raises."""
        if self._sock is None:
            return

        try:
            self._sock.close()
        except OSError as e:
            logger.warning("Error closing socket: %s", e)
        finally:
            self._sock = None
            logger.info("Disconnected")

    def write(self, data: bytes) -> int:
        """Send ``data`` completely.

        Raises:
            WriteError: If not connected or the send fails.
        """
        if self._sock is None:
            raise WriteError("Not connected to terminal")

        try:
            self._sock.sendall(data)
        except OSError as e:
            raise WriteError(f"Failed to send command: {e}") from e

        logger.debug("TX %s", data.hex(" "))
        return len(data)

    def read(self, max_bytes: int = READ_CHUNK_SIZE, timeout: float | None = None) -> bytes:
        """Read up to ``max_bytes``. An empty result means end of stream.

        Raises:
            ReadError: If not connected or the read fails.
            ResponseTimeout: If nothing arrives within ``timeout`` seconds.
        """
        if self._sock is None:
            raise ReadError("Not connected to terminal")

        timeout = self._read_timeout if timeout is None else timeout
        try:
            self._sock.settimeout(timeout)
            data = self._sock.recv(max_bytes)
        except socket.timeout as e:
            raise ResponseTimeout(
                f"No data from {self._host}:{self._port} within {timeout:.1f}s"
            ) from e
        except OSError as e:
            raise ReadError(f"Failed to read response: {e}") from e

        if data:
            logger.debug(
                "RX %d bytes: %s | %r",
                len(data),
                data.hex(" "),
                data.decode("ascii", errors="replace").rstrip(),
            )
        else:
            logger.debug("RX end of stream")
        return data

    def receive_frame(
        self,
        assembler: FrameAssembler,
        chunk_size: int = READ_CHUNK_SIZE,
    ) -> FrameStatus:
        """Read until ``assembler`` completes a frame or the stream ends.

        The read timeout bounds the whole response, not each chunk.

        Returns:
            ``Complete`` with the frame, or ``StreamEnded`` with whatever
            was received.

        Raises:
            ResponseTimeout: If the deadline passes first.
            ReadError: On socket failure.
            FrameTooLarge: If the assembler's limit is exceeded.
        """
        deadline = time.monotonic() + self._read_timeout
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                err = ResponseTimeout(
                    f"No complete frame from {self._host}:{self._port} "
                    f"within {self._read_timeout:.1f}s"
                )
                err.data = assembler.buffered
                raise err
            try:
                chunk = self.read(chunk_size, timeout=remaining)
            except (ResponseTimeout, ReadError) as e:
                e.data = assembler.buffered
                raise
            if not chunk:
                return assembler.finish()
            status = assembler.append(chunk)
            if status.complete:
                return status

    def send_and_receive(
        self,
        command: bytes,
        start: int = ControlByte.STX,
        end: int = ControlByte.ETX,
        chunk_size: int = READ_CHUNK_SIZE,
        max_frame_bytes: int | None = DEFAULT_MAX_FRAME_BYTES,
    ) -> FrameStatus:
        """Send a command and assemble the response frame."""
        self.write(command)
        assembler = FrameAssembler(start=start, end=end, max_size=max_frame_bytes)
        return self.receive_frame(assembler, chunk_size=chunk_size)
