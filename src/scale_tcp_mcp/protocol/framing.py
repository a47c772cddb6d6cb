"""Incremental assembler for delimited response frames.

Frame layout::

    +----------+------------------------------+--------+
    |  START   |   payload (ASCII text)       |  END   |
    |  1 byte  |   variable length            | 1 byte |
    +----------+------------------------------+--------+

- START: start-of-frame marker, 0x02 (STX) by default
- END: end-of-frame marker, 0x03 (ETX) by default
- Bytes before START are noise and are kept in the buffer but never
  returned as part of a frame.
- The first START wins; the first END after it closes the frame.

The assembler is fed chunks exactly as the transport returns them, so a
marker may arrive in any chunk and the search always covers the whole
accumulated buffer.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..errors import FrameTooLarge
from .commands import ControlByte

DEFAULT_MAX_FRAME_BYTES = 65536


@dataclass(frozen=True)
class Frame:
    """A complete frame, delimiters included."""

    data: bytes

    @property
    def payload(self) -> bytes:
        return self.data[1:-1]

    def __repr__(self) -> str:
        return f"Frame(data={self.data!r})"


@dataclass(frozen=True)
class FrameStatus:
    """Result of feeding the assembler."""

    @property
    def complete(self) -> bool:
        return False


@dataclass(frozen=True)
class Incomplete(FrameStatus):
    """More bytes are needed."""


@dataclass(frozen=True)
class Complete(FrameStatus):
    """A frame has been extracted; the assembler is done."""

    frame: Frame

    @property
    def complete(self) -> bool:
        return True


@dataclass(frozen=True)
class StreamEnded(FrameStatus):
    """The stream closed first.

    ``data`` is everything received so far and has NOT been validated
    against the delimiters.
    """

    data: bytes


INCOMPLETE = Incomplete()


class FrameAssembler:
    """Rebuilds one frame from arbitrarily sized chunks.

    Usage::

        assembler = FrameAssembler()
        status = assembler.append(chunk)
        if status.complete:
            frame = status.frame
        ...
        partial = assembler.finish()  # on EOF
    """

    def __init__(
        self,
        start: int = ControlByte.STX,
        end: int = ControlByte.ETX,
        max_size: int | None = DEFAULT_MAX_FRAME_BYTES,
    ) -> None:
        if start == end:
            raise ValueError("Start and end markers must differ")
        self._start = bytes([start])
        self._end = bytes([end])
        self._max_size = max_size
        self._buffer = bytearray()
        self._start_index: int | None = None
        self._result: Complete | None = None

    @property
    def buffered(self) -> bytes:
        """All bytes received so far, prefix noise included."""
        return bytes(self._buffer)

    @property
    def start_index(self) -> int | None:
        return self._start_index

    @property
    def state(self) -> str:
        if self._result is not None:
            return "complete"
        if self._start_index is None:
            return "searching"
        return "accumulating"

    def append(self, chunk: bytes) -> FrameStatus:
        """Add a chunk and report whether a frame is now complete.

        Raises:
            FrameTooLarge: If the buffer passes ``max_size`` with no frame.
        """
        if self._result is not None:
            return self._result

        self._buffer.extend(chunk)

        if self._start_index is None:
            index = self._buffer.find(self._start)
            if index >= 0:
                self._start_index = index

        if self._start_index is not None:
            end_index = self._buffer.find(self._end, self._start_index + 1)
            if end_index > self._start_index:
                frame = Frame(bytes(self._buffer[self._start_index : end_index + 1]))
                self._result = Complete(frame)
                return self._result

        if self._max_size is not None and len(self._buffer) > self._max_size:
            raise FrameTooLarge(
                len(self._buffer), self._max_size, data=bytes(self._buffer)
            )

        return INCOMPLETE

    def finish(self) -> FrameStatus:
        """Signal end of stream.

        Returns the Complete status if a frame was already extracted,
        otherwise a ``StreamEnded`` holding the raw accumulated bytes.
        """
        if self._result is not None:
            return self._result
        return StreamEnded(bytes(self._buffer))

    def reset(self) -> None:
        """Discard all state and start searching for a new frame."""
        self._buffer.clear()
        self._start_index = None
        self._result = None
