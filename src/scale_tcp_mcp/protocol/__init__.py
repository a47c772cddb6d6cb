"""Protocol layer: command bytes, frame assembly, and payload decoding."""

from .commands import Command, ControlByte, build_command
from .framing import Frame, FrameAssembler
from .parser import PayloadDecoder, decode_frame
