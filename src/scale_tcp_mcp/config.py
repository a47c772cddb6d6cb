"""Session configuration.

Values are fixed for the lifetime of a session. Any field can be set
through a ``SCALE_*`` environment variable (``SCALE_HOST``,
``SCALE_PORT``, ``SCALE_COMMAND``, ...); keyword arguments win over the
environment.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .protocol.commands import Command, ControlByte, describe_byte, parse_byte
from .protocol.framing import DEFAULT_MAX_FRAME_BYTES

DEFAULT_HOST = "192.168.15.130"
DEFAULT_PORT = 1100
DEFAULT_TIMEOUT = 5.0
DEFAULT_CHUNK_SIZE = 4096

_BYTE_FIELDS = ("command", "start_marker", "end_marker")


class SessionConfig(BaseSettings):
    """Connection target, command byte, delimiters and limits."""

    model_config = SettingsConfigDict(
        env_prefix="SCALE_",
        env_ignore_empty=True,
        extra="ignore",
        frozen=True,
        validate_default=True,
    )

    host: str = Field(DEFAULT_HOST, min_length=1)
    port: int = Field(DEFAULT_PORT, ge=1, le=65535)
    command: int = Command.REQUEST_READING
    start_marker: int = ControlByte.STX
    end_marker: int = ControlByte.ETX
    connect_timeout: float = Field(DEFAULT_TIMEOUT, gt=0)
    read_timeout: float = Field(DEFAULT_TIMEOUT, gt=0)
    chunk_size: int = Field(DEFAULT_CHUNK_SIZE, ge=1)
    # Room for at least the two markers
    max_frame_bytes: int = Field(DEFAULT_MAX_FRAME_BYTES, ge=2)
    accept_partial: bool = True
    currency: str = ""

    @field_validator(*_BYTE_FIELDS, mode="before")
    @classmethod
    def _parse_byte(cls, value: Any) -> int:
        return parse_byte(value)

    @model_validator(mode="after")
    def _check_markers(self) -> SessionConfig:
        if self.start_marker == self.end_marker:
            raise ValueError(
                f"Start and end markers must differ (both 0x{self.start_marker:02X})"
            )
        return self

    @classmethod
    def from_env(cls) -> SessionConfig:
        """Build a config from ``SCALE_*`` variables, falling back to defaults."""
        return cls()

    def with_overrides(self, **overrides: Any) -> SessionConfig:
        """Return a validated copy with the given non-``None`` fields replaced."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        if not changes:
            return self
        return type(self)(**{**self.model_dump(), **changes})

    @property
    def address(self) -> tuple[str, int]:
        return (self.host, self.port)

    def describe(self) -> list[str]:
        """Banner lines shown before a session starts."""
        return [
            f"Server: {self.host}:{self.port}",
            f"Command: {describe_byte(self.command)}; "
            f"Delimiters: start={describe_byte(self.start_marker)}, "
            f"end={describe_byte(self.end_marker)}",
        ]

    def to_dict(self) -> dict:
        data = self.model_dump()
        for name in _BYTE_FIELDS:
            data[name] = f"0x{data[name]:02X}"
        return data
