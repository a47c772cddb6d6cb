"""MCP server entry point for STX/ETX framed weighing terminals.

Exposes tools, resources, and prompts via the Model Context Protocol
using the official Python MCP SDK with stdio transport.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from mcp.server.fastmcp import FastMCP

from .config import SessionConfig
from .errors import DecodeFieldMissing
from .protocol.commands import parse_byte
from .protocol.parser import PayloadDecoder
from .session import request_reading

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "scale-tcp",
    instructions="MCP server for weighing terminals speaking STX/ETX framed TCP",
)

# Loaded lazily so that a bad environment surfaces as a tool error
_config: SessionConfig | None = None


def _get_config() -> SessionConfig:
    """Get the process configuration, reading ``SCALE_*`` on first use."""
    global _config
    if _config is None:
        _config = SessionConfig.from_env()
    return _config


# ─── MEASUREMENT TOOLS ───────────────────────────────────────────────

@mcp.tool()
def read_measurement(
    host: str | None = None,
    port: int | None = None,
    command: str | None = None,
    timeout: float | None = None,
) -> dict[str, Any]:
    """Request one reading from the terminal.

    Opens a TCP connection, sends the command byte, waits for a single
    STX ... ETX frame and decodes weight, price per unit and total.

    Args:
        host: Terminal address (default from SCALE_HOST).
        port: Terminal TCP port (default from SCALE_PORT).
        command: Command byte, e.g. "0x05" (default from SCALE_COMMAND).
        timeout: Response deadline in seconds.
    """
    try:
        config = _get_config().with_overrides(
            host=host,
            port=port,
            command=parse_byte(command) if command is not None else None,
            read_timeout=timeout,
        )
    except ValueError as e:
        return {"error": "invalid_config", "message": str(e)}

    result = request_reading(config)
    return result.to_dict()


@mcp.tool()
def decode_frame(data: str, hex_input: bool = False) -> dict[str, Any]:
    """Decode a captured response without contacting the terminal.

    Args:
        data: Frame text, e.g. "\\x021500 2500 3750\\x03", or hex bytes.
        hex_input: Treat ``data`` as hex ("02 31 35 ..").
    """
    try:
        config = _get_config()
        raw = bytes.fromhex(data) if hex_input else data.encode("latin-1")
    except (ValueError, UnicodeEncodeError) as e:
        return {"error": "invalid_input", "message": str(e)}

    decoder = PayloadDecoder(
        start=config.start_marker,
        end=config.end_marker,
        currency=config.currency,
    )
    try:
        reading = decoder.decode_reading(raw)
    except DecodeFieldMissing as e:
        return {"error": e.code, "message": str(e), "tokens": e.tokens}

    result: dict[str, Any] = {"display": reading.render(config.currency)}
    result.update(reading.to_dict())
    return result


@mcp.tool()
def get_config() -> dict[str, Any]:
    """Show the effective connection and framing configuration."""
    try:
        return _get_config().to_dict()
    except ValueError as e:
        return {"error": "invalid_config", "message": str(e)}


# ─── MCP RESOURCES ───────────────────────────────────────────────────

@mcp.resource("scale://config")
def resource_config() -> str:
    """Effective configuration as JSON."""
    return json.dumps(get_config())


# ─── MCP PROMPTS ─────────────────────────────────────────────────────

@mcp.prompt()
def check_scale() -> str:
    """Guide the AI through taking and sanity-checking a reading."""
    return """Use get_config to confirm which terminal will be contacted.
Then call read_measurement and report weight, price per unit and total.

Consider:
- If "partial" is true the frame was not terminated; treat values with care
- Weight times price per unit should be close to the total
- On "timeout" or "connection_error", check host, port and network reachability
- On "decode_field_missing", show the received text to the user"""


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main():
    """Run the MCP server with stdio transport."""
    logging.basicConfig(level=logging.INFO)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
