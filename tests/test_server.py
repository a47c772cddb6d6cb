"""Tests for the MCP server tools."""

from __future__ import annotations

import json
import sys
from unittest.mock import MagicMock, patch

import pytest

from scale_tcp_mcp.config import SessionConfig
from scale_tcp_mcp.session import SessionResult


def _get_server_module():
    """Import server module with FastMCP mocked to avoid init issues."""
    mock_fastmcp_cls = MagicMock()
    mock_fastmcp_instance = MagicMock()
    # Make the @mcp.tool() decorator a no-op that returns the function unchanged
    mock_fastmcp_instance.tool.return_value = lambda fn: fn
    mock_fastmcp_instance.resource.return_value = lambda fn: fn
    mock_fastmcp_instance.prompt.return_value = lambda fn: fn
    mock_fastmcp_cls.return_value = mock_fastmcp_instance

    with patch("mcp.server.fastmcp.FastMCP", mock_fastmcp_cls):
        # Remove cached server module so it re-imports with our mock
        sys.modules.pop("scale_tcp_mcp.server", None)
        import scale_tcp_mcp.server as server_mod

    return server_mod


@pytest.fixture
def server():
    server_mod = _get_server_module()
    with patch.object(server_mod, "_get_config", return_value=SessionConfig()):
        yield server_mod


def test_read_measurement_applies_overrides(server):
    ok = SessionResult(ok=True, display="Weight: 1.000 kg", frame=b"\x021 2 3\x03")
    with patch.object(server, "request_reading", return_value=ok) as request:
        result = server.read_measurement(host="10.1.1.1", port=4001, command="0x10")

    config = request.call_args.args[0]
    assert config.address == ("10.1.1.1", 4001)
    assert config.command == 0x10
    assert result["display"] == "Weight: 1.000 kg"


def test_read_measurement_reports_failure(server):
    failed = SessionResult(ok=False, error="timeout", message="no data")
    with patch.object(server, "request_reading", return_value=failed):
        result = server.read_measurement()
    assert result == {"error": "timeout", "message": "no data"}


def test_read_measurement_rejects_bad_command(server):
    with patch.object(server, "request_reading") as request:
        result = server.read_measurement(command="0x1FF")
    assert result["error"] == "invalid_config"
    request.assert_not_called()


def test_decode_frame_text(server):
    result = server.decode_frame("\x021500 2500 3750\x03")
    assert result["display"] == "Weight: 1.500 kg | Price/Unit: 25.00 | Total: 37.50"
    assert result["raw"] == [1500, 2500, 3750]


def test_decode_frame_hex(server):
    data = b"\x0210 20 30\x03".hex(" ")
    result = server.decode_frame(data, hex_input=True)
    assert result["weight"] == "0.010"
    assert result["total"] == "0.30"


def test_decode_frame_missing_field(server):
    result = server.decode_frame("\x021500 2500\x03")
    assert result["error"] == "decode_field_missing"
    assert result["tokens"] == ["1500", "2500"]


def test_decode_frame_bad_hex(server):
    result = server.decode_frame("zz", hex_input=True)
    assert result["error"] == "invalid_input"


def test_config_resource(server):
    data = json.loads(server.resource_config())
    assert data["host"] == "192.168.15.130"
    assert data["end_marker"] == "0x03"


def test_bad_environment_reported_by_get_config():
    server_mod = _get_server_module()
    with patch.object(server_mod, "_config", None):
        with patch.dict("os.environ", {"SCALE_PORT": "0"}):
            result = server_mod.get_config()
    assert result["error"] == "invalid_config"
