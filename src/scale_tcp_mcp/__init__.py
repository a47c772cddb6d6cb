"""TCP client and MCP server for STX/ETX framed weighing terminals."""

__version__ = "0.1.0"
