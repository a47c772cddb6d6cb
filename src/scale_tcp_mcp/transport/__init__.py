"""Transport layer: TCP socket to the terminal."""

from .tcp_connection import TCPConnection
