"""Request a single reading from a terminal and print it.

Usage:
  scale-read --host 192.168.15.130 --port 1100

Defaults come from SCALE_* environment variables.
"""

from __future__ import annotations

import argparse
import logging
import sys

from .config import SessionConfig
from .protocol.commands import parse_byte
from .session import request_reading

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scale-read",
        description=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--host", help="Terminal address")
    parser.add_argument("--port", type=int, help="Terminal TCP port")
    parser.add_argument("--command", type=parse_byte, help="Command byte (e.g. 0x05)")
    parser.add_argument("--start", type=parse_byte, help="Start marker byte (e.g. 0x02)")
    parser.add_argument("--end", type=parse_byte, help="End marker byte (e.g. 0x03)")
    parser.add_argument("--timeout", type=float, help="Response deadline in seconds")
    parser.add_argument("--currency", help="Prefix for price and total, e.g. 'R$'")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Reject responses that end without a closing marker",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log raw traffic")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Print the configuration banner, then one reading or an error."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = SessionConfig.from_env().with_overrides(
            host=args.host,
            port=args.port,
            command=args.command,
            start_marker=args.start,
            end_marker=args.end,
            read_timeout=args.timeout,
            currency=args.currency,
            accept_partial=False if args.strict else None,
        )
    except ValueError as err:
        print(f"error: {err}", file=sys.stderr)
        return 2

    for line in config.describe():
        print(line)
    print()

    result = request_reading(config)
    if not result.ok:
        print(f"Error ({result.error}): {result.message}", file=sys.stderr)
        return 1

    if result.partial:
        print("warning: response was not terminated; values are best effort", file=sys.stderr)
    print(result.display)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
