"""Send command lines to a tasker server in one UDP datagram."""

from __future__ import annotations

import argparse
import socket
import sys
from pathlib import Path
from typing import Sequence

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from common.reporting import make_reporter  # noqa: E402
from config.defaults import DEFAULT_PORT  # noqa: E402
from config.settings import parse_port  # noqa: E402
from protocol.line_protocol import encode_lines, preview_text  # noqa: E402


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Send commands to a tasker host over UDP", allow_abbrev=False)
    parser.add_argument("-a", "--address", default="127.0.0.1", help="Target host")
    parser.add_argument("-p", "--port", default=str(DEFAULT_PORT), help="Target UDP port")
    parser.add_argument("--plain", action="store_true", help="Disable rich output")
    parser.add_argument("lines", nargs="+", help='Command lines, e.g. ping "reboot now"')
    return parser.parse_args(argv)


def send_lines(host: str, port: int, lines: Sequence[str]) -> int:
    payload = encode_lines(list(lines))
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
        return sock.sendto(payload, (host, port))


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    reporter, _, _ = make_reporter(use_rich=not args.plain)
    port = parse_port(args.port)
    if port is None:
        reporter(f"[client] invalid port: {args.port}")
        return 2
    try:
        sent = send_lines(args.address, port, args.lines)
    except OSError as exc:
        reporter(f"[client] send failed: {exc}")
        return 1
    text = "\n".join(args.lines)
    reporter(f"[client] sent {sent} bytes to {args.address}:{port}: {preview_text(text)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
