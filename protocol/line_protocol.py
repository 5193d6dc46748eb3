"""Plain-text line protocol carried in UDP datagrams.

A payload is UTF-8 text holding one or more lines separated by CR and/or LF.
Each non-blank line is ``<command>[ <argument>]``. There is no framing,
length prefix, sequence number, or acknowledgement; every datagram is parsed
on its own.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_LINE_BREAK_RE = re.compile(r"[\r\n]+")
_FIRST_WHITESPACE_RE = re.compile(r"\s")


@dataclass(frozen=True)
class InboundDatagram:
    payload: bytes
    sender_address: str
    sender_port: int

    @property
    def sender(self) -> str:
        return f"{self.sender_address}:{self.sender_port}"


@dataclass(frozen=True)
class ParsedCommand:
    name: str
    argument: str = ""

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("command name must not be empty")

    def __str__(self) -> str:
        if self.argument:
            return f"{self.name} {self.argument}"
        return self.name


def decode_payload(payload: bytes | bytearray | memoryview) -> str:
    if isinstance(payload, memoryview):
        payload = payload.tobytes()
    return bytes(payload).decode("utf-8", errors="replace")


def split_lines(text: str) -> list[str]:
    lines = (line.strip() for line in _LINE_BREAK_RE.split(text))
    return [line for line in lines if line]


def parse_line(line: str) -> ParsedCommand:
    """Split a stripped, non-empty line at its first whitespace character."""
    parts = _FIRST_WHITESPACE_RE.split(line, maxsplit=1)
    if len(parts) == 1:
        return ParsedCommand(parts[0])
    return ParsedCommand(parts[0], parts[1])


def parse_text(text: str) -> list[ParsedCommand]:
    return [parse_line(line) for line in split_lines(text)]


def parse_payload(payload: bytes | bytearray | memoryview) -> list[ParsedCommand]:
    return parse_text(decode_payload(payload))


def encode_lines(lines: list[str]) -> bytes:
    return "\r\n".join(lines).encode("utf-8")


def preview_text(text: str, limit: int = 160) -> str:
    # Make line breaks visible so a multi-line payload logs on one line.
    normalized = text.replace("\r", "<CR>").replace("\n", "<LF>")
    if len(normalized) <= limit:
        return normalized
    return normalized[:limit] + "...(truncated)"
