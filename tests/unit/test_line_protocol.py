from __future__ import annotations

import unittest

from protocol.line_protocol import (
    InboundDatagram,
    ParsedCommand,
    encode_lines,
    parse_line,
    parse_payload,
    preview_text,
    split_lines,
)


class LineProtocolTests(unittest.TestCase):
    def test_mixed_line_endings_and_blank_line(self) -> None:
        commands = parse_payload(b"ping\r\nbeep\n\nreboot arg1 arg2")
        self.assertEqual(
            commands,
            [
                ParsedCommand("ping", ""),
                ParsedCommand("beep", ""),
                ParsedCommand("reboot", "arg1 arg2"),
            ],
        )

    def test_blank_payload_yields_nothing(self) -> None:
        self.assertEqual(parse_payload(b""), [])
        self.assertEqual(parse_payload(b"  \r\n\t\n\r\r\n   "), [])

    def test_lines_are_trimmed(self) -> None:
        self.assertEqual(split_lines("  ping  \r  sleep now\t"), ["ping", "sleep now"])

    def test_split_on_first_whitespace_only(self) -> None:
        self.assertEqual(parse_line("reboot\tin  5"), ParsedCommand("reboot", "in  5"))
        self.assertEqual(parse_line("reboot  later"), ParsedCommand("reboot", " later"))

    def test_command_name_is_case_sensitive(self) -> None:
        self.assertEqual(parse_line("PING").name, "PING")

    def test_invalid_utf8_is_replaced_not_rejected(self) -> None:
        commands = parse_payload(b"ping \xff\xfe\nbeep")
        self.assertEqual([c.name for c in commands], ["ping", "beep"])
        self.assertIn("�", commands[0].argument)

    def test_empty_name_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            ParsedCommand("")

    def test_preview_marks_line_breaks(self) -> None:
        self.assertEqual(preview_text("ping\r\nbeep"), "ping<CR><LF>beep")
        self.assertTrue(preview_text("x" * 50, limit=10).endswith("...(truncated)"))

    def test_encode_lines_uses_crlf(self) -> None:
        self.assertEqual(encode_lines(["ping", "reboot now"]), b"ping\r\nreboot now")

    def test_datagram_sender_label(self) -> None:
        datagram = InboundDatagram(payload=b"ping", sender_address="10.0.0.5", sender_port=5000)
        self.assertEqual(datagram.sender, "10.0.0.5:5000")


if __name__ == "__main__":
    unittest.main()
