"""Canonical command names shared by server, sender, and tests."""

CMD_PING = "ping"
CMD_BEEP = "beep"
CMD_SLEEP = "sleep"
CMD_SHUTDOWN = "shutdown"
CMD_REBOOT = "reboot"
