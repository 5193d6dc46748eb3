"""Built-in command modules."""

from commands.builtins import (
    beep_cmd,
    ping_cmd,
    reboot_cmd,
    shutdown_cmd,
    sleep_cmd,
)

BUILTIN_MODULES = (
    ping_cmd,
    beep_cmd,
    sleep_cmd,
    shutdown_cmd,
    reboot_cmd,
)
