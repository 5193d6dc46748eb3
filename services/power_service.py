"""Whitelisted power-management command execution per host platform."""

from __future__ import annotations

import asyncio
import logging
import subprocess
import sys
from dataclasses import dataclass
from enum import Enum


class PowerAction(str, Enum):
    SUSPEND = "suspend"
    POWEROFF = "poweroff"
    RESTART = "restart"


class HostPlatform(str, Enum):
    WINDOWS = "windows"
    MACOS = "macos"
    LINUX = "linux"
    # Any other Unix-like system; assumes sudo is needed.
    GENERIC = "generic"


POWER_COMMANDS: dict[HostPlatform, dict[PowerAction, tuple[str, ...]]] = {
    HostPlatform.WINDOWS: {
        PowerAction.SUSPEND: ("rundll32.exe", "powrprof.dll,SetSuspendState", "0,1,0"),
        PowerAction.POWEROFF: ("shutdown", "/s", "/t", "0"),
        PowerAction.RESTART: ("shutdown", "/r", "/t", "0"),
    },
    HostPlatform.MACOS: {
        PowerAction.SUSPEND: ("shutdown", "-s", "now"),
        PowerAction.POWEROFF: ("shutdown", "-h", "now"),
        PowerAction.RESTART: ("shutdown", "-r", "now"),
    },
    HostPlatform.LINUX: {
        PowerAction.SUSPEND: ("systemctl", "suspend"),
        PowerAction.POWEROFF: ("sudo", "shutdown", "-h", "now"),
        PowerAction.RESTART: ("sudo", "shutdown", "-r", "now"),
    },
    HostPlatform.GENERIC: {
        PowerAction.SUSPEND: ("sudo", "shutdown", "-s", "now"),
        PowerAction.POWEROFF: ("sudo", "shutdown", "-h", "now"),
        PowerAction.RESTART: ("sudo", "shutdown", "-r", "now"),
    },
}


def _check_command_table(table: dict[HostPlatform, dict[PowerAction, tuple[str, ...]]]) -> None:
    for platform in HostPlatform:
        actions = table.get(platform)
        if actions is None:
            raise RuntimeError(f"no power commands for platform: {platform.value}")
        missing = [action.value for action in PowerAction if not actions.get(action)]
        if missing:
            raise RuntimeError(f"platform {platform.value} lacks power commands: {', '.join(missing)}")


_check_command_table(POWER_COMMANDS)


@dataclass(frozen=True)
class ExecutionOutcome:
    stdout: str
    stderr: str
    failed: bool
    error_message: str | None = None


def detect_platform(name: str | None = None) -> HostPlatform:
    value = sys.platform if name is None else name
    if value.startswith("win"):
        return HostPlatform.WINDOWS
    if value == "darwin":
        return HostPlatform.MACOS
    if value.startswith("linux"):
        return HostPlatform.LINUX
    return HostPlatform.GENERIC


def command_for(action: PowerAction, platform: HostPlatform) -> tuple[str, ...]:
    return POWER_COMMANDS[platform][action]


class PowerExecutor:
    def __init__(self, platform: HostPlatform | None = None, logger: logging.Logger | None = None) -> None:
        self.platform = platform or detect_platform()
        self.logger = logger or logging.getLogger("tasker.power")

    async def execute(self, action: PowerAction) -> ExecutionOutcome:
        cmd = command_for(action, self.platform)
        self.logger.info("[POWER] %s on %s: %s", action.value, self.platform.value, " ".join(cmd))
        outcome = await _run(cmd, self.platform)
        if outcome.stdout:
            self.logger.info("[POWER] %s stdout: %s", action.value, outcome.stdout)
        if outcome.stderr:
            self.logger.warning("[POWER] %s stderr: %s", action.value, outcome.stderr)
        return outcome


async def _run(cmd: tuple[str, ...], platform: HostPlatform) -> ExecutionOutcome:
    kwargs: dict[str, int] = {}
    if platform is HostPlatform.WINDOWS:
        kwargs["creationflags"] = getattr(subprocess, "CREATE_NO_WINDOW", 0)
    try:
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            **kwargs,
        )
    except OSError as exc:
        return ExecutionOutcome("", "", True, f"failed to start {cmd[0]}: {exc}")

    # No timeout: a power command may legitimately never return.
    stdout, stderr = await proc.communicate()
    out = stdout.decode("utf-8", errors="replace").strip()
    err = stderr.decode("utf-8", errors="replace").strip()
    if proc.returncode != 0:
        detail = err or out or "no output"
        return ExecutionOutcome(out, err, True, f"{' '.join(cmd)} exited with rc={proc.returncode}: {detail}")
    return ExecutionOutcome(out, err, False)
