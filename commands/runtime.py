"""Unified execution runtime for registered commands."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable

CommandCall = Callable[[], Awaitable[None]]
Reporter = Callable[[str], None]


@dataclass(frozen=True)
class RuntimeConfig:
    logger: Reporter


class CommandRuntime:
    def __init__(self, config: RuntimeConfig) -> None:
        self._config = config

    async def run(self, label: str, timeout_sec: float | None, call: CommandCall) -> bool:
        """Run one handler call; return False instead of raising on failure."""
        try:
            await asyncio.wait_for(call(), timeout=timeout_sec)
        except asyncio.TimeoutError:
            self._config.logger(f"command timeout: {label} after {timeout_sec:.1f}s")
            return False
        except Exception as exc:  # noqa: BLE001
            self._config.logger(f"command execution error: {label}: {type(exc).__name__}: {exc}")
            return False
        return True
