"""Declarative command registry and dispatcher."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable

from commands.runtime import CommandRuntime, RuntimeConfig
from commands.schemas import CommandSpec
from protocol.line_protocol import ParsedCommand
from services.power_service import ExecutionOutcome, PowerAction

CommandHandler = Callable[["DispatchContext", ParsedCommand], Awaitable[None]]
PowerRunner = Callable[[PowerAction], Awaitable[ExecutionOutcome]]
Reporter = Callable[[str], None]


@dataclass(frozen=True)
class DispatchContext:
    run_power_action: PowerRunner
    emit_alert: Callable[[], None]
    log_info: Reporter
    log_error: Reporter


@dataclass(frozen=True)
class RegisteredCommand:
    spec: CommandSpec
    handler: CommandHandler


class CommandDispatcher:
    def __init__(self, context: DispatchContext, logger: Reporter) -> None:
        self._context = context
        self._registry: dict[str, RegisteredCommand] = {}
        self._runtime = CommandRuntime(RuntimeConfig(logger=logger))
        self._pending: set[asyncio.Task[None]] = set()

    def register(self, spec: CommandSpec, handler: CommandHandler) -> None:
        if spec.name in self._registry:
            raise ValueError(f"duplicate command: {spec.name}")
        self._registry[spec.name] = RegisteredCommand(spec=spec, handler=handler)

    async def dispatch(self, command: ParsedCommand) -> None:
        registered = self._registry.get(command.name)
        if registered is None:
            self._context.log_info(f"unknown command: {command}")
            return

        await self._runtime.run(
            str(command),
            registered.spec.timeout_sec,
            lambda: registered.handler(self._context, command),
        )

    def submit(self, command: ParsedCommand) -> asyncio.Task[None]:
        """Schedule ``dispatch`` without waiting for it to finish.

        Requires a running event loop. The task is tracked until it completes
        so it is not garbage collected mid-flight.
        """
        task = asyncio.get_running_loop().create_task(self.dispatch(command))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    @property
    def pending(self) -> frozenset[asyncio.Task[None]]:
        return frozenset(self._pending)

    def list_commands(self) -> list[CommandSpec]:
        return [item.spec for item in self._registry.values()]

    def render_command_list(self) -> str:
        lines = ["Available commands:"]
        for spec in sorted(self.list_commands(), key=lambda item: item.name):
            lines.append(f"- {spec.usage}: {spec.summary} (risk={spec.risk})")
        return "\n".join(lines)
