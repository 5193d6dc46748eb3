from __future__ import annotations

from commands.registry import CommandDispatcher, DispatchContext
from commands.schemas import CommandSpec
from protocol.command_ids import CMD_BEEP
from protocol.line_protocol import ParsedCommand

SPEC = CommandSpec(
    name=CMD_BEEP,
    summary="Ring the terminal bell on the host",
    usage="beep",
    risk="low",
    timeout_sec=2.0,
)


def register(dispatcher: CommandDispatcher) -> None:
    async def _handler(context: DispatchContext, _command: ParsedCommand) -> None:
        context.emit_alert()

    dispatcher.register(SPEC, _handler)
