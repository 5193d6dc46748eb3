from __future__ import annotations

from commands.registry import CommandDispatcher, DispatchContext
from commands.schemas import CommandSpec
from protocol.command_ids import CMD_PING
from protocol.line_protocol import ParsedCommand

SPEC = CommandSpec(
    name=CMD_PING,
    summary="Link health check, logs pong",
    usage="ping",
    risk="low",
    timeout_sec=2.0,
)


def register(dispatcher: CommandDispatcher) -> None:
    async def _handler(context: DispatchContext, _command: ParsedCommand) -> None:
        context.log_info("pong")

    dispatcher.register(SPEC, _handler)
