from __future__ import annotations

from commands.builtins.power import power_handler
from commands.registry import CommandDispatcher
from commands.schemas import CommandSpec
from protocol.command_ids import CMD_SHUTDOWN
from services.power_service import PowerAction

SPEC = CommandSpec(
    name=CMD_SHUTDOWN,
    summary="Power off the host",
    usage="shutdown",
    risk="high",
    timeout_sec=None,
)


def register(dispatcher: CommandDispatcher) -> None:
    dispatcher.register(SPEC, power_handler(PowerAction.POWEROFF))
