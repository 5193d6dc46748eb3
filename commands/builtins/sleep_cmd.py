from __future__ import annotations

from commands.builtins.power import power_handler
from commands.registry import CommandDispatcher
from commands.schemas import CommandSpec
from protocol.command_ids import CMD_SLEEP
from services.power_service import PowerAction

SPEC = CommandSpec(
    name=CMD_SLEEP,
    summary="Suspend the host",
    usage="sleep",
    risk="high",
    timeout_sec=None,
)


def register(dispatcher: CommandDispatcher) -> None:
    dispatcher.register(SPEC, power_handler(PowerAction.SUSPEND))
