"""Shared handler for the power verbs."""

from __future__ import annotations

from commands.registry import CommandHandler, DispatchContext
from protocol.line_protocol import ParsedCommand
from services.power_service import PowerAction


def power_handler(action: PowerAction) -> CommandHandler:
    async def _handler(context: DispatchContext, command: ParsedCommand) -> None:
        context.log_info(f"command started: {command}")
        outcome = await context.run_power_action(action)
        if outcome.failed:
            context.log_error(f"command failed: {command.name}: {outcome.error_message}")
            return
        context.log_info("command completed")

    return _handler
