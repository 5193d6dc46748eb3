from __future__ import annotations

import asyncio
import unittest

from commands.loader import load_builtin_commands
from commands.registry import CommandDispatcher, DispatchContext
from commands.schemas import CommandSpec
from protocol.command_ids import CMD_BEEP, CMD_PING, CMD_REBOOT, CMD_SHUTDOWN, CMD_SLEEP
from protocol.line_protocol import ParsedCommand
from services.power_service import ExecutionOutcome, PowerAction


class CommandDispatcherTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.power_calls: list[PowerAction] = []
        self.alerts = 0
        self.info: list[str] = []
        self.errors: list[str] = []
        self.runtime_errors: list[str] = []
        self.outcome = ExecutionOutcome("", "", False)
        self.dispatcher = CommandDispatcher(
            DispatchContext(
                run_power_action=self._run_power_action,
                emit_alert=self._emit_alert,
                log_info=self.info.append,
                log_error=self.errors.append,
            ),
            logger=self.runtime_errors.append,
        )
        load_builtin_commands(self.dispatcher)

    async def _run_power_action(self, action: PowerAction) -> ExecutionOutcome:
        self.power_calls.append(action)
        return self.outcome

    def _emit_alert(self) -> None:
        self.alerts += 1

    async def test_ping_logs_pong(self) -> None:
        await self.dispatcher.dispatch(ParsedCommand(CMD_PING))
        self.assertEqual(self.info, ["pong"])
        self.assertEqual(self.power_calls, [])

    async def test_beep_emits_alert(self) -> None:
        await self.dispatcher.dispatch(ParsedCommand(CMD_BEEP))
        self.assertEqual(self.alerts, 1)

    async def test_power_verbs_map_to_actions(self) -> None:
        await self.dispatcher.dispatch(ParsedCommand(CMD_SLEEP))
        await self.dispatcher.dispatch(ParsedCommand(CMD_SHUTDOWN))
        await self.dispatcher.dispatch(ParsedCommand(CMD_REBOOT, "now"))
        self.assertEqual(self.power_calls, [PowerAction.SUSPEND, PowerAction.POWEROFF, PowerAction.RESTART])
        self.assertIn("command started: reboot now", self.info)
        self.assertIn("command completed", self.info)

    async def test_unknown_command_never_reaches_executor(self) -> None:
        await self.dispatcher.dispatch(ParsedCommand("format", "c:"))
        self.assertEqual(self.power_calls, [])
        self.assertEqual(self.info, ["unknown command: format c:"])

    async def test_names_are_case_sensitive(self) -> None:
        await self.dispatcher.dispatch(ParsedCommand("REBOOT"))
        self.assertEqual(self.power_calls, [])

    async def test_failed_outcome_is_logged(self) -> None:
        self.outcome = ExecutionOutcome("", "denied", True, "sudo shutdown -r now exited with rc=1: denied")
        await self.dispatcher.dispatch(ParsedCommand(CMD_REBOOT))
        self.assertEqual(len(self.errors), 1)
        self.assertIn("rc=1", self.errors[0])
        self.assertNotIn("command completed", self.info)

    async def test_handler_exception_is_contained(self) -> None:
        async def _boom(_ctx: DispatchContext, _command: ParsedCommand) -> None:
            raise OSError("broken pipe")

        self.dispatcher.register(CommandSpec(name="boom", summary="x", usage="boom"), _boom)
        await self.dispatcher.dispatch(ParsedCommand("boom"))
        await self.dispatcher.dispatch(ParsedCommand(CMD_PING))
        self.assertEqual(len(self.runtime_errors), 1)
        self.assertIn("OSError: broken pipe", self.runtime_errors[0])
        self.assertEqual(self.info, ["pong"])

    async def test_slow_handler_times_out(self) -> None:
        async def _slow(_ctx: DispatchContext, _command: ParsedCommand) -> None:
            await asyncio.sleep(10)

        self.dispatcher.register(CommandSpec(name="slow", summary="x", usage="slow", timeout_sec=0.01), _slow)
        await self.dispatcher.dispatch(ParsedCommand("slow"))
        self.assertIn("command timeout: slow", self.runtime_errors[0])

    async def test_duplicate_registration_is_rejected(self) -> None:
        async def _noop_handler(_ctx: DispatchContext, _command: ParsedCommand) -> None:
            return None

        with self.assertRaises(ValueError):
            self.dispatcher.register(CommandSpec(name=CMD_PING, summary="x", usage="x"), _noop_handler)

    async def test_submit_does_not_wait_for_power_action(self) -> None:
        gate = asyncio.Event()

        async def _blocked(action: PowerAction) -> ExecutionOutcome:
            self.power_calls.append(action)
            await gate.wait()
            return ExecutionOutcome("", "", False)

        dispatcher = CommandDispatcher(
            DispatchContext(
                run_power_action=_blocked,
                emit_alert=self._emit_alert,
                log_info=self.info.append,
                log_error=self.errors.append,
            ),
            logger=self.runtime_errors.append,
        )
        load_builtin_commands(dispatcher)

        first = dispatcher.submit(ParsedCommand(CMD_REBOOT))
        second = dispatcher.submit(ParsedCommand(CMD_REBOOT))
        await asyncio.sleep(0)
        # No deduplication: both reboots reach the executor while neither has finished.
        self.assertEqual(self.power_calls, [PowerAction.RESTART, PowerAction.RESTART])
        self.assertEqual(len(dispatcher.pending), 2)

        gate.set()
        await asyncio.gather(first, second)
        self.assertEqual(len(dispatcher.pending), 0)

    async def test_command_list_mentions_every_builtin(self) -> None:
        text = self.dispatcher.render_command_list()
        for name in (CMD_PING, CMD_BEEP, CMD_SLEEP, CMD_SHUTDOWN, CMD_REBOOT):
            self.assertIn(f"- {name}:", text)

    def test_command_name_must_not_contain_whitespace(self) -> None:
        with self.assertRaises(ValueError):
            CommandSpec(name="re boot", summary="x", usage="x")


if __name__ == "__main__":
    unittest.main()
