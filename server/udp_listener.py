"""UDP listener feeding the line protocol into the command dispatcher."""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import Any

from commands.loader import load_builtin_commands
from commands.registry import CommandDispatcher, DispatchContext
from config.defaults import LOG_PREVIEW_CHARS
from config.settings import TaskerConfig
from protocol.line_protocol import InboundDatagram, decode_payload, parse_payload, preview_text
from services.power_service import ExecutionOutcome, PowerAction, PowerExecutor


class CommandDatagramProtocol(asyncio.DatagramProtocol):
    def __init__(self, server: "UdpCommandServer") -> None:
        self._server = server

    def connection_made(self, transport: asyncio.BaseTransport) -> None:
        self._server.on_listening(transport)

    def datagram_received(self, data: bytes, addr: Any) -> None:
        host, port = addr[0], addr[1]
        self._server.handle_datagram(InboundDatagram(payload=data, sender_address=str(host), sender_port=int(port)))

    def error_received(self, exc: Exception) -> None:
        self._server.on_socket_error(exc)

    def connection_lost(self, exc: Exception | None) -> None:
        self._server.on_connection_lost(exc)


class UdpCommandServer:
    def __init__(
        self,
        config: TaskerConfig,
        dispatcher: CommandDispatcher | None = None,
        executor: PowerExecutor | None = None,
    ) -> None:
        self.config = config
        self.logger = logging.getLogger("tasker.server")
        self.transport: asyncio.DatagramTransport | None = None
        self._executor = executor or PowerExecutor()
        self._stopped = asyncio.Event()
        if dispatcher is None:
            dispatcher = CommandDispatcher(
                DispatchContext(
                    run_power_action=self._run_power_action,
                    emit_alert=self._emit_alert,
                    log_info=lambda message: self.logger.info("%s", message),
                    log_error=lambda message: self.logger.error("%s", message),
                ),
                logger=lambda message: self.logger.error("%s", message),
            )
            load_builtin_commands(dispatcher)
        self._dispatcher = dispatcher

    @property
    def dispatcher(self) -> CommandDispatcher:
        return self._dispatcher

    async def bind(self) -> None:
        loop = asyncio.get_running_loop()
        self._stopped.clear()
        try:
            await loop.create_datagram_endpoint(
                lambda: CommandDatagramProtocol(self),
                local_addr=(self.config.host, self.config.port),
            )
        except OSError as exc:
            raise RuntimeError(
                f"Failed to bind UDP {self.config.host}:{self.config.port}: {exc}. "
                "Check that the port is free and the address belongs to this host."
            ) from exc

    async def start(self) -> None:
        """Bind the socket if needed and serve until ``stop`` is called or the transport is lost."""
        if self.transport is None:
            await self.bind()
        await self._stopped.wait()

    async def stop(self) -> None:
        if self.transport is None:
            return
        transport = self.transport
        self.transport = None
        self.logger.info("Stopping UDP listener")
        transport.close()
        self._stopped.set()

    def on_listening(self, transport: asyncio.BaseTransport) -> None:
        self.transport = transport  # type: ignore[assignment]
        sockname = transport.get_extra_info("sockname")
        if sockname:
            self.logger.info("server listening on %s:%s", sockname[0], sockname[1])
        else:
            self.logger.info("server listening on %s:%s", self.config.host, self.config.port)

    def handle_datagram(self, datagram: InboundDatagram) -> list[asyncio.Task[None]]:
        """Parse one datagram and hand every command to the dispatcher.

        Commands are scheduled, not awaited, so a long power action never
        delays the next datagram.
        """
        self.logger.info(
            "server received: %s from %s",
            preview_text(decode_payload(datagram.payload), limit=LOG_PREVIEW_CHARS),
            datagram.sender,
        )
        tasks: list[asyncio.Task[None]] = []
        try:
            commands = parse_payload(datagram.payload)
        except Exception:  # noqa: BLE001
            self.logger.exception("Unexpected parse failure from %s", datagram.sender)
            return tasks
        for command in commands:
            self.logger.debug("[RX] cmd=%s arg=%s", command.name, command.argument)
            tasks.append(self._dispatcher.submit(command))
        return tasks

    def on_socket_error(self, exc: Exception) -> None:
        # The socket stays open; only this receive is lost.
        self.logger.error("server error: %s: %s", type(exc).__name__, exc)

    def on_connection_lost(self, exc: Exception | None) -> None:
        if exc is not None:
            self.logger.error("UDP transport lost: %s", exc)
        self.transport = None
        self._stopped.set()

    async def _run_power_action(self, action: PowerAction) -> ExecutionOutcome:
        return await self._executor.execute(action)

    @staticmethod
    def _emit_alert() -> None:
        sys.stdout.write("\a")
        sys.stdout.flush()
