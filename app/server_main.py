"""Server application entrypoint."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path
from typing import Sequence

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from common.reporting import make_reporter, show_table  # noqa: E402
from config.settings import ConfigError, TaskerConfig, resolve_config  # noqa: E402
from server.interfaces import format_interface_report, interface_rows, list_active_interfaces  # noqa: E402
from server.udp_listener import UdpCommandServer  # noqa: E402


def report_interfaces(config: TaskerConfig) -> None:
    title = "available network interfaces"
    interfaces = list_active_interfaces()
    reporter, paneler, table_builder = make_reporter(use_rich=not config.plain_output)
    if paneler is None or table_builder is None:
        reporter(format_interface_report(interfaces, title))
        return
    show_table(
        paneler,
        table_builder,
        title=title,
        columns=("Interface", "IPv4", "MAC"),
        rows=interface_rows(interfaces),
    )


async def main(argv: Sequence[str] | None = None) -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s | %(message)s",
    )
    try:
        config = resolve_config(argv)
    except ConfigError as exc:
        raise SystemExit(f"[server] configuration error: {exc}") from exc
    logging.getLogger().setLevel(getattr(logging, config.log_level))

    server = UdpCommandServer(config)
    logging.getLogger("tasker").debug("%s", server.dispatcher.render_command_list())
    try:
        try:
            await server.bind()
        except RuntimeError as exc:
            raise SystemExit(f"[server] {exc}") from exc
        report_interfaces(config)
        await server.start()
    finally:
        await server.stop()


def run(argv: Sequence[str] | None = None) -> int:
    try:
        asyncio.run(main(argv))
    except KeyboardInterrupt:
        print("\n[server] interrupted")
    return 0


if __name__ == "__main__":
    raise SystemExit(run())
