"""Layered configuration: defaults, JSON file, environment, command line."""

from __future__ import annotations

import argparse
import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Sequence

from config.defaults import (
    CONFIG_HOST_KEY,
    CONFIG_PORT_KEY,
    DEFAULT_CONFIG_FILE,
    DEFAULT_HOST,
    DEFAULT_LOG_LEVEL,
    DEFAULT_PORT,
    ENV_HOST,
    ENV_PORT,
    MAX_PORT,
    MIN_PORT,
)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

logger = logging.getLogger("tasker.config")


class ConfigError(ValueError):
    """Configuration that must abort startup."""


@dataclass(frozen=True)
class TaskerConfig:
    port: int = DEFAULT_PORT
    host: str = DEFAULT_HOST
    config_path: str = DEFAULT_CONFIG_FILE
    log_level: str = DEFAULT_LOG_LEVEL
    plain_output: bool = False


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Receive UDP text commands and run power actions on this host",
        allow_abbrev=False,
    )
    # Every occurrence is kept as a raw string and applied in order, so the last one wins
    # and a malformed or missing value is dropped instead of aborting.
    parser.add_argument("-p", "-port", "--port", dest="port", action="append", nargs="?", default=[], help="UDP port to listen on")
    parser.add_argument(
        "-a", "-address", "--address", dest="host", action="append", nargs="?", default=[], help="Address to bind, e.g. 0.0.0.0"
    )
    parser.add_argument("-c", "--config", dest="config_path", default=None, help="JSON config file path")
    parser.add_argument("--log-level", default=DEFAULT_LOG_LEVEL, choices=list(LOG_LEVELS))
    parser.add_argument("--plain", action="store_true", help="Disable rich formatting of the startup report")
    return parser


def parse_port(value: Any) -> int | None:
    """Return a usable port number, or None when ``value`` is not one."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        port = value
    elif isinstance(value, str):
        try:
            port = int(value.strip())
        except ValueError:
            return None
    else:
        return None
    if port < MIN_PORT or port > MAX_PORT:
        return None
    return port


def load_config_file(path: str | Path) -> dict[str, Any]:
    """Read the optional JSON config file.

    A missing file yields an empty mapping. Any other read or parse failure
    raises ``ConfigError``.
    """
    file_path = Path(path)
    try:
        text = file_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.debug("config file %s not found; using defaults", file_path)
        return {}
    except OSError as exc:
        raise ConfigError(f"cannot read config file {file_path}: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise ConfigError(f"config file {file_path} is not valid UTF-8: {exc}") from exc

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"invalid JSON in config file {file_path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise ConfigError(f"config file {file_path} must contain a JSON object")
    return payload


def _merge_host(current: str, raw: Any, source: str) -> str:
    if not isinstance(raw, str):
        logger.warning("ignoring non-string host %r from %s; keeping %s", raw, source, current)
        return current
    if not raw.strip():
        logger.warning("ignoring blank host from %s; keeping %s", source, current)
        return current
    return raw


def _merge_port(current: int, raw: Any, source: str) -> int:
    port = parse_port(raw)
    if port is None:
        logger.warning("ignoring invalid port %r from %s; keeping %d", raw, source, current)
        return current
    return port


def resolve_config(
    argv: Sequence[str] | None = None,
    environ: Mapping[str, str] | None = None,
    config_path: str | Path | None = None,
) -> TaskerConfig:
    """Resolve the listening address from all configuration layers.

    Later layers overwrite earlier ones field by field:
    defaults, config file, environment, command line.
    """
    env = os.environ if environ is None else environ
    args, _unknown = build_arg_parser().parse_known_args(list(argv) if argv is not None else None)

    path = args.config_path or (str(config_path) if config_path is not None else DEFAULT_CONFIG_FILE)
    port = DEFAULT_PORT
    host = DEFAULT_HOST

    file_values = load_config_file(path)
    if CONFIG_PORT_KEY in file_values:
        port = _merge_port(port, file_values[CONFIG_PORT_KEY], f"config file {path}")
    if CONFIG_HOST_KEY in file_values:
        host = _merge_host(host, file_values[CONFIG_HOST_KEY], f"config file {path}")

    env_port = env.get(ENV_PORT, "")
    if env_port:
        port = _merge_port(port, env_port, ENV_PORT)
    env_host = env.get(ENV_HOST, "")
    if env_host:
        host = _merge_host(host, env_host, ENV_HOST)

    for raw_port in args.port:
        if raw_port is not None:
            port = _merge_port(port, raw_port, "--port")
    for raw_host in args.host:
        if raw_host is not None:
            host = _merge_host(host, raw_host, "--address")

    config = TaskerConfig(
        port=port,
        host=host,
        config_path=path,
        log_level=args.log_level,
        plain_output=args.plain,
    )
    validate_config(config)
    return config


def validate_config(config: TaskerConfig) -> None:
    if isinstance(config.port, bool) or not isinstance(config.port, int):
        raise ConfigError(f"port must be an integer, got {config.port!r}")
    if config.port < MIN_PORT or config.port > MAX_PORT:
        raise ConfigError(f"port must be within {MIN_PORT}..{MAX_PORT}, got {config.port}")
    if not config.host.strip():
        raise ConfigError("host must not be empty")
