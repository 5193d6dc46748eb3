"""Load command modules into dispatcher."""

from __future__ import annotations

from types import ModuleType
from typing import Iterable

from commands.builtins import BUILTIN_MODULES
from commands.registry import CommandDispatcher


def load_builtin_commands(dispatcher: CommandDispatcher, modules: Iterable[ModuleType] = BUILTIN_MODULES) -> None:
    for module in modules:
        module.register(dispatcher)
