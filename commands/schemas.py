"""Schema for declarative command registration."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CommandSpec:
    name: str
    summary: str
    usage: str
    risk: str = "low"
    # None means the handler may run for as long as it needs.
    timeout_sec: float | None = 5.0

    def __post_init__(self) -> None:
        if not self.name or any(ch.isspace() for ch in self.name):
            raise ValueError(f"invalid command name: {self.name!r}")
