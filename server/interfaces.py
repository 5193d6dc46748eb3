"""Active network interface listing for the startup report."""

from __future__ import annotations

import ipaddress
import socket
from dataclasses import dataclass
from typing import Any, Mapping

import psutil

ZERO_MAC = "00:00:00:00:00:00"


@dataclass(frozen=True)
class NetworkInterface:
    name: str
    address: str
    mac: str


def _normalize_mac(value: str) -> str:
    # Windows reports MACs with dashes.
    return value.replace("-", ":").lower()


def _is_loopback(address: str) -> bool:
    try:
        return ipaddress.ip_address(address).is_loopback
    except ValueError:
        return False


def select_active_interfaces(
    addrs: Mapping[str, list[Any]],
    stats: Mapping[str, Any],
) -> list[NetworkInterface]:
    """Keep interfaces that are up, have a non-loopback IPv4 address, and a real MAC."""
    found: list[NetworkInterface] = []
    for name in sorted(addrs):
        stat = stats.get(name)
        if stat is not None and not stat.isup:
            continue
        entries = addrs[name]
        mac = next((_normalize_mac(e.address) for e in entries if e.family == psutil.AF_LINK and e.address), "")
        if not mac or mac == ZERO_MAC:
            continue
        ipv4 = next(
            (e.address for e in entries if e.family == socket.AF_INET and e.address and not _is_loopback(e.address)),
            None,
        )
        if ipv4 is None:
            continue
        found.append(NetworkInterface(name=name, address=ipv4, mac=mac))
    return found


def list_active_interfaces() -> list[NetworkInterface]:
    return select_active_interfaces(psutil.net_if_addrs(), psutil.net_if_stats())


def interface_rows(interfaces: list[NetworkInterface]) -> list[tuple[str, str, str]]:
    return [(item.name, item.address, item.mac) for item in interfaces]


def format_interface_report(interfaces: list[NetworkInterface], title: str) -> str:
    lines = [title]
    for item in interfaces:
        lines.append(f"  {item.name}: {item.address} ({item.mac})")
    if not interfaces:
        lines.append("  (none)")
    return "\n".join(lines)
