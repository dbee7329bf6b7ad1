"""Test-suite egress guard.

Installs an audit hook that fails any DNS lookup or socket connect, so the
public suffix data must come from the bundled snapshot and never from the
network. The same hook records file writes for the ``disk_writes`` fixture.
"""

from __future__ import annotations

import os
import sys

import pytest

_CONNECT_EVENTS = frozenset(("socket.connect", "socket.sendto", "socket.sendmsg"))
_DNS_EVENTS = frozenset(("socket.getaddrinfo", "socket.gethostbyname", "socket.gethostbyaddr"))
_WRITE_FLAGS = os.O_WRONLY | os.O_RDWR | os.O_CREAT | os.O_APPEND

# Set to a list while a test is recording writes
_recorded_writes: list[str] | None = None


class NetworkAccessBlocked(RuntimeError):
    """Raised when the test suite tries to reach the network."""


def _is_write(event: str, args: tuple) -> bool:
    if event in ("os.mkdir", "os.rename", "os.replace", "os.remove"):
        return True
    if event != "open" or len(args) < 3:
        return False
    mode, flags = args[1], args[2]
    if isinstance(mode, str):
        return any(c in mode for c in "wax+")
    return isinstance(flags, int) and bool(flags & _WRITE_FLAGS)


def _test_egress_guard(event: str, args: tuple) -> None:
    """Block all network access during the tests."""
    if event in _DNS_EVENTS:
        host = args[0] if args else None
        raise NetworkAccessBlocked(f"DNS lookup blocked during tests: {host!r}")

    if event in _CONNECT_EVENTS:
        addr = args[1] if len(args) >= 2 else None
        # AF_UNIX paths are local
        if isinstance(addr, tuple):
            raise NetworkAccessBlocked(f"connect blocked during tests: {addr!r}")

    if _recorded_writes is not None and _is_write(event, args):
        _recorded_writes.append(f"{event} {args[0]!r}")


sys.addaudithook(_test_egress_guard)


@pytest.fixture
def disk_writes():
    """Collect every file write made while the test runs."""
    global _recorded_writes
    writes: list[str] = []
    _recorded_writes = writes
    try:
        yield writes
    finally:
        _recorded_writes = None
