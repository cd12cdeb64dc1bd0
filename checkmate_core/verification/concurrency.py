# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Check Mate Contributors
"""
Oracle Concurrency Gate

A bounded-capacity gate shared by every oracle client in the process, so
concurrent requests from several contexts can never exceed the oracle's
rate limit together.

The bound is per event loop. asyncio primitives bind to the loop that first
waits on them, so the gate keeps one semaphore per running loop: two loops
in two threads each get `capacity` slots. The `in_flight` / `peak` counters
are plain integers and are only exact when a single loop uses the gate.
A process normally runs a single loop; the per-loop map only matters for
test runners that create one loop per test.
"""

from __future__ import annotations

import asyncio
import weakref
from contextlib import asynccontextmanager
from typing import AsyncIterator


DEFAULT_ORACLE_CONCURRENCY = 3


class ConcurrencyGate:
    """
    At most `capacity` slots are held at once within one event loop.

    Example:
        gate = ConcurrencyGate(3)
        async with gate.slot():
            await call_oracle()
    """

    def __init__(self, capacity: int = DEFAULT_ORACLE_CONCURRENCY) -> None:
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self.capacity = int(capacity)
        self._semaphores: weakref.WeakKeyDictionary[asyncio.AbstractEventLoop, asyncio.Semaphore] = (
            weakref.WeakKeyDictionary()
        )
        self.in_flight = 0
        self.peak = 0

    def _semaphore(self) -> asyncio.Semaphore:
        loop = asyncio.get_running_loop()
        sem = self._semaphores.get(loop)
        if sem is None:
            sem = asyncio.Semaphore(self.capacity)
            self._semaphores[loop] = sem
        return sem

    @asynccontextmanager
    async def slot(self) -> AsyncIterator[None]:
        """Hold one slot for the duration of the block; released on every exit path."""
        async with self._semaphore():
            self.in_flight += 1
            if self.in_flight > self.peak:
                self.peak = self.in_flight
            try:
                yield
            finally:
                self.in_flight -= 1

    def reset_stats(self) -> None:
        self.peak = self.in_flight


_SHARED_GATES: dict[int, ConcurrencyGate] = {}


def shared_gate(capacity: int = DEFAULT_ORACLE_CONCURRENCY) -> ConcurrencyGate:
    """Process-wide gate for the given capacity; every caller gets the same instance."""
    gate = _SHARED_GATES.get(capacity)
    if gate is None:
        gate = ConcurrencyGate(capacity)
        _SHARED_GATES[capacity] = gate
    return gate


DEFAULT_ORACLE_GATE = shared_gate(DEFAULT_ORACLE_CONCURRENCY)
