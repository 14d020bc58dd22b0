"""Pytest fixtures for coindash tests."""

import os
import pty
import sys
from collections import deque
from typing import List, Optional

import pytest

from coindash.models import InstrumentSnapshot
from coindash.provider import FetchResult
from coindash.scheduler import RefreshScheduler
from coindash.state import DashboardState


def make_coin(rank: int, sparkline: Optional[tuple] = None, **fields) -> InstrumentSnapshot:
    if sparkline is None:
        sparkline = tuple(float(rank * 100 + i) for i in range(168))
    return InstrumentSnapshot(
        symbol=f"c{rank}",
        name=f"Coin {rank}",
        current_price=float(rank),
        market_cap_rank=rank,
        sparkline=sparkline,
        **fields,
    )


def make_coins(n: int) -> List[InstrumentSnapshot]:
    return [make_coin(i + 1) for i in range(n)]


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.t = start

    def __call__(self) -> float:
        return self.t

    def advance(self, seconds: float):
        self.t += seconds


class FakeProvider:
    """Returns queued results in order; the last one repeats."""

    def __init__(self, *results: FetchResult, on_fetch=None):
        self.results = list(results) or [FetchResult.ok(make_coins(3))]
        self.calls: List[str] = []
        self.on_fetch = on_fetch

    def fetch_markets(self, vs_currency: str) -> FetchResult:
        self.calls.append(vs_currency)
        if self.on_fetch:
            self.on_fetch()
        if len(self.results) > 1:
            return self.results.pop(0)
        return self.results[0]


class FakeKeys:
    def __init__(self, *keys: str):
        self.keys = deque(keys)
        self.timeouts: List[float] = []

    def push(self, *keys: str):
        self.keys.extend(keys)

    def poll(self, timeout: float) -> Optional[str]:
        self.timeouts.append(timeout)
        return self.keys.popleft() if self.keys else None


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def scheduler(clock):
    return RefreshScheduler(interval=60, clock=clock)


@pytest.fixture
def loaded_state():
    """A state holding 10 coins, as after a successful first fetch."""
    state = DashboardState(loading=False)
    state.replace_coins(make_coins(10))
    return state


@pytest.fixture
def pty_stdin(monkeypatch):
    """Point sys.stdin at the slave end of a fresh pty; yields the slave fd."""
    master, slave = pty.openpty()
    stdin = os.fdopen(slave, "r")
    monkeypatch.setattr(sys, "stdin", stdin)
    yield slave
    stdin.close()
    os.close(master)
