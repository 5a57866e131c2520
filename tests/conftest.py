import asyncio
import random
from collections import Counter

import pytest


class FakeProbe:
    """Stand-in for tcp_connect_probe that records every call."""

    def __init__(self, open_ports=(), delay=0.0, jitter=0.0, delay_for=None, fail_on=None, seed=1234):
        self.open_ports = set(open_ports)
        self.delay = delay
        self.jitter = jitter
        self.delay_for = delay_for
        self.fail_on = fail_on
        self.calls = Counter()
        self.completed = []
        self.active = 0
        self.peak = 0
        self._random = random.Random(seed)

    async def __call__(self, host, port, timeout):
        self.calls[port] += 1
        self.active += 1
        self.peak = max(self.peak, self.active)
        try:
            if self.fail_on is not None and port == self.fail_on:
                raise RuntimeError(f"probe blew up on port {port}")
            if self.delay_for is not None:
                delay = self.delay_for(port)
            else:
                delay = self.delay + self._random.uniform(0, self.jitter)
            await asyncio.sleep(delay)
        finally:
            self.active -= 1
        self.completed.append(port)
        return port in self.open_ports


@pytest.fixture
def make_probe():
    return FakeProbe
