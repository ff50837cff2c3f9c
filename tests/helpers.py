"""Test helpers: a controllable clock and block tampering."""

import dataclasses


START_TIME = 1_700_000_000


class FakeClock:
    """Deterministic clock returning a settable number of seconds."""

    def __init__(self, now: int = START_TIME):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds


def tamper(store, position, /, **changes):
    """Replace the block at position with a modified copy, keeping its hash."""
    block = store._chain[position]
    store._chain[position] = dataclasses.replace(block, **changes)
    return store._chain[position]
