# src/towergen/rng.py
# Portable Park–Miller minimal-standard generator.
# Same seed => same map on every platform and interpreter.

import time
from dataclasses import dataclass
from typing import Sequence, TypeVar

A = 16807
M = 0x7FFFFFFF  # 2^31-1

T = TypeVar("T")


def pm_next(state: int) -> int:
    return (state * A) % M


def low16_signed_abs(x32: int) -> int:
    w = x32 & 0xFFFF
    if w & 0x8000:
        w = -((~w + 1) & 0xFFFF)
    return abs(w)


def normalize_seed(seed: int) -> int:
    # The state must stay in 1..M-1; 0 and multiples of M would lock at 0.
    s = seed % M
    return s if s else 1


def fresh_seed() -> int:
    """Clock-derived seed for callers that did not ask for one."""
    return normalize_seed(time.perf_counter_ns() ^ time.time_ns())


@dataclass
class PMRandom:
    state: int

    def __post_init__(self) -> None:
        self.state = normalize_seed(self.state)

    def next32(self) -> int:
        self.state = pm_next(self.state)
        return self.state

    def bounded(self, n: int) -> int:
        """Uniform-ish draw in 1..n from the low 16 bits."""
        assert 0 < n <= 0x8000
        w = low16_signed_abs(self.next32())
        return (w % n) + 1

    def randrange(self, lo: int, hi: int) -> int:
        """Draw in lo..hi-1, like Random.Next(lo, hi)."""
        if hi <= lo:
            raise ValueError(f"empty range [{lo}, {hi})")
        return lo + self.bounded(hi - lo) - 1

    def choice(self, seq: Sequence[T]) -> T:
        if not seq:
            raise IndexError("choice from an empty sequence")
        return seq[self.randrange(0, len(seq))]
