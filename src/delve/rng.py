from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from typing import Any, Optional, Sequence

logger = logging.getLogger(__name__)


def time_based_seed() -> int:
    """Seed drawn from the wall clock (milliseconds, 31 bits)."""
    return int(time.time() * 1000) & 0x7FFFFFFF


@dataclass
class SeededRandom:
    """
    The single deterministic random stream of a generation run.

    Every phase draws from the same instance in a fixed order, so the stream
    must never be shared with unrelated code. The draw helpers mirror the
    integer/float conventions the generator relies on:

    - value(): float in [0, 1)
    - range_int(lo, hi): integer in [lo, hi); a degenerate range returns lo
    - coin(): value() > 0.5
    """

    seed: int

    def __post_init__(self) -> None:
        self._rng = random.Random(self.seed)
        logger.debug("Initialized SeededRandom with seed=%s", self.seed)

    @classmethod
    def from_settings(cls, seed: Optional[int], use_random_seed: bool = False) -> "SeededRandom":
        if use_random_seed or seed is None:
            seed = time_based_seed()
            logger.info("Random-seed mode; drew seed=%d from the clock", seed)
        return cls(seed)

    def value(self) -> float:
        return self._rng.random()

    def range_int(self, lo: int, hi: int) -> int:
        # One draw per call keeps the stream aligned even for degenerate ranges.
        r = self._rng.random()
        if hi <= lo:
            return lo
        return lo + int(r * (hi - lo))

    def coin(self) -> bool:
        return self.value() > 0.5

    def choice(self, seq: Sequence[Any]) -> Any:
        if not seq:
            raise ValueError("SeededRandom.choice() received an empty sequence")
        return seq[self.range_int(0, len(seq))]


__all__ = ["SeededRandom", "time_based_seed"]
