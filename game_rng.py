"""Seedable random source shared by dungeon generation and the simulation.

All randomness in the game flows through a single :class:`GameRNG` so that a
seed fully determines a generated dungeon.  The generator is backed by
``numpy.random.default_rng`` and exposes the small set of helpers the rest of
the code base relies on: inclusive integer ranges, floats, weighted booleans
and weighted choices.
"""

from __future__ import annotations

import random
from typing import Any, Dict, Optional, Sequence, Union

import numpy as np
import structlog

log = structlog.get_logger()


class GameRNG:
    def __init__(self, seed: Optional[int] = None) -> None:
        self.initial_seed = seed if seed is not None else random.randint(0, 2**32 - 1)
        self.rng = np.random.default_rng(self.initial_seed)
        log.debug("GameRNG seeded", seed=self.initial_seed)

    # ------------------------------------------------------------------
    # basic random helpers
    # ------------------------------------------------------------------
    def get_int(self, a: int, b: int) -> int:
        """Return an integer in the inclusive range ``[a, b]``."""
        if a > b:
            raise ValueError(f"empty integer range: {a} > {b}")
        return int(self.rng.integers(a, b + 1))

    def get_float(self, a: float = 0.0, b: float = 1.0) -> float:
        if a > b:
            raise ValueError(f"empty float range: {a} > {b}")
        return a + (b - a) * float(self.rng.random())

    # ------------------------------------------------------------------
    # weighted helpers
    # ------------------------------------------------------------------
    def coin_flip(
        self, num_flips: int = 1, heads_probability: float = 0.5
    ) -> Union[str, list[str]]:
        if not 0.0 <= heads_probability <= 1.0:
            raise ValueError("probability out of range")
        results = [
            "heads" if self.get_float() < heads_probability else "tails"
            for _ in range(num_flips)
        ]
        return results[0] if num_flips == 1 else results

    def chance(self, probability: float) -> bool:
        """Weighted boolean: ``True`` with the given probability."""
        return self.coin_flip(heads_probability=probability) == "heads"

    def weighted_choice(self, items: Sequence[Any], weights: Sequence[float]) -> Any:
        if len(items) != len(weights):
            raise ValueError("items/weights length mismatch")
        if not items:
            raise ValueError("items empty")
        total = float(sum(weights))
        if total <= 0:
            raise ValueError("weight sum must be positive")

        cdf = np.cumsum(np.asarray(weights, dtype=float))
        cdf[-1] = total
        r = self.get_float(0.0, total)
        idx = int(np.searchsorted(cdf, r, side="right"))
        return items[min(idx, len(items) - 1)]

    # ------------------------------------------------------------------
    # state management
    # ------------------------------------------------------------------
    def get_state(self) -> Dict[str, Any]:
        return {
            "random_state": self.rng.bit_generator.state,
            "initial_seed": self.initial_seed,
        }

    def set_state(self, state: Dict[str, Any]) -> None:
        if "random_state" in state:
            self.rng.bit_generator.state = state["random_state"]
        if "initial_seed" in state:
            self.initial_seed = state["initial_seed"]

    def reset(self, seed: Optional[int] = None) -> None:
        self.initial_seed = seed if seed is not None else random.randint(0, 2**32 - 1)
        self.rng = np.random.default_rng(self.initial_seed)
        log.debug("GameRNG reset", seed=self.initial_seed)


__all__ = ["GameRNG"]
