"""Seedable RNG wrapper for deterministic map generation and duels."""

import random
from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")


class GameRNG:
    """Wrapper around Python's random.Random for deterministic game behavior.

    Map seeding, region growth, question draws, the starting player and
    default player colours all go through one instance so that a game
    replays identically from the same seed.
    """

    def __init__(self, seed: int | None = None):
        """Initialize RNG with given seed.

        Args:
            seed: Integer seed, or None for an OS-seeded generator
        """
        self.seed = seed
        self.rng = random.Random(seed)

    def randrange(self, stop: int) -> int:
        """Return random integer in range [0, stop)."""
        return self.rng.randrange(stop)

    def choice(self, seq: Sequence[T]) -> T:
        """Choose random element from non-empty sequence.

        Args:
            seq: Sequence to choose from

        Returns:
            Random element from sequence
        """
        return self.rng.choice(seq)

    def shuffle(self, seq: list) -> None:
        """Shuffle list in place (Fisher-Yates)."""
        self.rng.shuffle(seq)

    def color(self) -> str:
        """Return a random ``#RRGGBB`` colour string."""
        return "#" + "".join(self.rng.choice("0123456789ABCDEF") for _ in range(6))

    def get_state(self):
        """Get the current state of the RNG for serialization.

        Returns:
            RNG state tuple that can be used with set_state
        """
        return self.rng.getstate()

    def set_state(self, state):
        """Set the state of the RNG for deserialization.

        JSON round-trips turn the state tuple into nested lists, so both
        shapes are accepted.

        Args:
            state: RNG state from get_state (tuple or list form)
        """
        if isinstance(state, list):
            state = (state[0], tuple(state[1]), state[2])
        self.rng.setstate(state)
