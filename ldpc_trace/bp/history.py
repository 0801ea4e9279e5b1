"""Per-round decoder state, kept for the whole run."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence

import numpy as np


def _frozen(arr: np.ndarray) -> np.ndarray:
    arr = np.array(arr, copy=True)
    arr.flags.writeable = False
    return arr


@dataclass(frozen=True, eq=False)
class RoundSnapshot:
    """Everything computed in one flooding round.

    ``variable_message[c, v]`` is the variable-side value that fed this
    round's check update (the channel LLR in round 0); ``check_message[c, v]``
    is what check ``c`` sent back to ``v``. Both are 0.0 where there is no edge.
    """

    index: int
    variable_message: np.ndarray
    check_message: np.ndarray
    belief: np.ndarray
    codeword: np.ndarray
    syndrome: np.ndarray

    def __post_init__(self) -> None:
        for name in ("variable_message", "check_message", "belief", "codeword", "syndrome"):
            object.__setattr__(self, name, _frozen(getattr(self, name)))

    @property
    def is_valid(self) -> bool:
        return not self.syndrome.any()


class IterationHistory:
    """Fixed-length, index-addressable sequence of round snapshots."""

    def __init__(self, rounds: Sequence[RoundSnapshot]) -> None:
        if not rounds:
            raise ValueError("history needs at least one round")
        for expected, snap in enumerate(rounds):
            if snap.index != expected:
                raise ValueError(f"round {snap.index} stored at position {expected}")
        self._rounds = tuple(rounds)

    def round_count(self) -> int:
        return len(self._rounds)

    def at(self, index: int) -> RoundSnapshot:
        if not (0 <= index < len(self._rounds)):
            raise IndexError(f"round index {index} out of range [0, {len(self._rounds)})")
        return self._rounds[index]

    def final_round(self) -> RoundSnapshot:
        return self._rounds[-1]

    def is_valid_codeword(self, index: int) -> bool:
        return self.at(index).is_valid

    def first_valid_round(self) -> int | None:
        """Index of the earliest round whose syndrome is all zero, if any."""

        for snap in self._rounds:
            if snap.is_valid:
                return snap.index
        return None

    def __len__(self) -> int:
        return len(self._rounds)

    def __iter__(self) -> Iterator[RoundSnapshot]:
        return iter(self._rounds)


__all__ = ["RoundSnapshot", "IterationHistory"]
