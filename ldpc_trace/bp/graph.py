"""Parity-check graphs: the bipartite check/variable structure of a code."""

from __future__ import annotations

from typing import Dict, FrozenSet, List, Sequence, Tuple

import numpy as np


class ParityCheckGraph:
    """Immutable factor graph built from a binary parity-check matrix.

    Rows are checks, columns are variables; a 1 at ``(c, v)`` is an edge.
    """

    def __init__(self, matrix: Sequence[Sequence[int]] | np.ndarray, name: str = "") -> None:
        H = _validate_matrix(matrix)
        H.flags.writeable = False
        self.name = name
        self._H = H
        self._mask = H.astype(bool)
        self._mask.flags.writeable = False
        self._vars_of = tuple(frozenset(np.flatnonzero(H[c]).tolist()) for c in range(H.shape[0]))
        self._checks_of = tuple(frozenset(np.flatnonzero(H[:, v]).tolist()) for v in range(H.shape[1]))

    @property
    def n_checks(self) -> int:
        return self._H.shape[0]

    @property
    def n_variables(self) -> int:
        return self._H.shape[1]

    @property
    def matrix(self) -> np.ndarray:
        """Read-only 0/1 parity-check matrix, shape (n_checks, n_variables)."""

        return self._H

    @property
    def mask(self) -> np.ndarray:
        """Read-only boolean edge mask, same shape as :attr:`matrix`."""

        return self._mask

    def connected(self, check: int, variable: int) -> bool:
        self._check_index(check, variable)
        return bool(self._mask[check, variable])

    def checks_of(self, variable: int) -> FrozenSet[int]:
        self._check_index(None, variable)
        return self._checks_of[variable]

    def variables_of(self, check: int) -> FrozenSet[int]:
        self._check_index(check, None)
        return self._vars_of[check]

    def edges(self) -> List[Tuple[int, int]]:
        rows, cols = np.nonzero(self._H)
        return [(int(c), int(v)) for c, v in zip(rows, cols)]

    def syndrome(self, codeword: np.ndarray) -> np.ndarray:
        """Per-check XOR of the codeword bits each check covers."""

        codeword = np.asarray(codeword)
        if codeword.shape != (self.n_variables,):
            raise ValueError("codeword length mismatch")
        return ((self._H.astype(np.int64) @ (codeword.astype(np.int64) & 1)) % 2).astype(np.int8)

    def _check_index(self, check: int | None, variable: int | None) -> None:
        if check is not None and not (0 <= check < self.n_checks):
            raise IndexError(f"check index {check} out of range")
        if variable is not None and not (0 <= variable < self.n_variables):
            raise IndexError(f"variable index {variable} out of range")

    def __repr__(self) -> str:
        return f"ParityCheckGraph(name={self.name!r}, n_checks={self.n_checks}, n_variables={self.n_variables})"


def _validate_matrix(matrix: Sequence[Sequence[int]] | np.ndarray) -> np.ndarray:
    if not isinstance(matrix, np.ndarray):
        rows = [list(row) for row in matrix]
        if not rows:
            raise ValueError("parity-check matrix has no rows")
        if len({len(row) for row in rows}) != 1:
            raise ValueError("parity-check matrix rows have different lengths")
        matrix = np.array(rows)
    if matrix.ndim != 2:
        raise ValueError("parity-check matrix must be 2D")
    if matrix.shape[0] == 0 or matrix.shape[1] == 0:
        raise ValueError("parity-check matrix must have at least one check and one variable")
    if not np.all((matrix == 0) | (matrix == 1)):
        raise ValueError("parity-check matrix must be binary")

    H = matrix.astype(np.int8)
    empty_checks = np.flatnonzero(~H.any(axis=1))
    if empty_checks.size:
        raise ValueError(f"checks with no variables: {empty_checks.tolist()}")
    empty_vars = np.flatnonzero(~H.any(axis=0))
    if empty_vars.size:
        raise ValueError(f"variables in no check: {empty_vars.tolist()}")
    return H


_GRAPHS: Dict[str, np.ndarray] = {
    # 4 checks x 6 variables, column weight 2, row weight 3
    "johnson_4x6": np.array(
        [
            [1, 1, 0, 1, 0, 0],
            [0, 1, 1, 0, 1, 0],
            [1, 0, 0, 0, 1, 1],
            [0, 0, 1, 1, 0, 1],
        ],
        dtype=np.int8,
    ),
}


def load_graph(name: str) -> ParityCheckGraph:
    if name not in _GRAPHS:
        raise ValueError(f"Unknown graph: {name}")
    return ParityCheckGraph(_GRAPHS[name], name=name)


def graph_names() -> List[str]:
    return sorted(_GRAPHS)


__all__ = ["ParityCheckGraph", "load_graph", "graph_names"]
