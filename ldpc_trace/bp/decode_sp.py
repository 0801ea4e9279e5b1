"""Flooding sum-product LDPC decoder that records every round."""

from __future__ import annotations

import logging

import numpy as np

from .channel import ChannelModel
from .graph import ParityCheckGraph
from .history import IterationHistory, RoundSnapshot

logger = logging.getLogger(__name__)


def _check_update(graph: ParityCheckGraph, incoming: np.ndarray) -> np.ndarray:
    """Tanh-product rule; each edge excludes its own variable's input."""

    out = np.zeros_like(incoming)
    for c in range(graph.n_checks):
        idx = np.array(sorted(graph.variables_of(c)), dtype=np.intp)
        half_tanh = np.tanh(incoming[c, idx] / 2.0)
        t = np.array([np.prod(np.delete(half_tanh, k)) for k in range(idx.size)])
        out[c, idx] = np.log((1.0 + t) / (1.0 - t))
    return out


def _variable_update(graph: ParityCheckGraph, llr: np.ndarray, check_msg: np.ndarray) -> np.ndarray:
    """Sum rule; each edge excludes its own check's message."""

    out = np.zeros_like(check_msg)
    for v in range(graph.n_variables):
        idx = np.array(sorted(graph.checks_of(v)), dtype=np.intp)
        col = check_msg[idx, v]
        out[idx, v] = [llr[v] + np.sum(np.delete(col, k)) for k in range(idx.size)]
    return out


def decode(graph: ParityCheckGraph, channel: ChannelModel, n_rounds: int) -> IterationHistory:
    """Run ``n_rounds`` flooding rounds and return the full history.

    There is no early exit: every round is computed even after the syndrome
    clears. Saturated messages become +/-inf rather than raising.
    """

    if n_rounds < 1:
        raise ValueError("n_rounds must be at least 1")
    if channel.n_variables != graph.n_variables:
        raise ValueError("channel length mismatch with graph")

    mask = graph.mask
    llr = channel.llrs()
    incoming = np.where(mask, llr[np.newaxis, :], 0.0)
    rounds = []

    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        for r in range(n_rounds):
            check_msg = _check_update(graph, incoming)

            belief = llr + np.where(mask, check_msg, 0.0).sum(axis=0)
            codeword = (belief < 0).astype(np.int8)
            syndrome = graph.syndrome(codeword)

            rounds.append(
                RoundSnapshot(
                    index=r,
                    variable_message=incoming,
                    check_message=check_msg,
                    belief=belief,
                    codeword=codeword,
                    syndrome=syndrome,
                )
            )
            logger.debug("round %d/%d: syndrome weight %d", r + 1, n_rounds, int(syndrome.sum()))

            if r + 1 < n_rounds:
                incoming = _variable_update(graph, llr, check_msg)

    return IterationHistory(rounds)


__all__ = ["decode"]
