"""Channel model: per-variable priors and their log-likelihood ratios."""

from __future__ import annotations

import logging
import math
from typing import Sequence

import numpy as np

from .. import config

logger = logging.getLogger(__name__)

# Slack for the grid snap so 0.57 * 100 == 56.999... still floors to 57.
_SNAP_EPS = 1e-9


def l_to_p(llr: float) -> float:
    """Logistic map from an LLR to a probability."""

    if llr >= 0:
        return 1.0 / (1.0 + math.exp(-llr))
    e = math.exp(llr)
    return e / (1.0 + e)


def p_to_l(p: float) -> float:
    """Logit map from a probability in (0, 1) to an LLR."""

    if not (0.0 < p < 1.0):
        raise ValueError("probability must lie strictly inside (0, 1)")
    return math.log(p / (1.0 - p))


class ChannelModel:
    """Holds the mutable channel priors of every variable.

    LLRs are never stored; they are derived from the priors on demand.
    """

    def __init__(
        self,
        priors: Sequence[float] | np.ndarray,
        step: float | None = None,
        p_min: float | None = None,
        p_max: float | None = None,
    ) -> None:
        cfg = config.DEFAULTS
        priors = np.asarray(priors, dtype=np.float64)
        if priors.ndim != 1 or priors.size == 0:
            raise ValueError("priors must be a non-empty 1D sequence")
        if np.any(priors <= 0.0) or np.any(priors >= 1.0):
            raise ValueError("priors must lie strictly inside (0, 1)")
        self.step = cfg.prior_step if step is None else float(step)
        self.p_min = cfg.prior_min if p_min is None else float(p_min)
        self.p_max = cfg.prior_max if p_max is None else float(p_max)
        if not (0.0 < self.p_min < self.p_max < 1.0):
            raise ValueError("prior clamp range must satisfy 0 < p_min < p_max < 1")
        self._prior = priors.copy()
        self.revision = 0

    @classmethod
    def from_llrs(cls, llrs: Sequence[float], n_variables: int, **kwargs) -> "ChannelModel":
        """Build priors from channel LLRs; variables past the end get 0.5."""

        if len(llrs) > n_variables:
            raise ValueError("more LLRs than variables")
        priors = [l_to_p(float(l)) for l in llrs]
        priors.extend([0.5] * (n_variables - len(priors)))
        return cls(priors, **kwargs)

    @property
    def n_variables(self) -> int:
        return self._prior.size

    @property
    def priors(self) -> np.ndarray:
        return self._prior.copy()

    def prior(self, variable: int) -> float:
        self._check_variable(variable)
        return float(self._prior[variable])

    def llr_of(self, variable: int) -> float:
        self._check_variable(variable)
        return p_to_l(float(self._prior[variable]))

    def llrs(self) -> np.ndarray:
        p = self._prior
        return np.log(p / (1.0 - p))

    def nudge(self, variable: int, direction: int) -> float:
        """Move one prior by a single grid step and return the new value.

        The prior is first floored to the grid, then stepped and clamped, so
        repeated up/down cycles land on the same grid points. Any decode
        result computed before the call is stale afterwards.
        """

        self._check_variable(variable)
        if direction not in (1, -1):
            raise ValueError("direction must be +1 or -1")
        scale = round(1.0 / self.step)
        ticks = math.floor(self._prior[variable] * scale + _SNAP_EPS) + direction
        lo = round(self.p_min * scale)
        hi = round(self.p_max * scale)
        ticks = min(max(ticks, lo), hi)
        self._prior[variable] = ticks / scale
        self.revision += 1
        logger.debug("prior[%d] -> %.2f (revision %d)", variable, self._prior[variable], self.revision)
        return float(self._prior[variable])

    def _check_variable(self, variable: int) -> None:
        if not (0 <= variable < self._prior.size):
            raise IndexError(f"variable index {variable} out of range")


__all__ = ["ChannelModel", "l_to_p", "p_to_l"]
