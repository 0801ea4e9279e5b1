"""Central configuration defaults for ldpc_trace."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass
class DecoderConfig:
    graph: str = "johnson_4x6"
    # Channel LLRs from the worked example in Johnson, "Introducing LDPC codes"
    initial_llr: List[float] = field(default_factory=lambda: [-0.5, 2.5, -4.0, 5.0, -3.5, 2.5])
    n_rounds: int = 8
    prior_step: float = 0.01
    prior_min: float = 0.01
    prior_max: float = 0.99


DEFAULTS = DecoderConfig()


def get_config() -> DecoderConfig:
    """Return a copy of the default configuration."""

    cfg = DecoderConfig(**DEFAULTS.__dict__)
    cfg.initial_llr = list(DEFAULTS.initial_llr)
    return cfg
