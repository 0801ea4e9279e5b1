"""Interactive decoding session: cursor, viewed round, priors and history."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from . import config
from .bp import ChannelModel, IterationHistory, ParityCheckGraph, RoundSnapshot, decode, load_graph

logger = logging.getLogger(__name__)


class Command(Enum):
    """Commands a front end may forward to the session."""

    CURSOR_LEFT = "cursor_left"
    CURSOR_RIGHT = "cursor_right"
    ROUND_PREV = "round_prev"
    ROUND_NEXT = "round_next"
    PRIOR_UP = "prior_up"
    PRIOR_DOWN = "prior_down"
    QUIT = "quit"


@dataclass
class Session:
    graph: ParityCheckGraph
    channel: ChannelModel
    n_rounds: int
    cursor: int = 0
    page: int = 0
    history: IterationHistory = field(init=False)

    def __post_init__(self) -> None:
        if self.channel.n_variables != self.graph.n_variables:
            raise ValueError("channel length mismatch with graph")
        self.rerun()

    @classmethod
    def from_config(cls, cfg: config.DecoderConfig | None = None) -> "Session":
        cfg = cfg or config.get_config()
        graph = load_graph(cfg.graph)
        channel = ChannelModel.from_llrs(
            cfg.initial_llr,
            graph.n_variables,
            step=cfg.prior_step,
            p_min=cfg.prior_min,
            p_max=cfg.prior_max,
        )
        return cls(graph=graph, channel=channel, n_rounds=cfg.n_rounds)

    def rerun(self) -> None:
        """Recompute the whole history from the current priors."""

        self.history = decode(self.graph, self.channel, self.n_rounds)
        logger.debug("decoded %d rounds at prior revision %d", self.n_rounds, self.channel.revision)

    def current_round(self) -> RoundSnapshot:
        return self.history.at(self.page)

    def apply(self, command: Command) -> bool:
        """Apply one command; returns False once the session should end."""

        if not isinstance(command, Command):
            raise ValueError(f"Unknown command: {command!r}")
        logger.debug("command %s (cursor=%d, page=%d)", command.value, self.cursor, self.page)

        n_vars = self.graph.n_variables
        if command is Command.QUIT:
            return False
        if command is Command.CURSOR_LEFT:
            self.cursor = (self.cursor - 1) % n_vars
        elif command is Command.CURSOR_RIGHT:
            self.cursor = (self.cursor + 1) % n_vars
        elif command is Command.ROUND_PREV:
            self.page = max(self.page - 1, 0)
        elif command is Command.ROUND_NEXT:
            self.page = min(self.page + 1, self.n_rounds - 1)
        elif command is Command.PRIOR_UP:
            self.channel.nudge(self.cursor, +1)
            self.rerun()
        elif command is Command.PRIOR_DOWN:
            self.channel.nudge(self.cursor, -1)
            self.rerun()
        return True


__all__ = ["Command", "Session"]
