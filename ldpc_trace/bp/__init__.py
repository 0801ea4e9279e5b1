"""Sum-product LDPC decoding: graph, channel model, engine, round history."""

from .graph import ParityCheckGraph, load_graph, graph_names
from .channel import ChannelModel, l_to_p, p_to_l
from .history import IterationHistory, RoundSnapshot
from .decode_sp import decode

__all__ = [
    "ParityCheckGraph",
    "load_graph",
    "graph_names",
    "ChannelModel",
    "l_to_p",
    "p_to_l",
    "IterationHistory",
    "RoundSnapshot",
    "decode",
]
