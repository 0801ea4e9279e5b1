"""Decode one received word and dump the per-round trace as text, CSV and plot."""

from __future__ import annotations

import argparse
import logging
import math
from pathlib import Path
from typing import Iterable, List, Optional

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

from .. import config as global_config
from ..bp import ChannelModel, IterationHistory, decode, graph_names, load_graph

# Keeps priors representable as floats strictly inside (0, 1).
LLR_CLIP = 30.0


def _bits(arr: np.ndarray) -> str:
    return "".join(str(int(b)) for b in arr)


def awgn_llrs(n: int, EbN0_dB: float, rate: float, rng: np.random.Generator) -> np.ndarray:
    """LLRs of an all-zero BPSK codeword after AWGN; positive favours bit 0."""

    ebno_lin = 10 ** (EbN0_dB / 10.0)
    noise_var = 1.0 / (2.0 * rate * ebno_lin)
    symbols = np.ones(n, dtype=np.float64)
    received = symbols + rng.normal(0.0, math.sqrt(noise_var), size=n)
    return np.clip(2.0 * received / noise_var, -LLR_CLIP, LLR_CLIP)


def summarize(history: IterationHistory) -> List[str]:
    lines = []
    for snap in history:
        status = "valid" if snap.is_valid else "invalid"
        lines.append(
            f"Round {snap.index + 1}/{history.round_count()}: codeword={_bits(snap.codeword)} "
            f"syndrome={_bits(snap.syndrome)} ({status})"
        )
    return lines


def write_csv(history: IterationHistory, path: Path) -> None:
    n_vars = history.final_round().belief.size
    header = ["round", "valid", "codeword", "syndrome"] + [f"belief_{v}" for v in range(n_vars)]
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w") as f:
        f.write(",".join(header) + "\n")
        for snap in history:
            values = [str(snap.index), str(int(snap.is_valid)), _bits(snap.codeword), _bits(snap.syndrome)]
            values.extend(f"{b:.6e}" for b in snap.belief)
            f.write(",".join(values) + "\n")


def plot_beliefs(history: IterationHistory, path: Path) -> None:
    beliefs = np.array([snap.belief for snap in history])
    rounds = np.arange(1, beliefs.shape[0] + 1)
    plt.figure(figsize=(6, 4))
    for v in range(beliefs.shape[1]):
        plt.plot(rounds, beliefs[:, v], "o-", label=f"v{v}")
    plt.axhline(0.0, color="k", lw=0.8)
    plt.xlabel("Round")
    plt.ylabel("Belief LLR")
    plt.grid(True, ls="--", alpha=0.4)
    plt.legend(ncol=2, fontsize="small")
    plt.tight_layout()
    path.parent.mkdir(parents=True, exist_ok=True)
    plt.savefig(path, dpi=200)
    plt.close()


def parse_args(argv: Optional[Iterable[str]] = None) -> argparse.Namespace:
    cfg = global_config.DEFAULTS
    parser = argparse.ArgumentParser(description="Trace sum-product LDPC decoding round by round")
    parser.add_argument("--graph", type=str, default=cfg.graph, choices=graph_names())
    parser.add_argument("--rounds", type=int, default=cfg.n_rounds, help="Number of flooding rounds")
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--llr", type=float, nargs="+", help="Channel LLRs, one per variable")
    source.add_argument("--ebno", type=float, help="Draw LLRs from BPSK over AWGN at this Eb/N0 (dB)")
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--out", type=str, help="Optional CSV output path")
    parser.add_argument("--plot", type=str, help="Optional plot path")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args(list(argv) if argv is not None else None)

    if args.rounds < 1:
        parser.error("--rounds must be at least 1")
    return args


def run(args: argparse.Namespace) -> IterationHistory:
    graph = load_graph(args.graph)
    if args.ebno is not None:
        rng = np.random.default_rng(args.seed)
        rate = (graph.n_variables - graph.n_checks) / graph.n_variables
        llrs = awgn_llrs(graph.n_variables, args.ebno, rate, rng)
    elif args.llr is not None:
        llrs = args.llr
    else:
        llrs = global_config.DEFAULTS.initial_llr
    channel = ChannelModel.from_llrs(list(llrs), graph.n_variables)
    return decode(graph, channel, args.rounds)


def main(argv: Optional[Iterable[str]] = None) -> None:
    args = parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    history = run(args)
    for line in summarize(history):
        print(line)
    if args.out:
        write_csv(history, Path(args.out))
        print(f"Saved round trace to {args.out}")
    if args.plot:
        plot_beliefs(history, Path(args.plot))
        print(f"Saved belief plot to {args.plot}")


if __name__ == "__main__":
    main()
