import math
from dataclasses import FrozenInstanceError

import numpy as np
import pytest

from ldpc_trace import config
from ldpc_trace.bp import ChannelModel, ParityCheckGraph, decode, load_graph

JOHNSON_LLR = [-0.5, 2.5, -4.0, 5.0, -3.5, 2.5]


@pytest.fixture
def graph() -> ParityCheckGraph:
    return load_graph("johnson_4x6")


def _channel(llrs, n_variables=6) -> ChannelModel:
    return ChannelModel.from_llrs(llrs, n_variables)


def test_converges_on_worked_example(graph):
    history = decode(graph, _channel(JOHNSON_LLR), config.DEFAULTS.n_rounds)
    assert history.round_count() == 8
    final = history.final_round()
    assert final.is_valid
    np.testing.assert_array_equal(final.codeword, [0, 0, 1, 0, 1, 1])
    assert not history.is_valid_codeword(0)


def test_first_round_matches_hand_computation(graph):
    first = decode(graph, _channel(JOHNSON_LLR), 1).at(0)
    assert first.check_message[0, 0] == pytest.approx(2.4217, abs=1e-3)
    assert first.check_message[0, 1] == pytest.approx(-0.4930, abs=1e-3)
    np.testing.assert_allclose(
        first.belief,
        [-0.2676, 5.0334, -3.7676, 2.2783, -6.2217, -0.7173],
        atol=5e-3,
    )
    np.testing.assert_array_equal(first.codeword, [1, 0, 1, 0, 1, 1])


def test_round_zero_seeded_from_channel(graph):
    channel = _channel(JOHNSON_LLR)
    first = decode(graph, channel, 3).at(0)
    llr = channel.llrs()
    for c, v in graph.edges():
        assert first.variable_message[c, v] == pytest.approx(llr[v])
        t = 1.0
        for other in graph.variables_of(c) - {v}:
            t *= math.tanh(llr[other] / 2.0)
        assert first.check_message[c, v] == pytest.approx(math.log((1 + t) / (1 - t)))


def test_decode_is_deterministic(graph):
    a = decode(graph, _channel(JOHNSON_LLR), 8)
    b = decode(graph, _channel(JOHNSON_LLR), 8)
    for ra, rb in zip(a, b):
        for name in ("variable_message", "check_message", "belief", "codeword", "syndrome"):
            np.testing.assert_array_equal(getattr(ra, name), getattr(rb, name))


def test_stored_syndrome_matches_codeword(graph):
    history = decode(graph, _channel([0.3, -1.2, 0.8, -0.1, 2.0, -0.7]), 8)
    for snap in history:
        for c in range(graph.n_checks):
            parity = 0
            for v in graph.variables_of(c):
                parity ^= int(snap.codeword[v])
            assert snap.syndrome[c] == parity
        np.testing.assert_array_equal(snap.codeword, (snap.belief < 0).astype(np.int8))


def test_check_message_excludes_own_variable(graph):
    base = decode(graph, _channel(JOHNSON_LLR), 1).at(0)
    perturbed_llr = list(JOHNSON_LLR)
    perturbed_llr[0] = 3.0
    perturbed = decode(graph, _channel(perturbed_llr), 1).at(0)
    for c in graph.checks_of(0):
        assert perturbed.check_message[c, 0] == base.check_message[c, 0]
    assert perturbed.check_message[0, 1] != base.check_message[0, 1]


def test_variable_message_excludes_own_check(graph):
    channel = _channel(JOHNSON_LLR)
    history = decode(graph, channel, 2)
    prev, nxt = history.at(0), history.at(1)
    llr = channel.llrs()
    for c, v in graph.edges():
        others = graph.checks_of(v) - {c}
        expected = llr[v] + sum(prev.check_message[o, v] for o in others)
        assert nxt.variable_message[c, v] == pytest.approx(expected)
    # Variable 0 sits in checks 0 and 2 only.
    assert nxt.variable_message[0, 0] == pytest.approx(llr[0] + prev.check_message[2, 0])


def test_unconnected_positions_stay_zero(graph):
    mask = graph.mask
    for snap in decode(graph, _channel(JOHNSON_LLR), 4):
        assert not snap.check_message[~mask].any()
        assert not snap.variable_message[~mask].any()


def test_snapshots_are_immutable(graph):
    history = decode(graph, _channel(JOHNSON_LLR), 2)
    snap = history.at(1)
    before = snap.belief.copy()
    with pytest.raises(ValueError):
        snap.belief[0] = 0.0
    with pytest.raises(ValueError):
        snap.check_message[0, 0] = 0.0
    with pytest.raises(FrozenInstanceError):
        snap.codeword = np.zeros(6, dtype=np.int8)
    decode(graph, _channel([1.0] * 6), 2)
    np.testing.assert_array_equal(snap.belief, before)


def test_saturated_check_propagates_infinity():
    # Check 1 touches only variable 1, so its empty tanh product is exactly 1.
    graph = ParityCheckGraph([[1, 1], [0, 1]])
    channel = ChannelModel([0.3, 0.6])
    history = decode(graph, channel, 4)
    first = history.at(0)
    assert first.check_message[1, 1] == np.inf
    assert first.belief[1] == np.inf
    assert first.codeword[1] == 0
    final = history.final_round()
    assert final.belief[0] == np.inf
    np.testing.assert_array_equal(final.codeword, [0, 0])
    assert final.is_valid


def test_decode_rejects_bad_arguments(graph):
    with pytest.raises(ValueError):
        decode(graph, _channel(JOHNSON_LLR), 0)
    with pytest.raises(ValueError):
        decode(graph, ChannelModel([0.5, 0.5]), 4)
