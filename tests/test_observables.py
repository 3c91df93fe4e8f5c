"""
Tests for QLAB observables: entanglement, marginals and sampling.
"""

import pytest
import numpy as np

from qlab.core.circuit import Circuit
from qlab.core.errors import InvalidQubitIndexError
from qlab.core.graph import EntanglementGraph
from qlab.core.statevector import as_state, basis_state, simulate, zero_state
from qlab.observables.entanglement import (
    TSIRELSON_BOUND,
    analyze,
    bell_report,
    chsh_value,
    concurrence,
    identify_bell_state,
    mutual_information,
    qubit_entropies,
    qubit_entropy,
    von_neumann_entropy,
)
from qlab.observables.marginals import (
    extract_joint_marginal,
    extract_marginals,
    probability_zero,
    qubit_state,
    qubit_states,
)
from qlab.observables.sampler import (
    MeasurementSampler,
    counts_to_expectations,
    empirical_frequencies,
    histogram_to_counts,
    sample_histogram,
    sample_indices,
)
from qlab.utils.sparse import MutualInformationMatrix


def bell_phi_plus():
    return simulate(Circuit(2).h(0).cx(0, 1))


def ghz(n):
    circuit = Circuit(n).h(0)
    for q in range(n - 1):
        circuit = circuit.cx(q, q + 1)
    return simulate(circuit)


class FixedDraws:
    """Generator stand-in returning preset uniform draws."""

    def __init__(self, draws):
        self.draws = np.asarray(draws, dtype=float)

    def random(self, size):
        return self.draws[:size]


class TestEntropy:
    """Tests for single-qubit entropy."""

    def test_product_state(self):
        entropies = qubit_entropies(simulate(Circuit(3).h(0).x(1).t(2)))
        assert entropies == [0.0, 0.0, 0.0]

    def test_bell_state(self):
        assert np.allclose(qubit_entropies(bell_phi_plus()), [1.0, 1.0])

    def test_partial_entanglement(self):
        a = np.pi / 8
        state = as_state([np.cos(a), 0, 0, np.sin(a)])
        p = np.cos(a) ** 2
        expected = -(p * np.log2(p) + (1 - p) * np.log2(1 - p))
        assert np.allclose(qubit_entropies(state), [expected, expected])

    def test_single_qubit_entropy_is_a_float(self):
        value = qubit_entropy(bell_phi_plus(), 1)
        assert isinstance(value, float)
        assert np.isclose(value, 1.0)

    def test_larger_reduction_has_no_entropy(self):
        from qlab.core.density_matrix import reduce

        assert von_neumann_entropy(reduce(bell_phi_plus(), [0, 1])) is None

    def test_entropy_bounds(self):
        from qlab.utils.validation import random_circuit

        state = simulate(random_circuit(4, depth=5, seed=3))
        for s in qubit_entropies(state):
            assert 0.0 <= s <= 1.0 + 1e-12


class TestMutualInformation:
    """Tests for pairwise mutual information."""

    def test_two_qubit_bell(self):
        mi = mutual_information(bell_phi_plus())
        assert list(mi) == [(0, 1)]
        assert np.isclose(mi[(0, 1)], 2.0)

    def test_three_qubit_ghz(self):
        mi = mutual_information(ghz(3))
        assert set(mi) == {(0, 1), (0, 2), (1, 2)}
        for value in mi.values():
            assert np.isclose(value, 1.0)

    def test_three_qubit_partial(self):
        # Bell pair on (0, 1), qubit 2 untouched
        mi = mutual_information(simulate(Circuit(3).h(0).cx(0, 1)))
        assert np.isclose(mi[(0, 1)], 2.0)
        assert np.isclose(mi[(0, 2)], 0.0)
        assert np.isclose(mi[(1, 2)], 0.0)

    def test_unavailable_registers(self):
        assert mutual_information(ghz(4)) == {}
        assert mutual_information(zero_state(1)) == {}

    def test_non_negative(self):
        from qlab.utils.validation import random_circuit

        for seed in range(4):
            mi = mutual_information(simulate(random_circuit(3, depth=4, seed=seed)))
            assert all(v >= 0.0 for v in mi.values())


class TestBellMetrics:
    """Tests for concurrence, CHSH and Bell identification."""

    def test_concurrence(self):
        assert np.isclose(concurrence(bell_phi_plus()), 1.0)
        assert np.isclose(concurrence(simulate(Circuit(2).h(0).h(1))), 0.0, atol=1e-6)

        a = np.pi / 8
        state = as_state([np.cos(a), 0, 0, np.sin(a)])
        assert np.isclose(concurrence(state), np.sin(2 * a))

    def test_concurrence_two_qubits_only(self):
        assert concurrence(ghz(3)) is None
        assert bell_report(ghz(3)) is None

    def test_chsh(self):
        assert np.isclose(chsh_value(0.0), 2.0)
        assert np.isclose(chsh_value(1.0), TSIRELSON_BOUND)

    @pytest.mark.parametrize("amplitudes,expected", [
        ([1, 0, 0, 1], "phi_plus"),
        ([1, 0, 0, -1], "phi_minus"),
        ([0, 1, 1, 0], "psi_plus"),
        ([0, 1, -1, 0], "psi_minus"),
        ([0, -1, 1, 0], "psi_minus"),
        ([1j, 0, 0, 1j], "phi_plus"),
    ])
    def test_identify_bell_state(self, amplitudes, expected):
        state = as_state(np.array(amplitudes) / np.sqrt(2))
        assert identify_bell_state(state) == expected

    def test_not_a_bell_state(self):
        assert identify_bell_state(zero_state(2)) is None
        a = np.pi / 8
        assert identify_bell_state(as_state([np.cos(a), 0, 0, np.sin(a)])) is None
        assert identify_bell_state(ghz(3)) is None

    def test_bell_report(self):
        report = bell_report(bell_phi_plus())
        assert np.isclose(report.concurrence, 1.0)
        assert np.isclose(report.chsh, 2 * np.sqrt(2))
        assert report.bell_state == "phi_plus"
        assert report.violates_classical
        assert "Φ⁺" in report.bell_label

        product = bell_report(zero_state(2))
        assert not product.violates_classical
        assert product.bell_label is None


class TestAnalyze:
    """Tests for the combined entanglement report."""

    def test_product_state(self):
        report = analyze(simulate(Circuit(3).h(0).h(1)))
        assert report.is_product_state
        assert report.mutual_information_available
        assert report.bell is None

    def test_four_qubits(self):
        report = analyze(ghz(4))
        assert not report.mutual_information_available
        assert report.mutual_information == {}
        assert np.allclose(report.entropies, [1.0] * 4)

    def test_graph_and_matrix(self):
        report = analyze(ghz(3))
        graph = report.to_graph()
        assert graph.num_edges == 3
        assert graph.connected_clusters() == [{0, 1, 2}]

        dense = report.to_matrix().to_dense()
        assert np.allclose(dense, dense.T)
        assert np.isclose(dense[0, 2], 1.0)
        assert np.isclose(dense[1, 1], 0.0)


class TestEntanglementGraph:
    """Tests for EntanglementGraph."""

    def test_threshold_filters_edges(self):
        graph = EntanglementGraph.from_values(
            [1.0, 1.0, 0.0],
            {(0, 1): 2.0, (0, 2): 1e-9, (1, 2): 0.0},
        )
        assert graph.num_edges == 1
        assert graph.has_edge(1, 0)
        assert not graph.has_edge(0, 2)
        assert graph.neighbors(0) == {1}
        assert graph.connected_clusters() == [{0, 1}, {2}]
        assert graph.entangled_qubits() == {0, 1}

    def test_strongest_pair(self):
        graph = EntanglementGraph.from_values(
            [0.5, 0.9, 0.7],
            {(0, 1): 0.3, (1, 2): 0.8},
        )
        strongest = graph.strongest_pair()
        assert strongest.key == (1, 2)
        assert np.isclose(graph.total_mutual_information, 1.1)
        assert [e.key for e in graph.iter_edges()] == [(0, 1), (1, 2)]

    def test_node_and_edge_attributes(self):
        graph = EntanglementGraph.from_values([1.0, 1.0], {(0, 1): 2.0})
        assert graph.graph.nodes[0]["entropy"] == 1.0
        adjacency = graph.to_adjacency_matrix()
        assert np.allclose(adjacency, [[0.0, 2.0], [2.0, 0.0]])

    def test_empty_graph(self):
        graph = EntanglementGraph(num_qubits=2)
        assert graph.strongest_pair() is None
        assert graph.entropies == [0.0, 0.0]

    def test_entropy_count_checked(self):
        with pytest.raises(ValueError):
            EntanglementGraph(num_qubits=3, entropies=[0.0, 0.0])


class TestMutualInformationMatrix:
    """Tests for MutualInformationMatrix."""

    def test_symmetric_storage(self):
        matrix = MutualInformationMatrix(num_qubits=3)
        matrix.set_value(2, 0, 0.4)
        assert matrix.get_value(0, 2) == 0.4
        assert matrix.has_value(2, 0)
        assert matrix.get_value(0, 1) is None

        sp = matrix.to_scipy_sparse()
        assert sp.shape == (3, 3)
        assert sp.nnz == 2

    def test_iteration_and_removal(self):
        matrix = MutualInformationMatrix.from_mapping(3, {(1, 2): 0.1, (0, 1): 0.2})
        assert list(matrix.iter_pairs()) == [(0, 1, 0.2), (1, 2, 0.1)]
        assert matrix.remove_value(2, 1)
        assert not matrix.remove_value(2, 1)
        assert matrix.num_pairs == 1

    def test_same_qubit_rejected(self):
        with pytest.raises(ValueError):
            MutualInformationMatrix(num_qubits=2).set_value(1, 1, 0.5)


class TestMarginals:
    """Tests for per-qubit marginals and Bloch angles."""

    def test_basis_states(self):
        zero = qubit_state(zero_state(1), 0)
        assert np.isclose(zero.theta, 0.0)
        assert zero.phi == 0.0
        assert np.allclose(zero.bloch_coordinates, (0, 0, 1))

        one = qubit_state(basis_state(1, 1), 0)
        assert np.isclose(one.theta, np.pi)
        assert np.isclose(one.probability_one, 1.0)

    def test_superposition(self):
        state = qubit_state(simulate(Circuit(1).h(0)), 0)
        assert np.isclose(state.theta, np.pi / 2)
        assert np.isclose(state.probability_zero, 0.5)

    def test_phase_is_not_recovered(self):
        # |+i> and |+> reduce to the same displayed state
        plus_i = qubit_state(simulate(Circuit(1).h(0).s(0)), 0)
        assert plus_i.phi == 0.0
        assert np.allclose(plus_i.bloch_coordinates, (1, 0, 0), atol=1e-12)

    def test_all_qubits(self):
        states = qubit_states(simulate(Circuit(3).x(1)))
        assert [round(s.probability_one) for s in states] == [0, 1, 0]

    def test_probability_clamped(self):
        state = np.array([1.0 + 1e-9, 0.0], dtype=complex)
        assert probability_zero(state, 0) == 1.0

    def test_marginals(self):
        marginals = extract_marginals(bell_phi_plus())
        assert np.allclose(marginals[0], [0.5, 0.5])
        assert np.allclose(marginals[1], [0.5, 0.5])

        joint = extract_joint_marginal(bell_phi_plus(), 0, 1)
        assert np.allclose(joint, [[0.5, 0.0], [0.0, 0.5]])

    def test_invalid_qubit(self):
        with pytest.raises(InvalidQubitIndexError):
            qubit_state(zero_state(2), 2)
        with pytest.raises(InvalidQubitIndexError):
            extract_joint_marginal(zero_state(2), 1, 1)


class TestSampling:
    """Tests for measurement sampling."""

    def test_inverse_transform(self):
        state = as_state([0.5, 0.5])
        # cdf = [0.25, 0.5]; draws past the total mass fall back to the last index
        outcomes = sample_indices(state, 4, rng=FixedDraws([0.0, 0.25, 0.49, 0.99]))
        assert list(outcomes) == [0, 1, 1, 1]

    def test_deterministic_state(self):
        histogram = sample_histogram(basis_state(2, 2), 500, seed=0)
        assert list(histogram) == [0, 0, 500, 0]

    def test_zero_shots(self):
        assert list(sample_histogram(zero_state(1), 0, seed=0)) == [0, 0]
        with pytest.raises(ValueError):
            sample_indices(zero_state(1), -1)

    def test_seeded_runs_repeat(self):
        state = simulate(Circuit(2).h(0).h(1))
        first = sample_histogram(state, 200, seed=5)
        second = sample_histogram(state, 200, seed=5)
        assert np.array_equal(first, second)

    def test_bell_convergence(self):
        sampler = MeasurementSampler(seed=11)
        state = bell_phi_plus()
        for _ in range(10):
            histogram = sampler.sample(state, 1000, accumulate=True)
        assert sampler.total_shots == 10000
        freqs = empirical_frequencies(histogram)
        assert np.allclose(freqs, [0.5, 0.0, 0.0, 0.5], atol=0.05)

    def test_convergence(self):
        state = ghz(3)
        histogram = sample_histogram(state, 10000, seed=7)
        freqs = empirical_frequencies(histogram)
        assert np.allclose(freqs, np.abs(state) ** 2, atol=0.05)
        assert histogram[1:7].sum() == 0

    def test_histogram_accumulates_on_copy(self):
        base = np.array([3, 0])
        updated = sample_histogram(zero_state(1), 2, histogram=base, seed=0)
        assert list(updated) == [5, 0]
        assert list(base) == [3, 0]
        with pytest.raises(ValueError):
            sample_histogram(zero_state(1), 2, histogram=np.zeros(4))

    def test_empirical_frequencies_empty(self):
        assert np.allclose(empirical_frequencies(np.zeros(4)), 0.0)


class TestMeasurementSampler:
    """Tests for MeasurementSampler."""

    def test_accumulate_on_same_state(self):
        sampler = MeasurementSampler(seed=1)
        state = bell_phi_plus()
        sampler.sample(state, 100)
        assert sampler.total_shots == 100
        sampler.sample(state, 50, accumulate=True)
        assert sampler.total_shots == 150
        sampler.sample(state, 50)
        assert sampler.total_shots == 50

    def test_reset_on_state_change(self):
        sampler = MeasurementSampler(seed=1)
        sampler.sample(bell_phi_plus(), 100)
        histogram = sampler.sample(zero_state(2), 40, accumulate=True)
        assert sampler.total_shots == 40
        assert list(histogram) == [40, 0, 0, 0]

    def test_observe(self):
        sampler = MeasurementSampler(seed=1)
        assert sampler.histogram is None
        assert sampler.observe(zero_state(1))
        assert not sampler.observe(zero_state(1))
        assert sampler.observe(basis_state(1, 1))

    def test_histogram_is_a_copy(self):
        sampler = MeasurementSampler(seed=1)
        sampler.sample(zero_state(1), 10)
        sampler.histogram[0] = 0
        assert sampler.total_shots == 10

    def test_explicit_reset(self):
        sampler = MeasurementSampler(seed=1)
        sampler.sample(zero_state(1), 10)
        sampler.reset()
        assert sampler.total_shots == 0
        assert sampler.histogram is None


class TestCounts:
    """Tests for count conversion."""

    def test_histogram_to_counts(self):
        counts = histogram_to_counts(np.array([0, 3, 0, 5]), 2)
        assert counts == {"01": 3, "11": 5}

    def test_expectations(self):
        counts = {"00": 50, "11": 50}
        expectations = counts_to_expectations(counts, ["Z0", "Z0Z1", "X0"])
        assert np.isclose(expectations["Z0"], 0.0)
        assert np.isclose(expectations["Z0Z1"], 1.0)
        assert expectations["X0"] == 1.0

    def test_expectation_bit_order(self):
        # Qubit 0 is the rightmost character
        expectations = counts_to_expectations({"01": 10}, ["Z0", "Z1"])
        assert np.isclose(expectations["Z0"], -1.0)
        assert np.isclose(expectations["Z1"], 1.0)

    def test_no_counts(self):
        assert counts_to_expectations({}, ["Z0"]) == {"Z0": 0.0}


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
