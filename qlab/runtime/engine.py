"""
QLAB simulation runtime.

Ties the engine and the observers together for one circuit. The state is
recomputed from |0...0⟩ whenever the circuit changes; derived values are
computed on demand and never cached across a circuit change.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import numpy as np

from qlab.core.circuit import Circuit
from qlab.core.density_matrix import ReducedDensityMatrix, reduce
from qlab.core.io_spec import SamplerSpec, SimulatorConfig
from qlab.core.statevector import amplitude_table, check_normalized, simulate
from qlab.observables.entanglement import EntanglementReport, analyze
from qlab.observables.marginals import QubitState, qubit_states
from qlab.observables.sampler import MeasurementSampler, histogram_to_counts
from qlab.runtime.unitary import build_unitary

logger = logging.getLogger(__name__)


@dataclass
class ExecutionResult:
    """
    Result of simulating a circuit.

    Attributes:
        amplitudes: Final amplitude vector
        qubit_states: Per-qubit reduced state (P0, Bloch angles)
        entanglement: Entropy, mutual information and Bell metrics
        histogram: Measurement counts per basis index (if shots were taken)
        metadata: Execution metadata
    """
    amplitudes: np.ndarray
    qubit_states: List[QubitState]
    entanglement: EntanglementReport
    histogram: Optional[np.ndarray] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def num_qubits(self) -> int:
        return len(self.qubit_states)

    @property
    def probabilities(self) -> np.ndarray:
        return np.abs(self.amplitudes) ** 2

    def probability(self, index: int) -> float:
        return float(self.probabilities[index])

    @property
    def counts(self) -> Dict[str, int]:
        if self.histogram is None:
            return {}
        return histogram_to_counts(self.histogram, self.num_qubits)


class CircuitSimulator:
    """
    Runtime for one circuit on one register.

    Usage:
        sim = CircuitSimulator(Circuit(2).h(0).cx(0, 1))
        result = sim.execute(shots=1000)
        print(result.entanglement.bell)
    """

    def __init__(self, circuit: Circuit, config: Optional[SimulatorConfig] = None):
        self.config = config or SimulatorConfig()
        self.sampler = MeasurementSampler(seed=self.config.seed)
        self._circuit: Optional[Circuit] = None
        self._state: Optional[np.ndarray] = None
        self.set_circuit(circuit)

    @property
    def circuit(self) -> Circuit:
        return self._circuit

    @property
    def num_qubits(self) -> int:
        return self._circuit.num_qubits

    @property
    def state(self) -> np.ndarray:
        """Current amplitude vector (a copy)."""
        return self._state.copy()

    def set_circuit(self, circuit: Circuit) -> None:
        """Replace the circuit, recompute the state from scratch and drop stale counts."""
        if circuit.num_qubits > self.config.max_qubits:
            circuit = Circuit(circuit.num_qubits, circuit.gates, self.config.max_qubits)
        state = simulate(circuit)
        check_normalized(state, self.config.norm_tolerance)
        self._circuit = circuit
        self._state = state
        self.sampler.observe(state)
        logger.debug("Circuit set: %s", circuit)

    def qubit_states(self) -> List[QubitState]:
        return qubit_states(self._state)

    def reduced_density_matrix(self, keep) -> ReducedDensityMatrix:
        return reduce(self._state, keep, max_qubits=self.config.max_reduced_qubits)

    def entanglement(self) -> EntanglementReport:
        return analyze(self._state)

    def sample(self, shots: int, accumulate: bool = False) -> np.ndarray:
        return self.sampler.sample(self._state, shots, accumulate=accumulate)

    def unitary(self) -> np.ndarray:
        return build_unitary(self._circuit, max_qubits=self.config.max_unitary_qubits)

    def amplitude_table(self, min_probability: float = 0.0) -> List[Dict[str, object]]:
        return amplitude_table(self._state, min_probability)

    def execute(
        self,
        shots: int = 0,
        accumulate: bool = False,
        sampler_spec: Optional[SamplerSpec] = None,
    ) -> ExecutionResult:
        """
        Collect amplitudes, per-qubit states, entanglement and (optionally) counts.

        Args:
            shots: Number of measurement shots (0 = no sampling)
            accumulate: Add to the counts of earlier runs on the same state
            sampler_spec: Overrides ``shots`` and ``accumulate`` when given

        Returns:
            ExecutionResult
        """
        if sampler_spec is not None:
            shots, accumulate = sampler_spec.shots, sampler_spec.accumulate

        histogram = None
        if shots > 0:
            histogram = self.sample(shots, accumulate=accumulate)

        return ExecutionResult(
            amplitudes=self.state,
            qubit_states=self.qubit_states(),
            entanglement=self.entanglement(),
            histogram=histogram,
            metadata={
                "num_qubits": self.num_qubits,
                "num_gates": len(self._circuit),
                "shots": shots,
                "total_shots": self.sampler.total_shots if histogram is not None else 0,
            },
        )
