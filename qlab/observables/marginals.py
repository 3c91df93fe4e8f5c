"""
Single-qubit marginals and Bloch angles for QLAB.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

import numpy as np

from qlab.core.errors import InvalidQubitIndexError
from qlab.core.statevector import num_qubits_of, probabilities


@dataclass(frozen=True)
class QubitState:
    """
    Reduced single-qubit state as shown on a Bloch sphere.

    ``phi`` is always 0: only P(|0⟩) is available after the reduction,
    so the azimuth cannot be recovered.
    """
    theta: float
    phi: float
    probability_zero: float
    probability_one: float

    @property
    def bloch_coordinates(self):
        """Cartesian point (x, y, z) on the unit sphere for (theta, phi)."""
        return (
            float(np.sin(self.theta) * np.cos(self.phi)),
            float(np.sin(self.theta) * np.sin(self.phi)),
            float(np.cos(self.theta)),
        )


def _check_qubit(qubit: int, num_qubits: int) -> None:
    if qubit < 0 or qubit >= num_qubits:
        raise InvalidQubitIndexError(f"Qubit {qubit} out of range [0, {num_qubits - 1}]")


def probability_zero(state: np.ndarray, qubit: int) -> float:
    """P(qubit = 0), summed over basis states with that bit clear."""
    n = num_qubits_of(state)
    _check_qubit(qubit, n)
    indices = np.arange(state.shape[0])
    mask = (indices >> qubit) & 1 == 0
    p0 = float(probabilities(state)[mask].sum())
    return min(1.0, max(0.0, p0))


def qubit_state(state: np.ndarray, qubit: int) -> QubitState:
    """Reduced single-qubit state with ``theta = 2·acos(√P0)`` and ``phi = 0``."""
    p0 = probability_zero(state, qubit)
    theta = 2.0 * float(np.arccos(np.sqrt(p0)))
    return QubitState(theta=theta, phi=0.0, probability_zero=p0, probability_one=1.0 - p0)


def qubit_states(state: np.ndarray) -> List[QubitState]:
    return [qubit_state(state, q) for q in range(num_qubits_of(state))]


def extract_marginals(
    state: np.ndarray,
    qubits: Optional[Iterable[int]] = None,
) -> Dict[int, np.ndarray]:
    """
    Marginal distributions for the given qubits.

    Returns:
        Dictionary mapping qubit -> [p(0), p(1)]
    """
    if qubits is None:
        qubits = range(num_qubits_of(state))
    marginals = {}
    for q in qubits:
        p0 = probability_zero(state, q)
        marginals[q] = np.array([p0, 1.0 - p0])
    return marginals


def extract_joint_marginal(state: np.ndarray, qubit_a: int, qubit_b: int) -> np.ndarray:
    """
    Joint distribution of two qubits.

    Returns:
        2x2 array where [i, j] = P(q_a = i, q_b = j)
    """
    n = num_qubits_of(state)
    _check_qubit(qubit_a, n)
    _check_qubit(qubit_b, n)
    if qubit_a == qubit_b:
        raise InvalidQubitIndexError("Joint marginal needs two distinct qubits")

    indices = np.arange(state.shape[0])
    bits_a = (indices >> qubit_a) & 1
    bits_b = (indices >> qubit_b) & 1
    joint = np.zeros((2, 2))
    np.add.at(joint, (bits_a, bits_b), probabilities(state))
    return joint
