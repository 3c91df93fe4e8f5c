"""
Entanglement metrics for QLAB.

Every quantity here is computed from 2x2 reduced density matrices only:
single-qubit entropy, pairwise mutual information for registers of at
most three qubits (where S(AB) = S(C) for a pure state), and, for
exactly two qubits, concurrence, the CHSH value and the Bell state.
Anything that would need a larger eigen-decomposition is reported as
unavailable rather than approximated.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from qlab.core.density_matrix import ReducedDensityMatrix, reduce
from qlab.core.graph import EntanglementGraph
from qlab.core.statevector import num_qubits_of
from qlab.utils.sparse import MutualInformationMatrix


EIGENVALUE_CUTOFF = 1e-9
CLASSICAL_BOUND = 2.0
TSIRELSON_BOUND = 2.0 * np.sqrt(2.0)
BELL_TOLERANCE = 0.01

# Largest register for which pairwise mutual information is exact with 2x2 solves
MAX_MUTUAL_INFORMATION_QUBITS = 3

BELL_STATE_LABELS = {
    "phi_plus": "|Φ⁺⟩ = (|00⟩ + |11⟩)/√2",
    "phi_minus": "|Φ⁻⟩ = (|00⟩ - |11⟩)/√2",
    "psi_plus": "|Ψ⁺⟩ = (|01⟩ + |10⟩)/√2",
    "psi_minus": "|Ψ⁻⟩ = (|01⟩ - |10⟩)/√2",
}


def _entropy_term(lam: float) -> float:
    if lam <= EIGENVALUE_CUTOFF:
        return 0.0
    return lam * np.log2(lam)


def von_neumann_entropy(rdm: ReducedDensityMatrix) -> Optional[float]:
    """
    Von Neumann entropy ``-Σ λ log2 λ`` of a single-qubit density matrix.

    Returns None for anything larger than 2x2.
    """
    eigenvalues = rdm.eigenvalues()
    if eigenvalues is None:
        return None
    entropy = -sum(_entropy_term(lam) for lam in eigenvalues)
    if abs(entropy) < EIGENVALUE_CUTOFF:
        return 0.0
    return float(entropy)


def qubit_entropy(state: np.ndarray, qubit: int) -> Optional[float]:
    return von_neumann_entropy(reduce(state, [qubit]))


def qubit_entropies(state: np.ndarray) -> List[float]:
    """Entropy of every qubit's reduced state."""
    return [qubit_entropy(state, q) for q in range(num_qubits_of(state))]


def mutual_information(
    state: np.ndarray,
    entropies: Optional[Sequence[float]] = None,
) -> Dict[Tuple[int, int], float]:
    """
    Pairwise mutual information ``I(A:B) = S(A) + S(B) - S(AB)``.

    For two qubits S(AB) = 0; for three qubits S(AB) = S(C), the single
    remaining qubit. Larger (or single-qubit) registers give an empty dict.

    Args:
        state: Amplitude vector
        entropies: Precomputed per-qubit entropies, if available

    Returns:
        Mapping (i, j) -> I(i:j) with i < j, values clamped at 0
    """
    n = num_qubits_of(state)
    if n < 2 or n > MAX_MUTUAL_INFORMATION_QUBITS:
        return {}
    if entropies is None:
        entropies = qubit_entropies(state)

    values = {}
    for i in range(n):
        for j in range(i + 1, n):
            if n == 2:
                s_ab = 0.0
            else:
                k = next(q for q in range(n) if q not in (i, j))
                s_ab = entropies[k]
            values[(i, j)] = max(0.0, entropies[i] + entropies[j] - s_ab)
    return values


def concurrence(state: np.ndarray) -> Optional[float]:
    """
    Concurrence ``C = 2√(λ1·λ2)`` of a two-qubit pure state.

    Uses the eigenvalues of qubit 0's reduced matrix. None unless N == 2.
    """
    if num_qubits_of(state) != 2:
        return None
    lam1, lam2 = reduce(state, [0]).eigenvalues()
    return float(2.0 * np.sqrt(max(0.0, lam1 * lam2)))


def chsh_value(concurrence_value: float) -> float:
    """Maximal CHSH value ``2√(1 + C²)`` for a pure state of concurrence C."""
    return float(2.0 * np.sqrt(1.0 + concurrence_value ** 2))


def identify_bell_state(state: np.ndarray, tolerance: float = BELL_TOLERANCE) -> Optional[str]:
    """
    Name the Bell state a two-qubit vector is, if any.

    The dominant amplitude pair (|00⟩,|11⟩ versus |01⟩,|10⟩) selects Φ or
    Ψ, and the sign of their relative phase selects + or -.

    Returns:
        One of ``phi_plus``, ``phi_minus``, ``psi_plus``, ``psi_minus`` or None
    """
    c = concurrence(state)
    if c is None or abs(c - 1.0) > tolerance:
        return None

    probs = np.abs(state) ** 2
    if probs[0] + probs[3] >= probs[1] + probs[2]:
        family, first, second = "phi", state[0], state[3]
    else:
        family, first, second = "psi", state[1], state[2]

    sign = "plus" if (second * np.conj(first)).real >= 0 else "minus"
    return f"{family}_{sign}"


@dataclass(frozen=True)
class BellReport:
    """
    Two-qubit entanglement summary.

    Attributes:
        concurrence: C in [0, 1]
        chsh: Maximal CHSH value 2√(1 + C²)
        bell_state: Bell state name, or None if not maximally entangled
    """
    concurrence: float
    chsh: float
    bell_state: Optional[str] = None
    classical_bound: float = CLASSICAL_BOUND
    quantum_bound: float = TSIRELSON_BOUND

    @property
    def violates_classical(self) -> bool:
        return self.chsh > self.classical_bound + 1e-9

    @property
    def bell_label(self) -> Optional[str]:
        if self.bell_state is None:
            return None
        return BELL_STATE_LABELS[self.bell_state]


def bell_report(state: np.ndarray) -> Optional[BellReport]:
    """Concurrence, CHSH and Bell state of a two-qubit register (else None)."""
    c = concurrence(state)
    if c is None:
        return None
    return BellReport(concurrence=c, chsh=chsh_value(c), bell_state=identify_bell_state(state))


@dataclass
class EntanglementReport:
    """
    Entanglement metrics of one amplitude vector.

    Attributes:
        num_qubits: Register size
        entropies: Per-qubit von Neumann entropy
        mutual_information: Pairwise values; empty when unavailable (N > 3)
        bell: Two-qubit report; None unless N == 2
    """
    num_qubits: int
    entropies: List[float]
    mutual_information: Dict[Tuple[int, int], float] = field(default_factory=dict)
    bell: Optional[BellReport] = None

    @property
    def mutual_information_available(self) -> bool:
        return 2 <= self.num_qubits <= MAX_MUTUAL_INFORMATION_QUBITS

    @property
    def is_product_state(self) -> bool:
        return all(s < 1e-6 for s in self.entropies)

    def to_graph(self, threshold: float = 1e-6) -> EntanglementGraph:
        return EntanglementGraph.from_values(self.entropies, self.mutual_information, threshold)

    def to_matrix(self) -> MutualInformationMatrix:
        return MutualInformationMatrix.from_mapping(self.num_qubits, self.mutual_information)


def analyze(state: np.ndarray) -> EntanglementReport:
    """Compute every available entanglement metric of ``state``."""
    n = num_qubits_of(state)
    entropies = qubit_entropies(state)
    return EntanglementReport(
        num_qubits=n,
        entropies=entropies,
        mutual_information=mutual_information(state, entropies),
        bell=bell_report(state),
    )
