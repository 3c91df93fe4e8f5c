"""Reduced density matrices obtained by partial trace of a pure state."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple

import numpy as np

from qlab.core.errors import InvalidQubitIndexError, ReductionUnavailableError
from qlab.core.gates import PAULI_X, PAULI_Y, PAULI_Z
from qlab.core.statevector import num_qubits_of


def _scatter_bits(value: int, positions: Sequence[int]) -> int:
    """Place bit ``j`` of ``value`` at bit ``positions[j]`` of the result."""
    out = 0
    for j, pos in enumerate(positions):
        if value & (1 << j):
            out |= 1 << pos
    return out


@dataclass
class ReducedDensityMatrix:
    """
    Density matrix of a kept subsystem.

    Bit ``j`` of a row/column index is the value of qubit ``qubits[j]``.
    """
    qubits: Tuple[int, ...]
    rho: np.ndarray

    def __post_init__(self):
        self.qubits = tuple(self.qubits)
        self.rho = np.asarray(self.rho, dtype=np.complex128)
        dim = 1 << len(self.qubits)
        if self.rho.shape != (dim, dim):
            raise ValueError(f"Density matrix must be {dim}x{dim}, got {self.rho.shape}")

    @property
    def num_qubits(self) -> int:
        return len(self.qubits)

    @property
    def dim(self) -> int:
        return self.rho.shape[0]

    @property
    def trace(self) -> float:
        return float(np.real(np.trace(self.rho)))

    @property
    def purity(self) -> float:
        return float(np.real(np.trace(self.rho @ self.rho)))

    @property
    def is_hermitian(self) -> bool:
        return bool(np.allclose(self.rho, self.rho.conj().T, atol=1e-10))

    def validate(self) -> Tuple[bool, Optional[str]]:
        if not self.is_hermitian:
            return False, "Not Hermitian"
        trace = self.trace
        if not np.isclose(trace, 1.0, atol=1e-6):
            return False, f"Trace = {trace:.6f}"
        return True, None

    def eigenvalues(self) -> Optional[Tuple[float, float]]:
        """
        Closed-form eigenvalues ``(λ1, λ2)`` of a single-qubit matrix.

        Uses ``det = ρ00·ρ11 - |ρ01|²`` and ``λ = (1 ± √max(0, 1 - 4·det)) / 2``.
        Returns None for larger matrices; no general eigensolver is used.
        """
        if self.dim != 2:
            return None
        rho00 = self.rho[0, 0].real
        rho11 = self.rho[1, 1].real
        det = rho00 * rho11 - abs(self.rho[0, 1]) ** 2
        diff = np.sqrt(max(0.0, 1.0 - 4.0 * det))
        return (1.0 + diff) / 2.0, (1.0 - diff) / 2.0

    def probability_zero(self) -> float:
        if self.dim != 2:
            raise ReductionUnavailableError("probability_zero is defined for one qubit only")
        return float(np.clip(self.rho[0, 0].real, 0.0, 1.0))

    def probability_one(self) -> float:
        return 1.0 - self.probability_zero()

    def bloch_vector(self) -> np.ndarray:
        """Bloch vector (x, y, z) of a single-qubit matrix."""
        if self.dim != 2:
            raise ReductionUnavailableError("bloch_vector is defined for one qubit only")
        rx = np.real(np.trace(self.rho @ PAULI_X))
        ry = np.real(np.trace(self.rho @ PAULI_Y))
        rz = np.real(np.trace(self.rho @ PAULI_Z))
        return np.array([rx, ry, rz])

    def __repr__(self) -> str:
        return f"ReducedDensityMatrix(qubits={self.qubits}, purity={self.purity:.4f})"


def reduce(
    state: np.ndarray,
    keep: Iterable[int],
    max_qubits: Optional[int] = None,
) -> ReducedDensityMatrix:
    """
    Partial trace of ``|ψ⟩⟨ψ|`` onto the ``keep`` qubits.

    For every assignment of the traced-out bits, the kept sub-vector is
    gathered and its outer product accumulated into ρ, so that
    ``ρ[u, v] = Σ_k ψ[k|u] · conj(ψ[k|v])``.

    Args:
        state: Amplitude vector
        keep: Qubit indices to keep; their order fixes the bit order of ρ
        max_qubits: Optional ceiling on ``len(keep)``

    Returns:
        ReducedDensityMatrix of dimension 2^len(keep)
    """
    n = num_qubits_of(state)
    keep = tuple(int(q) for q in keep)

    if not keep:
        raise InvalidQubitIndexError("keep must name at least one qubit")
    if len(set(keep)) != len(keep):
        raise InvalidQubitIndexError(f"Duplicate qubits in keep: {keep}")
    for q in keep:
        if q < 0 or q >= n:
            raise InvalidQubitIndexError(f"Qubit {q} out of range [0, {n - 1}]")
    if max_qubits is not None and len(keep) > max_qubits:
        raise ReductionUnavailableError(
            f"Reduction onto {len(keep)} qubits exceeds the supported {max_qubits}"
        )

    traced = [q for q in range(n) if q not in keep]
    dim = 1 << len(keep)
    keep_offsets = np.array([_scatter_bits(u, keep) for u in range(dim)], dtype=np.int64)

    rho = np.zeros((dim, dim), dtype=np.complex128)
    for k in range(1 << len(traced)):
        sub = state[_scatter_bits(k, traced) | keep_offsets]
        rho += np.outer(sub, sub.conj())

    return ReducedDensityMatrix(qubits=keep, rho=rho)
