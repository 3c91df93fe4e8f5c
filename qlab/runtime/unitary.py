"""
Full circuit unitary, built column by column from basis-state runs.
"""

from __future__ import annotations

import logging

import numpy as np

from qlab.core.circuit import Circuit
from qlab.core.errors import QubitLimitError
from qlab.core.io_spec import DEFAULT_MAX_UNITARY_QUBITS
from qlab.core.statevector import fold_gates

logger = logging.getLogger(__name__)


def build_unitary(circuit: Circuit, max_qubits: int = DEFAULT_MAX_UNITARY_QUBITS) -> np.ndarray:
    """
    The ``2^N x 2^N`` unitary of ``circuit``.

    Column ``k`` is the result of simulating the circuit from basis state
    ``|k⟩``. This costs 2^N simulations, hence the qubit ceiling.

    Args:
        circuit: Validated circuit
        max_qubits: Largest register accepted

    Returns:
        Complex matrix U with U[:, k] = circuit|k⟩
    """
    if circuit.num_qubits > max_qubits:
        raise QubitLimitError(
            f"Unitary of {circuit.num_qubits} qubits exceeds the limit of {max_qubits}"
        )

    dim = circuit.dimension
    front = np.empty(dim, dtype=np.complex128)
    back = np.empty(dim, dtype=np.complex128)
    unitary = np.empty((dim, dim), dtype=np.complex128)

    for k in range(dim):
        front[:] = 0.0
        front[k] = 1.0
        unitary[:, k] = fold_gates(circuit.gates, front, back)

    logger.debug("Built %dx%d unitary from %d gates", dim, dim, len(circuit))
    return unitary


def is_unitary(matrix: np.ndarray, atol: float = 1e-9) -> bool:
    """Check ``U†U = I``."""
    dim = matrix.shape[0]
    return bool(np.allclose(matrix.conj().T @ matrix, np.eye(dim), atol=atol))
