"""
State-vector engine for QLAB.

Amplitudes are stored little-endian: bit ``q`` of basis index ``i`` is
the value of qubit ``q``. A gate on target ``t`` acts on the ``2^(N-1)``
disjoint pairs ``(idx0, idx0 | 1 << t)`` with bit ``t`` of ``idx0`` clear.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Dict, Iterable, List, Optional, Tuple, Union

import numpy as np

from qlab.core.circuit import Circuit, check_gate_fits
from qlab.core.errors import NormalizationError, QubitLimitError
from qlab.core.gates import GateDescriptor, GateLibrary
from qlab.core.io_spec import DEFAULT_NORM_TOLERANCE

logger = logging.getLogger(__name__)

ArrayLike = Union[np.ndarray, List[complex]]


def zero_state(num_qubits: int) -> np.ndarray:
    """The all-zero basis state |0...0⟩."""
    if num_qubits < 1:
        raise QubitLimitError(f"num_qubits must be >= 1, got {num_qubits}")
    state = np.zeros(1 << num_qubits, dtype=np.complex128)
    state[0] = 1.0
    return state


def basis_state(num_qubits: int, index: int) -> np.ndarray:
    """Computational basis state |index⟩."""
    state = np.zeros(1 << num_qubits, dtype=np.complex128)
    state[index] = 1.0
    return state


def num_qubits_of(state: np.ndarray) -> int:
    """Register size of an amplitude vector (length must be a power of two)."""
    if state.ndim != 1:
        raise ValueError(f"Amplitude vector must be one-dimensional, got shape {state.shape}")
    length = state.shape[0]
    n = length.bit_length() - 1
    if length < 2 or (1 << n) != length:
        raise ValueError(f"Amplitude vector length must be 2^N with N >= 1, got shape {state.shape}")
    return n


def as_state(amplitudes: ArrayLike) -> np.ndarray:
    """Coerce a sequence of amplitudes into a complex128 vector."""
    state = np.asarray(amplitudes, dtype=np.complex128)
    num_qubits_of(state)
    return state


@lru_cache(maxsize=256)
def pair_indices(num_qubits: int, target: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    Enumerate the amplitude pairs touched by a gate on ``target``.

    Each of the ``2^(N-1)`` counters is split into the bits below ``target``
    and the bits above it, which are shifted up by one to make room for a
    cleared target bit.

    Returns:
        (idx0, idx1) read-only index arrays
    """
    half = np.arange(1 << (num_qubits - 1), dtype=np.int64)
    low_mask = (1 << target) - 1
    low = half & low_mask
    high = (half & ~low_mask) << 1
    idx0 = high | low
    idx1 = idx0 | (1 << target)
    idx0.setflags(write=False)
    idx1.setflags(write=False)
    return idx0, idx1


def apply_gate(
    state: np.ndarray,
    gate: GateDescriptor,
    out: Optional[np.ndarray] = None,
) -> np.ndarray:
    """
    Apply one gate to ``state`` and return the resulting amplitudes.

    The input is never modified. When ``out`` is given the result is
    written into it, which lets callers reuse a buffer across a fold.

    Args:
        state: Amplitude vector of length 2^N
        gate: Gate descriptor whose qubits lie in [0, N)
        out: Optional output buffer, same shape as ``state`` and not aliasing it

    Returns:
        The output buffer
    """
    n = num_qubits_of(state)
    check_gate_fits(gate, n)

    if out is None:
        out = np.empty_like(state)
    elif out.shape != state.shape:
        raise ValueError(f"Output buffer shape {out.shape} != state shape {state.shape}")
    elif np.shares_memory(out, state):
        raise ValueError("Output buffer must not alias the input state")

    out[:] = state
    idx0, idx1 = pair_indices(n, gate.target)

    if gate.is_controlled:
        selected = ((idx0 >> gate.control) & 1).astype(bool)
        idx0, idx1 = idx0[selected], idx1[selected]
        new0, new1 = GateLibrary.controlled_rule(gate.kind)(state[idx0], state[idx1])
    else:
        u = GateLibrary.single_qubit_matrix(gate.kind)
        a0, a1 = state[idx0], state[idx1]
        new0 = u[0, 0] * a0 + u[0, 1] * a1
        new1 = u[1, 0] * a0 + u[1, 1] * a1

    out[idx0] = new0
    out[idx1] = new1
    return out


def fold_gates(
    gates: Iterable[GateDescriptor],
    front: np.ndarray,
    back: np.ndarray,
) -> np.ndarray:
    """
    Apply ``gates`` in order, swapping two buffers after every gate.

    ``front`` holds the input amplitudes; both buffers are overwritten.

    Returns:
        Whichever buffer holds the final amplitudes
    """
    for gate in gates:
        apply_gate(front, gate, out=back)
        front, back = back, front
    return front


def simulate(circuit: Circuit, initial: Optional[ArrayLike] = None) -> np.ndarray:
    """
    Fold the circuit's gates over an initial state, in authored order.

    Two buffers are allocated up front and swapped after every gate.

    Args:
        circuit: Validated circuit
        initial: Starting amplitudes (default |0...0⟩)

    Returns:
        Final amplitude vector
    """
    if initial is None:
        front = zero_state(circuit.num_qubits)
    else:
        front = np.array(initial, dtype=np.complex128)
        if front.shape != (circuit.dimension,):
            raise ValueError(
                f"Initial state has shape {front.shape}, expected ({circuit.dimension},)"
            )
    front = fold_gates(circuit.gates, front, np.empty_like(front))

    logger.debug("Simulated %d gates on %d qubits", len(circuit), circuit.num_qubits)
    return front


def norm(state: np.ndarray) -> float:
    """Squared norm ``sum |a_i|^2``."""
    return float(np.vdot(state, state).real)


def check_normalized(state: np.ndarray, tol: float = DEFAULT_NORM_TOLERANCE) -> None:
    n2 = norm(state)
    if abs(1.0 - n2) > tol:
        raise NormalizationError(f"Normalization failed: ||psi||^2={n2}")


def probabilities(state: np.ndarray) -> np.ndarray:
    """Basis-state probabilities, clamped to [0, 1]."""
    return np.clip(np.abs(state) ** 2, 0.0, 1.0)


def format_ket(index: int, num_qubits: int) -> str:
    """Ket label with qubit N-1 leftmost, e.g. index 1 on 2 qubits -> '|01⟩'."""
    return f"|{index:0{num_qubits}b}⟩"


def amplitude_table(state: np.ndarray, min_probability: float = 0.0) -> List[Dict[str, object]]:
    """
    Per-basis-state rows for statevector and phasor displays.

    Args:
        state: Amplitude vector
        min_probability: Skip rows whose probability is below this value

    Returns:
        List of dicts with keys index, label, amplitude, probability, phase
    """
    n = num_qubits_of(state)
    probs = probabilities(state)
    rows = []
    for idx, amp in enumerate(state):
        if probs[idx] < min_probability:
            continue
        rows.append({
            "index": idx,
            "label": format_ket(idx, n),
            "amplitude": complex(amp),
            "probability": float(probs[idx]),
            "phase": float(np.arctan2(amp.imag, amp.real)),
        })
    return rows
