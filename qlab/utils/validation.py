"""
Validation utilities for QLAB.

Compares QLAB amplitudes against Qiskit's exact statevector.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import numpy as np

from qlab.core.circuit import Circuit
from qlab.core.statevector import simulate

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Result of validating QLAB against exact simulation."""
    qlab_amplitudes: np.ndarray
    exact_amplitudes: np.ndarray
    max_error: float
    passed: bool
    threshold: float
    details: Dict[str, Any]


def validate_against_exact(
    circuit: Circuit,
    threshold: float = 1e-9,
    qiskit_circuit: Optional[Any] = None,
    verbose: bool = False,
) -> ValidationResult:
    """
    Validate QLAB's amplitudes against ``qiskit.quantum_info.Statevector``.

    Both use little-endian qubit order, so vectors compare index by index,
    global phase included.

    Args:
        circuit: QLAB circuit
        threshold: Maximum allowed absolute amplitude error
        qiskit_circuit: Reference circuit (default: converted from ``circuit``)
        verbose: Print detailed output

    Returns:
        ValidationResult with comparison data
    """
    try:
        from qiskit.quantum_info import Statevector
    except ImportError:
        raise ImportError("Qiskit required for validation")

    from qlab.compiler.parser import circuit_to_qiskit

    if qiskit_circuit is None:
        qiskit_circuit = circuit_to_qiskit(circuit)

    qlab_amplitudes = simulate(circuit)
    exact_amplitudes = np.asarray(Statevector.from_instruction(qiskit_circuit).data)

    max_error = float(np.max(np.abs(qlab_amplitudes - exact_amplitudes)))
    passed = max_error <= threshold

    if verbose:
        print(f"\n{'Index':<8} {'QLAB':<26} {'Exact':<26}")
        print("-" * 60)
        for idx, (ours, exact) in enumerate(zip(qlab_amplitudes, exact_amplitudes)):
            print(f"{idx:<8} {complex(ours):.6f}  {complex(exact):.6f}")
        print("-" * 60)
        print(f"Max error: {max_error:.3e}")
        print(f"Result: {'PASSED' if passed else 'FAILED'}")

    if not passed:
        logger.warning("Validation failed for %s: max error %.3e", circuit, max_error)

    return ValidationResult(
        qlab_amplitudes=qlab_amplitudes,
        exact_amplitudes=exact_amplitudes,
        max_error=max_error,
        passed=passed,
        threshold=threshold,
        details={
            "num_qubits": circuit.num_qubits,
            "num_gates": len(circuit),
        },
    )


def random_circuit(
    num_qubits: int,
    depth: int,
    seed: Optional[int] = None,
) -> Circuit:
    """Random circuit over the full gate library, for cross-checks."""
    rng = np.random.default_rng(seed)
    single = ["H", "X", "Y", "Z", "S", "T"]
    controlled = ["CX", "CY", "CZ", "CS"]

    circuit = Circuit(num_qubits)
    for _ in range(depth):
        for q in range(num_qubits):
            circuit = circuit.add(single[rng.integers(len(single))], q)
        if num_qubits > 1:
            control, target = rng.choice(num_qubits, size=2, replace=False)
            circuit = circuit.add(controlled[rng.integers(len(controlled))], int(target), int(control))
    return circuit


def quick_validation(num_qubits: int = 4, depth: int = 8, seed: int = 42) -> ValidationResult:
    """
    Quick validation with a random circuit.

    Useful for sanity checking a QLAB installation.
    """
    return validate_against_exact(random_circuit(num_qubits, depth, seed), verbose=True)
