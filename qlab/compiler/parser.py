"""
Circuit parsing for QLAB.

Builds validated Circuits from plain gate dictionaries (the editor's
grid format) or from Qiskit circuits, and converts back.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from qlab.core.circuit import Circuit
from qlab.core.errors import QlabError, UnsupportedGateError
from qlab.core.gates import GateDescriptor, GateKind
from qlab.core.io_spec import DEFAULT_MAX_QUBITS

logger = logging.getLogger(__name__)


# Gate name mapping from Qiskit to QLAB
QISKIT_GATE_MAP = {
    "h": GateKind.H,
    "x": GateKind.X,
    "y": GateKind.Y,
    "z": GateKind.Z,
    "s": GateKind.S,
    "t": GateKind.T,
    "cx": GateKind.CX,
    "cnot": GateKind.CX,
    "cy": GateKind.CY,
    "cz": GateKind.CZ,
    "cs": GateKind.CS,
}

# Instructions with no effect on the amplitude vector
QISKIT_SKIPPED = {"id", "barrier", "measure", "delay"}


def _normalize_entry(entry: Dict[str, Any]) -> Dict[str, Any]:
    """Accept both long keys (type/target/control) and grid keys (t/w/c)."""
    return {
        "type": entry.get("type", entry.get("name", entry.get("t"))),
        "target": entry.get("target", entry.get("w")),
        "control": entry.get("control", entry.get("c")),
    }


def parse_gate_sequence(
    gate_list: List[Dict[str, Any]],
    num_qubits: int,
    strict: bool = True,
    max_qubits: int = DEFAULT_MAX_QUBITS,
) -> Circuit:
    """
    Parse a list of gate dictionaries into a Circuit.

    Each entry has ``type`` (or ``name``/``t``), ``target`` (or ``w``) and
    an optional ``control`` (or ``c``). If every entry carries a grid step
    ``s``, gates are ordered by (step, target wire), matching a column-major
    read of the editor grid; otherwise list order is kept.

    Args:
        gate_list: Gate dictionaries
        num_qubits: Register size
        strict: Raise on invalid entries instead of dropping them
        max_qubits: Register ceiling

    Returns:
        Circuit
    """
    entries = list(gate_list)
    if entries and all("s" in e for e in entries):
        entries = sorted(entries, key=lambda e: (e["s"], e.get("target", e.get("w", 0))))

    gates: List[GateDescriptor] = []
    for position, entry in enumerate(entries):
        try:
            gates.append(GateDescriptor.from_dict(_normalize_entry(entry)))
        except QlabError as exc:
            if strict:
                raise
            logger.warning("Dropping gate %d (%r): %s", position, entry, exc)

    if strict:
        return Circuit(num_qubits, tuple(gates), max_qubits)
    return Circuit.lenient(num_qubits, gates, max_qubits)


def circuit_to_gate_list(circuit: Circuit) -> List[Dict[str, Any]]:
    """Convert a Circuit to the gate-dictionary format. Useful for serialization."""
    return [gate.to_dict() for gate in circuit.gates]


def parse_qiskit_circuit(circuit, max_qubits: int = DEFAULT_MAX_QUBITS) -> Circuit:
    """
    Parse a Qiskit QuantumCircuit into a QLAB Circuit.

    Qiskit and QLAB both number qubits little-endian, so indices carry
    over unchanged.

    Args:
        circuit: A qiskit.QuantumCircuit object

    Returns:
        Circuit
    """
    gates: List[GateDescriptor] = []

    for instruction in circuit.data:
        op = instruction.operation
        name = op.name.lower()
        if name in QISKIT_SKIPPED:
            continue
        if name not in QISKIT_GATE_MAP:
            raise UnsupportedGateError(f"Qiskit gate '{op.name}' has no QLAB equivalent")

        kind = QISKIT_GATE_MAP[name]
        qubit_indices = [circuit.find_bit(q).index for q in instruction.qubits]

        if kind.is_controlled:
            control, target = qubit_indices
            gates.append(GateDescriptor(kind, target, control))
        else:
            gates.append(GateDescriptor(kind, qubit_indices[0]))

    return Circuit(circuit.num_qubits, tuple(gates), max_qubits)


def circuit_to_qiskit(circuit: Circuit):
    """Build the equivalent qiskit.QuantumCircuit (used for cross-checking)."""
    try:
        from qiskit import QuantumCircuit
    except ImportError:
        raise ImportError("Qiskit is required for circuit conversion. "
                          "Install with: pip install qiskit")

    qc = QuantumCircuit(circuit.num_qubits)
    for gate in circuit.gates:
        method = getattr(qc, gate.kind.value.lower())
        if gate.is_controlled:
            method(gate.control, gate.target)
        else:
            method(gate.target)
    return qc
