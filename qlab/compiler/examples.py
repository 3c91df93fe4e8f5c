"""
Library of named example circuits.

Entries use the editor's grid format: ``t`` gate type, ``w`` target wire,
``c`` control wire, ``s`` grid step.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from qlab.core.circuit import Circuit
from qlab.compiler.parser import parse_gate_sequence


CIRCUIT_EXAMPLES: Dict[str, List[Dict[str, Any]]] = {
    "Bell State (|Φ⁺>)": [
        {"t": "H", "w": 0, "s": 0},
        {"t": "CX", "w": 1, "c": 0, "s": 1},
    ],
    "Bell State (|Φ⁻>)": [
        {"t": "X", "w": 0, "s": 0},
        {"t": "H", "w": 0, "s": 1},
        {"t": "CX", "w": 1, "c": 0, "s": 2},
    ],
    "Bell State (|Ψ⁺>)": [
        {"t": "X", "w": 1, "s": 0},
        {"t": "H", "w": 0, "s": 1},
        {"t": "CX", "w": 1, "c": 0, "s": 2},
    ],
    "Bell State (|Ψ⁻>)": [
        {"t": "X", "w": 1, "s": 0},
        {"t": "H", "w": 0, "s": 1},
        {"t": "Z", "w": 0, "s": 2},
        {"t": "CX", "w": 1, "c": 0, "s": 3},
    ],
    "GHZ State (3-Qubit)": [
        {"t": "H", "w": 0, "s": 0},
        {"t": "CX", "w": 1, "c": 0, "s": 1},
        {"t": "CX", "w": 2, "c": 1, "s": 2},
    ],
    "GHZ State (4-Qubit)": [
        {"t": "H", "w": 0, "s": 0},
        {"t": "CX", "w": 1, "c": 0, "s": 1},
        {"t": "CX", "w": 2, "c": 1, "s": 2},
        {"t": "CX", "w": 3, "c": 2, "s": 3},
    ],
    "Superposition (All)": [
        {"t": "H", "w": 0, "s": 0},
        {"t": "H", "w": 1, "s": 0},
        {"t": "H", "w": 2, "s": 0},
        {"t": "H", "w": 3, "s": 0},
    ],
    "Swap Gate (q0-q1)": [
        {"t": "CX", "w": 1, "c": 0, "s": 0},
        {"t": "CX", "w": 0, "c": 1, "s": 1},
        {"t": "CX", "w": 1, "c": 0, "s": 2},
    ],
    "QFT (2-Qubit)": [
        {"t": "H", "w": 0, "s": 0},
        {"t": "CS", "w": 0, "c": 1, "s": 1},
        {"t": "H", "w": 1, "s": 2},
        {"t": "CX", "w": 1, "c": 0, "s": 3},
        {"t": "CX", "w": 0, "c": 1, "s": 4},
        {"t": "CX", "w": 1, "c": 0, "s": 5},
    ],
    "Phase Kickback": [
        {"t": "H", "w": 0, "s": 0},
        {"t": "X", "w": 1, "s": 0},
        {"t": "H", "w": 1, "s": 1},
        {"t": "CX", "w": 1, "c": 0, "s": 2},
    ],
    "Grover's Search (2-Qubit |11>)": [
        {"t": "H", "w": 0, "s": 0}, {"t": "H", "w": 1, "s": 0},
        {"t": "CZ", "w": 1, "c": 0, "s": 1},
        {"t": "H", "w": 0, "s": 2}, {"t": "H", "w": 1, "s": 2},
        {"t": "X", "w": 0, "s": 3}, {"t": "X", "w": 1, "s": 3},
        {"t": "CZ", "w": 1, "c": 0, "s": 4},
        {"t": "X", "w": 0, "s": 5}, {"t": "X", "w": 1, "s": 5},
        {"t": "H", "w": 0, "s": 6}, {"t": "H", "w": 1, "s": 6},
    ],
    "Deutsch (Balanced)": [
        {"t": "X", "w": 1, "s": 0},
        {"t": "H", "w": 0, "s": 1}, {"t": "H", "w": 1, "s": 1},
        {"t": "CX", "w": 1, "c": 0, "s": 2},
        {"t": "H", "w": 0, "s": 3},
    ],
    "Deutsch (Constant)": [
        {"t": "X", "w": 1, "s": 0},
        {"t": "H", "w": 0, "s": 1}, {"t": "H", "w": 1, "s": 1},
        {"t": "H", "w": 0, "s": 3},
    ],
    "Teleportation Prep": [
        {"t": "H", "w": 1, "s": 0},
        {"t": "CX", "w": 2, "c": 1, "s": 1},
        {"t": "X", "w": 0, "s": 0},
        {"t": "CX", "w": 1, "c": 0, "s": 2},
        {"t": "H", "w": 0, "s": 3},
    ],
    "Bernstein-Vazirani (s=11)": [
        {"t": "X", "w": 2, "s": 0},
        {"t": "H", "w": 0, "s": 1}, {"t": "H", "w": 1, "s": 1}, {"t": "H", "w": 2, "s": 1},
        {"t": "CX", "w": 2, "c": 0, "s": 2},
        {"t": "CX", "w": 2, "c": 1, "s": 3},
        {"t": "H", "w": 0, "s": 4}, {"t": "H", "w": 1, "s": 4},
    ],
    "Graph State (Linear)": [
        {"t": "H", "w": 0, "s": 0}, {"t": "H", "w": 1, "s": 0},
        {"t": "H", "w": 2, "s": 0}, {"t": "H", "w": 3, "s": 0},
        {"t": "CZ", "w": 1, "c": 0, "s": 1},
        {"t": "CZ", "w": 2, "c": 1, "s": 2},
        {"t": "CZ", "w": 3, "c": 2, "s": 3},
    ],
    "Graph State (Ring)": [
        {"t": "H", "w": 0, "s": 0}, {"t": "H", "w": 1, "s": 0},
        {"t": "H", "w": 2, "s": 0}, {"t": "H", "w": 3, "s": 0},
        {"t": "CZ", "w": 1, "c": 0, "s": 1},
        {"t": "CZ", "w": 2, "c": 1, "s": 2},
        {"t": "CZ", "w": 3, "c": 2, "s": 3},
        {"t": "CZ", "w": 0, "c": 3, "s": 4},
    ],
    "Repetition Code (Encode)": [
        {"t": "CX", "w": 1, "c": 0, "s": 0},
        {"t": "CX", "w": 2, "c": 0, "s": 1},
        {"t": "X", "w": 1, "s": 3},
    ],
    "T-Depth Test": [
        {"t": "H", "w": 0, "s": 0}, {"t": "H", "w": 1, "s": 0},
        {"t": "H", "w": 2, "s": 0}, {"t": "H", "w": 3, "s": 0},
        {"t": "T", "w": 0, "s": 1}, {"t": "T", "w": 1, "s": 1},
        {"t": "T", "w": 2, "s": 1}, {"t": "T", "w": 3, "s": 1},
        {"t": "H", "w": 0, "s": 2}, {"t": "H", "w": 1, "s": 2},
        {"t": "H", "w": 2, "s": 2}, {"t": "H", "w": 3, "s": 2},
    ],
    "Entanglement Swapping": [
        {"t": "H", "w": 0, "s": 0}, {"t": "CX", "w": 1, "c": 0, "s": 1},
        {"t": "H", "w": 2, "s": 0}, {"t": "CX", "w": 3, "c": 2, "s": 1},
        {"t": "CX", "w": 2, "c": 1, "s": 2},
        {"t": "H", "w": 1, "s": 3},
    ],
}


def required_qubits(entries: List[Dict[str, Any]]) -> int:
    """Smallest register that holds every wire used by ``entries``."""
    highest = 0
    for entry in entries:
        highest = max(highest, entry["w"], entry.get("c", 0))
    return highest + 1


def list_examples() -> List[str]:
    return list(CIRCUIT_EXAMPLES)


def get_example(name: str, num_qubits: Optional[int] = None) -> Circuit:
    """
    Build a named example circuit.

    Args:
        name: Key of CIRCUIT_EXAMPLES
        num_qubits: Register size (default: the smallest that fits)
    """
    if name not in CIRCUIT_EXAMPLES:
        raise KeyError(f"Unknown example circuit: {name}")
    entries = CIRCUIT_EXAMPLES[name]
    if num_qubits is None:
        num_qubits = required_qubits(entries)
    return parse_gate_sequence(entries, num_qubits)
