"""Circuit input components for QLAB."""

from qlab.compiler.examples import CIRCUIT_EXAMPLES, get_example
from qlab.compiler.parser import parse_gate_sequence, parse_qiskit_circuit

__all__ = [
    "CIRCUIT_EXAMPLES",
    "get_example",
    "parse_gate_sequence",
    "parse_qiskit_circuit",
]
