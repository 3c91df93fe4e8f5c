"""
QLAB - Quantum state-vector laboratory

A small-register state-vector simulator with entanglement and
measurement analysis.
"""

from qlab.core.circuit import Circuit
from qlab.core.gates import GateDescriptor, GateKind
from qlab.core.statevector import simulate
from qlab.runtime.engine import CircuitSimulator

__version__ = "0.1.0"
__all__ = ["Circuit", "GateDescriptor", "GateKind", "simulate", "CircuitSimulator"]
