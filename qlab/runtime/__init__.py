"""Runtime components for QLAB execution."""

from qlab.runtime.engine import CircuitSimulator, ExecutionResult
from qlab.runtime.unitary import build_unitary

__all__ = ["CircuitSimulator", "ExecutionResult", "build_unitary"]
