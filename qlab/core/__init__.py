"""Core QLAB components: gates, circuits, the state-vector engine and density matrices."""

from qlab.core.circuit import Circuit
from qlab.core.density_matrix import ReducedDensityMatrix, reduce
from qlab.core.errors import (
    InvalidQubitIndexError,
    NormalizationError,
    QlabError,
    QubitLimitError,
    ReductionUnavailableError,
    UnsupportedGateError,
)
from qlab.core.gates import GateDescriptor, GateKind, GateLibrary
from qlab.core.graph import EntanglementEdge, EntanglementGraph
from qlab.core.io_spec import SamplerSpec, SimulatorConfig
from qlab.core.statevector import apply_gate, simulate, zero_state

__all__ = [
    # Gates and circuits
    "GateKind",
    "GateDescriptor",
    "GateLibrary",
    "Circuit",
    # Engine
    "zero_state",
    "apply_gate",
    "simulate",
    # Density matrices
    "ReducedDensityMatrix",
    "reduce",
    # Entanglement graph
    "EntanglementGraph",
    "EntanglementEdge",
    # Configuration
    "SimulatorConfig",
    "SamplerSpec",
    # Errors
    "QlabError",
    "InvalidQubitIndexError",
    "UnsupportedGateError",
    "QubitLimitError",
    "ReductionUnavailableError",
    "NormalizationError",
]
