"""
Gate library for QLAB.

Single-qubit gates are exposed as dense 2x2 unitaries. Controlled gates
are exposed as a rule acting on the pair of amplitudes ``(a0, a1)`` whose
control bit is set, which is how the state-vector engine applies them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple

import numpy as np

from qlab.core.errors import InvalidQubitIndexError, UnsupportedGateError


PAULI_I = np.array([[1, 0], [0, 1]], dtype=np.complex128)
PAULI_X = np.array([[0, 1], [1, 0]], dtype=np.complex128)
PAULI_Y = np.array([[0, -1j], [1j, 0]], dtype=np.complex128)
PAULI_Z = np.array([[1, 0], [0, -1]], dtype=np.complex128)
HADAMARD = np.array([[1, 1], [1, -1]], dtype=np.complex128) / np.sqrt(2)
S_GATE = np.array([[1, 0], [0, 1j]], dtype=np.complex128)
T_GATE = np.array([[1, 0], [0, np.exp(1j * np.pi / 4)]], dtype=np.complex128)

for _m in (PAULI_I, PAULI_X, PAULI_Y, PAULI_Z, HADAMARD, S_GATE, T_GATE):
    _m.setflags(write=False)


class GateKind(Enum):
    """Supported gate kinds."""
    H = "H"
    X = "X"
    Y = "Y"
    Z = "Z"
    S = "S"
    T = "T"
    CX = "CX"
    CY = "CY"
    CZ = "CZ"
    CS = "CS"

    @property
    def is_controlled(self) -> bool:
        return self in _CONTROLLED_KINDS

    @property
    def num_qubits(self) -> int:
        return 2 if self.is_controlled else 1


_CONTROLLED_KINDS = frozenset({GateKind.CX, GateKind.CY, GateKind.CZ, GateKind.CS})


PairRule = Callable[[np.ndarray, np.ndarray], Tuple[np.ndarray, np.ndarray]]


def _cx_rule(a0, a1):
    return a1, a0


def _cy_rule(a0, a1):
    # Y restricted to the conditioned pair: (a0, a1) -> (-i*a1, i*a0)
    return -1j * a1, 1j * a0


def _cz_rule(a0, a1):
    return a0, -a1


def _cs_rule(a0, a1):
    return a0, 1j * a1


class GateLibrary:
    """Lookup tables for gate matrices and controlled update rules."""

    SINGLE_QUBIT_MATRICES: Dict[GateKind, np.ndarray] = {
        GateKind.H: HADAMARD,
        GateKind.X: PAULI_X,
        GateKind.Y: PAULI_Y,
        GateKind.Z: PAULI_Z,
        GateKind.S: S_GATE,
        GateKind.T: T_GATE,
    }

    CONTROLLED_RULES: Dict[GateKind, PairRule] = {
        GateKind.CX: _cx_rule,
        GateKind.CY: _cy_rule,
        GateKind.CZ: _cz_rule,
        GateKind.CS: _cs_rule,
    }

    # 2x2 operator applied to the target when the control is set
    CONTROLLED_TARGETS: Dict[GateKind, np.ndarray] = {
        GateKind.CX: PAULI_X,
        GateKind.CY: PAULI_Y,
        GateKind.CZ: PAULI_Z,
        GateKind.CS: S_GATE,
    }

    ALIASES: Dict[str, GateKind] = {
        "CNOT": GateKind.CX,
    }

    @classmethod
    def get_kind(cls, name: Any) -> GateKind:
        """Resolve a gate name (case-insensitive) or GateKind to a GateKind."""
        if isinstance(name, GateKind):
            return name
        if not isinstance(name, str):
            raise UnsupportedGateError(f"Unknown gate: {name!r}")
        key = name.strip().upper()
        if key in cls.ALIASES:
            return cls.ALIASES[key]
        try:
            return GateKind(key)
        except ValueError:
            raise UnsupportedGateError(f"Unknown gate: {name}") from None

    @classmethod
    def single_qubit_matrix(cls, kind: GateKind) -> np.ndarray:
        """Return the 2x2 unitary ``[[u00, u01], [u10, u11]]`` of a single-qubit gate."""
        kind = cls.get_kind(kind)
        if kind.is_controlled:
            raise UnsupportedGateError(f"{kind.value} is a controlled gate; use controlled_rule")
        return cls.SINGLE_QUBIT_MATRICES[kind]

    @classmethod
    def controlled_rule(cls, kind: GateKind) -> PairRule:
        """Return the pair update rule of a controlled gate."""
        kind = cls.get_kind(kind)
        if not kind.is_controlled:
            raise UnsupportedGateError(f"{kind.value} is not a controlled gate")
        return cls.CONTROLLED_RULES[kind]

    @classmethod
    def target_matrix(cls, kind: GateKind) -> np.ndarray:
        """2x2 matrix of any gate restricted to its target qubit."""
        kind = cls.get_kind(kind)
        if kind.is_controlled:
            return cls.CONTROLLED_TARGETS[kind]
        return cls.SINGLE_QUBIT_MATRICES[kind]


def _check_index(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidQubitIndexError(f"{name} must be an integer, got {value!r}")
    if value < 0:
        raise InvalidQubitIndexError(f"{name} must be non-negative, got {value}")
    return int(value)


@dataclass(frozen=True)
class GateDescriptor:
    """
    A single gate placed in a circuit.

    Attributes:
        kind: Gate kind (a GateKind, or a name resolved through GateLibrary)
        target: Target qubit index
        control: Control qubit index, present iff the kind is controlled
    """
    kind: GateKind
    target: int
    control: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, "kind", GateLibrary.get_kind(self.kind))
        object.__setattr__(self, "target", _check_index("target", self.target))

        if self.kind.is_controlled:
            if self.control is None:
                raise InvalidQubitIndexError(f"{self.kind.value} requires a control qubit")
            object.__setattr__(self, "control", _check_index("control", self.control))
            if self.control == self.target:
                raise InvalidQubitIndexError(
                    f"{self.kind.value}: control and target must differ (both {self.target})"
                )
        elif self.control is not None:
            raise InvalidQubitIndexError(f"{self.kind.value} does not take a control qubit")

    @property
    def is_controlled(self) -> bool:
        return self.kind.is_controlled

    @property
    def qubits(self) -> Tuple[int, ...]:
        """Qubits touched by the gate, control first."""
        if self.control is None:
            return (self.target,)
        return (self.control, self.target)

    @property
    def max_qubit(self) -> int:
        return max(self.qubits)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.kind.value, "target": self.target}
        if self.control is not None:
            data["control"] = self.control
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> GateDescriptor:
        """Build a descriptor from ``{"type" | "name", "target", "control"?}``."""
        kind = data.get("type", data.get("name"))
        if kind is None:
            raise UnsupportedGateError(f"Gate entry has no type: {data!r}")
        if "target" not in data:
            raise InvalidQubitIndexError(f"Gate entry has no target: {data!r}")
        return cls(kind=kind, target=data["target"], control=data.get("control"))

    def __str__(self) -> str:
        if self.control is None:
            return f"{self.kind.value}({self.target})"
        return f"{self.kind.value}(c={self.control}, t={self.target})"
