"""
Circuit representation for QLAB.

A circuit is an immutable register size plus an ordered tuple of gate
descriptors. Every descriptor is checked against the register when the
circuit is built, so a constructed Circuit is always safe to simulate.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, Set, Tuple

import numpy as np

from qlab.core.errors import InvalidQubitIndexError, QubitLimitError
from qlab.core.gates import GateDescriptor, GateKind
from qlab.core.io_spec import DEFAULT_MAX_QUBITS

logger = logging.getLogger(__name__)


def check_num_qubits(num_qubits: int, max_qubits: int = DEFAULT_MAX_QUBITS) -> int:
    """Validate a register size against the ceiling and return it as int."""
    if isinstance(num_qubits, bool) or not isinstance(num_qubits, (int, np.integer)):
        raise QubitLimitError(f"num_qubits must be an integer, got {num_qubits!r}")
    if num_qubits < 1:
        raise QubitLimitError(f"num_qubits must be >= 1, got {num_qubits}")
    if num_qubits > max_qubits:
        raise QubitLimitError(
            f"num_qubits={num_qubits} exceeds the limit of {max_qubits} "
            f"({2 ** num_qubits} amplitudes)"
        )
    return int(num_qubits)


def check_gate_fits(gate: GateDescriptor, num_qubits: int) -> None:
    """Raise InvalidQubitIndexError unless every qubit of ``gate`` is in ``[0, num_qubits)``."""
    for q in gate.qubits:
        if q >= num_qubits:
            raise InvalidQubitIndexError(
                f"{gate}: qubit {q} out of range [0, {num_qubits - 1}]"
            )


@dataclass(frozen=True)
class Circuit:
    """
    Ordered gate sequence on a fixed-size register.

    Usage:
        bell = Circuit(2).h(0).cx(0, 1)

    Attributes:
        num_qubits: Register size N
        gates: Gate descriptors in authored order
        max_qubits: Register ceiling enforced at construction
    """
    num_qubits: int
    gates: Tuple[GateDescriptor, ...] = ()
    max_qubits: int = field(default=DEFAULT_MAX_QUBITS, compare=False, repr=False)

    def __post_init__(self):
        object.__setattr__(self, "num_qubits", check_num_qubits(self.num_qubits, self.max_qubits))
        gates = tuple(self.gates)
        for gate in gates:
            if not isinstance(gate, GateDescriptor):
                raise TypeError(f"Expected GateDescriptor, got {type(gate).__name__}")
            check_gate_fits(gate, self.num_qubits)
        object.__setattr__(self, "gates", gates)

    @classmethod
    def lenient(
        cls,
        num_qubits: int,
        gates: Iterable[GateDescriptor],
        max_qubits: int = DEFAULT_MAX_QUBITS,
    ) -> Circuit:
        """Build a circuit, dropping gates that do not fit the register."""
        kept: List[GateDescriptor] = []
        for position, gate in enumerate(gates):
            try:
                check_gate_fits(gate, num_qubits)
            except InvalidQubitIndexError as exc:
                logger.warning("Dropping gate %d: %s", position, exc)
                continue
            kept.append(gate)
        return cls(num_qubits=num_qubits, gates=tuple(kept), max_qubits=max_qubits)

    def __len__(self) -> int:
        return len(self.gates)

    def __iter__(self) -> Iterator[GateDescriptor]:
        return iter(self.gates)

    @property
    def dimension(self) -> int:
        return 1 << self.num_qubits

    @property
    def has_controlled_gates(self) -> bool:
        return any(g.is_controlled for g in self.gates)

    @property
    def qubits_used(self) -> Set[int]:
        used: Set[int] = set()
        for g in self.gates:
            used.update(g.qubits)
        return used

    def append(self, gate: GateDescriptor) -> Circuit:
        """Return a new circuit with ``gate`` added at the end."""
        return Circuit(self.num_qubits, self.gates + (gate,), self.max_qubits)

    def add(self, kind, target: int, control: Optional[int] = None) -> Circuit:
        return self.append(GateDescriptor(kind, target, control))

    def with_num_qubits(self, num_qubits: int) -> Circuit:
        """Same gates on a different register size (gates must still fit)."""
        return Circuit(num_qubits, self.gates, self.max_qubits)

    # Fluent builders

    def h(self, q: int) -> Circuit:
        return self.add(GateKind.H, q)

    def x(self, q: int) -> Circuit:
        return self.add(GateKind.X, q)

    def y(self, q: int) -> Circuit:
        return self.add(GateKind.Y, q)

    def z(self, q: int) -> Circuit:
        return self.add(GateKind.Z, q)

    def s(self, q: int) -> Circuit:
        return self.add(GateKind.S, q)

    def t(self, q: int) -> Circuit:
        return self.add(GateKind.T, q)

    def cx(self, control: int, target: int) -> Circuit:
        return self.add(GateKind.CX, target, control)

    def cy(self, control: int, target: int) -> Circuit:
        return self.add(GateKind.CY, target, control)

    def cz(self, control: int, target: int) -> Circuit:
        return self.add(GateKind.CZ, target, control)

    def cs(self, control: int, target: int) -> Circuit:
        return self.add(GateKind.CS, target, control)

    def __str__(self) -> str:
        body = ", ".join(str(g) for g in self.gates)
        return f"Circuit(n={self.num_qubits}: {body})"
