"""
Sparse pairwise mutual-information storage for QLAB.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, Mapping, Optional, Tuple

import numpy as np
from scipy import sparse


@dataclass
class MutualInformationMatrix:
    """
    Symmetric sparse matrix of pairwise mutual information.

    Only pairs with a computed value are stored; pairs for which mutual
    information is unavailable are simply absent.
    """
    num_qubits: int
    _data: Dict[Tuple[int, int], float] = field(default_factory=dict)

    @classmethod
    def from_mapping(
        cls,
        num_qubits: int,
        values: Mapping[Tuple[int, int], float],
    ) -> MutualInformationMatrix:
        matrix = cls(num_qubits=num_qubits)
        for (qa, qb), value in values.items():
            matrix.set_value(qa, qb, value)
        return matrix

    def set_value(self, qubit_a: int, qubit_b: int, value: float) -> None:
        if qubit_a == qubit_b:
            raise ValueError("Mutual information needs two distinct qubits")
        key = (min(qubit_a, qubit_b), max(qubit_a, qubit_b))
        self._data[key] = float(value)

    def get_value(self, qubit_a: int, qubit_b: int) -> Optional[float]:
        key = (min(qubit_a, qubit_b), max(qubit_a, qubit_b))
        return self._data.get(key)

    def has_value(self, qubit_a: int, qubit_b: int) -> bool:
        key = (min(qubit_a, qubit_b), max(qubit_a, qubit_b))
        return key in self._data

    def remove_value(self, qubit_a: int, qubit_b: int) -> bool:
        """Remove the value for a pair. Returns True if it existed."""
        key = (min(qubit_a, qubit_b), max(qubit_a, qubit_b))
        return self._data.pop(key, None) is not None

    @property
    def num_pairs(self) -> int:
        return len(self._data)

    def iter_pairs(self) -> Iterator[Tuple[int, int, float]]:
        for (qa, qb), value in sorted(self._data.items()):
            yield qa, qb, value

    def to_scipy_sparse(self) -> sparse.csr_matrix:
        rows = []
        cols = []
        data = []

        for (qa, qb), value in self._data.items():
            rows.extend((qa, qb))
            cols.extend((qb, qa))
            data.extend((value, value))

        return sparse.csr_matrix(
            (data, (rows, cols)),
            shape=(self.num_qubits, self.num_qubits)
        )

    def to_dense(self) -> np.ndarray:
        return self.to_scipy_sparse().toarray()
