"""
Entanglement graph for QLAB.

Nodes are qubits carrying their single-qubit entropy; edges join qubit
pairs whose mutual information exceeds a threshold. The graph is rebuilt
from scratch for every state and never updated incrementally.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Set, Tuple

import networkx as nx
import numpy as np


@dataclass
class EntanglementEdge:
    """
    Edge of the entanglement graph.

    Attributes:
        qubit_a: Lower qubit index
        qubit_b: Higher qubit index
        mutual_information: I(a:b) in bits
    """
    qubit_a: int
    qubit_b: int
    mutual_information: float

    @property
    def key(self) -> Tuple[int, int]:
        return (self.qubit_a, self.qubit_b)


@dataclass
class EntanglementGraph:
    """
    Qubit graph weighted by entropy (nodes) and mutual information (edges).

    Attributes:
        num_qubits: Register size
        entropies: Per-qubit von Neumann entropy
        edges: Mapping (a, b) -> EntanglementEdge with a < b
        threshold: Smallest mutual information kept as an edge
    """
    num_qubits: int
    entropies: List[float] = field(default_factory=list)
    edges: Dict[Tuple[int, int], EntanglementEdge] = field(default_factory=dict)
    threshold: float = 1e-6
    _graph: Optional[nx.Graph] = field(default=None, repr=False)

    def __post_init__(self):
        if not self.entropies:
            self.entropies = [0.0] * self.num_qubits
        if len(self.entropies) != self.num_qubits:
            raise ValueError(
                f"Expected {self.num_qubits} entropies, got {len(self.entropies)}"
            )
        self._rebuild_graph()

    @classmethod
    def from_values(
        cls,
        entropies: Sequence[float],
        mutual_information: Mapping[Tuple[int, int], float],
        threshold: float = 1e-6,
    ) -> EntanglementGraph:
        edges = {}
        for (a, b), value in mutual_information.items():
            if value <= threshold:
                continue
            key = (min(a, b), max(a, b))
            edges[key] = EntanglementEdge(key[0], key[1], float(value))
        return cls(
            num_qubits=len(entropies),
            entropies=[float(s) for s in entropies],
            edges=edges,
            threshold=threshold,
        )

    def _rebuild_graph(self):
        self._graph = nx.Graph()
        for q in range(self.num_qubits):
            self._graph.add_node(q, entropy=self.entropies[q])
        for (qa, qb), edge in self.edges.items():
            self._graph.add_edge(qa, qb, weight=edge.mutual_information, edge=edge)

    @property
    def graph(self) -> nx.Graph:
        return self._graph

    @property
    def num_edges(self) -> int:
        return len(self.edges)

    @property
    def total_mutual_information(self) -> float:
        return sum(e.mutual_information for e in self.edges.values())

    def has_edge(self, qubit_a: int, qubit_b: int) -> bool:
        return (min(qubit_a, qubit_b), max(qubit_a, qubit_b)) in self.edges

    def neighbors(self, qubit: int) -> Set[int]:
        return set(self._graph.neighbors(qubit))

    def strongest_pair(self) -> Optional[EntanglementEdge]:
        """Edge with the largest mutual information, if any."""
        if not self.edges:
            return None
        return max(self.edges.values(), key=lambda e: (e.mutual_information, -e.qubit_a))

    def connected_clusters(self) -> List[Set[int]]:
        """Groups of qubits linked by mutual information, largest first."""
        clusters = [set(c) for c in nx.connected_components(self._graph)]
        return sorted(clusters, key=lambda c: (-len(c), min(c)))

    def entangled_qubits(self, min_entropy: float = 1e-6) -> Set[int]:
        return {q for q, s in enumerate(self.entropies) if s > min_entropy}

    def iter_edges(self) -> Iterator[EntanglementEdge]:
        return iter(sorted(self.edges.values(), key=lambda e: e.key))

    def to_adjacency_matrix(self) -> np.ndarray:
        """Symmetric matrix of edge mutual information."""
        return nx.to_numpy_array(
            self._graph, nodelist=list(range(self.num_qubits)), weight="weight"
        )

    def __repr__(self) -> str:
        return f"EntanglementGraph(qubits={self.num_qubits}, edges={self.num_edges})"
