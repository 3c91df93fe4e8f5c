"""
Measurement sampling for QLAB.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional

import numpy as np

from qlab.core.statevector import num_qubits_of, probabilities

logger = logging.getLogger(__name__)


def cumulative_distribution(state: np.ndarray) -> np.ndarray:
    """``cdf[j] = Σ_{i ≤ j} |a_i|²``."""
    return np.cumsum(probabilities(state))


def _resolve_rng(rng: Optional[np.random.Generator], seed: Optional[int]) -> np.random.Generator:
    if rng is not None:
        return rng
    return np.random.default_rng(seed)


def sample_indices(
    state: np.ndarray,
    shots: int,
    rng: Optional[np.random.Generator] = None,
    seed: Optional[int] = None,
) -> np.ndarray:
    """
    Draw basis indices by inverse-transform sampling.

    Each draw ``r ∈ [0, 1)`` selects the smallest ``j`` with ``r < cdf[j]``.
    When rounding leaves ``cdf[-1]`` below ``r`` the last index is used.

    Args:
        state: Amplitude vector
        shots: Number of draws
        rng: Random generator (takes precedence over ``seed``)
        seed: Seed for a fresh generator

    Returns:
        Integer array of sampled basis indices
    """
    if shots < 0:
        raise ValueError(f"shots must be non-negative, got {shots}")
    cdf = cumulative_distribution(state)
    draws = _resolve_rng(rng, seed).random(shots)
    outcomes = np.searchsorted(cdf, draws, side="right")
    return np.minimum(outcomes, cdf.shape[0] - 1)


def sample_histogram(
    state: np.ndarray,
    shots: int,
    histogram: Optional[np.ndarray] = None,
    rng: Optional[np.random.Generator] = None,
    seed: Optional[int] = None,
) -> np.ndarray:
    """
    Sample ``shots`` outcomes and count them per basis index.

    If ``histogram`` is given, the new counts are added to a copy of it;
    otherwise counting starts from zero.
    """
    dim = state.shape[0]
    if histogram is None:
        counts = np.zeros(dim, dtype=np.int64)
    else:
        counts = np.array(histogram, dtype=np.int64)
        if counts.shape != (dim,):
            raise ValueError(f"Histogram shape {counts.shape} does not match state ({dim},)")
    outcomes = sample_indices(state, shots, rng=rng, seed=seed)
    counts += np.bincount(outcomes, minlength=dim)
    return counts


class MeasurementSampler:
    """
    Stateful shot sampler that owns a measurement histogram.

    The histogram is cleared whenever the sampled amplitude vector differs
    from the previous one, since earlier counts describe a different
    distribution. Otherwise ``accumulate=True`` adds to the existing counts.

    Usage:
        sampler = MeasurementSampler(seed=7)
        counts = sampler.sample(state, shots=1000, accumulate=True)
    """

    def __init__(self, seed: Optional[int] = None, rng: Optional[np.random.Generator] = None):
        self._rng = _resolve_rng(rng, seed)
        self._state: Optional[np.ndarray] = None
        self._histogram: Optional[np.ndarray] = None

    @property
    def histogram(self) -> Optional[np.ndarray]:
        if self._histogram is None:
            return None
        return self._histogram.copy()

    @property
    def total_shots(self) -> int:
        return 0 if self._histogram is None else int(self._histogram.sum())

    def reset(self) -> None:
        self._state = None
        self._histogram = None

    def observe(self, state: np.ndarray) -> bool:
        """
        Register the current state; clears the histogram if it changed.

        Returns:
            True if the histogram was reset
        """
        if self._state is not None and np.array_equal(self._state, state):
            return False
        self._state = np.array(state, dtype=np.complex128)
        self._histogram = np.zeros(state.shape[0], dtype=np.int64)
        logger.debug("Measurement histogram reset for a new state")
        return True

    def sample(self, state: np.ndarray, shots: int, accumulate: bool = False) -> np.ndarray:
        """
        Run ``shots`` measurements of ``state``.

        Args:
            state: Amplitude vector
            shots: Number of shots
            accumulate: Add to the counts of earlier runs on the same state

        Returns:
            Copy of the histogram after this run
        """
        self.observe(state)
        base = self._histogram if accumulate else None
        self._histogram = sample_histogram(state, shots, histogram=base, rng=self._rng)
        logger.debug("Sampled %d shots (total %d)", shots, self.total_shots)
        return self._histogram.copy()


def empirical_frequencies(histogram: np.ndarray) -> np.ndarray:
    """Normalized counts (all zeros if nothing was sampled)."""
    histogram = np.asarray(histogram, dtype=np.float64)
    total = histogram.sum()
    if total == 0:
        return np.zeros_like(histogram)
    return histogram / total


def histogram_to_counts(histogram: np.ndarray, num_qubits: Optional[int] = None) -> Dict[str, int]:
    """
    Convert a histogram into a bitstring -> count dictionary.

    Bitstrings put qubit N-1 leftmost (the Qiskit counts convention);
    outcomes that never occurred are omitted.
    """
    histogram = np.asarray(histogram)
    if num_qubits is None:
        num_qubits = num_qubits_of(histogram)
    return {
        format(idx, f"0{num_qubits}b"): int(count)
        for idx, count in enumerate(histogram)
        if count > 0
    }


def counts_to_expectations(counts: Dict[str, int], observables: List[str]) -> Dict[str, float]:
    """
    Estimate Z-basis expectation values from measurement counts.

    Args:
        counts: Bitstring -> count dictionary (qubit N-1 leftmost)
        observables: Z strings such as "Z0" or "Z0Z2"

    Returns:
        Dictionary of observable -> expectation value
    """
    total = sum(counts.values())
    expectations = {}

    for obs in observables:
        z_indices = [int(m) for m in re.findall(r"Z(\d+)", obs.upper())]

        if not z_indices or total == 0:
            expectations[obs] = 1.0 if not z_indices else 0.0
            continue

        exp_sum = 0
        for bitstring, count in counts.items():
            parity = 1
            for q in z_indices:
                if q < len(bitstring):
                    parity *= 1 - 2 * int(bitstring[-1 - q])
            exp_sum += count * parity

        expectations[obs] = exp_sum / total

    return expectations
