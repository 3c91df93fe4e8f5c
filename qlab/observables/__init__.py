"""Observable computation components."""

from qlab.observables.entanglement import analyze, bell_report, mutual_information, qubit_entropies
from qlab.observables.marginals import QubitState, extract_marginals, qubit_state
from qlab.observables.sampler import MeasurementSampler, sample_histogram

__all__ = [
    "analyze",
    "bell_report",
    "mutual_information",
    "qubit_entropies",
    "QubitState",
    "extract_marginals",
    "qubit_state",
    "MeasurementSampler",
    "sample_histogram",
]
