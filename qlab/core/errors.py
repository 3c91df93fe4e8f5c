"""Exception hierarchy for QLAB.

Validation problems are raised where circuits and descriptors are built,
so the simulation fold itself is only ever handed well-formed input.
"""


class QlabError(Exception):
    """Base class for all QLAB errors."""


class InvalidQubitIndexError(QlabError, ValueError):
    """A gate or reduction refers to a qubit outside ``[0, N)``, or reuses one."""


class UnsupportedGateError(QlabError, ValueError):
    """A gate kind that the gate library does not implement."""


class QubitLimitError(QlabError, ValueError):
    """The requested register is larger than the configured ceiling."""


class ReductionUnavailableError(QlabError, ValueError):
    """A reduced density matrix was requested for too many kept qubits."""


class NormalizationError(QlabError, ArithmeticError):
    """The amplitude vector no longer has unit norm."""
