"""Utility functions for QLAB."""

from qlab.utils.sparse import MutualInformationMatrix
from qlab.utils.validation import validate_against_exact

__all__ = ["MutualInformationMatrix", "validate_against_exact"]
