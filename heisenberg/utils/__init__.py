"""Utility functions for heisenberg."""

from heisenberg.utils.validation import (
    compare_representations,
    is_unitary,
    validate_against_exact,
)

__all__ = ["compare_representations", "is_unitary", "validate_against_exact"]
