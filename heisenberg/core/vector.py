"""State-vector primitives shared by every machine representation."""

from __future__ import annotations

from typing import Sequence
import numpy as np

from heisenberg.core.errors import DimensionError


ZERO_STATE = np.array([1, 0], dtype=np.complex128)
ONE_STATE = np.array([0, 1], dtype=np.complex128)


def empty_state() -> np.ndarray:
    """State of a machine that holds no qubits yet."""
    return np.zeros(0, dtype=np.complex128)


def basis_state(bit: int) -> np.ndarray:
    """|0⟩ or |1⟩ as a fresh 2-element vector."""
    return (ONE_STATE if bit else ZERO_STATE).copy()


def tensor(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """
    Kronecker product of two state vectors.

    ``out[x * len(b) + y] == a[x] * b[y]``, so ``a`` supplies the
    most-significant bits of the combined index.
    """
    return np.kron(np.asarray(a, dtype=np.complex128), np.asarray(b, dtype=np.complex128))


def probabilities(state: np.ndarray) -> np.ndarray:
    """Measurement probabilities |amplitude|^2 in the computational basis."""
    return np.abs(state) ** 2


def squared_error(state: np.ndarray, targets: Sequence[float]) -> float:
    """Sum of squared differences between state probabilities and targets."""
    if len(targets) > len(state):
        raise DimensionError(
            f"{len(targets)} target probabilities for a state of length {len(state)}"
        )
    probs = probabilities(state[: len(targets)])
    diff = probs - np.asarray(targets, dtype=float)
    return float(np.sum(diff * diff))
