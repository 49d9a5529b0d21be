"""
ARRAY HELPERS: max, argmax and distances between tables

===============================================================
WHAT IT IS
===============================================================

Small numpy helpers shared by both solvers:

    max / min            over a vector or a matrix
    argmax (two ways):
        first_maximizing_index   lowest index, deterministic
        random_maximizing_index  uniform among ties after rounding
    distances:
        difference           componentwise a - b
        max_difference       sup-norm ||a - b||_inf
        average_difference   mean |a - b|

===============================================================
WHY TWO ARGMAXES?
===============================================================

Value iteration does not explore, so any maximizer is fine and the
first one keeps the output stable.

The episodic learners DO explore. np.argmax always returns the lowest
index, so among equal Q-values the same action would be picked forever
and the others would only ever be tried by the random ε branch.
Rounding to 4 decimals also treats values that differ only by float
noise as ties.

===============================================================
"""

import numpy as np

from .errors import DimensionMismatchError


def _as_array(values) -> np.ndarray:
    array = np.asarray(values, dtype=float)
    if array.size == 0:
        raise DimensionMismatchError("Cannot reduce an empty array")
    return array


def _check_same_shape(first: np.ndarray, second: np.ndarray):
    if first.shape != second.shape:
        raise DimensionMismatchError(
            f"Shape mismatch: {first.shape} vs {second.shape}"
        )


def get_max(values) -> float:
    """Largest entry of a vector or matrix."""
    return float(np.max(_as_array(values)))


def get_min(values) -> float:
    """Smallest entry of a vector or matrix."""
    return float(np.min(_as_array(values)))


def first_maximizing_index(values) -> int:
    """Lowest index attaining the maximum."""
    return int(np.argmax(_as_array(values)))


def random_maximizing_index(values, rng: np.random.Generator,
                            decimals: int = 4) -> int:
    """
    Index of the maximum, ties broken uniformly at random.

    Two entries tie when they agree after rounding to `decimals`.
    Entries equal to -inf never tie with a finite maximum.
    """
    array = _as_array(values)
    rounded = np.round(array, decimals)
    maximizers = np.flatnonzero(rounded == np.max(rounded))
    return int(maximizers[rng.integers(len(maximizers))])


def difference(first, second) -> np.ndarray:
    """Componentwise first - second; shapes must match exactly."""
    first = _as_array(first)
    second = _as_array(second)
    _check_same_shape(first, second)
    return first - second


def max_difference(first, second) -> float:
    """
    Sup-norm of the difference:

        ||a - b||_inf = max_i |a_i - b_i|

    This is the stopping criterion of value iteration.
    """
    return float(np.max(np.abs(difference(first, second))))


def average_difference(first, second) -> float:
    """Mean absolute difference, handy to compare two value functions."""
    return float(np.mean(np.abs(difference(first, second))))
