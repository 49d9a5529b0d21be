"""
Compute-once results shared by both solvers.

A solver starts UNINITIALIZED. The first query runs `_compute()` and,
only if it returns normally, moves the solver to COMPUTED. Every later
query reads the cached arrays. Accessors hand out copies so callers
can never write into the cached results.
"""

from enum import Enum


class SolverState(Enum):
    UNINITIALIZED = "uninitialized"
    COMPUTED = "computed"


class LazySolver:
    """Mixin holding the UNINITIALIZED -> COMPUTED transition."""

    def __init__(self):
        self._state = SolverState.UNINITIALIZED
        self._n_computations = 0

    @property
    def state(self) -> SolverState:
        return self._state

    @property
    def is_computed(self) -> bool:
        return self._state is SolverState.COMPUTED

    @property
    def n_computations(self) -> int:
        """How many times the solve pass has completed (0 or 1)."""
        return self._n_computations

    def solve(self):
        """Run the computation if it has not run yet. Returns self."""
        if self._state is SolverState.UNINITIALIZED:
            self._compute()
            self._n_computations += 1
            self._state = SolverState.COMPUTED
        return self

    def _compute(self):
        raise NotImplementedError
