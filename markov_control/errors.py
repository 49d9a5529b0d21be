"""
Exceptions raised by the solvers.

Configuration and shape problems surface at the offending call.
Nothing here is transient, so nothing is ever retried.
"""


class MarkovControlError(Exception):
    """Base class for every error raised by markov_control."""


class DimensionMismatchError(MarkovControlError, ValueError):
    """Two arrays that must have the same shape do not."""


class ConfigurationError(MarkovControlError, ValueError):
    """A solver was built with parameters outside their valid range."""


class ContractViolationError(MarkovControlError, RuntimeError):
    """A problem binding broke its contract (e.g. no legal actions)."""


class ConvergenceError(MarkovControlError, RuntimeError):
    """Value iteration ran out of sweeps before reaching the precision."""

    def __init__(self, n_iterations, delta, precision):
        self.n_iterations = n_iterations
        self.delta = delta
        self.precision = precision
        super().__init__(
            f"Value iteration did not converge in {n_iterations} iterations "
            f"(last delta={delta:.3e}, required precision={precision:.3e})"
        )
