"""
Solvers for finite, episodic controlled Markov chains.

    ValueIteration               transition law known
    QLearning, Sarsa             transition law unknown, learn from episodes
"""

from .errors import (
    ConfigurationError,
    ContractViolationError,
    ConvergenceError,
    DimensionMismatchError,
    MarkovControlError,
)
from .lazy import SolverState
from .learning_rules import QLearningRule, SarsaRule
from .problems import CoinGamblerProblem
from .temporal_difference import (
    UNDEFINED_ACTION,
    QLearning,
    Sarsa,
    TemporalDifferenceLearning,
)
from .value_iteration import ValueIteration

__version__ = "0.1.0"

__all__ = [
    "CoinGamblerProblem",
    "ConfigurationError",
    "ContractViolationError",
    "ConvergenceError",
    "DimensionMismatchError",
    "MarkovControlError",
    "QLearning",
    "QLearningRule",
    "Sarsa",
    "SarsaRule",
    "SolverState",
    "TemporalDifferenceLearning",
    "UNDEFINED_ACTION",
    "ValueIteration",
]
