"""
VALUE ITERATION: Known dynamics, synchronous dynamic programming

===============================================================
WHAT IT IS (THE CORE IDEA)
===============================================================

The transition law P(s'|s,a) is KNOWN. Then the optimal value function
is the fixed point of the Bellman optimality operator:

    V*(s) = max_a [ R(s,a) + γ × Σ_s' P(s'|s,a) × V*(s') ]

for every non-absorbing s, while an absorbing state just keeps its
terminal reward:

    V*(s) = reward(s)       s absorbing

===============================================================
THE ALGORITHM
===============================================================

1. V_0(s) = reward(s) for every s (zero outside the absorbing set)
2. Sweep: for every non-absorbing s
       V_{k+1}(s) = max_a [ R(s,a) + γ × E[V_k(next) | s, a] ]
   using ONLY the previous sweep V_k (Jacobi, not Gauss-Seidel).
3. Stop when ||V_{k+1} - V_k||_inf < precision.

The maximizing action of the last sweep is the optimal action. Ties go
to the first action in the problem's action list: nothing is explored
here, so there is no reason to randomize.

===============================================================
NON-CONVERGENCE
===============================================================

With γ = 1 the operator is not a contraction and convergence relies on
the absorbing states. The sweep count is therefore capped
(max_iterations) and running out raises ConvergenceError instead of
looping forever.

===============================================================
"""

from typing import List, Tuple

import numpy as np

from .array_ops import first_maximizing_index, max_difference
from .errors import ConfigurationError, ContractViolationError, ConvergenceError
from .lazy import LazySolver
from .validation import check_in_range, check_positive, check_rewards


class ValueIteration(LazySolver):
    """
    Value iteration for a problem with known dynamics.

    The problem supplies:
        states                                  literal state values, length S
        reward_at_states                        length S
        absorbing_states                        state indices
        actions(state_index)                    literal legal actions
        running_reward(state_index, action)     float
        transition_distribution(state_index, action)
                                                (next_state_indices, probabilities)

    Results are computed on first access and cached.
    """

    def __init__(self, problem, discount_factor: float = 1.0,
                 precision: float = 1e-9, max_iterations: int = 10000,
                 verbose: bool = False):
        super().__init__()
        check_in_range("discount_factor", discount_factor, 0.0, 1.0)
        check_positive("precision", precision)
        check_positive("max_iterations", max_iterations)

        self.problem = problem
        self._discount_factor = discount_factor
        self._precision = precision
        self._max_iterations = max_iterations
        self.verbose = verbose

        self._rewards, self._absorbing = check_rewards(
            problem.reward_at_states, problem.absorbing_states)
        self.n_states = len(self._rewards)
        states = getattr(problem, "states", None)
        if states is not None and len(states) != self.n_states:
            raise ConfigurationError(
                f"problem has {len(states)} states but {self.n_states} rewards"
            )

        self._values = None
        self._optimal_actions = None
        self._history = []

    # =============================================================
    # PARAMETERS (READ-ONLY)
    # =============================================================

    @property
    def discount_factor(self) -> float:
        return self._discount_factor

    @property
    def precision(self) -> float:
        return self._precision

    @property
    def max_iterations(self) -> int:
        return self._max_iterations

    # =============================================================
    # SOLVER
    # =============================================================

    def _checked_distribution(self, s: int, action) -> Tuple[np.ndarray, np.ndarray]:
        """The law of the next state, rejected unless it is a distribution on [0, S)."""
        next_states, probabilities = self.problem.transition_distribution(s, action)
        next_states = np.asarray(next_states, dtype=int)
        probabilities = np.asarray(probabilities, dtype=float)

        if next_states.shape != probabilities.shape:
            raise ContractViolationError(
                f"State {s}, action {action}: {next_states.size} next states "
                f"but {probabilities.size} probabilities"
            )
        if np.any((next_states < 0) | (next_states >= self.n_states)):
            raise ContractViolationError(
                f"State {s}, action {action}: next states {next_states.tolist()} "
                f"outside [0, {self.n_states})"
            )
        if np.any(probabilities < 0) or not np.isclose(probabilities.sum(), 1.0):
            raise ContractViolationError(
                f"State {s}, action {action}: probabilities {probabilities.tolist()} "
                f"are not a distribution"
            )
        return next_states, probabilities

    def _build_backups(self) -> List[Tuple[int, np.ndarray, np.ndarray, np.ndarray]]:
        """
        Precompute, for every non-absorbing state, the one-step model:

            actions             (k,)
            running rewards     (k,)
            transition matrix   (k, S)   row a = P(.|s, a)

        so that one backup is  returns = R + γ × P @ V_old.
        """
        backups = []
        for s in np.flatnonzero(~self._absorbing):
            actions = np.asarray(self.problem.actions(s))
            if actions.size == 0:
                raise ContractViolationError(
                    f"Non-absorbing state {s} has no legal actions"
                )

            running = np.empty(len(actions))
            transitions = np.zeros((len(actions), self.n_states))
            for k, action in enumerate(actions):
                running[k] = self.problem.running_reward(s, action)
                next_states, probabilities = self._checked_distribution(s, action)
                # np.add.at accumulates when two outcomes share a next state
                np.add.at(transitions[k], next_states, probabilities)

            backups.append((int(s), actions, running, transitions))
        return backups

    def _compute(self):
        backups = self._build_backups()

        old_values = self._rewards.copy()
        optimal_actions = np.full(self.n_states, np.nan)
        history = [old_values.copy()]
        delta = np.inf

        for iteration in range(self._max_iterations):
            # Absorbing entries are copied over and never touched
            new_values = old_values.copy()

            for s, actions, running, transitions in backups:
                returns = running + self._discount_factor * (transitions @ old_values)
                best = first_maximizing_index(returns)
                new_values[s] = returns[best]
                optimal_actions[s] = actions[best]

            delta = max_difference(new_values, old_values)
            history.append(new_values.copy())
            old_values = new_values

            if delta < self._precision:
                if self.verbose:
                    print(f"Value iteration converged in {iteration+1} iterations "
                          f"(delta={delta:.3e})")
                break
        else:
            raise ConvergenceError(self._max_iterations, delta, self._precision)

        self._values = old_values
        self._optimal_actions = optimal_actions
        self._history = history

    # =============================================================
    # RESULTS (COPIES)
    # =============================================================

    @property
    def value_function(self) -> np.ndarray:
        """V*(s) for every state; equals reward(s) on absorbing states."""
        self.solve()
        return self._values.copy()

    @property
    def optimal_actions(self) -> np.ndarray:
        """Literal optimal action per state, NaN on absorbing states."""
        self.solve()
        return self._optimal_actions.copy()

    @property
    def history(self) -> List[np.ndarray]:
        """Value vector before the first sweep and after every sweep."""
        self.solve()
        return [values.copy() for values in self._history]

    @property
    def n_iterations(self) -> int:
        """Number of sweeps performed."""
        self.solve()
        return len(self._history) - 1
