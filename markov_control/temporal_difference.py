"""
TEMPORAL DIFFERENCE LEARNING: Unknown dynamics, learn from episodes

===============================================================
WHAT IT IS (THE CORE IDEA)
===============================================================

The transition law is UNKNOWN: we can only SAMPLE the next state.
So instead of computing E[V(next)] we learn a table

    Q(s,a) ≈ value of taking action a in state s, then acting optimally

from simulated episodes, nudging Q toward a one-step target:

    Q(s,a) <- Q(s,a) + λ × [target - Q(s,a)]

    target = R(s,a) + γ × bootstrap(s')     s' not absorbing
    target = reward(s')                     s' absorbing

At an absorbing s' the terminal reward is the exact remaining value,
so there is nothing to bootstrap and no discount is applied.

===============================================================
THE EPISODE LOOP
===============================================================

    s = uniform random non-absorbing state
    c = rule.choose_candidate_action(s)
    loop:
        a  = rule.choose_executed_action(s, c)
        s' = problem.sample_next_state(s, a)
        if s' absorbing:  update toward reward(s'), stop
        (b, c') = rule.bootstrap_value_and_next_candidate(s')
        update toward R(s,a) + γ × b
        s, c = s', c'

The learning RULE is the only difference between Q-learning and SARSA
(see learning_rules.py). The engine owns everything else: the Q-table,
the ε-greedy policy, the fixed number of episodes.

===============================================================
THE Q-TABLE
===============================================================

    Q[s, a] = -inf          a not legal in s (never selected by a max)
    Q[s, a] = reward(s)     a legal (a neutral seed, overwritten on visit)

Absorbing rows have no legal actions, so they are -inf everywhere.
Their value is the terminal reward and their action is UNDEFINED_ACTION.

===============================================================
EXPLORATION: ε-greedy
===============================================================

    with probability ε:  uniform among the LEGAL actions of s
    otherwise:           argmax_a Q[s, a], ties (4 decimals) at random

===============================================================
"""

from typing import List, Optional

import numpy as np

from .array_ops import random_maximizing_index
from .errors import ConfigurationError, ContractViolationError, MarkovControlError
from .lazy import LazySolver
from .learning_rules import QLearningRule, SarsaRule
from .validation import check_in_range, check_positive, check_rewards

UNDEFINED_ACTION = -1


class TemporalDifferenceLearning(LazySolver):
    """
    Episodic TD control with a pluggable learning rule.

    The problem supplies:
        n_states, n_actions
        reward_at_states, absorbing_states
        running_rewards                         optional (S, A) matrix
        legal_actions(state)                    action indices
        sample_next_state(state, action, rng)   next state index
        is_absorbing(state)

    Termination is decided by absorbing_states, the same set that seeds
    the Q-table, so is_absorbing must agree with it.

    The rule supplies choose_candidate_action, choose_executed_action
    and bootstrap_value_and_next_candidate.
    """

    def __init__(self, problem, rule, discount_factor: float = 1.0,
                 learning_rate: float = 0.1,
                 exploration_probability: float = 0.1,
                 n_episodes: int = 10000,
                 history_interval: Optional[int] = None,
                 rng: Optional[np.random.Generator] = None,
                 seed: Optional[int] = None,
                 verbose: bool = False):
        super().__init__()
        check_in_range("discount_factor", discount_factor, 0.0, 1.0)
        check_in_range("learning_rate", learning_rate, 0.0, 1.0, low_inclusive=False)
        check_in_range("exploration_probability", exploration_probability, 0.0, 1.0)
        check_positive("n_episodes", n_episodes)
        if history_interval is not None:
            check_positive("history_interval", history_interval)

        self.problem = problem
        self.rule = rule
        self._discount_factor = discount_factor
        self._learning_rate = learning_rate
        self._exploration_probability = exploration_probability
        self._n_episodes = n_episodes
        self._history_interval = history_interval
        self.verbose = verbose
        self.rng = rng if rng is not None else np.random.default_rng(seed)

        self._rewards, self._absorbing = check_rewards(
            problem.reward_at_states, problem.absorbing_states)
        self.n_states = len(self._rewards)
        if self.n_states != problem.n_states:
            raise ConfigurationError(
                f"reward_at_states has length {self.n_states}, "
                f"expected n_states={problem.n_states}"
            )
        self.n_actions = problem.n_actions

        running = getattr(problem, "running_rewards", None)
        if running is None:
            running = np.zeros((self.n_states, self.n_actions))
        self._running_rewards = np.asarray(running, dtype=float)
        if self._running_rewards.shape != (self.n_states, self.n_actions):
            raise ConfigurationError(
                f"running_rewards must have shape {(self.n_states, self.n_actions)}, "
                f"got {self._running_rewards.shape}"
            )

        self._legal = None
        self._q = None
        self._values = None
        self._policy = None
        self._history = []

    # =============================================================
    # PARAMETERS (READ-ONLY)
    # =============================================================

    @property
    def discount_factor(self) -> float:
        return self._discount_factor

    @property
    def learning_rate(self) -> float:
        return self._learning_rate

    @property
    def exploration_probability(self) -> float:
        return self._exploration_probability

    @property
    def n_episodes(self) -> int:
        return self._n_episodes

    # =============================================================
    # POLICY
    # These read the Q-table, so they are only valid once training
    # has started (inside the learning rules) or after solve().
    # =============================================================

    def _require_table(self):
        if self._q is None:
            raise MarkovControlError(
                "The Q-table does not exist yet; call solve() first"
            )

    def legal_actions(self, state: int) -> np.ndarray:
        self._require_table()
        return self._legal[state]

    def epsilon_greedy(self, state: int) -> int:
        """ε-greedy draw over the current Q-table."""
        self._require_table()
        if self.rng.random() < self._exploration_probability:
            legal = self._legal[state]
            return int(legal[self.rng.integers(len(legal))])
        return random_maximizing_index(self._q[state], self.rng)

    def q_value(self, state: int, action: int) -> float:
        self._require_table()
        return float(self._q[state, action])

    def max_q_value(self, state: int) -> float:
        """max_a Q[state, a] over the legal actions."""
        self._require_table()
        return float(np.max(self._q[state, self._legal[state]]))

    # =============================================================
    # TRAINING
    # =============================================================

    def _collect_legal_actions(self) -> List[np.ndarray]:
        legal = []
        for s in range(self.n_states):
            if self._absorbing[s]:
                legal.append(np.empty(0, dtype=int))
                continue

            actions = np.asarray(self.problem.legal_actions(s), dtype=int)
            if actions.size == 0:
                raise ContractViolationError(
                    f"Non-absorbing state {s} has no legal actions"
                )
            if actions.min() < 0 or actions.max() >= self.n_actions:
                raise ContractViolationError(
                    f"State {s} has action indices outside [0, {self.n_actions})"
                )
            legal.append(actions)
        return legal

    def _initial_q_table(self) -> np.ndarray:
        Q = np.full((self.n_states, self.n_actions), -np.inf)
        for s, actions in enumerate(self._legal):
            Q[s, actions] = self._rewards[s]
        return Q

    def _run_episode(self, start_states: np.ndarray):
        Q = self._q
        lr = self._learning_rate

        state = int(start_states[self.rng.integers(len(start_states))])
        candidate = self.rule.choose_candidate_action(self, state)

        while True:
            action = self.rule.choose_executed_action(self, state, candidate)
            next_state = self.problem.sample_next_state(state, action, self.rng)
            if not 0 <= next_state < self.n_states:
                raise ContractViolationError(
                    f"State {state}, action {action}: sampled next state "
                    f"{next_state} outside [0, {self.n_states})"
                )

            if self._absorbing[next_state]:
                Q[state, action] += lr * (self._rewards[next_state] - Q[state, action])
                return

            bootstrap, candidate = self.rule.bootstrap_value_and_next_candidate(
                self, next_state)
            target = self._running_rewards[state, action] + self._discount_factor * bootstrap
            Q[state, action] += lr * (target - Q[state, action])
            state = next_state

    def _derive_values(self) -> np.ndarray:
        values = self._rewards.copy()
        for s in np.flatnonzero(~self._absorbing):
            values[s] = self.max_q_value(s)
        return values

    def _derive_policy(self) -> np.ndarray:
        policy = np.full(self.n_states, UNDEFINED_ACTION, dtype=int)
        for s in np.flatnonzero(~self._absorbing):
            policy[s] = random_maximizing_index(self._q[s], self.rng)
        return policy

    def _compute(self):
        self._legal = self._collect_legal_actions()
        self._q = self._initial_q_table()
        start_states = np.flatnonzero(~self._absorbing)
        history = []

        report_every = max(1, self._n_episodes // 10)
        for episode in range(1, self._n_episodes + 1):
            self._run_episode(start_states)

            if self._history_interval and (episode % self._history_interval == 0
                                           or episode == self._n_episodes):
                history.append(self._derive_values())

            if self.verbose and episode % report_every == 0:
                print(f"episode={episode:>7} / {self._n_episodes}")

        self._values = self._derive_values()
        self._policy = self._derive_policy()
        self._history = history
        # Frozen from here on
        self._q.flags.writeable = False

    # =============================================================
    # RESULTS (COPIES)
    # =============================================================

    @property
    def q_values(self) -> np.ndarray:
        """The learned (S, A) Q-table; illegal entries are -inf."""
        self.solve()
        return self._q.copy()

    @property
    def value_function(self) -> np.ndarray:
        """max_a Q[s, a], or the terminal reward on absorbing states."""
        self.solve()
        return self._values.copy()

    @property
    def optimal_policy_indices(self) -> np.ndarray:
        """argmax_a Q[s, a], UNDEFINED_ACTION on absorbing states."""
        self.solve()
        return self._policy.copy()

    @property
    def value_history(self) -> List[np.ndarray]:
        """Value function every history_interval episodes (empty if disabled)."""
        self.solve()
        return [values.copy() for values in self._history]


class QLearning(TemporalDifferenceLearning):
    """Off-policy TD control: bootstrap on max_a' Q(s', a')."""

    def __init__(self, problem, **kwargs):
        super().__init__(problem, QLearningRule(), **kwargs)


class Sarsa(TemporalDifferenceLearning):
    """On-policy TD control: bootstrap on Q(s', a') for the a' taken next."""

    def __init__(self, problem, **kwargs):
        super().__init__(problem, SarsaRule(), **kwargs)
