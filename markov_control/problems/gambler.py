"""
THE GAMBLER'S PROBLEM

===============================================================
SETUP
===============================================================

A gambler holds capital s in {0, 1, ..., N}. At every step they stake
a bet b in {1, ..., min(s, N - s)} on a coin toss:

    heads (probability p):  s -> s + b
    tails (1 - p):          s -> s - b

The game ends at s = 0 (ruin, reward 0) or s = N (win, reward 1).
No running reward and no discount, so V(s) = P(reach N from s).

For a fair coin (p = 0.5) every strategy gives V(s) = s / N.
For p < 0.5 bold play is optimal.

===============================================================
ACTIONS vs ACTION INDICES
===============================================================

Value iteration works with the literal bets 1..min(s, N - s).
The episodic learners work with indices 0..min(s, N - s) - 1 into a
table of width N - 1, bet = index + 1.

===============================================================
"""

import numpy as np

from ..errors import ConfigurationError
from ..validation import check_in_range


class CoinGamblerProblem:
    """Gambler's problem, usable by both ValueIteration and the TD learners."""

    def __init__(self, head_probability: float = 0.4, money_to_win: int = 100):
        check_in_range("head_probability", head_probability, 0.0, 1.0)
        if money_to_win < 2:
            raise ConfigurationError(f"money_to_win must be at least 2, got {money_to_win}")

        self.head_probability = head_probability
        self.money_to_win = money_to_win

        self.states = np.arange(money_to_win + 1, dtype=float)
        self.n_states = money_to_win + 1
        # Largest sensible bet is N - 1 (at s = 1 or s = N - 1 it is 1)
        self.n_actions = money_to_win - 1

        self.reward_at_states = np.zeros(self.n_states)
        self.reward_at_states[money_to_win] = 1.0
        self.absorbing_states = (0, money_to_win)
        self.running_rewards = np.zeros((self.n_states, self.n_actions))

    def is_absorbing(self, state: int) -> bool:
        return state == 0 or state == self.money_to_win

    def _max_bet(self, state: int) -> int:
        return min(state, self.money_to_win - state)

    @staticmethod
    def action_from_index(action_index: int) -> int:
        return action_index + 1

    # Known dynamics (value iteration)

    def actions(self, state_index: int) -> np.ndarray:
        return np.arange(1, self._max_bet(state_index) + 1, dtype=float)

    def running_reward(self, state_index: int, action: float) -> float:
        return 0.0

    def transition_distribution(self, state_index: int, action: float):
        bet = int(action)
        p = self.head_probability
        return (np.array([state_index + bet, state_index - bet]),
                np.array([p, 1.0 - p]))

    # Unknown dynamics (Q-learning, SARSA)

    def legal_actions(self, state: int) -> np.ndarray:
        return np.arange(self._max_bet(state))

    def sample_next_state(self, state: int, action_index: int,
                          rng: np.random.Generator) -> int:
        bet = self.action_from_index(action_index)
        if rng.random() < self.head_probability:
            return state + bet
        return state - bet
