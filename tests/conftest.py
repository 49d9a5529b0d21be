"""Shared fixtures and small hand-built problems for the solver tests."""

import numpy as np
import pytest

from markov_control import CoinGamblerProblem


class ChainProblem:
    """
    Deterministic chain 0 -> 1 -> 2, state 2 absorbing with reward 1.

    Action index 0 ("advance", literal 1.0) moves one step right and pays
    a running reward of 0.5. Action index 1 ("stay", literal 0.0) stays
    put and pays nothing.
    """

    ADVANCE, STAY = 0, 1

    def __init__(self, advance_reward: float = 0.5):
        self.advance_reward = advance_reward
        self.states = np.arange(3, dtype=float)
        self.n_states = 3
        self.n_actions = 2
        self.reward_at_states = np.array([0.0, 0.0, 1.0])
        self.absorbing_states = (2,)
        self.running_rewards = np.array([
            [advance_reward, 0.0],
            [advance_reward, 0.0],
            [0.0, 0.0],
        ])

    def is_absorbing(self, state):
        return state == 2

    # Known dynamics
    def actions(self, state_index):
        return np.array([1.0, 0.0])

    def running_reward(self, state_index, action):
        return self.advance_reward if action == 1.0 else 0.0

    def transition_distribution(self, state_index, action):
        return np.array([state_index + int(action)]), np.array([1.0])

    # Unknown dynamics
    def legal_actions(self, state):
        return np.array([self.ADVANCE, self.STAY])

    def sample_next_state(self, state, action_index, rng):
        return state + 1 if action_index == self.ADVANCE else state


class DeadEndProblem(ChainProblem):
    """Chain whose middle state has no actions although it is not absorbing."""

    def actions(self, state_index):
        if state_index == 1:
            return np.array([])
        return super().actions(state_index)

    def legal_actions(self, state):
        if state == 1:
            return np.array([], dtype=int)
        return super().legal_actions(state)


class LeakyChainProblem(ChainProblem):
    """Chain whose "stay" action leaks to the nonexistent state -1."""

    def transition_distribution(self, state_index, action):
        if action == 0.0:
            return np.array([-1]), np.array([1.0])
        return super().transition_distribution(state_index, action)

    def sample_next_state(self, state, action_index, rng):
        if action_index == self.STAY:
            return -1
        return super().sample_next_state(state, action_index, rng)


class LossyChainProblem(ChainProblem):
    """Chain whose "advance" probabilities only add up to one half."""

    def transition_distribution(self, state_index, action):
        next_states, probabilities = super().transition_distribution(state_index, action)
        return next_states, 0.5 * probabilities


class CountingGambler(CoinGamblerProblem):
    """Gambler problem that counts how many transitions were sampled."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.n_samples = 0

    def sample_next_state(self, state, action_index, rng):
        self.n_samples += 1
        return super().sample_next_state(state, action_index, rng)


@pytest.fixture
def fair_gambler():
    return CoinGamblerProblem(head_probability=0.5, money_to_win=100)


@pytest.fixture
def unfair_gambler():
    return CoinGamblerProblem(head_probability=0.4, money_to_win=10)


@pytest.fixture
def chain():
    return ChainProblem()


@pytest.fixture
def dead_end():
    return DeadEndProblem()


@pytest.fixture
def counting_gambler():
    return CountingGambler(head_probability=0.4, money_to_win=10)


@pytest.fixture
def leaky_chain():
    return LeakyChainProblem()


@pytest.fixture
def lossy_chain():
    return LossyChainProblem()
