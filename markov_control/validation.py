"""Checks run by the solver constructors."""

from typing import Tuple

import numpy as np

from .errors import ConfigurationError


def check_in_range(name: str, value: float, low: float, high: float,
                   low_inclusive: bool = True):
    too_low = value < low if low_inclusive else value <= low
    if too_low or value > high:
        bracket = "[" if low_inclusive else "("
        raise ConfigurationError(
            f"{name} must lie in {bracket}{low}, {high}], got {value}"
        )


def check_positive(name: str, value):
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {value}")


def check_rewards(reward_at_states, absorbing_states) -> Tuple[np.ndarray, np.ndarray]:
    """
    Validate the terminal rewards and the absorbing set.

    Returns (rewards, absorbing_mask). Rewards must vanish outside the
    absorbing set: the terminal reward is only ever paid on absorption.
    """
    rewards = np.asarray(reward_at_states, dtype=float)
    if rewards.ndim != 1 or rewards.size == 0:
        raise ConfigurationError(
            f"reward_at_states must be a non-empty vector, got shape {rewards.shape}"
        )
    n_states = rewards.size

    absorbing_mask = np.zeros(n_states, dtype=bool)
    for state in absorbing_states:
        if not 0 <= state < n_states:
            raise ConfigurationError(
                f"Absorbing state {state} outside [0, {n_states})"
            )
        absorbing_mask[state] = True

    if absorbing_mask.all():
        raise ConfigurationError("At least one state must be non-absorbing")

    stray = np.flatnonzero((rewards != 0) & ~absorbing_mask)
    if stray.size:
        raise ConfigurationError(
            f"Non-absorbing states {stray.tolist()} have nonzero terminal reward"
        )
    return rewards, absorbing_mask
