"""
OFF-POLICY vs ON-POLICY: the only seam between Q-learning and SARSA

===============================================================
THE DIFFERENCE
===============================================================

Both update Q(s,a) toward  R(s,a) + γ × bootstrap(s').

Q-LEARNING (off-policy):
    bootstrap(s') = max_a' Q(s', a')
    The next action is drawn afresh at the next step, independently of
    whatever a' achieved the max. Learns Q* whatever the behavior.

SARSA (on-policy):
    a' ~ ε-greedy(s')
    bootstrap(s') = Q(s', a')
    and a' IS the action executed at the next step.
    Learns the value of the ε-greedy policy itself.

===============================================================
THE THREE HOOKS
===============================================================

    choose_candidate_action(learner, s)
        action chosen at the start of an episode
    choose_executed_action(learner, s, candidate)
        action actually taken at this step
    bootstrap_value_and_next_candidate(learner, s')
        (bootstrap value, candidate carried to the next step)

`learner` is the TemporalDifferenceLearning instance: it owns the
Q-table and the random generator used for the ε-greedy draws.

===============================================================
"""

from typing import Optional, Tuple


class QLearningRule:
    """Off-policy: fresh ε-greedy draw every step, bootstrap on the max."""

    def choose_candidate_action(self, learner, state: int) -> Optional[int]:
        # Discarded: the executed action is drawn afresh
        return None

    def choose_executed_action(self, learner, state: int,
                               candidate: Optional[int]) -> int:
        return learner.epsilon_greedy(state)

    def bootstrap_value_and_next_candidate(self, learner,
                                           next_state: int) -> Tuple[float, Optional[int]]:
        return learner.max_q_value(next_state), None


class SarsaRule:
    """On-policy: the action used to bootstrap is the action taken next."""

    def choose_candidate_action(self, learner, state: int) -> int:
        return learner.epsilon_greedy(state)

    def choose_executed_action(self, learner, state: int, candidate: int) -> int:
        return candidate

    def bootstrap_value_and_next_candidate(self, learner,
                                           next_state: int) -> Tuple[float, int]:
        next_action = learner.epsilon_greedy(next_state)
        return learner.q_value(next_state, next_action), next_action
