"""
FlappyRL - Source Package
=========================

A minimal reinforcement-learning harness: a hand-built Deep Q-Network learns
to control a single-action flapping game from (state, action, reward,
next_state, done) transitions.

Modules:
    game/   - Environment contract (observations, actions, step results)
    ai/     - Feedforward network, Adam optimizer, replay buffer, agent, trainer
    utils/  - Logging helpers
"""

__version__ = "1.0.0"
