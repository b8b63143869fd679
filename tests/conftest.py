"""
Pytest configuration for the test suite.

This file is automatically loaded by pytest and applies configuration
to all tests in the tests/ directory.
"""

import pytest

from flappy_rl.config import Config
from flappy_rl.game.base_game import Action, BaseGame, Observation, StepResult


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


class CorridorGame(BaseGame):
    """
    Deterministic stand-in for the flapping game.

    The bird drifts down each tick and a flap pushes it up. Every
    `pipe_every` ticks a pipe is passed (+1 reward); leaving the band
    [0, 1] ends the episode with -1.
    """

    def __init__(self, pipe_every: int = 5, max_ticks: int = 50):
        self.pipe_every = pipe_every
        self.max_ticks = max_ticks
        self.reset()

    def reset(self, seed=None) -> Observation:
        self.y = 0.5
        self.vy = 0.0
        self.ticks = 0
        return self.observe()

    def observe(self) -> Observation:
        dx = (self.pipe_every - self.ticks % self.pipe_every) / self.pipe_every
        return Observation(y=self.y, vy=self.vy, dx_to_pipe=dx, dy_to_gap=0.5 - self.y)

    def step(self, action) -> StepResult:
        self.vy = 0.05 if action == Action.FLAP else self.vy - 0.02
        self.y += self.vy
        self.ticks += 1

        if not 0.0 <= self.y <= 1.0:
            return StepResult(self.observe(), reward=-1.0, done=True)
        reward = 1.0 if self.ticks % self.pipe_every == 0 else 0.0
        return StepResult(self.observe(), reward=reward, done=self.ticks >= self.max_ticks)


@pytest.fixture
def small_config():
    """Small, fast configuration used across agent and trainer tests."""
    cfg = Config()
    cfg.LAYER_SIZES = [4, 8, 2]
    cfg.BATCH_SIZE = 4
    cfg.MEMORY_SIZE = 100
    cfg.LEARNING_RATE = 0.001
    cfg.EPSILON_DECAY_STEPS = 100
    return cfg


@pytest.fixture
def corridor_game():
    return CorridorGame()
