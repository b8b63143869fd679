"""
Base Game Interface
===================

The contract between the learning engine and a game. The agent only ever sees
a 4-field Observation, a binary Action, a scalar reward and a terminal flag,
so any game producing those can be trained on.

To add a new game:
1. Inherit from BaseGame
2. Implement reset(), step() and observe()
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, Sequence

import numpy as np


class Action(IntEnum):
    """Binary control. The integer value doubles as the Q-vector index."""
    NO_FLAP = 0
    FLAP = 1


@dataclass(frozen=True)
class Observation:
    """
    What the agent sees each step.

    Attributes:
        y: Vertical position of the bird
        vy: Vertical velocity
        dx_to_pipe: Horizontal distance to the next pipe
        dy_to_gap: Vertical distance to the centre of that pipe's gap
    """
    y: float = 0.0
    vy: float = 0.0
    dx_to_pipe: float = 0.0
    dy_to_gap: float = 0.0

    SIZE = 4

    def to_array(self) -> np.ndarray:
        """Network input vector."""
        return np.array([self.y, self.vy, self.dx_to_pipe, self.dy_to_gap], dtype=np.float64)

    @classmethod
    def from_array(cls, values: Sequence[float]) -> 'Observation':
        values = np.asarray(values, dtype=np.float64)
        if values.shape != (cls.SIZE,):
            raise ValueError(f"Observation needs a flat sequence of {cls.SIZE} values, got shape {values.shape}")
        return cls(*(float(v) for v in values))


@dataclass(frozen=True)
class StepResult:
    """Outcome of one game step."""
    observation: Observation
    reward: float = 0.0
    done: bool = False


class BaseGame(ABC):
    """
    Abstract base class for games.

    Methods:
        reset(seed) -> Observation
            Start a new episode, return the first observation

        step(action) -> StepResult
            Advance one tick with the given action

        observe() -> Observation
            Current observation without advancing
    """

    @abstractmethod
    def reset(self, seed: Optional[int] = None) -> Observation:
        """
        Reset the game to its initial state.

        Args:
            seed: Reseed the game's randomness (None keeps the current stream)
        """

    @abstractmethod
    def step(self, action: Action) -> StepResult:
        """Execute one game step with the given action."""

    @abstractmethod
    def observe(self) -> Observation:
        """Get the current observation."""

    def close(self) -> None:
        """Clean up resources. Override if needed."""
        pass
