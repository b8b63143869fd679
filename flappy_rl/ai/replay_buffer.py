"""
Experience Replay Buffer
========================

A memory buffer that stores transitions for training the DQN.

Why Experience Replay?
    1. Breaks correlation between consecutive experiences
    2. Each experience can be used for multiple training steps

How it works:
    1. Agent plays, stores (state, action, reward, next_state, done) records
    2. During training, random batches are drawn without replacement
    3. Old experiences are overwritten when the buffer is full (FIFO)

References:
    Mnih et al., 2015 - "Human-level control through deep reinforcement learning"
"""

from dataclasses import dataclass
from typing import List

import numpy as np

from .errors import InsufficientSamples
from ..game.base_game import Action, Observation


@dataclass(frozen=True)
class Experience:
    """One environment transition."""
    state: Observation
    action: Action
    reward: float
    next_state: Observation
    done: bool


class ReplayBuffer:
    """
    Fixed-capacity circular store of Experience records.

    While below capacity, pushes append. Once full, each push overwrites the
    slot at the write cursor (the oldest entry) and advances the cursor
    modulo capacity.

    The sampling generator is owned by the buffer and advanced by every
    sample() call, so sampling mutates buffer state.

    Example:
        >>> buffer = ReplayBuffer(capacity=10000, seed=12347)
        >>> buffer.push(Experience(state, Action.FLAP, 0.0, next_state, False))
        >>> batch = buffer.sample(batch_size=32)
    """

    def __init__(self, capacity: int, seed: int = 12345):
        """
        Initialize the replay buffer.

        Args:
            capacity: Maximum number of experiences to store
            seed: Seed for batch sampling
        """
        if capacity <= 0:
            raise ValueError(f"Capacity must be positive, got {capacity}")
        self._capacity = capacity
        self._experiences: List[Experience] = []
        self._write_index = 0  # Next slot to overwrite once full
        self._rng = np.random.default_rng(seed)

    def push(self, experience: Experience) -> None:
        """
        Add an experience, evicting the oldest one when full.

        Args:
            experience: Transition to store
        """
        if len(self._experiences) < self._capacity:
            self._experiences.append(experience)
        else:
            self._experiences[self._write_index] = experience
            self._write_index = (self._write_index + 1) % self._capacity

    def sample(self, batch_size: int) -> List[Experience]:
        """
        Draw batch_size experiences from distinct slots.

        A full permutation of the held indices is drawn and the first
        batch_size are taken. Separate calls are independent.

        Raises:
            ValueError: batch_size is negative
            InsufficientSamples: Fewer than batch_size experiences are held
        """
        if batch_size < 0:
            raise ValueError(f"Batch size must be non-negative, got {batch_size}")
        if len(self._experiences) < batch_size:
            raise InsufficientSamples(
                f"Cannot sample {batch_size} experiences, buffer holds {len(self._experiences)}"
            )
        indices = self._rng.permutation(len(self._experiences))[:batch_size]
        return [self._experiences[i] for i in indices]

    def can_sample(self, batch_size: int) -> bool:
        """Check if buffer has enough experiences for sampling."""
        return len(self._experiences) >= batch_size

    def contents(self) -> List[Experience]:
        """Held experiences in eviction order, next to be overwritten first."""
        if len(self._experiences) < self._capacity:
            return list(self._experiences)
        return self._experiences[self._write_index:] + self._experiences[:self._write_index]

    def size(self) -> int:
        return len(self._experiences)

    def capacity(self) -> int:
        return self._capacity

    def is_full(self) -> bool:
        return len(self._experiences) == self._capacity

    def __len__(self) -> int:
        """Return current buffer size."""
        return len(self._experiences)

    def clear(self) -> None:
        """
        Drop all experiences.

        The write cursor keeps its value; it is only consulted once the
        buffer has filled again.
        """
        self._experiences.clear()
