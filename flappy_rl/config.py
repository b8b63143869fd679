"""
Configuration for FlappyRL
==========================

All hyperparameters and training-loop settings are centralized here.
Modify these values to experiment with different training configurations.

Usage:
    from flappy_rl.config import Config
    cfg = Config()
    print(cfg.LEARNING_RATE)
"""

from dataclasses import dataclass, field
from typing import List


@dataclass
class Config:
    """
    Central configuration for the entire project.

    Sections:
    1. Neural Network - Architecture configuration
    2. Training - Learning hyperparameters
    3. Exploration - Epsilon-greedy settings
    4. Adam - Optimizer hyperparameters
    5. Training Control - Episode loop and logging
    """

    # =========================================================================
    # NEURAL NETWORK ARCHITECTURE
    # =========================================================================

    # Layer sizes: input, hidden..., output
    # Input is the 4-field observation (y, vy, dx_to_pipe, dy_to_gap)
    # Output is one Q-value per action (NO_FLAP, FLAP)
    LAYER_SIZES: List[int] = field(default_factory=lambda: [4, 128, 128, 2])

    # Apply the ReLU derivative mask when propagating error from the linear
    # output layer into the last hidden layer (textbook backprop).
    # False keeps the legacy identity mask at that boundary.
    STRICT_BACKPROP: bool = False

    # =========================================================================
    # TRAINING HYPERPARAMETERS
    # =========================================================================

    LEARNING_RATE: float = 0.0001

    # Discount factor (gamma)
    GAMMA: float = 0.99

    # Replay buffer capacity
    MEMORY_SIZE: int = 10_000

    # Experiences per gradient step; train() is a no-op below this many
    BATCH_SIZE: int = 32

    # Train every N agent steps (consumed by the Trainer, not the agent)
    TRAIN_FREQUENCY: int = 4

    # Copy main weights into the target network every N agent steps
    TARGET_UPDATE_FREQUENCY: int = 100

    # Also copy biases on target sync. False keeps the legacy weights-only copy.
    SYNC_TARGET_BIASES: bool = False

    # =========================================================================
    # EXPLORATION SETTINGS (Epsilon-Greedy)
    # =========================================================================

    # Epsilon is interpolated linearly from START to END over
    # EPSILON_DECAY_STEPS total agent steps, then held at END
    EPSILON_START: float = 1.0
    EPSILON_END: float = 0.01
    EPSILON_DECAY_STEPS: int = 10_000

    # =========================================================================
    # ADAM OPTIMIZER
    # =========================================================================

    ADAM_BETA1: float = 0.9
    ADAM_BETA2: float = 0.999
    ADAM_EPSILON: float = 1e-8

    # =========================================================================
    # TRAINING CONTROL
    # =========================================================================

    # Total episodes to train (0 = must be passed explicitly to Trainer.train)
    MAX_EPISODES: int = 0

    # Maximum steps per episode (prevents endless episodes)
    MAX_STEPS_PER_EPISODE: int = 10_000

    # Log stats every N episodes
    LOG_EVERY: int = 10

    # Number of episodes kept in the metrics history
    METRICS_HISTORY_LENGTH: int = 1000

    LOG_DIR: str = 'logs'

    # =========================================================================
    # SYSTEM SETTINGS
    # =========================================================================

    # Base seed; independent seeds for each component are derived from it
    SEED: int = 12345

    @property
    def OBSERVATION_SIZE(self) -> int:
        """y, vy, dx_to_pipe, dy_to_gap."""
        return 4

    @property
    def ACTION_SIZE(self) -> int:
        """NO_FLAP, FLAP."""
        return 2

    @property
    def MAIN_SEED(self) -> int:
        return self.SEED

    @property
    def TARGET_SEED(self) -> int:
        return self.SEED + 1

    @property
    def BUFFER_SEED(self) -> int:
        return self.SEED + 2

    @property
    def EXPLORATION_SEED(self) -> int:
        return self.SEED + 3

    def __post_init__(self):
        """Validation."""
        assert self.LEARNING_RATE > 0, "Learning rate must be positive"
        assert 0 < self.GAMMA <= 1, "Gamma must be in (0, 1]"
        assert self.BATCH_SIZE > 0, "Batch size must be positive"
        assert self.BATCH_SIZE <= self.MEMORY_SIZE, "Batch size cannot exceed memory size"
        assert len(self.LAYER_SIZES) >= 2, "Need at least input and output layer sizes"
        assert self.LAYER_SIZES[0] == self.OBSERVATION_SIZE, \
            f"Input layer must have {self.OBSERVATION_SIZE} units"
        assert self.LAYER_SIZES[-1] == self.ACTION_SIZE, \
            f"Output layer must have {self.ACTION_SIZE} units"
        assert 0 <= self.EPSILON_START <= 1, "Epsilon start must be in [0, 1]"
        assert 0 <= self.EPSILON_END <= 1, "Epsilon end must be in [0, 1]"
        assert self.EPSILON_DECAY_STEPS > 0, "Epsilon decay steps must be positive"
        assert self.TRAIN_FREQUENCY > 0, "Train frequency must be positive"
        assert self.TARGET_UPDATE_FREQUENCY > 0, "Target update frequency must be positive"
        assert 0 <= self.ADAM_BETA1 < 1, "Adam beta1 must be in [0, 1)"
        assert 0 <= self.ADAM_BETA2 < 1, "Adam beta2 must be in [0, 1)"
        assert self.ADAM_EPSILON > 0, "Adam epsilon must be positive"
