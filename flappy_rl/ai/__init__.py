"""
AI Module
=========

Deep Reinforcement Learning components, all built on numpy.

Classes:
    FeedforwardNetwork - ReLU MLP with hand-derived backprop
    AdamOptimizer      - Adam over per-layer weight/bias arrays
    ReplayBuffer       - Circular experience memory
    DQNAgent           - Epsilon-greedy DQN with a target network
    Trainer            - Training loop orchestration
"""

from .errors import DQNError, InvalidArchitecture, InputSizeMismatch, ShapeMismatch, InsufficientSamples
from .network import FeedforwardNetwork
from .optimizer import AdamOptimizer
from .replay_buffer import Experience, ReplayBuffer
from .agent import DQNAgent
from .trainer import Trainer

__all__ = [
    'FeedforwardNetwork', 'AdamOptimizer', 'Experience', 'ReplayBuffer', 'DQNAgent', 'Trainer',
    'DQNError', 'InvalidArchitecture', 'InputSizeMismatch', 'ShapeMismatch', 'InsufficientSamples',
]
