"""Exceptions raised by the learning engine."""


class DQNError(Exception):
    """Base class for all learning-engine errors."""


class InvalidArchitecture(DQNError, ValueError):
    """Network layer sizes cannot form a valid feed-forward network."""


class InputSizeMismatch(DQNError, ValueError):
    """Forward-pass input length disagrees with the network's input size."""


class ShapeMismatch(DQNError, ValueError):
    """Supplied weight or bias tensors do not match the network's shape."""


class InsufficientSamples(DQNError, RuntimeError):
    """Replay buffer holds fewer experiences than the requested batch."""
