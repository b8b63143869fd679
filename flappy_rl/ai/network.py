"""
Feedforward Q-Network
=====================

A small fully-connected network with hand-derived forward and backward passes.
It approximates Q-values for the two actions given a 4-field observation.

Theory:
    Input:  Observation vector (y, vy, dx_to_pipe, dy_to_gap)
    Output: Q-value for each action (NO_FLAP, FLAP)

    Every layer computes z = W·a + b. Hidden layers apply ReLU, the output
    layer is linear so Q-values can take any sign.

Storage:
    All parameters live in one contiguous float64 arena. Each layer's weight
    matrix (fan_out x fan_in, row-major) and bias vector are views into that
    arena at precomputed offsets, so the whole network can be copied, counted
    or validated as a single block.

Backward pass:
    The output error is delta = predicted - target (derivative of
    0.5 * ||predicted - target||²). Walking from the last layer to the first,
    bias gradients are delta and weight gradients are outer(delta, incoming
    activation). Error is carried back through W.T and masked by the ReLU
    derivative of the receiving layer's pre-activation.

    Legacy behaviour: when carrying error from the linear output layer into the
    last hidden layer, the mask is the identity, so inactive last-hidden units
    still receive gradient. This is not textbook backprop; it is kept by
    default so training dynamics match earlier runs. Construct with
    strict_backprop=True for the textbook mask at every hidden layer.
"""

import math
from typing import List, Sequence, Tuple

import numpy as np

from .errors import InvalidArchitecture, InputSizeMismatch, ShapeMismatch
from ..utils.logger import get_logger

logger = get_logger(__name__)


class FeedforwardNetwork:
    """
    ReLU-hidden / linear-output multilayer perceptron.

    Attributes:
        layer_sizes: Declared sizes, input first, output last
        strict_backprop: Mask the output->last-hidden error with ReLU'

    Example:
        >>> net = FeedforwardNetwork([4, 128, 128, 2], seed=12345)
        >>> q_values = net.forward([0.5, 0.0, 1.0, 0.1])  # Shape: (2,)
    """

    def __init__(self, layer_sizes: Sequence[int], seed: int = 12345,
                 strict_backprop: bool = False):
        """
        Initialize the network with Xavier/Glorot uniform weights and zero biases.

        Args:
            layer_sizes: At least two positive sizes (input, hidden..., output)
            seed: Seed for weight initialization
            strict_backprop: Use the textbook ReLU mask at the output boundary

        Raises:
            InvalidArchitecture: Fewer than two sizes, or a non-positive size
        """
        if len(layer_sizes) < 2:
            raise InvalidArchitecture(
                f"Network needs at least input and output layers, got {list(layer_sizes)}"
            )
        for size in layer_sizes:
            if isinstance(size, bool) or int(size) != size or size <= 0:
                raise InvalidArchitecture(f"Layer sizes must be positive integers, got {list(layer_sizes)}")

        self.layer_sizes: List[int] = [int(s) for s in layer_sizes]
        self.strict_backprop = strict_backprop
        self._rng = np.random.default_rng(seed)

        self._build_arena()
        self._init_weights()

        logger.debug(
            f"Network built: sizes={self.layer_sizes}, params={self.get_num_parameters():,}, "
            f"strict_backprop={self.strict_backprop}"
        )

    def _build_arena(self) -> None:
        """Allocate the parameter arena and carve per-layer views out of it."""
        shapes = self._layer_shapes()
        total = sum(rows * cols + rows for rows, cols in shapes)
        self._params = np.zeros(total, dtype=np.float64)

        self._weights: List[np.ndarray] = []
        self._biases: List[np.ndarray] = []
        offset = 0
        for rows, cols in shapes:
            w_end = offset + rows * cols
            self._weights.append(self._params[offset:w_end].reshape(rows, cols))
            self._biases.append(self._params[w_end:w_end + rows])
            offset = w_end + rows

    def _layer_shapes(self) -> List[Tuple[int, int]]:
        """(fan_out, fan_in) for every layer."""
        return [(self.layer_sizes[i + 1], self.layer_sizes[i]) for i in range(len(self.layer_sizes) - 1)]

    def _init_weights(self) -> None:
        """Xavier/Glorot uniform: U(-L, L) with L = sqrt(6 / (fan_in + fan_out))."""
        for weights, biases in zip(self._weights, self._biases):
            fan_out, fan_in = weights.shape
            limit = math.sqrt(6.0 / (fan_in + fan_out))
            weights[...] = self._rng.uniform(-limit, limit, size=weights.shape)
            biases[...] = 0.0

    @property
    def num_layers(self) -> int:
        """Number of weight layers (one fewer than declared sizes)."""
        return len(self._weights)

    def _as_input(self, x) -> np.ndarray:
        x = np.asarray(x, dtype=np.float64)
        if x.ndim != 1 or x.shape[0] != self.layer_sizes[0]:
            raise InputSizeMismatch(
                f"Expected input of length {self.layer_sizes[0]}, got shape {x.shape}"
            )
        return x

    def _as_output(self, values, what: str) -> np.ndarray:
        values = np.asarray(values, dtype=np.float64)
        if values.shape != (self.layer_sizes[-1],):
            raise ShapeMismatch(
                f"Expected {what} of length {self.layer_sizes[-1]}, got shape {values.shape}"
            )
        return values

    def forward(self, x) -> np.ndarray:
        """
        Forward pass through the network.

        Args:
            x: Input vector of length layer_sizes[0]

        Returns:
            Q-values, shape (layer_sizes[-1],)

        Raises:
            InputSizeMismatch: Input length differs from the input layer size
        """
        a = self._as_input(x)
        last = self.num_layers - 1
        for i, (weights, biases) in enumerate(zip(self._weights, self._biases)):
            z = weights @ a + biases
            a = np.maximum(z, 0.0) if i < last else z
        return a

    def _forward_cached(self, x: np.ndarray) -> Tuple[List[np.ndarray], List[np.ndarray]]:
        """
        Forward pass keeping every layer's pre- and post-activation.

        Returns:
            (pre_activations, activations) where activations[0] is the input
            and activations[i + 1] is layer i's output
        """
        pre_activations: List[np.ndarray] = []
        activations: List[np.ndarray] = [x]
        last = self.num_layers - 1
        a = x
        for i, (weights, biases) in enumerate(zip(self._weights, self._biases)):
            z = weights @ a + biases
            pre_activations.append(z)
            a = np.maximum(z, 0.0) if i < last else z
            activations.append(a)
        return pre_activations, activations

    def backward(self, x, target, predicted) -> Tuple[List[np.ndarray], List[np.ndarray]]:
        """
        Compute parameter gradients for one sample.

        The forward pass is recomputed here rather than reused from an earlier
        forward() call. The output error uses the supplied `predicted` vector.

        Args:
            x: Input vector the prediction was made for
            target: Desired output vector
            predicted: Network output for x

        Returns:
            (weight_gradients, bias_gradients), shaped like get_weights()/get_biases()

        Raises:
            InputSizeMismatch: x length differs from the input layer size
            ShapeMismatch: target or predicted length differs from the output layer size
        """
        x = self._as_input(x)
        target = self._as_output(target, 'target')
        predicted = self._as_output(predicted, 'predicted')
        pre_activations, activations = self._forward_cached(x)

        delta = predicted - target

        weight_gradients: List[np.ndarray] = [np.empty(0)] * self.num_layers
        bias_gradients: List[np.ndarray] = [np.empty(0)] * self.num_layers
        last = self.num_layers - 1

        for layer in range(last, -1, -1):
            bias_gradients[layer] = delta.copy()
            weight_gradients[layer] = np.outer(delta, activations[layer])

            if layer > 0:
                delta = self._weights[layer].T @ delta
                # Legacy: no ReLU' mask between the linear output and last hidden layer
                if layer < last or self.strict_backprop:
                    delta = delta * (pre_activations[layer - 1] > 0.0)

        return weight_gradients, bias_gradients

    def update_weights(self, weight_gradients: Sequence[np.ndarray],
                       bias_gradients: Sequence[np.ndarray], learning_rate: float) -> None:
        """
        Plain gradient-descent step: param -= learning_rate * grad.

        The agent trains through AdamOptimizer; this is for ad hoc updates.
        """
        w_grads = self._checked_weights(weight_gradients)
        b_grads = self._checked_biases(bias_gradients)
        for weights, biases, w_grad, b_grad in zip(self._weights, self._biases, w_grads, b_grads):
            weights -= learning_rate * w_grad
            biases -= learning_rate * b_grad

    @staticmethod
    def _as_float_tensor(tensor, what: str, index: int) -> np.ndarray:
        try:
            return np.asarray(tensor, dtype=np.float64)
        except (TypeError, ValueError):
            # Ragged nested lists or non-numeric entries
            raise ShapeMismatch(f"{what} layer {index}: not a rectangular array of numbers") from None

    def _checked_tensors(self, mine: List[np.ndarray], theirs: Sequence, what: str) -> List[np.ndarray]:
        """Convert every layer to float64 and verify its shape, before anything is mutated."""
        if len(theirs) != self.num_layers:
            raise ShapeMismatch(f"Expected {self.num_layers} {what.lower()} layers, got {len(theirs)}")
        converted = []
        for i, (own, tensor) in enumerate(zip(mine, theirs)):
            tensor = self._as_float_tensor(tensor, what, i)
            if tensor.shape != own.shape:
                raise ShapeMismatch(f"{what} layer {i}: expected shape {own.shape}, got {tensor.shape}")
            converted.append(tensor)
        return converted

    def _checked_weights(self, weights: Sequence) -> List[np.ndarray]:
        return self._checked_tensors(self._weights, weights, 'Weight')

    def _checked_biases(self, biases: Sequence) -> List[np.ndarray]:
        return self._checked_tensors(self._biases, biases, 'Bias')

    def get_weights(self) -> List[np.ndarray]:
        """Copies of every layer's weight matrix (fan_out x fan_in)."""
        return [w.copy() for w in self._weights]

    def get_biases(self) -> List[np.ndarray]:
        """Copies of every layer's bias vector."""
        return [b.copy() for b in self._biases]

    def set_weights(self, weights: Sequence) -> None:
        """
        Replace all weight matrices.

        Raises:
            ShapeMismatch: Layer count or any layer's shape differs; nothing is changed
        """
        for mine, theirs in zip(self._weights, self._checked_weights(weights)):
            mine[...] = theirs

    def set_biases(self, biases: Sequence) -> None:
        """
        Replace all bias vectors.

        Raises:
            ShapeMismatch: Layer count or any layer's length differs; nothing is changed
        """
        for mine, theirs in zip(self._biases, self._checked_biases(biases)):
            mine[...] = theirs

    def get_layer_sizes(self) -> List[int]:
        return list(self.layer_sizes)

    def get_num_parameters(self) -> int:
        """Total number of weights and biases."""
        return int(self._params.size)
