"""
Adam Optimizer
==============

Adaptive moment estimation for the hand-built network's parameters.

For every scalar parameter p with gradient g at step t:
    m = β1·m + (1 - β1)·g
    v = β2·v + (1 - β2)·g²
    m̂ = m / (1 - β1^t)
    v̂ = v / (1 - β2^t)
    p -= lr · m̂ / (√v̂ + ε)

Moment tensors are allocated lazily on the first update() from the shapes of
the tensors passed in, so one optimizer can serve any network layout.

Reference:
    Kingma & Ba, 2015 - "Adam: A Method for Stochastic Optimization"
"""

from typing import List, Optional, Sequence

import numpy as np

from ..utils.logger import get_logger

logger = get_logger(__name__)


class AdamOptimizer:
    """
    Adam over per-layer weight matrices and bias vectors.

    update() mutates the caller's weight and bias arrays in place. Weights and
    biases share one learning rate and one set of hyperparameters.

    Example:
        >>> opt = AdamOptimizer(learning_rate=0.001)
        >>> weights, biases = net.get_weights(), net.get_biases()
        >>> opt.update(weights, biases, weight_grads, bias_grads)
        >>> net.set_weights(weights); net.set_biases(biases)
    """

    def __init__(self, learning_rate: float = 0.001, beta1: float = 0.9,
                 beta2: float = 0.999, epsilon: float = 1e-8):
        self.learning_rate = learning_rate
        self.beta1 = beta1
        self.beta2 = beta2
        self.epsilon = epsilon

        self._step = 0
        self._m_weights: Optional[List[np.ndarray]] = None
        self._v_weights: Optional[List[np.ndarray]] = None
        self._m_biases: Optional[List[np.ndarray]] = None
        self._v_biases: Optional[List[np.ndarray]] = None

    def _initialize_state(self, weights: Sequence[np.ndarray], biases: Sequence[np.ndarray]) -> None:
        """Zero moments shaped like the given tensors."""
        self._m_weights = [np.zeros(np.shape(w), dtype=np.float64) for w in weights]
        self._v_weights = [np.zeros(np.shape(w), dtype=np.float64) for w in weights]
        self._m_biases = [np.zeros(np.shape(b), dtype=np.float64) for b in biases]
        self._v_biases = [np.zeros(np.shape(b), dtype=np.float64) for b in biases]

    def _step_tensor(self, param: np.ndarray, grad, m: np.ndarray, v: np.ndarray,
                     correction1: float, correction2: float) -> None:
        grad = np.asarray(grad, dtype=np.float64)
        m *= self.beta1
        m += (1.0 - self.beta1) * grad
        v *= self.beta2
        v += (1.0 - self.beta2) * grad * grad
        m_hat = m / correction1
        v_hat = v / correction2
        param -= self.learning_rate * m_hat / (np.sqrt(v_hat) + self.epsilon)

    def update(self, weights: List[np.ndarray], biases: List[np.ndarray],
               weight_gradients: Sequence[np.ndarray], bias_gradients: Sequence[np.ndarray]) -> None:
        """
        Apply one Adam step in place.

        Args:
            weights: Per-layer weight arrays, modified in place
            biases: Per-layer bias arrays, modified in place
            weight_gradients: Gradients shaped like weights
            bias_gradients: Gradients shaped like biases
        """
        if self._m_weights is None:
            self._initialize_state(weights, biases)
        assert self._m_weights is not None and self._v_weights is not None
        assert self._m_biases is not None and self._v_biases is not None

        self._step += 1
        correction1 = 1.0 - self.beta1 ** self._step
        correction2 = 1.0 - self.beta2 ** self._step

        for param, grad, m, v in zip(weights, weight_gradients, self._m_weights, self._v_weights):
            self._step_tensor(param, grad, m, v, correction1, correction2)
        for param, grad, m, v in zip(biases, bias_gradients, self._m_biases, self._v_biases):
            self._step_tensor(param, grad, m, v, correction1, correction2)

    def reset(self) -> None:
        """Forget all moments; the next update() reallocates from its tensors' shapes."""
        self._step = 0
        self._m_weights = None
        self._v_weights = None
        self._m_biases = None
        self._v_biases = None
        logger.debug("Adam state reset")

    def get_step(self) -> int:
        """Number of update() calls since construction or the last reset()."""
        return self._step
