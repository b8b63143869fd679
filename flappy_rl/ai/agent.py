"""
DQN Agent
=========

The agent that learns to play using Deep Q-Learning.

Key Components:
    1. Main Network    - Policy; the only network that receives gradient updates
    2. Target Network  - Periodically synchronized snapshot used for bootstrapping
    3. Replay Buffer   - Stores experiences for training
    4. Adam Optimizer  - Applies the summed batch gradients to the main network
    5. Epsilon-Greedy  - Linear decay over total agent steps

Training Algorithm (DQN):
    1. Observe state s
    2. Choose action a (epsilon-greedy)
    3. Execute action, observe reward r and next state s'
    4. Store (s, a, r, s', done) in replay buffer
    5. Sample mini-batch from replay buffer
    6. Target: y = r if done else r + γ * max_a' Q_target(s', a')
    7. Update main network: minimize (Q(s,a) - y)² for the taken action only
    8. Periodically copy main weights into the target network

Lifecycle:
    cold -> warming (buffer below batch size, train() returns 0.0)
         -> training (every train() call performs one gradient step)

Legacy behaviour kept by default:
    - update_target_network() copies weights only, never biases
      (Config.SYNC_TARGET_BIASES=True also copies biases)
    - see network.py for the output-layer backprop mask

References:
    Mnih et al., 2015 - "Human-level control through deep reinforcement learning"
"""

from typing import Optional, Sequence, Union

import numpy as np

from .network import FeedforwardNetwork
from .optimizer import AdamOptimizer
from .replay_buffer import Experience, ReplayBuffer
from ..config import Config
from ..game.base_game import Action, Observation
from ..utils.logger import get_logger

logger = get_logger(__name__)

State = Union[Observation, Sequence[float], np.ndarray]


def greedy_action(q_values: Sequence[float]) -> Action:
    """FLAP only when its Q-value is strictly higher; ties go to NO_FLAP."""
    if q_values[Action.FLAP] > q_values[Action.NO_FLAP]:
        return Action.FLAP
    return Action.NO_FLAP


def _to_observation(state: State) -> Observation:
    if isinstance(state, Observation):
        return state
    return Observation.from_array(state)


class DQNAgent:
    """
    DQN agent for the flapping game.

    The agent maintains two networks:
        - main_network: Updated every training step
        - target_network: Updated only by update_target_network()

    Action Selection:
        - With probability epsilon: uniformly random action (exploration)
        - Otherwise: action with the highest Q-value (exploitation)

    Example:
        >>> agent = DQNAgent(Config())
        >>> action = agent.select_action(obs)
        >>> agent.store_experience(obs, action, reward, next_obs, done)
        >>> loss = agent.train()
    """

    def __init__(self, config: Optional[Config] = None):
        """
        Initialize the DQN agent.

        Args:
            config: Configuration object
        """
        self.config = config or Config()
        cfg = self.config

        self.main_network = FeedforwardNetwork(cfg.LAYER_SIZES, cfg.MAIN_SEED, cfg.STRICT_BACKPROP)
        self.target_network = FeedforwardNetwork(cfg.LAYER_SIZES, cfg.TARGET_SEED, cfg.STRICT_BACKPROP)
        self.replay_buffer = ReplayBuffer(cfg.MEMORY_SIZE, cfg.BUFFER_SEED)
        self.optimizer = AdamOptimizer(
            learning_rate=cfg.LEARNING_RATE,
            beta1=cfg.ADAM_BETA1,
            beta2=cfg.ADAM_BETA2,
            epsilon=cfg.ADAM_EPSILON,
        )

        # One persistent stream for explore/exploit decisions
        self._rng = np.random.default_rng(cfg.EXPLORATION_SEED)

        self._total_steps = 0
        self._training_steps = 0
        self._epsilon = cfg.EPSILON_START

        self.update_target_network()

        logger.info(
            f"DQN agent ready: layers={cfg.LAYER_SIZES}, params={self.main_network.get_num_parameters():,}, "
            f"lr={cfg.LEARNING_RATE}, gamma={cfg.GAMMA}, batch={cfg.BATCH_SIZE}, memory={cfg.MEMORY_SIZE}"
        )

    def _observation_to_input(self, state: State) -> np.ndarray:
        return _to_observation(state).to_array()

    def _epsilon_at(self, step: int) -> float:
        progress = min(1.0, step / self.config.EPSILON_DECAY_STEPS)
        return self.config.EPSILON_START + (self.config.EPSILON_END - self.config.EPSILON_START) * progress

    def select_action(self, state: State) -> Action:
        """
        Select an action using the epsilon-greedy policy.

        Every call counts as one agent step and advances the epsilon schedule.

        Args:
            state: Current observation

        Returns:
            Selected action

        Raises:
            ValueError: State does not have exactly 4 values
        """
        # Validate before counting the step, whichever branch is taken
        x = self._observation_to_input(state)

        self._total_steps += 1
        self._epsilon = self._epsilon_at(self._total_steps)

        if self._rng.random() < self._epsilon:
            return Action.NO_FLAP if self._rng.random() < 0.5 else Action.FLAP

        return greedy_action(self.main_network.forward(x))

    def store_experience(self, state: State, action: Action, reward: float,
                         next_state: State, done: bool) -> None:
        """
        Store a transition in the replay buffer.

        Args:
            state: Observation before the action
            action: Action taken
            reward: Reward received
            next_state: Observation after the action
            done: Whether the episode ended
        """
        self.replay_buffer.push(Experience(
            state=_to_observation(state),
            action=Action(action),
            reward=float(reward),
            next_state=_to_observation(next_state),
            done=bool(done),
        ))

    def _compute_td_target(self, experience: Experience) -> float:
        """Bootstrapped target for the taken action, evaluated by the target network."""
        if experience.done:
            return experience.reward
        next_q = self.target_network.forward(experience.next_state.to_array())
        return experience.reward + self.config.GAMMA * float(np.max(next_q))

    def train(self) -> float:
        """
        Perform one training step on a sampled batch.

        Below BATCH_SIZE stored experiences this is a silent no-op.

        Returns:
            Mean squared TD error of the taken actions, or 0.0 if skipped
        """
        batch_size = self.config.BATCH_SIZE
        if not self.replay_buffer.can_sample(batch_size):
            return 0.0

        batch = self.replay_buffer.sample(batch_size)

        weight_grad_sum = [np.zeros_like(w) for w in self.main_network.get_weights()]
        bias_grad_sum = [np.zeros_like(b) for b in self.main_network.get_biases()]
        total_loss = 0.0

        for experience in batch:
            x = experience.state.to_array()
            predicted = self.main_network.forward(x)
            action_idx = int(experience.action)

            # Untaken action's target is its own prediction: zero error on that head
            target = predicted.copy()
            target[action_idx] = self._compute_td_target(experience)

            td_error = predicted[action_idx] - target[action_idx]
            total_loss += td_error * td_error

            weight_grads, bias_grads = self.main_network.backward(x, target, predicted)
            for acc, grad in zip(weight_grad_sum, weight_grads):
                acc += grad
            for acc, grad in zip(bias_grad_sum, bias_grads):
                acc += grad

        weights = self.main_network.get_weights()
        biases = self.main_network.get_biases()
        self.optimizer.update(weights, biases, weight_grad_sum, bias_grad_sum)
        self.main_network.set_weights(weights)
        self.main_network.set_biases(biases)

        self._training_steps += 1
        loss = total_loss / len(batch)
        logger.debug(f"train step {self._training_steps}: loss={loss:.6f}")
        return float(loss)

    def update_target_network(self) -> None:
        """
        Hard update: copy main network weights into the target network.

        Biases are not copied unless SYNC_TARGET_BIASES is enabled.
        """
        self.target_network.set_weights(self.main_network.get_weights())
        if self.config.SYNC_TARGET_BIASES:
            self.target_network.set_biases(self.main_network.get_biases())
        logger.debug(f"Target network synced (biases={self.config.SYNC_TARGET_BIASES})")

    def get_epsilon(self) -> float:
        """Current exploration rate."""
        return self._epsilon

    def get_q_values(self, state: State) -> np.ndarray:
        """
        Get Q-values for all actions from the main network.

        Args:
            state: Observation to evaluate

        Returns:
            Array of Q-values indexed by Action
        """
        return self.main_network.forward(self._observation_to_input(state))

    def get_training_steps(self) -> int:
        """Number of gradient steps performed."""
        return self._training_steps

    def get_total_steps(self) -> int:
        """Number of select_action() calls."""
        return self._total_steps

    def save_weights(self, filepath: str) -> None:
        """Weight persistence has no file format yet."""
        raise NotImplementedError(f"Saving weights is not supported (requested: {filepath})")

    def load_weights(self, filepath: str) -> None:
        """Weight persistence has no file format yet."""
        raise NotImplementedError(f"Loading weights is not supported (requested: {filepath})")
