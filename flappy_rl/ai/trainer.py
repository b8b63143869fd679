"""
Training Loop
=============

Orchestrates the training process:
    1. Run episodes of the game
    2. Collect experiences
    3. Train the agent every TRAIN_FREQUENCY agent steps
    4. Sync the target network every TARGET_UPDATE_FREQUENCY agent steps
    5. Track metrics

The schedule lives here rather than in the agent; the agent only knows how
to take a step, store a transition and train on one batch.
"""

import time
from dataclasses import dataclass
from typing import Dict, List, Optional

import numpy as np

from .agent import DQNAgent, greedy_action
from ..config import Config
from ..game.base_game import BaseGame
from ..utils.logger import get_logger, log_training_metrics

logger = get_logger(__name__)


@dataclass
class EpisodeStats:
    """Statistics for a single episode."""
    episode: int
    score: int          # Pipes passed (steps with positive reward)
    steps: int
    total_reward: float
    epsilon: float
    avg_loss: float     # Over steps that performed a gradient update, 0.0 if none
    duration: float


class TrainingMetrics:
    """
    Tracks per-episode metrics over time.

    Metrics tracked:
        - Episode scores
        - Total rewards
        - Steps per episode
        - Loss values
        - Epsilon values
        - Episode durations
    """

    _FIELDS = ('scores', 'rewards', 'steps', 'losses', 'epsilons', 'durations')

    def __init__(self, history_length: int = 1000):
        """
        Initialize metrics tracker.

        Args:
            history_length: Maximum history to store
        """
        self.history_length = history_length

        self.scores: List[int] = []
        self.rewards: List[float] = []
        self.steps: List[int] = []
        self.losses: List[float] = []
        self.epsilons: List[float] = []
        self.durations: List[float] = []

    def add(self, stats: EpisodeStats) -> None:
        """Add episode statistics."""
        self.scores.append(stats.score)
        self.rewards.append(stats.total_reward)
        self.steps.append(stats.steps)
        self.losses.append(stats.avg_loss)
        self.epsilons.append(stats.epsilon)
        self.durations.append(stats.duration)

        if len(self.scores) > self.history_length:
            for attr in self._FIELDS:
                setattr(self, attr, getattr(self, attr)[-self.history_length:])

    def get_recent_average(self, metric: str, n: int = 100) -> Optional[float]:
        """Average of the last n values of a metric, None if nothing recorded."""
        values = getattr(self, metric)
        if not values:
            return None
        return float(np.mean(values[-n:]))

    def get_best_score(self) -> int:
        """Get the highest score achieved."""
        return max(self.scores) if self.scores else 0

    def __len__(self) -> int:
        return len(self.scores)


class Trainer:
    """
    Manages the training loop for the DQN agent.

    Example:
        >>> game = MyFlappyGame(seed=12345)
        >>> agent = DQNAgent(config)
        >>> trainer = Trainer(game, agent, config)
        >>> trainer.train(num_episodes=1000)
    """

    def __init__(self, game: BaseGame, agent: DQNAgent, config: Optional[Config] = None):
        """
        Initialize the trainer.

        Args:
            game: Game instance (implements BaseGame)
            agent: DQN agent instance
            config: Configuration object (defaults to the agent's)
        """
        self.game = game
        self.agent = agent
        self.config = config or agent.config

        self.metrics = TrainingMetrics(self.config.METRICS_HISTORY_LENGTH)
        self.current_episode = 0

    def run_episode(self) -> EpisodeStats:
        """
        Run a single training episode.

        Returns:
            Episode statistics
        """
        start_time = time.time()

        state = self.game.reset()
        total_reward = 0.0
        score = 0
        steps = 0
        losses: List[float] = []

        while steps < self.config.MAX_STEPS_PER_EPISODE:
            action = self.agent.select_action(state)
            result = self.game.step(action)

            self.agent.store_experience(state, action, result.reward, result.observation, result.done)

            agent_steps = self.agent.get_total_steps()
            if agent_steps % self.config.TRAIN_FREQUENCY == 0:
                trained_before = self.agent.get_training_steps()
                loss = self.agent.train()
                if self.agent.get_training_steps() > trained_before:
                    losses.append(loss)

            if agent_steps % self.config.TARGET_UPDATE_FREQUENCY == 0:
                self.agent.update_target_network()

            state = result.observation
            total_reward += result.reward
            if result.reward > 0:
                score += 1
            steps += 1

            if result.done:
                break

        return EpisodeStats(
            episode=self.current_episode,
            score=score,
            steps=steps,
            total_reward=total_reward,
            epsilon=self.agent.get_epsilon(),
            avg_loss=float(np.mean(losses)) if losses else 0.0,
            duration=time.time() - start_time,
        )

    def train(self, num_episodes: Optional[int] = None) -> TrainingMetrics:
        """
        Run the training loop.

        Args:
            num_episodes: Number of episodes (default from config)

        Returns:
            Training metrics
        """
        num_episodes = num_episodes or self.config.MAX_EPISODES
        if num_episodes <= 0:
            raise ValueError("num_episodes must be positive (set it or Config.MAX_EPISODES)")

        logger.info(
            f"Starting DQN training: episodes={num_episodes}, layers={self.config.LAYER_SIZES}, "
            f"train_every={self.config.TRAIN_FREQUENCY}, target_every={self.config.TARGET_UPDATE_FREQUENCY}"
        )

        for episode in range(num_episodes):
            self.current_episode = episode
            stats = self.run_episode()
            self.metrics.add(stats)

            if episode % self.config.LOG_EVERY == 0:
                log_training_metrics(
                    episode=episode,
                    score=stats.score,
                    epsilon=stats.epsilon,
                    loss=stats.avg_loss if stats.avg_loss > 0 else None,
                    steps=stats.steps,
                )

        logger.info(
            f"Training complete: best score={self.metrics.get_best_score()}, "
            f"epsilon={self.agent.get_epsilon():.4f}, agent steps={self.agent.get_total_steps():,}, "
            f"gradient steps={self.agent.get_training_steps():,}"
        )
        return self.metrics

    def evaluate(self, num_episodes: int = 10) -> Dict[str, float]:
        """
        Evaluate the trained agent greedily.

        Uses get_q_values directly, so the agent's step counter, epsilon and
        exploration stream are left untouched.

        Args:
            num_episodes: Number of evaluation episodes

        Returns:
            Evaluation statistics
        """
        if num_episodes <= 0:
            raise ValueError(f"num_episodes must be positive, got {num_episodes}")

        scores = []
        episode_steps = []

        for _ in range(num_episodes):
            state = self.game.reset()
            score = 0
            steps = 0
            while steps < self.config.MAX_STEPS_PER_EPISODE:
                action = greedy_action(self.agent.get_q_values(state))
                result = self.game.step(action)
                state = result.observation
                if result.reward > 0:
                    score += 1
                steps += 1
                if result.done:
                    break
            scores.append(score)
            episode_steps.append(steps)

        return {
            'mean_score': float(np.mean(scores)),
            'max_score': max(scores),
            'min_score': min(scores),
            'mean_steps': float(np.mean(episode_steps)),
        }
