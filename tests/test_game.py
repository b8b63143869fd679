"""
Tests for the game contract.

These tests verify:
    - Action values double as Q-vector indices
    - Observation conversion to and from network input
    - BaseGame cannot be used without implementing the interface
"""

import dataclasses

import numpy as np
import pytest

from flappy_rl.game.base_game import Action, BaseGame, Observation, StepResult


class TestAction:
    """Test the binary action enum."""

    def test_values(self):
        assert int(Action.NO_FLAP) == 0
        assert int(Action.FLAP) == 1

    def test_indexes_arrays(self):
        q = np.array([0.25, 0.75])
        assert q[Action.FLAP] == 0.75


class TestObservation:
    """Test observation conversion."""

    def test_to_array_order(self):
        obs = Observation(y=1.0, vy=2.0, dx_to_pipe=3.0, dy_to_gap=4.0)
        arr = obs.to_array()
        assert arr.dtype == np.float64
        np.testing.assert_array_equal(arr, [1.0, 2.0, 3.0, 4.0])

    def test_from_array(self):
        obs = Observation.from_array(np.array([0.1, -0.2, 0.3, -0.4]))
        assert obs == Observation(0.1, -0.2, 0.3, -0.4)

    def test_from_list(self):
        assert Observation.from_array([1, 2, 3, 4]).dy_to_gap == 4.0

    @pytest.mark.parametrize("values", [
        [], [1.0, 2.0, 3.0], [0.0] * 5, [[1.0, 2.0], [3.0, 4.0]], [[1.0, 2.0, 3.0, 4.0]],
    ])
    def test_from_array_wrong_size(self, values):
        with pytest.raises(ValueError):
            Observation.from_array(values)

    def test_frozen(self):
        obs = Observation()
        with pytest.raises(dataclasses.FrozenInstanceError):
            obs.y = 1.0

    def test_size(self):
        assert Observation.SIZE == len(Observation().to_array())


class TestBaseGame:
    """Test the abstract game interface."""

    def test_cannot_instantiate(self):
        with pytest.raises(TypeError):
            BaseGame()

    def test_step_result_defaults(self):
        result = StepResult(Observation())
        assert result.reward == 0.0
        assert result.done is False

    def test_corridor_game_follows_contract(self, corridor_game):
        obs = corridor_game.reset()
        assert isinstance(obs, Observation)
        result = corridor_game.step(Action.FLAP)
        assert isinstance(result, StepResult)
        assert result.observation == corridor_game.observe()
        corridor_game.close()
