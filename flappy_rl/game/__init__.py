"""
Game Module
===========

Environment contract consumed by the agent. The physics simulation and
rendering live outside this package; a game plugs in by subclassing BaseGame.
"""

from .base_game import Action, Observation, StepResult, BaseGame

__all__ = ['Action', 'Observation', 'StepResult', 'BaseGame']
