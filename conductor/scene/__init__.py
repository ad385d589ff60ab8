"""
Scene Transition Synchronizer

The scene contract consumed by the conductor, keyed frame animations and a
headless reference scene.
"""

from conductor.scene.animation import AnimationScheduler
from conductor.scene.contract import NullScene, SceneSynchronizer
from conductor.scene.headless import HeadlessScene

__all__ = ["AnimationScheduler", "HeadlessScene", "NullScene", "SceneSynchronizer"]
