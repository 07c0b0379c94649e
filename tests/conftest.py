"""Pytest configuration and fixtures."""

from __future__ import annotations

import random

import pytest
from PIL import Image

from arcade_shooter.config import GameSettings
from arcade_shooter.engine import GameController, ManualFrameScheduler
from arcade_shooter.renderer.surface import Surface
from arcade_shooter.types import GameResources


def _make_frames(count: int, size: int = 8) -> list[Image.Image]:
    """Create distinct solid-color frames."""
    return [
        Image.new("RGBA", (size, size), (40 * (i + 1) % 256, 100, 200, 255))
        for i in range(count)
    ]


@pytest.fixture
def frames() -> list[Image.Image]:
    """Three small frames."""
    return _make_frames(3)


@pytest.fixture
def surface() -> Surface:
    """An 800x600 surface."""
    return Surface(800, 600)


@pytest.fixture
def scheduler() -> ManualFrameScheduler:
    """A scheduler stepped by hand."""
    return ManualFrameScheduler()


@pytest.fixture
def resources() -> GameResources:
    """Resources with every sequence present."""
    return GameResources(
        enemy_move_frames=_make_frames(4),
        enemy_death_frames=_make_frames(2),
        fire_effect_frames=_make_frames(3),
    )


@pytest.fixture
def controller(surface, scheduler) -> GameController:
    """A controller with no images and a seeded random source."""
    return GameController(
        surface=surface,
        scheduler=scheduler,
        settings=GameSettings(enemy_speed=3, anim_speed_ms=150),
        rng=random.Random(1234),
    )


@pytest.fixture
def playing(controller) -> GameController:
    """A controller that has just started at t=0."""
    controller.start(0.0)
    return controller


@pytest.fixture
def make_frames():
    """Factory for solid-color frame sequences."""
    return _make_frames
