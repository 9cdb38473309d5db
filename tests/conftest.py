"""Shared fixtures and fake collaborators."""

import random
from typing import Callable

import pytest

from lanecross.core.interfaces import Canvas, FrameScheduler
from lanecross.game.grid import Grid
from lanecross.game.simulation import Simulation


class RecordingCanvas(Canvas):
    """Canvas that records every call as a tuple."""

    def __init__(self) -> None:
        self.calls: list[tuple] = []

    def clear_frame(self) -> None:
        self.calls.append(("clear",))

    def draw_image(self, sprite_id: str, x: float, y: float) -> None:
        self.calls.append(("image", sprite_id, x, y))

    def draw_text(self, text, x, y, color, scale=3) -> None:
        self.calls.append(("text", text, x, y, color))

    def images(self) -> list[tuple]:
        return [c for c in self.calls if c[0] == "image"]

    def texts(self) -> list[tuple]:
        return [c for c in self.calls if c[0] == "text"]


class ManualScheduler(FrameScheduler):
    """Scheduler driven by the test: advance() runs the pending frame."""

    def __init__(self, start: float = 100.0) -> None:
        self.time = start
        self.pending: Callable[[float], None] | None = None

    def now(self) -> float:
        return self.time

    def request_next_frame(self, callback) -> None:
        self.pending = callback

    def advance(self, dt: float) -> None:
        self.time += dt
        callback, self.pending = self.pending, None
        if callback is not None:
            callback(self.time)


@pytest.fixture
def grid() -> Grid:
    return Grid()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def canvas() -> RecordingCanvas:
    return RecordingCanvas()


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def make_sim(grid, rng):
    """Factory for simulations with a chosen number of obstacles."""

    def _make(obstacle_count: int = 0, **kwargs) -> Simulation:
        return Simulation.create(grid, rng, obstacle_count=obstacle_count, **kwargs)

    return _make


def park_obstacles(sim: Simulation) -> None:
    """Stop every obstacle far left of the field in the bottom lane."""
    for obstacle in sim.state.obstacles:
        obstacle.speed = 0.0
        obstacle.set_row(3)
        obstacle.move_to_x(-500.0)


def hide_collectables(sim: Simulation) -> None:
    for collectable in sim.state.collectables:
        collectable.is_visible = False
