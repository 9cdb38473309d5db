"""On-screen entities: obstacles, the player, collectables and feedback text.

All entities share grid position, visibility and a horizontal collision box.
Grid coordinates are authoritative; pixel coordinates are derived from them
plus a fixed per-kind render offset.
"""

import logging
import random
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from lanecross.core.interfaces import Canvas, Color
from lanecross.game.grid import Grid

logger = logging.getLogger(__name__)


class Entity:
    """Base for everything drawn on the lane field.

    Subclasses override the class-level sprite, offsets and collision
    margins. Position changes go through set_col/set_row so that x/y never
    drift away from col/row.
    """

    sprite: Optional[str] = None
    offset_x: int = 0
    offset_y: int = 0
    margin_left: int = 0
    margin_right: int = 0

    def __init__(self, grid: Grid, col: int = 0, row: int = 0) -> None:
        self.grid = grid
        self.is_visible = True
        self._col = 0
        self._row = 0
        self._x = 0.0
        self._y = 0.0
        self.set_col(col)
        self.set_row(row)

    @property
    def col(self) -> int:
        return self._col

    @property
    def row(self) -> int:
        return self._row

    @property
    def x(self) -> float:
        return self._x

    @property
    def y(self) -> float:
        return self._y

    def set_col(self, col: int) -> None:
        self._col = col
        self._x = float(col * self.grid.tile_width + self.offset_x)

    def set_row(self, row: int) -> None:
        self._row = row
        self._y = float(row * self.grid.tile_height + self.offset_y)

    def collision_span(self) -> Tuple[float, float]:
        """Half-open horizontal span [left, right) used for overlap tests."""
        left = self._x + self.margin_left
        right = self._x + self.grid.tile_width - self.margin_right
        return left, right

    def overlaps(self, other: "Entity") -> bool:
        """Same-lane horizontal overlap between two visible entities.

        Touching edges do not count.
        """
        if not (self.is_visible and other.is_visible):
            return False
        if self._row != other.row:
            return False

        left, right = self.collision_span()
        other_left, other_right = other.collision_span()
        return right > other_left and left < other_right

    def update(self, dt: float) -> None:
        """Advance kinematic state by dt seconds."""
        pass

    def render(self, canvas: Canvas) -> None:
        if self.is_visible and self.sprite:
            canvas.draw_image(self.sprite, self._x, self._y)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(col={self._col}, row={self._row}, x={self._x:.1f}, y={self._y:.1f})"


class Obstacle(Entity):
    """A bug crawling left to right along one of the obstacle lanes."""

    sprite = "enemy-bug"
    offset_y = -20
    margin_left = 3
    margin_right = 3

    MIN_SPEED = 250.0   # pixels per second
    MAX_SPEED = 400.0
    MIN_DELAY = 0.5     # seconds spent off-screen before entering
    MAX_DELAY = 1.5

    def __init__(
        self,
        grid: Grid,
        rng: random.Random,
        *,
        min_speed: float = MIN_SPEED,
        max_speed: float = MAX_SPEED,
        min_delay: float = MIN_DELAY,
        max_delay: float = MAX_DELAY,
    ) -> None:
        super().__init__(grid)
        self._rng = rng
        self.min_speed = min_speed
        self.max_speed = max_speed
        self.min_delay = min_delay
        self.max_delay = max_delay
        self.speed = 0.0
        self.reset()

    def move_to_x(self, x: float) -> None:
        """Continuous horizontal placement; col follows the sprite's left edge."""
        self._x = x
        self._col = self.grid.pixel_x_to_col(x - self.offset_x)

    def reset(self) -> None:
        # Start left of the field, staggered by a random delay
        lanes = self.grid.lane_rows
        self.set_row(self._rng.choice(lanes))
        self.speed = self._rng.uniform(self.min_speed, self.max_speed)
        delay = self._rng.uniform(self.min_delay, self.max_delay)
        self.move_to_x(-delay * self.speed)
        logger.debug(f"Obstacle respawned in lane {self._row} at {self.speed:.0f}px/s")

    def update(self, dt: float) -> None:
        self.move_to_x(self._x + self.speed * dt)
        if self._x > self.grid.width:
            self.reset()


class Player(Entity):
    """The avatar. Moves one cell per direction input."""

    sprite = "char-boy"
    margin_left = 16
    margin_right = 16

    STEPS: Dict[str, Tuple[int, int]] = {
        "left": (-1, 0),
        "right": (1, 0),
        "up": (0, -1),
        "down": (0, 1),
    }

    def __init__(self, grid: Grid) -> None:
        col, row = grid.start_cell
        super().__init__(grid, col, row)

    def reset(self) -> None:
        col, row = self.grid.start_cell
        self.set_row(row)
        self.set_col(col)

    def handle_input(self, direction: Optional[str]) -> bool:
        """Step one cell in direction. Unknown directions are ignored.

        Returns:
            True if the direction was recognized
        """
        step = self.STEPS.get(direction) if direction else None
        if step is None:
            return False

        dc, dr = step
        self.set_col(self.grid.clamp_col(self._col + dc))
        self.set_row(self.grid.clamp_row(self._row + dr))
        return True


@dataclass(frozen=True)
class CollectableKind:
    name: str
    sprite: str
    points: int
    appear_probability: float


BLUE_GEM = CollectableKind("blue_gem", "gem-blue", points=1, appear_probability=0.6)
GREEN_GEM = CollectableKind("green_gem", "gem-green", points=3, appear_probability=0.3)
STAR = CollectableKind("star", "star", points=10, appear_probability=0.2)

COLLECTABLE_KINDS: Dict[str, CollectableKind] = {
    kind.name: kind for kind in (BLUE_GEM, GREEN_GEM, STAR)
}


class Collectable(Entity):
    """Stationary bonus item. Hidden when picked up, re-rolled each round."""

    offset_y = -32

    def __init__(self, grid: Grid, kind: CollectableKind) -> None:
        super().__init__(grid)
        self.kind = kind
        self.sprite = kind.sprite

    @property
    def points(self) -> int:
        return self.kind.points

    @property
    def appear_probability(self) -> float:
        return self.kind.appear_probability


class FeedbackText(Entity):
    """Short-lived label that drifts upward, e.g. "+3" after a pickup."""

    TEXT_OFFSET_X = 30
    TEXT_OFFSET_Y = 120
    SCALE = 4

    def __init__(
        self,
        grid: Grid,
        text: str,
        col: int,
        row: int,
        duration: float,
        color: Color,
        drift_speed: float = 50.0,
    ) -> None:
        super().__init__(grid, col, row)
        self.text = text
        self.remaining_duration = duration
        self.color = color
        self.drift_speed = drift_speed

    @property
    def expired(self) -> bool:
        return self.remaining_duration < 0

    def update(self, dt: float) -> None:
        self.remaining_duration -= dt
        self._y -= self.drift_speed * dt

    def render(self, canvas: Canvas) -> None:
        canvas.draw_text(
            self.text,
            self._x + self.TEXT_OFFSET_X,
            self._y + self.TEXT_OFFSET_Y,
            self.color,
            scale=self.SCALE,
        )
