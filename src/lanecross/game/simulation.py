"""Per-frame simulation: update, collisions, goal check and full-scene render.

One tick runs synchronously:

    1. apply the buffered direction input
    2. update every entity, drop expired feedback texts
    3. collectable pickup (at most one per tick), then obstacle hits
    4. goal check
    5. redraw the whole scene (when a canvas is given)
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional, TYPE_CHECKING

from lanecross.core.events import Event, EventBus, EventType
from lanecross.core.interfaces import Canvas, Color
from lanecross.game.entities import (
    COLLECTABLE_KINDS,
    Collectable,
    FeedbackText,
    Obstacle,
    Player,
)
from lanecross.game.grid import Grid
from lanecross.game.placement import place_collectables
from lanecross.graphics.primitives import text_size

if TYPE_CHECKING:
    from lanecross.config.settings import Settings

logger = logging.getLogger(__name__)

PICKUP_COLOR: Color = (255, 255, 0)
HIT_COLOR: Color = (255, 0, 0)
GOAL_COLOR: Color = (255, 255, 255)
HUD_COLOR: Color = (0, 0, 0)

HUD_SCALE = 4
HUD_BASELINE = 40
SCORE_X = 0

GOAL_TILE = "water-block"
LANE_TILE = "stone-block"
SAFE_TILE = "grass-block"

DEFAULT_POPULATION: Dict[str, int] = {"blue_gem": 4, "green_gem": 2, "star": 1}


@dataclass
class GameState:
    """Score for the current life and the best score this session."""

    score: int = 0
    high_score: int = 0

    def bank_score(self) -> bool:
        """Fold score into high_score and zero it.

        Returns:
            True if a new high score was set
        """
        new_high = self.score > self.high_score
        if new_high:
            self.high_score = self.score
        self.score = 0
        return new_high


@dataclass
class SimulationState:
    """Everything the simulation owns and mutates during a tick."""

    grid: Grid
    player: Player
    obstacles: List[Obstacle] = field(default_factory=list)
    collectables: List[Collectable] = field(default_factory=list)
    texts: List[FeedbackText] = field(default_factory=list)
    game: GameState = field(default_factory=GameState)
    frame: int = 0


def build_collectables(grid: Grid, population: Dict[str, int]) -> List[Collectable]:
    """Instantiate collectables in catalog order (low value first).

    Raises:
        KeyError: If population names an unknown kind
    """
    for name in population:
        if name not in COLLECTABLE_KINDS:
            raise KeyError(f"Unknown collectable kind: {name}")

    collectables: List[Collectable] = []
    for name, kind in COLLECTABLE_KINDS.items():
        collectables.extend(Collectable(grid, kind) for _ in range(population.get(name, 0)))
    return collectables


class Simulation:
    """Owns the game state and runs one tick at a time."""

    GOAL_BONUS = 5
    FEEDBACK_DURATION = 0.5   # seconds
    DRIFT_SPEED = 50.0        # pixels per second

    def __init__(
        self,
        state: SimulationState,
        rng: random.Random,
        *,
        goal_bonus: int = GOAL_BONUS,
        feedback_duration: float = FEEDBACK_DURATION,
        drift_speed: float = DRIFT_SPEED,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        self.state = state
        self.rng = rng
        self.goal_bonus = goal_bonus
        self.feedback_duration = feedback_duration
        self.drift_speed = drift_speed
        self.event_bus = event_bus
        self._pending_move: Optional[str] = None

        # Raises ValueError if the collectables cannot all be placed
        self.reset_round()
        logger.info(
            f"Simulation ready: {len(state.obstacles)} obstacles, "
            f"{len(state.collectables)} collectables on a "
            f"{state.grid.num_cols}x{state.grid.num_rows} grid"
        )

    @classmethod
    def create(
        cls,
        grid: Grid,
        rng: random.Random,
        *,
        obstacle_count: int = 3,
        population: Optional[Dict[str, int]] = None,
        event_bus: Optional[EventBus] = None,
        **kwargs,
    ) -> "Simulation":
        """Build a simulation with the default entity set."""
        state = SimulationState(
            grid=grid,
            player=Player(grid),
            obstacles=[Obstacle(grid, rng) for _ in range(obstacle_count)],
            collectables=build_collectables(grid, population or DEFAULT_POPULATION),
        )
        return cls(state, rng, event_bus=event_bus, **kwargs)

    @classmethod
    def from_settings(
        cls,
        settings: "Settings",
        rng: Optional[random.Random] = None,
        event_bus: Optional[EventBus] = None,
    ) -> "Simulation":
        """Build a simulation from application settings."""
        rng = rng or random.Random(settings.seed)
        grid = settings.grid.to_grid()
        obstacles = settings.obstacles

        state = SimulationState(
            grid=grid,
            player=Player(grid),
            obstacles=[
                Obstacle(
                    grid,
                    rng,
                    min_speed=obstacles.min_speed,
                    max_speed=obstacles.max_speed,
                    min_delay=obstacles.min_delay,
                    max_delay=obstacles.max_delay,
                )
                for _ in range(obstacles.count)
            ],
            collectables=build_collectables(grid, settings.collectables),
        )
        scoring = settings.scoring
        return cls(
            state,
            rng,
            goal_bonus=scoring.goal_bonus,
            feedback_duration=scoring.feedback_duration,
            drift_speed=scoring.drift_speed,
            event_bus=event_bus,
        )

    # Convenience accessors
    @property
    def player(self) -> Player:
        return self.state.player

    @property
    def score(self) -> int:
        return self.state.game.score

    @property
    def high_score(self) -> int:
        return self.state.game.high_score

    @property
    def pending_move(self) -> Optional[str]:
        return self._pending_move

    # Input
    def queue_input(self, direction: Optional[str]) -> None:
        """Buffer a move for the next tick. A later move replaces an earlier one."""
        if direction in Player.STEPS:
            self._pending_move = direction

    # Tick
    def tick(self, dt: float, canvas: Optional[Canvas] = None) -> None:
        """Run one full frame."""
        if self._pending_move is not None:
            self.state.player.handle_input(self._pending_move)
            self._pending_move = None

        self.update_entities(dt)
        if not self.check_collisions():
            self.update_game_state()

        if canvas is not None:
            self.render(canvas)

        self.state.frame += 1

    def update_entities(self, dt: float) -> None:
        state = self.state

        for collectable in state.collectables:
            collectable.update(dt)

        for obstacle in state.obstacles:
            obstacle.update(dt)

        state.player.update(dt)

        for text in state.texts:
            text.update(dt)

        state.texts = [t for t in state.texts if not t.expired]

    def check_collisions(self) -> bool:
        """Handle pickups and obstacle hits.

        Returns:
            True if the player was hit and the round was reset
        """
        state = self.state
        player = state.player

        # Only one pickup per tick
        for collectable in state.collectables:
            if collectable.overlaps(player):
                self._collect(collectable)
                break

        for obstacle in state.obstacles:
            if obstacle.overlaps(player):
                self._hit(obstacle)
                return True

        return False

    def update_game_state(self) -> None:
        """Award the goal bonus when the player reaches the goal lane."""
        player = self.state.player
        if not self.state.grid.is_goal_row(player.row):
            return

        self.state.game.score += self.goal_bonus
        self.spawn_text(f"+{self.goal_bonus}", player.col, player.row, GOAL_COLOR)
        logger.info(f"Goal reached, score {self.state.game.score}")
        self._emit(EventType.GOAL_REACHED, {"score": self.state.game.score})

        self.reset_player()

    # Resets
    def reset_round(self) -> None:
        """New life: player and collectables reset, score banked into high score."""
        self.reset_player()

        game = self.state.game
        previous = game.score
        if game.bank_score():
            logger.info(f"New high score: {game.high_score}")
            self._emit(EventType.HIGH_SCORE, {"high_score": game.high_score})
        elif previous:
            logger.debug(f"Round over with score {previous}")

    def reset_player(self) -> None:
        """Send the player home and lay out a fresh set of collectables."""
        self.state.player.reset()
        place_collectables(self.state.collectables, self.state.grid, self.rng)

    def spawn_text(self, text: str, col: int, row: int, color: Color) -> FeedbackText:
        feedback = FeedbackText(
            self.state.grid,
            text,
            col,
            row,
            self.feedback_duration,
            color,
            drift_speed=self.drift_speed,
        )
        self.state.texts.append(feedback)
        return feedback

    # Rendering
    def render(self, canvas: Canvas) -> None:
        """Redraw the full scene, back to front."""
        state = self.state
        grid = state.grid

        canvas.clear_frame()

        for row in range(grid.num_rows):
            tile = self._row_tile(row)
            for col in range(grid.num_cols):
                x, y = grid.to_pixel(col, row)
                canvas.draw_image(tile, x, y)

        self._render_hud(canvas)

        # Top lane first so lower sprites overlap the ones above them
        for collectable in sorted(state.collectables, key=lambda c: c.row):
            collectable.render(canvas)

        state.player.render(canvas)

        for obstacle in state.obstacles:
            obstacle.render(canvas)

        for text in state.texts:
            text.render(canvas)

    def _render_hud(self, canvas: Canvas) -> None:
        game = self.state.game
        canvas.draw_text(f"Score: {game.score}", SCORE_X, HUD_BASELINE, HUD_COLOR, scale=HUD_SCALE)

        # High score hugs the right edge of the field
        high = f"High Score: {game.high_score}"
        x = self.state.grid.width - text_size(high, HUD_SCALE)[0]
        canvas.draw_text(high, x, HUD_BASELINE, HUD_COLOR, scale=HUD_SCALE)

    def _row_tile(self, row: int) -> str:
        grid = self.state.grid
        if grid.is_goal_row(row):
            return GOAL_TILE
        if grid.is_lane_row(row):
            return LANE_TILE
        return SAFE_TILE

    # Internals
    def _collect(self, collectable: Collectable) -> None:
        collectable.is_visible = False
        self.state.game.score += collectable.points
        self.spawn_text(f"+{collectable.points}", collectable.col, collectable.row, PICKUP_COLOR)

        logger.debug(f"Collected {collectable.kind.name} for {collectable.points}, score {self.state.game.score}")
        self._emit(EventType.ITEM_COLLECTED, {
            "kind": collectable.kind.name,
            "points": collectable.points,
            "score": self.state.game.score,
        })

    def _hit(self, obstacle: Obstacle) -> None:
        player = self.state.player
        self.spawn_text("!!!", player.col, player.row, HIT_COLOR)

        score = self.state.game.score
        logger.info(f"Player hit in lane {obstacle.row} with score {score}")
        self._emit(EventType.PLAYER_HIT, {"score": score, "lane": obstacle.row})

        self.reset_round()

    def _emit(self, event_type: EventType, data: Dict) -> None:
        if self.event_bus is not None:
            self.event_bus.emit(Event(event_type, data=data, source="simulation"))

    def status_lines(self) -> List[str]:
        """Short state summary for the debug overlay."""
        state = self.state
        visible = sum(1 for c in state.collectables if c.is_visible)
        return [
            f"Frame: {state.frame}",
            f"Score: {state.game.score}  High: {state.game.high_score}",
            f"Player: col {state.player.col} row {state.player.row}",
            f"Items: {visible}/{len(state.collectables)}",
            f"Texts: {len(state.texts)}",
        ]
