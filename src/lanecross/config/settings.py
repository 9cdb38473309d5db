"""
Application settings using Pydantic.

Settings are loaded from environment variables with .env file support.
Nested values use a double underscore, e.g. LANECROSS_GRID__NUM_COLS=7.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from lanecross.game.grid import Grid
from lanecross.graphics.sprites import SPRITE_HEIGHT


class GridSettings(BaseModel):
    """Lane field layout."""

    num_rows: int = Field(default=6, ge=3)
    num_cols: int = Field(default=5, ge=1)
    tile_width: int = Field(default=101, gt=0)
    tile_height: int = Field(default=83, gt=0)

    # Row bands: goal lane on top, safe area at the bottom
    goal_rows: int = Field(default=1, ge=1)
    safe_rows: int = Field(default=2, ge=1)

    def to_grid(self) -> Grid:
        return Grid(
            num_rows=self.num_rows,
            num_cols=self.num_cols,
            tile_width=self.tile_width,
            tile_height=self.tile_height,
            goal_rows=self.goal_rows,
            safe_rows=self.safe_rows,
        )


class ObstacleSettings(BaseModel):
    """Bug count and speed/entry-delay ranges."""

    count: int = Field(default=3, ge=0)
    min_speed: float = Field(default=250.0, gt=0)  # pixels per second
    max_speed: float = Field(default=400.0, gt=0)
    min_delay: float = Field(default=0.5, ge=0)    # seconds
    max_delay: float = Field(default=1.5, ge=0)

    @model_validator(mode="after")
    def check_ranges(self) -> "ObstacleSettings":
        if self.min_speed > self.max_speed:
            raise ValueError("min_speed must not exceed max_speed")
        if self.min_delay > self.max_delay:
            raise ValueError("min_delay must not exceed max_delay")
        return self


class ScoringSettings(BaseModel):
    """Goal bonus and feedback text timing."""

    goal_bonus: int = Field(default=5, ge=0)
    feedback_duration: float = Field(default=0.5, gt=0)  # seconds
    drift_speed: float = Field(default=50.0, ge=0)       # pixels per second


class DisplaySettings(BaseModel):
    """Window settings. The frame size follows the grid."""

    scale: int = Field(default=1, ge=1)
    fps: int = Field(default=60, ge=1)


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="LANECROSS_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Environment
    debug: bool = False
    seed: Optional[int] = None
    title: str = "LANECROSS"

    # Paths
    assets_path: Path = Field(default_factory=lambda: Path.cwd() / "assets")

    # Population per collectable kind
    collectables: dict[str, int] = Field(
        default_factory=lambda: {"blue_gem": 4, "green_gem": 2, "star": 1}
    )

    # Nested settings
    grid: GridSettings = Field(default_factory=GridSettings)
    obstacles: ObstacleSettings = Field(default_factory=ObstacleSettings)
    scoring: ScoringSettings = Field(default_factory=ScoringSettings)
    display: DisplaySettings = Field(default_factory=DisplaySettings)

    @model_validator(mode="after")
    def check_population(self) -> "Settings":
        if any(count < 0 for count in self.collectables.values()):
            raise ValueError("collectable counts must not be negative")
        return self

    @property
    def frame_size(self) -> tuple[int, int]:
        """Frame buffer (width, height) in pixels.

        Tall sprites on the bottom row reach below the last tile, so the
        frame is taller than the grid by the sprite overhang.
        """
        grid = self.grid.to_grid()
        return grid.width, grid.height + SPRITE_HEIGHT - grid.tile_height


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
