"""Grid and coordinate helpers for the lane field.

The field is a fixed ``num_rows x num_cols`` grid of tiles:

    row 0            goal lane (water)
    rows 1..3        obstacle lanes (stone)
    rows 4..5        safe start area (grass)

Every cell maps to one ``tile_width x tile_height`` pixel rectangle.
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Grid:
    """Lane field dimensions and cell/pixel conversions."""

    num_rows: int = 6
    num_cols: int = 5
    tile_width: int = 101
    tile_height: int = 83
    goal_rows: int = 1
    safe_rows: int = 2

    def __post_init__(self) -> None:
        if self.num_rows <= 0 or self.num_cols <= 0:
            raise ValueError("Grid needs at least one row and one column")
        if self.tile_width <= 0 or self.tile_height <= 0:
            raise ValueError("Tile size must be positive")
        if self.goal_rows < 1 or self.safe_rows < 1:
            raise ValueError("Grid needs a goal row and a safe row")
        if self.goal_rows + self.safe_rows >= self.num_rows:
            raise ValueError("Grid has no room left for obstacle lanes")

    @property
    def width(self) -> int:
        return self.num_cols * self.tile_width

    @property
    def height(self) -> int:
        return self.num_rows * self.tile_height

    @property
    def lane_rows(self) -> range:
        """Rows that obstacles and collectables live in."""
        return range(self.goal_rows, self.num_rows - self.safe_rows)

    @property
    def lane_cell_count(self) -> int:
        return len(self.lane_rows) * self.num_cols

    @property
    def start_cell(self) -> Tuple[int, int]:
        """Player start as (col, row): bottom row, middle column."""
        return self.num_cols // 2, self.num_rows - 1

    def to_pixel(self, col: int, row: int) -> Tuple[int, int]:
        return col * self.tile_width, row * self.tile_height

    def pixel_x_to_col(self, x: float) -> int:
        return int(x // self.tile_width)

    def clamp_col(self, col: int) -> int:
        return min(max(col, 0), self.num_cols - 1)

    def clamp_row(self, row: int) -> int:
        return min(max(row, 0), self.num_rows - 1)

    def is_goal_row(self, row: int) -> bool:
        return row < self.goal_rows

    def is_lane_row(self, row: int) -> bool:
        return row in self.lane_rows

    def decode_lane_cell(self, index: int) -> Tuple[int, int]:
        """Map a lane cell index in ``[0, lane_cell_count)`` to (col, row)."""
        return index % self.num_cols, index // self.num_cols + self.goal_rows


DEFAULT_GRID = Grid()
