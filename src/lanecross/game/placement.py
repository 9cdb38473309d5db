"""Random, non-overlapping placement of collectables on the obstacle lanes."""

import random
from typing import List, Sequence, Tuple

from lanecross.game.entities import Collectable
from lanecross.game.grid import Grid


def shuffled_lane_cells(grid: Grid, rng: random.Random) -> List[int]:
    """All lane cell indices in uniformly random order."""
    cells = list(range(grid.lane_cell_count))
    rng.shuffle(cells)
    return cells


def place_collectables(
    collectables: Sequence[Collectable],
    grid: Grid,
    rng: random.Random,
) -> List[Tuple[int, int]]:
    """Give every collectable its own lane cell and re-roll its visibility.

    Args:
        collectables: Collectables to place, in fixed order
        grid: Lane field
        rng: Random source

    Returns:
        The (col, row) assigned to each collectable, in order

    Raises:
        ValueError: If there are more collectables than lane cells
    """
    if len(collectables) > grid.lane_cell_count:
        raise ValueError(
            f"Cannot place {len(collectables)} collectables on "
            f"{grid.lane_cell_count} lane cells"
        )

    cells = shuffled_lane_cells(grid, rng)
    placed: List[Tuple[int, int]] = []

    for collectable, cell in zip(collectables, cells):
        col, row = grid.decode_lane_cell(cell)
        collectable.set_col(col)
        collectable.set_row(row)
        collectable.is_visible = rng.random() < collectable.appear_probability
        placed.append((col, row))

    return placed
