# spawner.py
# Places new low-value tiles into empty cells.

import logging
import random
from typing import Optional

from terminal_state import get_empty_cells
from tiles import Grid, Tile, new_tile_id

logger = logging.getLogger(__name__)

SPAWN_FOUR_PROBABILITY = 0.1

class Spawner:
    """
    Adds a new tile (90% chance of 2, 10% chance of 4) to a random empty cell.

    The random source is injectable so games can be replayed from a seed.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng if rng is not None else random.Random()

    def try_spawn(self, grid: Grid) -> Optional[Tile]:
        """
        Writes a new tile into the given grid in place.
        Args:
            grid (Grid): The working grid to spawn into.
        Returns:
            Optional[Tile]: The spawned tile, or None if the grid has no empty cell.
        """
        empty_cells = get_empty_cells(grid)
        if not empty_cells:
            logger.debug("No empty cell left, nothing spawned")
            return None

        row, col = self.rng.choice(empty_cells)
        value = 4 if self.rng.random() < SPAWN_FOUR_PROBABILITY else 2
        tile = Tile(value=value, row=row, col=col, id=new_tile_id("tile"), is_new=True)
        grid[row][col] = tile
        logger.debug("Spawned %d at (%d, %d)", value, row, col)
        return tile
