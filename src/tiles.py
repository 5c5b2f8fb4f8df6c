# tiles.py
# Value types shared by every part of the engine: tiles, directions, game states and difficulties.

import itertools
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, List, Optional, Union

class GameProgressState(Enum):
    """Represents the current progress state of the game."""
    IN_PROGRESS = 1
    GAME_OVER = 2  # Lost
    GAME_WON = 3

class Direction(Enum):
    """Represents the possible move directions."""
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

class Difficulty(Enum):
    """Selects the grid size and the target tile of a game."""
    EASY = "easy"
    NORMAL = "normal"
    HARD = "hard"
    EXPERT = "expert"

@dataclass(frozen=True)
class DifficultyConfig:
    size: int
    target: int
    name: str

DIFFICULTY_CONFIGS: Dict[Difficulty, DifficultyConfig] = {
    Difficulty.EASY: DifficultyConfig(size=4, target=2048, name="Easy"),
    Difficulty.NORMAL: DifficultyConfig(size=5, target=4096, name="Normal"),
    Difficulty.HARD: DifficultyConfig(size=6, target=8192, name="Hard"),
    Difficulty.EXPERT: DifficultyConfig(size=8, target=16384, name="Expert"),
}

def parse_difficulty(difficulty: Union[Difficulty, str]) -> Difficulty:
    """
    Normalizes a difficulty given either as the enum or as its string value.
    Args:
        difficulty (Union[Difficulty, str]): e.g. Difficulty.HARD or "hard".
    Returns:
        Difficulty: The matching enum member.
    Raises:
        ValueError: If the string does not name a known difficulty.
    """
    if isinstance(difficulty, Difficulty):
        return difficulty
    try:
        return Difficulty(str(difficulty).lower())
    except ValueError:
        raise ValueError(f"Unknown difficulty: {difficulty!r}") from None

def get_difficulty_config(difficulty: Union[Difficulty, str]) -> DifficultyConfig:
    """Returns the grid size and target tile for a difficulty."""
    return DIFFICULTY_CONFIGS[parse_difficulty(difficulty)]

# --- Tiles ---

_tile_ids = itertools.count(1)

def new_tile_id(kind: str = "tile") -> str:
    """Returns an opaque token that no other tile created in this process shares."""
    return f"{kind}_{next(_tile_ids)}"

def is_power_of_two(value: int) -> bool:
    """True for 2, 4, 8, ...; False for 0, 1 and everything else."""
    return isinstance(value, int) and value >= 2 and value & (value - 1) == 0

@dataclass(frozen=True)
class Tile:
    """
    A single tile on the board.

    Tiles are immutable: a move never edits a tile in place, it builds new ones.
    `is_new` marks the tile spawned this turn, `just_merged` a tile produced by
    a merge this turn. Both are False on every tile that merely slid.
    """
    value: int
    row: int
    col: int
    id: str
    is_new: bool = False
    just_merged: bool = False

    def moved_to(self, row: int, col: int) -> "Tile":
        """Returns a copy at (row, col) with the per-turn flags cleared."""
        return replace(self, row=row, col=col, is_new=False, just_merged=False)

    def placed_at(self, row: int, col: int) -> "Tile":
        """Returns a copy at (row, col) keeping the per-turn flags."""
        if self.row == row and self.col == col:
            return self
        return replace(self, row=row, col=col)

Grid = List[List[Optional[Tile]]]

def copy_grid(grid: Grid) -> Grid:
    """Copies the row lists of a grid; tiles are immutable and shared."""
    return [list(row) for row in grid]

def grid_values(grid: Grid) -> List[List[int]]:
    """
    Converts a tile grid into the plain integer form (0 for an empty cell).
    Args:
        grid (Grid): The grid of optional tiles.
    Returns:
        List[List[int]]: Tile values, row by row.
    """
    return [[tile.value if tile is not None else 0 for tile in row] for row in grid]
