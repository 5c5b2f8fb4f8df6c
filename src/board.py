# board.py
# The stateful game board: owns the tiles, the counters and the game status,
# and is the only place where a resolved move is committed.

import logging
import random
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from move_resolver import get_board_size, resolve_move
from spawner import Spawner
from terminal_state import check_won, is_move_possible_in_direction, next_status
from tiles import (
    Difficulty,
    Direction,
    GameProgressState,
    Grid,
    Tile,
    copy_grid,
    get_difficulty_config,
    grid_values,
    is_power_of_two,
    new_tile_id,
    parse_difficulty,
)

logger = logging.getLogger(__name__)

INITIAL_TILES = 2

@dataclass(frozen=True)
class MoveResult:
    """What a single apply_move() call did. Built fresh per call, never kept by the board."""
    direction: Direction
    changed: bool
    score_delta: int
    merged_tiles: Tuple[Tile, ...]
    spawned_tile: Optional[Tile]
    status: GameProgressState

@dataclass(frozen=True)
class GameStateSnapshot:
    """Counters and status of a board at one point in time."""
    difficulty: Difficulty
    size: int
    target: int
    score: int
    best_score: int
    move_count: int
    merge_count: int
    max_tile_seen: int
    status: GameProgressState
    has_won: bool
    last_move_valid: bool

class Board:
    """
    An N x N game of 2048.

    Usage:
        board = Board(Difficulty.EASY, rng=random.Random(7))
        result = board.apply_move(Direction.LEFT)
        if not result.changed:
            ...  # the move was rejected; nothing on the board changed

    Best score is seeded by the caller (from whatever store it keeps) and is
    only reported back; the board never persists anything itself.
    """

    def __init__(self, difficulty: Union[Difficulty, str] = Difficulty.EASY,
                 rng: Optional[random.Random] = None, best_score: int = 0):
        self.spawner = Spawner(rng)
        self.best_score = best_score
        self._setup(parse_difficulty(difficulty))
        for _ in range(INITIAL_TILES):
            self._spawn()
        logger.info("New %s game on a %dx%d board", self.difficulty.value, self.size, self.size)

    @classmethod
    def from_values(cls, values: List[List[int]], difficulty: Union[Difficulty, str] = Difficulty.EASY,
                    rng: Optional[random.Random] = None, best_score: int = 0) -> "Board":
        """
        Builds a board holding exactly the given tile values (0 for an empty cell).
        Args:
            values (List[List[int]]): Square grid matching the difficulty's size.
            difficulty (Union[Difficulty, str]): Selects size and target tile.
            rng (Optional[random.Random]): Random source for later spawns.
            best_score (int): Best score carried over from earlier games.
        Returns:
            Board: A board with no counters advanced and its status evaluated.
        Raises:
            ValueError: If the grid is not square, has the wrong size, or holds
                        a value that is neither 0 nor a power of two >= 2.
        """
        board = cls.__new__(cls)
        board.spawner = Spawner(rng)
        board.best_score = best_score
        board._setup(parse_difficulty(difficulty))

        n = get_board_size(values)
        if n != board.size:
            raise ValueError(f"{board.difficulty.value} boards are {board.size}x{board.size}, got {n}x{n}.")
        for r, row in enumerate(values):
            for c, value in enumerate(row):
                if value == 0:
                    continue
                if not is_power_of_two(value):
                    raise ValueError(f"Invalid tile value {value!r} at ({r}, {c}).")
                board.cells[r][c] = Tile(value=value, row=r, col=c, id=new_tile_id("tile"))
                board.max_tile_seen = max(board.max_tile_seen, value)

        board.has_won = check_won(board.cells, board.target)
        board.status = next_status(GameProgressState.IN_PROGRESS, board.cells, board.target)
        return board

    def _setup(self, difficulty: Difficulty) -> None:
        config = get_difficulty_config(difficulty)
        self.difficulty = difficulty
        self.size = config.size
        self.target = config.target
        self.cells: Grid = [[None] * self.size for _ in range(self.size)]
        self.score = 0
        self.move_count = 0
        self.merge_count = 0
        self.max_tile_seen = 0
        self.status = GameProgressState.IN_PROGRESS
        self.has_won = False
        self.last_move_valid = False

    def _spawn(self) -> Optional[Tile]:
        tile = self.spawner.try_spawn(self.cells)
        if tile is not None:
            self.max_tile_seen = max(self.max_tile_seen, tile.value)
        return tile

    # --- Queries ---

    def snapshot(self) -> Grid:
        """Returns a copy of the grid. Tiles are immutable, so the copy is read-only in effect."""
        return copy_grid(self.cells)

    def values(self) -> List[List[int]]:
        """Returns the grid as plain integers, 0 for an empty cell."""
        return grid_values(self.cells)

    def is_terminal(self) -> bool:
        """True once the game is lost. A won game can still be played."""
        return self.status == GameProgressState.GAME_OVER

    def query_state(self) -> GameStateSnapshot:
        return GameStateSnapshot(
            difficulty=self.difficulty,
            size=self.size,
            target=self.target,
            score=self.score,
            best_score=self.best_score,
            move_count=self.move_count,
            merge_count=self.merge_count,
            max_tile_seen=self.max_tile_seen,
            status=self.status,
            has_won=self.has_won,
            last_move_valid=self.last_move_valid,
        )

    def valid_directions(self) -> List[Direction]:
        """Directions that would change the grid right now, without playing them."""
        if self.is_terminal():
            return []
        return [direction for direction in Direction if is_move_possible_in_direction(self.cells, direction)]

    def render_text(self) -> str:
        """Renders the grid and counters as text, for debugging and the CLI."""
        lines = [
            " ".join(f"{tile.value:>5}" if tile is not None else "    ." for tile in row)
            for row in self.cells
        ]
        lines.append(f"Score: {self.score}, Moves: {self.move_count}, Status: {self.status.name}")
        return "\n".join(lines)

    # --- Commands ---

    def apply_move(self, direction: Direction) -> MoveResult:
        """
        Slides all tiles in one direction, then spawns a tile if anything moved.

        The whole move is computed before any field is touched. A move that
        changes nothing leaves the grid and every counter as they were and is
        reported with changed=False; so is any move on a lost board.

        Args:
            direction (Direction): The direction to move.
        Returns:
            MoveResult: What happened during this move.
        Raises:
            ValueError: If direction is not a Direction member.
        """
        if not isinstance(direction, Direction):
            raise ValueError(f"Invalid direction specified: {direction!r}")

        if self.status == GameProgressState.GAME_OVER:
            return MoveResult(direction, False, 0, (), None, self.status)

        resolved = resolve_move(self.cells, direction)

        if not resolved.changed:
            self.last_move_valid = False
            self._update_status()
            logger.debug("Move %s rejected: nothing can slide or merge", direction.value)
            return MoveResult(direction, False, 0, (), None, self.status)

        self.cells = resolved.grid
        self.last_move_valid = True
        self.move_count += 1
        self.score += resolved.score_delta
        if resolved.merged_tiles:
            self.merge_count += 1
            self.max_tile_seen = max(self.max_tile_seen, max(tile.value for tile in resolved.merged_tiles))
        if self.score > self.best_score:
            self.best_score = self.score

        spawned = self._spawn()
        self._update_status()

        return MoveResult(
            direction=direction,
            changed=True,
            score_delta=resolved.score_delta,
            merged_tiles=resolved.merged_tiles,
            spawned_tile=spawned,
            status=self.status,
        )

    def _update_status(self) -> None:
        previous = self.status
        self.status = next_status(previous, self.cells, self.target)
        if not self.has_won and check_won(self.cells, self.target):
            self.has_won = True
        if self.status != previous:
            if self.status == GameProgressState.GAME_OVER:
                logger.info("Game over with score %d after %d moves", self.score, self.move_count)
            else:
                logger.info("Reached %d, play may continue", self.target)

    def reset(self, difficulty: Union[Difficulty, str, None] = None, best_score: Optional[int] = None) -> None:
        """
        Starts a new game on this board object, discarding all tiles and counters.
        Args:
            difficulty: New difficulty; None keeps the current one.
            best_score: Best score to start from. When None, the current best is
                        kept for the same difficulty and dropped for a new one.
        """
        new_difficulty = self.difficulty if difficulty is None else parse_difficulty(difficulty)
        if best_score is not None:
            self.best_score = best_score
        elif new_difficulty != self.difficulty:
            self.best_score = 0
        self._setup(new_difficulty)
        for _ in range(INITIAL_TILES):
            self._spawn()
        logger.info("Reset to a new %s game", self.difficulty.value)
