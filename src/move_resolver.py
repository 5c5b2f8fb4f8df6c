# move_resolver.py
# Resolves a move in any direction with a single leftward compaction routine.
# The grid is oriented so the requested direction becomes "left", every row is
# compacted, and the result is oriented back.

from dataclasses import dataclass
from typing import List, Tuple

from line_compactor import compact_line
from tiles import Direction, Grid, Tile

@dataclass(frozen=True)
class ResolvedMove:
    """A fully computed move that has not been committed to any board."""
    grid: Grid
    changed: bool
    score_delta: int
    merged_tiles: Tuple[Tile, ...]

# --- Board Helper Functions ---

def get_board_size(grid: list) -> int:
    """
    Gets the size (N) of an N x N grid.
    Args:
        grid (list): The grid, as rows of cells.
    Returns:
        int: The dimension of the grid.
    Raises:
        ValueError: If the grid is not square or empty.
    """
    if not grid or not all(len(row) == len(grid) for row in grid):
        raise ValueError("Board must be a non-empty square matrix.")
    return len(grid)

# --- Board Transformations ---

def transpose_board(grid: list) -> list:
    """
    Transposes a given grid (swaps rows and columns).
    Args:
        grid (list): The grid to transpose.
    Returns:
        list: A new transposed grid.
    """
    n = get_board_size(grid)
    new_grid = [[None] * n for _ in range(n)]
    for r in range(n):
        for c in range(n):
            new_grid[c][r] = grid[r][c]
    return new_grid

def reverse_rows(grid: list) -> list:
    """
    Reverses each row in a given grid.
    Args:
        grid (list): The grid whose rows are to be reversed.
    Returns:
        list: A new grid with rows reversed.
    """
    return [row[::-1] for row in grid]

def orient(grid: list, direction: Direction) -> list:
    """
    Rotates the requested direction onto "left".
    Rows of the result are the lines to compact, index 0 being the end tiles slide toward.
    Raises:
        ValueError: If the direction is not a Direction member.
    """
    if direction == Direction.LEFT:
        return [list(row) for row in grid]
    if direction == Direction.RIGHT:
        return reverse_rows(grid)
    if direction == Direction.UP:
        return transpose_board(grid)
    if direction == Direction.DOWN:
        return reverse_rows(transpose_board(grid))
    raise ValueError(f"Invalid direction specified: {direction!r}")

def restore(grid: list, direction: Direction) -> list:
    """Inverse of orient()."""
    if direction == Direction.LEFT:
        return [list(row) for row in grid]
    if direction == Direction.RIGHT:
        return reverse_rows(grid)
    if direction == Direction.UP:
        return transpose_board(grid)
    if direction == Direction.DOWN:
        return transpose_board(reverse_rows(grid))
    raise ValueError(f"Invalid direction specified: {direction!r}")

def _stamp_positions(grid: Grid) -> Grid:
    return [
        [tile.placed_at(r, c) if tile is not None else None for c, tile in enumerate(row)]
        for r, row in enumerate(grid)
    ]

# --- Core Move Processing ---

def resolve_move(grid: Grid, direction: Direction) -> ResolvedMove:
    """
    Computes the outcome of sliding every tile of the grid in one direction.
    The input grid is left untouched.
    Args:
        grid (Grid): The current grid of optional tiles.
        direction (Direction): The direction to move.
    Returns:
        ResolvedMove: The new grid with every tile at its final position, whether
                      anything changed, the score gained and the merged tiles in
                      line-then-position order of the compaction.
    Raises:
        ValueError: If an invalid direction is specified.
    """
    if not isinstance(direction, Direction):
        raise ValueError(f"Invalid direction specified: {direction!r}")

    # Flags describe the previous turn only; every tile starts this pass unlocked.
    working = [[tile.moved_to(tile.row, tile.col) if tile is not None else None for tile in row] for row in grid]
    oriented = orient(working, direction)
    changed = False
    score_delta = 0
    compacted: List[list] = []

    for line in oriented:
        result = compact_line(line)
        compacted.append(result.new_line)
        changed = changed or result.changed
        score_delta += result.score_gained

    if not changed:
        return ResolvedMove(grid=[list(row) for row in grid], changed=False, score_delta=0, merged_tiles=())

    new_grid = _stamp_positions(restore(compacted, direction))

    # Walk the final grid in compaction order so merged tiles carry their final positions.
    merged_tiles = tuple(
        tile
        for line in orient(new_grid, direction)
        for tile in line
        if tile is not None and tile.just_merged
    )
    return ResolvedMove(grid=new_grid, changed=True, score_delta=score_delta, merged_tiles=merged_tiles)
