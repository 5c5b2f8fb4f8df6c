# terminal_state.py
# Win and loss detection. Only raw tile values are considered; merge flags from
# the last move play no part in deciding whether a pair can still merge.

from typing import List, Optional, Sequence, Tuple

from tiles import Direction, GameProgressState, Tile

Cells = Sequence[Sequence[Optional[Tile]]]

def get_empty_cells(grid: Cells) -> List[Tuple[int, int]]:
    """
    Get coordinates of empty cells in the given grid.
    Args:
        grid (Cells): The grid to check.
    Returns:
        List[Tuple[int, int]]: List of (row, col) tuples for empty cells, row-major.
    """
    empty_cells = []
    for row, cells in enumerate(grid):
        for col, tile in enumerate(cells):
            if tile is None:
                empty_cells.append((row, col))
    return empty_cells

def check_won(grid: Cells, target: int) -> bool:
    """
    Check if a tile has reached the target value.
    Args:
        grid (Cells): The game grid.
        target (int): The tile value that signifies a win.
    Returns:
        bool: True if any tile value is >= target.
    """
    return any(tile is not None and tile.value >= target for row in grid for tile in row)

def _has_adjacent_equal_pair(grid: Cells) -> bool:
    n = len(grid)
    for r in range(n):
        for c in range(len(grid[r])):
            tile = grid[r][c]
            if tile is None:
                continue
            right = grid[r][c + 1] if c + 1 < len(grid[r]) else None
            if right is not None and right.value == tile.value:
                return True
            below = grid[r + 1][c] if r + 1 < n else None
            if below is not None and below.value == tile.value:
                return True
    return False

def check_lost(grid: Cells) -> bool:
    """
    The game is lost when no cell is empty and no two horizontally or
    vertically adjacent tiles hold the same value.
    """
    if get_empty_cells(grid):
        return False
    return not _has_adjacent_equal_pair(grid)

def is_move_possible_in_direction(grid: Cells, direction: Direction) -> bool:
    """
    Check if any tile can move or merge in the given specific direction.
    Args:
        grid (Cells): The game grid.
        direction (Direction): The direction to check.
    Returns:
       bool: True if at least one tile can move or merge in that direction, False otherwise.
    Raises:
        ValueError: If the direction is not a Direction member.
    """
    offsets = {
        Direction.UP: (-1, 0),
        Direction.DOWN: (1, 0),
        Direction.LEFT: (0, -1),
        Direction.RIGHT: (0, 1),
    }
    if direction not in offsets:
        raise ValueError(f"Invalid direction specified: {direction!r}")
    dr, dc = offsets[direction]
    n = len(grid)
    for r in range(n):
        for c in range(n):
            tile = grid[r][c]
            if tile is None:
                continue  # Only non-empty tiles can initiate a move
            nr, nc = r + dr, c + dc
            if not (0 <= nr < n and 0 <= nc < n):
                continue
            neighbour = grid[nr][nc]
            if neighbour is None or neighbour.value == tile.value:
                return True
    return False

def next_status(current: GameProgressState, grid: Cells, target: int) -> GameProgressState:
    """
    Determines the progress state after a move attempt.

    IN_PROGRESS moves to GAME_WON the first time the target is reached and
    stays there while play continues. A stuck grid moves any state to
    GAME_OVER, which is never left.
    """
    if current == GameProgressState.GAME_OVER:
        return current
    if check_lost(grid):
        return GameProgressState.GAME_OVER
    if current == GameProgressState.IN_PROGRESS and check_won(grid, target):
        return GameProgressState.GAME_WON
    return current
