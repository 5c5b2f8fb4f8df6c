import random

import pytest

from move_resolver import orient, resolve_move, restore, reverse_rows, transpose_board
from tiles import Direction, Tile, grid_values

from helpers import grid_of


def random_values(seed, size=4):
    rng = random.Random(seed)
    return [[rng.choice([0, 0, 2, 2, 4, 8]) for _ in range(size)] for _ in range(size)]


def test_left_merges_and_slides():
    grid = grid_of([
        [2, 2, 0, 0],
        [0, 4, 0, 4],
        [2, 4, 2, 4],
        [0, 0, 0, 8],
    ])
    resolved = resolve_move(grid, Direction.LEFT)
    assert grid_values(resolved.grid) == [
        [4, 0, 0, 0],
        [8, 0, 0, 0],
        [2, 4, 2, 4],
        [8, 0, 0, 0],
    ]
    assert resolved.changed
    assert resolved.score_delta == 12


def test_right_reverses_lines():
    grid = grid_of([
        [2, 2, 2, 0],
        [0, 0, 0, 0],
        [0, 0, 0, 0],
        [0, 0, 0, 0],
    ])
    resolved = resolve_move(grid, Direction.RIGHT)
    assert grid_values(resolved.grid)[0] == [0, 0, 2, 4]
    assert resolved.score_delta == 4
    merged = resolved.merged_tiles[0]
    assert (merged.row, merged.col, merged.value) == (0, 3, 4)


def test_up_and_down_work_on_columns():
    values = [
        [2, 0, 0, 0],
        [2, 0, 0, 0],
        [4, 0, 0, 0],
        [0, 0, 0, 2],
    ]
    up = resolve_move(grid_of(values), Direction.UP)
    assert [row[0] for row in grid_values(up.grid)] == [4, 4, 0, 0]
    assert grid_values(up.grid)[0][3] == 2

    down = resolve_move(grid_of(values), Direction.DOWN)
    assert [row[0] for row in grid_values(down.grid)] == [0, 0, 4, 4]
    assert down.score_delta == 4


def test_tiles_are_stamped_with_final_positions():
    resolved = resolve_move(grid_of([
        [0, 0, 0, 0],
        [0, 0, 2, 2],
        [0, 8, 0, 0],
        [0, 0, 0, 0],
    ]), Direction.LEFT)
    for r, row in enumerate(resolved.grid):
        for c, tile in enumerate(row):
            if tile is not None:
                assert (tile.row, tile.col) == (r, c)
    assert [(t.row, t.col, t.value) for t in resolved.merged_tiles] == [(1, 0, 4)]


def test_merged_tiles_follow_line_order():
    resolved = resolve_move(grid_of([
        [4, 4, 0, 0],
        [0, 0, 0, 0],
        [2, 2, 8, 8],
        [0, 0, 0, 0],
    ]), Direction.LEFT)
    assert [(t.row, t.col, t.value) for t in resolved.merged_tiles] == [(0, 0, 8), (2, 0, 4), (2, 1, 16)]
    assert resolved.score_delta == 28


def test_unchanged_move_returns_same_tiles():
    grid = grid_of([
        [2, 4, 2, 4],
        [4, 2, 4, 2],
        [0, 0, 0, 0],
        [0, 0, 0, 0],
    ])
    resolved = resolve_move(grid, Direction.UP)
    assert not resolved.changed
    assert resolved.score_delta == 0
    assert resolved.merged_tiles == ()
    assert resolved.grid == grid


def test_input_grid_is_not_modified():
    grid = grid_of(random_values(3))
    before = [list(row) for row in grid]
    for direction in Direction:
        resolve_move(grid, direction)
    assert grid == before


@pytest.mark.parametrize("seed", range(20))
def test_left_and_right_are_mirror_images(seed):
    values = random_values(seed)
    left = resolve_move(grid_of(values), Direction.LEFT)
    right = resolve_move(grid_of(reverse_rows(values)), Direction.RIGHT)
    assert grid_values(right.grid) == reverse_rows(grid_values(left.grid))
    assert right.score_delta == left.score_delta
    assert right.changed == left.changed


@pytest.mark.parametrize("seed", range(20))
def test_up_matches_left_on_transposed_grid(seed):
    values = random_values(seed, size=5)
    left = resolve_move(grid_of(values), Direction.LEFT)
    up = resolve_move(grid_of(transpose_board(values)), Direction.UP)
    assert grid_values(up.grid) == transpose_board(grid_values(left.grid))
    assert up.score_delta == left.score_delta


@pytest.mark.parametrize("direction", list(Direction))
def test_restore_undoes_orient(direction):
    values = [[r * 10 + c for c in range(4)] for r in range(4)]
    assert restore(orient(values, direction), direction) == values


def test_invalid_direction_fails_fast():
    with pytest.raises(ValueError):
        resolve_move(grid_of(random_values(1)), "left")


def test_non_square_grid_is_rejected():
    with pytest.raises(ValueError):
        transpose_board([[0, 0], [0]])


def test_last_turns_merged_tiles_can_merge_again():
    grid = grid_of([[0] * 4 for _ in range(4)])
    grid[0][0] = Tile(value=4, row=0, col=0, id="a", just_merged=True)
    grid[0][1] = Tile(value=4, row=0, col=1, id="b", is_new=True)
    resolved = resolve_move(grid, Direction.LEFT)
    assert resolved.changed
    assert grid_values(resolved.grid)[0] == [8, 0, 0, 0]
    assert resolved.score_delta == 8
    # Tiles that only slid come out with both flags cleared
    moved = resolve_move(grid_of([[0, 0, 0, 2]] + [[0] * 4] * 3), Direction.LEFT).grid[0][0]
    assert not moved.is_new and not moved.just_merged
