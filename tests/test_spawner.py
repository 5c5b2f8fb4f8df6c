import random
from collections import Counter

from spawner import Spawner
from tiles import grid_values

from helpers import StubRandom, grid_of


def test_spawn_on_full_grid_returns_nothing():
    values = [[2, 4], [4, 2]]
    grid = grid_of(values)
    assert Spawner(StubRandom()).try_spawn(grid) is None
    assert grid_values(grid) == values


def test_spawn_writes_a_new_tile_into_an_empty_cell():
    grid = grid_of([[2, 0], [0, 4]])
    rng = StubRandom(roll=0.5)
    tile = Spawner(rng).try_spawn(grid)
    assert rng.choices == [[(0, 1), (1, 0)]]
    assert (tile.row, tile.col, tile.value) == (0, 1, 2)
    assert tile.is_new and not tile.just_merged
    assert grid[0][1] is tile


def test_low_roll_spawns_a_four():
    tile = Spawner(StubRandom(roll=0.05)).try_spawn(grid_of([[0, 0], [0, 0]]))
    assert tile.value == 4


def test_seeded_spawns_are_reproducible():
    def play(seed):
        grid = grid_of([[0] * 4 for _ in range(4)])
        spawner = Spawner(random.Random(seed))
        return [(t.row, t.col, t.value) for t in iter(lambda: spawner.try_spawn(grid), None)]

    first = play(11)
    assert len(first) == 16
    assert first == play(11)


def test_values_are_mostly_twos():
    spawner = Spawner(random.Random(2024))
    counts = Counter(spawner.try_spawn(grid_of([[0]])).value for _ in range(2000))
    assert set(counts) == {2, 4}
    assert 0.05 < counts[4] / 2000 < 0.15
