from __future__ import annotations

from typing import Sequence

from board import Board
from tiles import Difficulty, Tile, new_tile_id


class StubRandom:
    """Stands in for random.Random: always picks the first candidate cell and returns a fixed roll."""

    def __init__(self, roll: float = 0.5):
        self.roll = roll
        self.choices: list[list] = []

    def choice(self, seq):
        self.choices.append(list(seq))
        return seq[0]

    def random(self) -> float:
        return self.roll


def line_of(*values: int, row: int = 0) -> list:
    """Builds a line of tiles along one row, 0 meaning an empty cell."""
    return [
        Tile(value=value, row=row, col=col, id=new_tile_id("test")) if value else None
        for col, value in enumerate(values)
    ]


def grid_of(values: Sequence[Sequence[int]]) -> list:
    return [line_of(*row, row=r) for r, row in enumerate(values)]


def board_from_values(values, difficulty=Difficulty.EASY, roll: float = 0.5, best_score: int = 0) -> Board:
    return Board.from_values([list(row) for row in values], difficulty, rng=StubRandom(roll), best_score=best_score)
