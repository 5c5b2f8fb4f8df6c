# line_compactor.py
# Slides and merges a single row or column toward index 0.

from dataclasses import dataclass
from typing import List, Optional, Sequence

from tiles import Tile, new_tile_id

@dataclass(frozen=True)
class LineResult:
    """Outcome of compacting one line."""
    new_line: List[Optional[Tile]]
    changed: bool
    score_gained: int
    merged: List[Tile]

def _line_signature(line: Sequence[Optional[Tile]]) -> tuple:
    return tuple(tile.value if tile is not None else 0 for tile in line)

def compact_line(line: Sequence[Optional[Tile]]) -> LineResult:
    """
    Compacts a line toward index 0, merging equal neighbours once each.

    Tiles are consumed left to right. A tile merges with the next non-empty
    tile when both hold the same value and neither has merged this pass, so
    [2, 2, 2, 2] becomes [4, 4, _, _] and [2, 2, 2] becomes [4, 2, _].
    Tiles in the returned line keep their old row/col; the caller stamps the
    final positions.

    Args:
        line (Sequence[Optional[Tile]]): The line, oriented so that index 0 is
                                         the end tiles slide toward.
    Returns:
        LineResult: The new line (same length), whether the value pattern
                    changed, the score gained and the tiles produced by merges.
    """
    n = len(line)
    tiles = [tile for tile in line if tile is not None]
    new_line: List[Optional[Tile]] = [None] * n
    merged: List[Tile] = []
    score_gained = 0
    write_idx = 0
    read_idx = 0

    while read_idx < len(tiles):
        current = tiles[read_idx]
        following = tiles[read_idx + 1] if read_idx + 1 < len(tiles) else None

        if (following is not None
                and current.value == following.value
                and not current.just_merged
                and not following.just_merged):
            merged_value = current.value * 2
            merged_tile = Tile(
                value=merged_value,
                row=current.row,
                col=current.col,
                id=new_tile_id("merged"),
                just_merged=True,
            )
            new_line[write_idx] = merged_tile
            merged.append(merged_tile)
            score_gained += merged_value
            read_idx += 2 # Both source tiles are consumed
        else:
            new_line[write_idx] = current.moved_to(current.row, current.col)
            read_idx += 1
        write_idx += 1

    changed = _line_signature(new_line) != _line_signature(line)
    return LineResult(new_line=new_line, changed=changed, score_gained=score_gained, merged=merged)
