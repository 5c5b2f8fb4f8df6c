# cli_driver.py
# This file is intended to be run to play or test the 2048 game on the CLI

import argparse
import logging
import random
from typing import Optional

from board import Board, MoveResult
from tiles import Difficulty, Direction, GameProgressState

DIRECTION_MAP = {'W': Direction.UP, 'A': Direction.LEFT, 'S': Direction.DOWN, 'D': Direction.RIGHT}

def parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='Play 2048 in the terminal')
    parser.add_argument('--difficulty', type=str, default=Difficulty.EASY.value,
                        choices=[difficulty.value for difficulty in Difficulty],
                        help='Board size and target tile (default: easy, 4x4 to 2048)')
    parser.add_argument('--seed', type=int, default=None, help='Seed for tile spawns')
    parser.add_argument('--verbose', action='store_true', help='Log engine debug output')
    return parser.parse_args(argv)

def main(argv: Optional[list] = None, input_fn=input) -> Board:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    # 1. Initialize game
    rng = random.Random(args.seed) if args.seed is not None else None
    board = Board(args.difficulty, rng=rng)
    display_board_state(board)

    # 2. Game Loop
    while not board.is_terminal():
        move_input = input_fn("Enter move (W/A/S/D for Up/Left/Down/Right, Q to quit): ").strip().upper()

        if move_input == 'Q':
            print("Quitting game.")
            break

        chosen_direction = DIRECTION_MAP.get(move_input)
        if chosen_direction is None:
            print("Invalid input. Use W, A, S, D.")
            continue

        # 3. Process the move; spawning and the status check happen inside the board
        result = board.apply_move(chosen_direction)
        if not result.changed and not board.is_terminal():
            print("Move did not change the board. Try a different direction.")
        else:
            describe_move(result)

        display_board_state(board)

    # 4. Game Ended
    state = board.query_state()
    print("\n--- Final Board State ---")
    display_board_state(board)
    if state.has_won:
        print(f"Congratulations! You reached the {state.target} tile!")
    if state.status == GameProgressState.GAME_OVER:
        print("No more moves possible. Better luck next time!")
    print(f"Best score ({state.difficulty.value}): {state.best_score}")
    return board

# --- Display Functions (Example of external usage) ---

def describe_move(result: MoveResult):
    """Prints what a successful move produced."""
    if result.score_delta:
        merged = ", ".join(str(tile.value) for tile in result.merged_tiles)
        print(f"+{result.score_delta} (merged: {merged})")

def display_board_state(board: Board):
    """Prints the board, score, and game status to the console."""
    state = board.query_state()
    print(f"\nScore: {state.score}  Best: {state.best_score}  Max tile: {state.max_tile_seen}")
    status_message = {
        GameProgressState.IN_PROGRESS: f"Status: {state.status.name}",
        GameProgressState.GAME_WON: "YOU WON! Keep going if you like.",
        GameProgressState.GAME_OVER: "GAME OVER!"
    }
    print(status_message.get(state.status, f"Status: {state.status.name} (Unknown)"))

    for row in board.values():
        print("\t".join(str(value) if value else "." for value in row))
    print("-" * (state.size * 6)) # Adjust width based on board size

if __name__ == "__main__":
    main()
