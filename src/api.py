import logging
import random
import uuid
from collections import OrderedDict
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel, Field
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from board import Board, MoveResult
from tiles import Difficulty, Direction, GameProgressState, Tile

logger = logging.getLogger(__name__)

RATE_LIMIT = "100/minute"
MAX_GAMES = 10000

# Initialize the rate limiter
limiter = Limiter(key_func=get_remote_address)
app = FastAPI(
    title="2048 Game API",
    description="An HTTP front end for the 2048 engine. "\
                "Games live on the server and are addressed by their game_id.",
    version="1.0.0"
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# --- Game storage ---

class BestScores:
    """Best score per difficulty. The engine only reports scores; this keeps them."""

    def __init__(self):
        self._scores: Dict[Difficulty, int] = {difficulty: 0 for difficulty in Difficulty}

    def get(self, difficulty: Difficulty) -> int:
        return self._scores[difficulty]

    def record(self, difficulty: Difficulty, score: int) -> int:
        """Stores the score if it beats the current best and returns the best."""
        if score > self._scores[difficulty]:
            self._scores[difficulty] = score
        return self._scores[difficulty]

class GameStore:
    """
    In-memory games keyed by id, plus the best scores they feed.

    At most `max_games` boards are kept; creating one more evicts the game
    that was used least recently, after recording its score.
    """

    def __init__(self, max_games: int = MAX_GAMES):
        self.max_games = max_games
        self.games: "OrderedDict[str, Board]" = OrderedDict()
        self.best_scores = BestScores()

    def create(self, difficulty: Difficulty, seed: Optional[int] = None) -> str:
        game_id = uuid.uuid4().hex
        rng = random.Random(seed) if seed is not None else None
        self.games[game_id] = Board(difficulty, rng=rng, best_score=self.best_scores.get(difficulty))
        while len(self.games) > self.max_games:
            evicted_id, evicted = self.games.popitem(last=False)
            self.best_scores.record(evicted.difficulty, evicted.score)
            logger.debug("Evicted game %s", evicted_id)
        return game_id

    def get(self, game_id: str) -> Board:
        try:
            self.games.move_to_end(game_id)
            return self.games[game_id]
        except KeyError:
            raise HTTPException(status_code=404, detail=f"No game with id {game_id!r}.") from None

store = GameStore()

# --- Pydantic Models for API requests and responses ---

class NewGameSettings(BaseModel):
    """Settings for creating a new game."""
    difficulty: Difficulty = Field(
        default=Difficulty.EASY,
        description="easy (4x4, 2048), normal (5x5, 4096), hard (6x6, 8192) or expert (8x8, 16384)."
    )
    seed: Optional[int] = Field(
        default=None,
        description="Seed for tile spawns, for reproducible games."
    )

class ResetSettings(BaseModel):
    """Settings for restarting an existing game."""
    difficulty: Optional[Difficulty] = Field(
        default=None,
        description="Difficulty of the new game; the current one is kept when omitted."
    )

class TileData(BaseModel):
    """A single tile as seen by clients."""
    id: str
    value: int = Field(..., ge=2)
    row: int = Field(..., ge=0)
    col: int = Field(..., ge=0)
    is_new: bool
    just_merged: bool

    @classmethod
    def from_tile(cls, tile: Tile) -> "TileData":
        return cls(id=tile.id, value=tile.value, row=tile.row, col=tile.col,
                   is_new=tile.is_new, just_merged=tile.just_merged)

class GameStateData(BaseModel):
    """Represents the complete state of a game instance."""
    game_id: str = Field(..., description="Identifier to use in later requests.")
    difficulty: Difficulty
    board: List[List[int]] = Field(..., description="The N x N game board, 0 for an empty cell.")
    tiles: List[TileData] = Field(..., description="Every tile on the board, row by row.")
    score: int = Field(..., ge=0, description="Current score of the game.")
    best_score: int = Field(..., ge=0, description="Best score reached on this difficulty.")
    move_count: int = Field(..., ge=0)
    merge_count: int = Field(..., ge=0)
    max_tile: int = Field(..., ge=0, description="Highest tile value seen during this game.")
    progress: GameProgressState = Field(
        ...,
        description="Current progress state of the game (IN_PROGRESS, GAME_WON, GAME_OVER)."
    )
    has_won: bool = Field(..., description="True once the target tile has been reached.")
    win_tile: int = Field(..., gt=0, description="The tile value required to win this game instance.")
    board_size: int = Field(..., gt=0, description="The dimension N of the N x N board.")

class MoveRequestData(BaseModel):
    """Data required to make a move."""
    direction: Direction = Field(..., description="Direction of the move: up, down, left or right.")

class MoveResponseData(GameStateData):
    """Response after a move, including the new game state and move effectiveness."""
    move_was_effective: bool = Field(
        ...,
        description="True if the move resulted in a change to the board state, False otherwise."
    )
    score_delta: int = Field(..., ge=0, description="Points gained by this move.")
    merged_tiles: List[TileData] = Field(default_factory=list, description="Tiles produced by merges this move.")
    spawned_tile: Optional[TileData] = Field(default=None, description="Tile added after the move, if any.")
    message: Optional[str] = Field(
        default=None,
        description="An optional message, e.g., if a move was invalid, game ended, or other info."
    )

def _state_fields(game_id: str, board: Board) -> dict:
    state = board.query_state()
    return dict(
        game_id=game_id,
        difficulty=state.difficulty,
        board=board.values(),
        tiles=[TileData.from_tile(tile) for row in board.snapshot() for tile in row if tile is not None],
        score=state.score,
        best_score=state.best_score,
        move_count=state.move_count,
        merge_count=state.merge_count,
        max_tile=state.max_tile_seen,
        progress=state.status,
        has_won=state.has_won,
        win_tile=state.target,
        board_size=state.size,
    )

def _move_message(result: MoveResult) -> Optional[str]:
    if result.status == GameProgressState.GAME_OVER:
        return "Game Over. No more valid moves."
    if not result.changed:
        return "Move was not effective; board state unchanged by slide."
    if result.status == GameProgressState.GAME_WON:
        return "Congratulations! You won!"
    return None

# --- API Endpoints ---

@app.post("/game/new", response_model=GameStateData, summary="Start a New 2048 Game")
@limiter.limit(RATE_LIMIT)
async def start_new_game(request: Request, settings: NewGameSettings):
    """
    Creates a new game for the chosen difficulty.

    - **difficulty**: easy, normal, hard or expert. Default is easy.
    - **seed**: optional seed that makes tile spawns reproducible.

    Returns the initial game state, including the board with two random tiles,
    score (0), progress status (IN_PROGRESS) and the new game_id.
    """
    try:
        game_id = store.create(settings.difficulty, settings.seed)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Unexpected error in /game/new")
        raise HTTPException(status_code=500, detail=f"An unexpected error occurred during game creation: {str(e)}")
    return GameStateData(**_state_fields(game_id, store.get(game_id)))

@app.get("/game/{game_id}", response_model=GameStateData, summary="Get the State of a Game")
@limiter.limit(RATE_LIMIT)
async def get_game(request: Request, game_id: str):
    """Returns the current state of an existing game."""
    return GameStateData(**_state_fields(game_id, store.get(game_id)))

@app.post("/game/{game_id}/move", response_model=MoveResponseData, summary="Make a Move in the Game")
@limiter.limit(RATE_LIMIT)
async def make_move(request: Request, game_id: str, request_data: MoveRequestData):
    """
    Processes a player's move in the game.

    The API will:
    1. Attempt to process the move (slide tiles, merge).
    2. If the move changed the board, add a new random tile (2 or 4).
    3. Determine the new game status (IN_PROGRESS, GAME_WON, GAME_OVER).

    Returns the updated game state, whether the move was effective, and an optional message.
    """
    board = store.get(game_id)
    try:
        result = board.apply_move(request_data.direction)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Error processing move: {str(e)}")
    except Exception as e:
        logger.exception("Unexpected error in /game/%s/move", game_id)
        raise HTTPException(status_code=500, detail=f"An unexpected server error occurred while processing the move: {str(e)}")

    store.best_scores.record(board.difficulty, board.score)

    return MoveResponseData(
        **_state_fields(game_id, board),
        move_was_effective=result.changed,
        score_delta=result.score_delta,
        merged_tiles=[TileData.from_tile(tile) for tile in result.merged_tiles],
        spawned_tile=TileData.from_tile(result.spawned_tile) if result.spawned_tile is not None else None,
        message=_move_message(result),
    )

@app.post("/game/{game_id}/reset", response_model=GameStateData, summary="Restart a Game")
@limiter.limit(RATE_LIMIT)
async def reset_game(request: Request, game_id: str, settings: ResetSettings):
    """Discards the current board of a game and starts over, optionally on another difficulty."""
    board = store.get(game_id)
    difficulty = settings.difficulty if settings.difficulty is not None else board.difficulty
    store.best_scores.record(board.difficulty, board.score)
    board.reset(difficulty, best_score=store.best_scores.get(difficulty))
    return GameStateData(**_state_fields(game_id, board))
