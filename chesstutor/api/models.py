"""Requests and Response models"""

from typing import Optional

from pydantic import BaseModel, field_validator

from chesstutor.chess.fen import FENState, is_valid_position
from chesstutor.chess.square import FILES, RANKS
from chesstutor.core.exceptions import InvalidFENError, InvalidRequestError
from chesstutor.core.shared_types import GuessResult, RejectReason, Side


def _is_algebraic_notation(value: str) -> bool:
    if len(value) != 2:
        return False

    file_character, rank_character = value[0].lower(), value[1]
    if file_character not in FILES:
        return False
    return rank_character in RANKS


# --- REQUEST MODELS ---
class NewGameRequest(BaseModel):
    starting_fen: Optional[str] = None

    @field_validator("starting_fen")
    @classmethod
    def validate_starting_fen(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value

        try:
            position = FENState.from_fen(value).position
        except InvalidFENError as exc:
            raise InvalidRequestError(str(exc)) from exc
        if not is_valid_position(position):
            raise InvalidRequestError(
                f"Cannot interpret {position!r} as a board position."
            )
        return value


class NewPuzzleRequest(BaseModel):
    puzzle_id: Optional[str] = None


class MoveRequest(BaseModel):
    from_square: str
    to_square: str

    @field_validator(*["from_square", "to_square"])
    @classmethod
    def validate_square(cls, value: str) -> str:
        if not _is_algebraic_notation(value):
            raise InvalidRequestError(
                f"Cannot interpret {value!r} as a valid square name."
            )
        return value


# --- RESPONSE MODELS ---
class BoardResponse(BaseModel):
    board: list[list[int]]
    side_to_move: Side
    fen: str


class MoveResponse(BaseModel):
    state: BoardResponse
    moved: bool
    reason: Optional[RejectReason] = None
    captured: int = 0
    king_taken: bool = False


class PuzzleResponse(BaseModel):
    puzzle_id: str
    rating: int
    themes: list[str]
    current_step: int
    total_steps: int
    state: BoardResponse


class GuessResponse(BaseModel):
    result: GuessResult
    current_step: int
    solved: bool
    reason: Optional[RejectReason] = None
    elo_change: Optional[int] = None
    rating: Optional[int] = None


class HintResponse(BaseModel):
    from_square: Optional[str] = None
    to_square: Optional[str] = None
