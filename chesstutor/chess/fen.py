"""
Reading FEN records.

Only the piece placement and the active color are used by the engine. The other fields are kept as raw text:
puzzles are filtered upstream on their castling field, and en passant / move counters play no role in the rules implemented here.
"""

from dataclasses import dataclass
from typing import Self

from chesstutor.chess.pieces import FEN_TO_PIECE
from chesstutor.chess.square import BOARD_SIZE
from chesstutor.core.exceptions import InvalidFENError
from chesstutor.core.shared_types import Side

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"
NO_CASTLING = "-"


def is_valid_position(position: str) -> bool:
    """Only check the part of the FEN encoding for the board position."""
    rank_fens = position.split("/")
    if len(rank_fens) != BOARD_SIZE:
        return False

    for rank_fen in rank_fens:
        file_count = 0
        for character in rank_fen:
            # make sure every character is valid
            if character.isdigit():
                file_count += int(character)
            elif character in FEN_TO_PIECE:
                file_count += 1
            else:
                # immediately invalidate if the character is anything else
                return False

        # make sure you are creating a correctly sized board
        if file_count != BOARD_SIZE:
            return False
    return True


@dataclass
class FENState:
    """
    Data that can be constructed from a FEN string.
    ----

    <board position string><active color><castling rights><en passant square><# half move clock><number turns played>

    ex) The standard starting position has a FEN
    rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1

    Missing trailing fields fall back to the values of a fresh game.
    """

    position: str
    side_to_move: Side
    castling: str = NO_CASTLING
    en_passant: str = "-"
    half_move_clock: str = "0"
    num_turns: str = "1"

    @classmethod
    def from_fen(cls, fen: str) -> Self:
        parts = fen.split()
        if not parts:
            raise InvalidFENError(f"Cannot interpret supplied string as FEN: {fen!r}")

        position = parts[0]
        # anything but an explicit "b" leaves white to move
        side = Side.BLACK if len(parts) > 1 and parts[1] == "b" else Side.WHITE
        defaults = [NO_CASTLING, "-", "0", "1"]
        castling, en_passant, half_move_clock, num_turns = [
            parts[idx] if len(parts) > idx else default
            for idx, default in enumerate(defaults, start=2)
        ]
        return cls(position, side, castling, en_passant, half_move_clock, num_turns)

    def to_fen(self) -> str:
        active_color = "w" if self.side_to_move == Side.WHITE else "b"
        return f"{self.position} {active_color} {self.castling} {self.en_passant} {self.half_move_clock} {self.num_turns}"

    @property
    def has_castling_rights(self) -> bool:
        return self.castling != NO_CASTLING

    @classmethod
    def starting_position(cls) -> Self:
        return cls.from_fen(STARTING_FEN)
