"""
Standard play between two people at one board.

The GameSession orchestrates a turn: whose piece may move, which piece rule applies, and what the UI gets told.
Moves that break the rules are rejected silently (no exception): the turn simply is not consumed.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Self

from chesstutor.chess.board import Board, Grid
from chesstutor.chess.events import EventSink, NullSink
from chesstutor.chess.fen import FENState
from chesstutor.chess.moves import Move, Moved, MoveOutcome, NoOp, Rejected
from chesstutor.chess.pieces import belongs_to
from chesstutor.chess.rules import is_legal_move
from chesstutor.chess.square import Square
from chesstutor.chess.table import Table
from chesstutor.core.config import TutorSettings
from chesstutor.core.shared_types import PieceKind, RejectReason, Side

_LOGGER = logging.getLogger(__name__)


@dataclass
class GameSession:
    table: Table
    is_over: bool = False

    @classmethod
    def new_game(
        cls,
        sink: Optional[EventSink] = None,
        settings: Optional[TutorSettings] = None,
    ) -> Self:
        """Standard starting position, white to move."""
        return cls._create(Board.default(), Side.WHITE, sink, settings)

    @classmethod
    def from_fen(
        cls,
        fen: str,
        sink: Optional[EventSink] = None,
        settings: Optional[TutorSettings] = None,
    ) -> Self:
        state = FENState.from_fen(fen)
        return cls._create(
            Board.from_fen(state.position), state.side_to_move, sink, settings
        )

    @classmethod
    def _create(
        cls,
        board: Board,
        side: Side,
        sink: Optional[EventSink],
        settings: Optional[TutorSettings],
    ) -> Self:
        settings = settings or TutorSettings()
        table = Table(
            board=board,
            side_to_move=side,
            sink=sink or NullSink(),
            capture_particles=settings.capture_particles,
        )
        table.announce_side()
        return cls(table)

    # --- BOARD SESSION ---
    @property
    def board(self) -> Board:
        return self.table.board

    @property
    def side_to_move(self) -> Side:
        return self.table.side_to_move

    def get_piece(self, square: Square) -> int:
        return self.board.get(square)

    def add_piece(self, side: Side, kind: PieceKind, square: Square) -> None:
        self.board.place(side, kind, square)

    def snapshot(self) -> Grid:
        return self.board.snapshot()

    # --- PLAY ---
    def move_piece(self, from_square: Square, to_square: Square) -> MoveOutcome:
        """
        Attempt to make a move
        -----

        1. the piece must be yours
        2. it must actually go somewhere
        3. you cannot take your own piece
        4. the piece specific rule must allow it

        Only when all of these hold does the board change and the turn pass to the opponent.
        """
        side = self.side_to_move
        piece = self.get_piece(from_square)
        _LOGGER.debug("Attempting to move a: %s at: %s to: %s", piece, from_square, to_square)

        if not belongs_to(piece, side):
            _LOGGER.debug("Player moved a piece that isn't theirs. Didn't count for a turn.")
            return Rejected(RejectReason.NOT_YOUR_PIECE)

        if from_square == to_square:
            _LOGGER.debug("Player 'moved' a piece to the same square. Didn't count for a turn.")
            return NoOp()

        if belongs_to(self.get_piece(to_square), side):
            _LOGGER.debug("Player moved to attack a piece they own. Didn't count for a turn.")
            return Rejected(RejectReason.FRIENDLY_FIRE)

        if not is_legal_move(from_square, to_square, self.board):
            _LOGGER.debug("Illegal move for piece %s", piece)
            return Rejected(RejectReason.ILLEGAL_MOVE)

        return self.move_piece_unconditionally(from_square, to_square)

    def move_piece_unconditionally(self, from_square: Square, to_square: Square) -> Moved:
        """No rules checked. Captures and a taken king are still reported."""
        outcome = self.table.apply_unconditionally(Move(from_square, to_square))
        if outcome.king_taken:
            self.is_over = True
        return outcome
