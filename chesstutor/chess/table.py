"""
The part both a standard game and a puzzle share: a board, whose turn it is, and a channel to tell the UI what happened.

Sessions hold a `Table` rather than inheriting from one another. The UI talks to either session through `BoardSession`.
"""

import logging
from dataclasses import dataclass, field
from typing import Protocol

from chesstutor.chess.board import Board, Grid
from chesstutor.chess.events import (
    BoardUpdated,
    CaptureOccurred,
    EventSink,
    GameWon,
    NullSink,
    TurnChanged,
)
from chesstutor.chess.moves import Move, Moved
from chesstutor.chess.pieces import EMPTY
from chesstutor.chess.square import BOARD_SIZE, Square
from chesstutor.core.config import TutorSettings
from chesstutor.core.shared_types import Side

_LOGGER = logging.getLogger(__name__)


class BoardSession(Protocol):
    """What the presentation layer needs from either kind of session."""

    @property
    def side_to_move(self) -> Side: ...

    def get_piece(self, square: Square) -> int: ...

    def snapshot(self) -> Grid: ...


def capture_position(square: Square) -> tuple[float, float]:
    """Centre of the square in rendering coordinates (origin at the bottom left corner of a1)."""
    return square.col + 0.5, (BOARD_SIZE - square.row) - 0.5


@dataclass
class Table:
    board: Board
    side_to_move: Side = Side.WHITE
    sink: EventSink = field(default_factory=NullSink)
    capture_particles: int = TutorSettings().capture_particles

    def switch_side(self) -> None:
        self.side_to_move = self.side_to_move.opponent
        _LOGGER.debug("setting to player: %s", self.side_to_move.name)
        self.sink.notify(TurnChanged(self.side_to_move))

    def announce_side(self) -> None:
        self.sink.notify(TurnChanged(self.side_to_move))

    def apply_unconditionally(self, move: Move) -> Moved:
        """
        Make the move without checking any rule.
        ----

        Callers only use this after establishing the move is allowed (legal in a game, scripted in a puzzle).

        1. a piece standing on the destination gets captured --> tell the UI where
        2. update the board
        3. hand the turn to the other side
        4. a captured king ends the game
        5. always finish with a board update
        """
        origin_code = self.board.get(move.from_square)
        target_code = self.board.get(move.to_square)
        is_capture = target_code != EMPTY and origin_code != EMPTY
        if is_capture:
            x, y = capture_position(move.to_square)
            self.sink.notify(CaptureOccurred(x, y, self.capture_particles))
            _LOGGER.debug("capture on %s", move.to_square)

        captured = self.board.move(move.from_square, move.to_square)
        _LOGGER.debug("board after %s:\n%s", move, self.board.render())
        self.switch_side()

        # moving an empty square wipes the destination, but nothing was captured
        outcome = Moved.from_captured(captured) if is_capture else Moved()
        if outcome.king_taken:
            _LOGGER.info("king captured on %s", move.to_square)
            self.sink.notify(GameWon())
        self.sink.notify(BoardUpdated())
        return outcome
