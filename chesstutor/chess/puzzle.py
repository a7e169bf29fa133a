"""
Puzzle mode.

A puzzle is a position plus the moves that solve it. The first scripted move is the opponent's, played as soon as
the puzzle is loaded. After that the player has to find every other move; each correct guess is answered
by the next scripted opponent move a moment later.

States: waiting for the guess of step i (0 <= i <= number of moves). Step == number of moves means solved.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Self

from chesstutor.chess.board import Board, Grid
from chesstutor.chess.events import EventSink, HintPair, HintSingle, NullSink, PuzzleSolved
from chesstutor.chess.fen import NO_CASTLING, FENState, is_valid_position
from chesstutor.chess.moves import Move, parse_move_list
from chesstutor.chess.scheduling import Scheduler, run_callback
from chesstutor.chess.square import Square
from chesstutor.chess.table import Table
from chesstutor.core.config import TutorSettings
from chesstutor.core.exceptions import (
    InvalidSquareError,
    MalformedPuzzleRecordError,
    PuzzleStateError,
)
from chesstutor.core.models import PuzzleModel
from chesstutor.core.shared_types import GuessResult, RejectReason, Side

_LOGGER = logging.getLogger(__name__)

# The full record parser reads up to the themes and requires at least one field after them (the game url).
MIN_RECORD_FIELDS = 9
# The filter only looks at the FEN (field 1) and the themes (field 7).
MIN_FILTER_FIELDS = 8
EN_PASSANT_THEME = "enpassant"


def is_valid_puzzle_line(line: str) -> bool:
    """
    Can the engine play this puzzle?
    ----

    The rules do not implement castling nor en passant, so skip:
    * puzzles whose FEN still has castling rights
    * puzzles tagged with the en passant theme
    """
    parts = line.split(",")
    if len(parts) < MIN_FILTER_FIELDS:
        return False

    fen_fields = parts[1].split()
    if len(fen_fields) < 3 or fen_fields[2] != NO_CASTLING:
        return False

    return EN_PASSANT_THEME not in parts[7].lower()


def _to_int(value: str, name: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise MalformedPuzzleRecordError(
            f"Puzzle field {name!r} should be a number, got: {value!r}"
        ) from None


@dataclass
class PuzzleRecord:
    """
    One line of the puzzle database:

    <id>,<FEN>,<moves>,<rating>,<rating deviation>,<popularity>,<number of plays>,<themes>,<game url>[,<opening tags>]
    """

    puzzle_id: str
    fen: str
    moves: list[Move]
    rating: int
    rating_deviation: int = 0
    popularity: int = 0
    play_count: int = 0
    themes: list[str] = field(default_factory=list)
    extra: list[str] = field(default_factory=list)

    @classmethod
    def from_csv(cls, line: str) -> Self:
        parts = line.strip().split(",")
        if len(parts) < MIN_RECORD_FIELDS:
            raise MalformedPuzzleRecordError(
                f"Puzzle record needs at least {MIN_RECORD_FIELDS} comma separated fields, got {len(parts)}."
            )

        puzzle_id, fen, moves, rating, deviation, popularity, plays, themes = parts[:8]
        if not fen.strip():
            raise MalformedPuzzleRecordError(f"Puzzle {puzzle_id!r} has no position.")
        if not is_valid_position(FENState.from_fen(fen).position):
            raise MalformedPuzzleRecordError(
                f"Puzzle {puzzle_id!r} has an unreadable position: {fen!r}"
            )

        try:
            solution = parse_move_list(moves)
        except InvalidSquareError as exc:
            raise MalformedPuzzleRecordError(
                f"Puzzle {puzzle_id!r} has an unreadable move list: {moves!r}"
            ) from exc
        if not solution:
            raise MalformedPuzzleRecordError(f"Puzzle {puzzle_id!r} has no moves.")

        return cls(
            puzzle_id=puzzle_id,
            fen=fen,
            moves=solution,
            rating=_to_int(rating, "rating"),
            rating_deviation=_to_int(deviation or "0", "rating deviation"),
            popularity=_to_int(popularity or "0", "popularity"),
            play_count=_to_int(plays or "0", "number of plays"),
            themes=themes.split(),
            extra=parts[8:],
        )

    @classmethod
    def from_model(cls, model: PuzzleModel) -> Self:
        return cls.from_csv(model.to_csv())

    def to_model(self) -> PuzzleModel:
        return PuzzleModel(
            puzzle_id=self.puzzle_id,
            fen=self.fen,
            moves=" ".join(move.to_coordinates() for move in self.moves),
            rating=self.rating,
            rating_deviation=self.rating_deviation,
            popularity=self.popularity,
            play_count=self.play_count,
            themes=" ".join(self.themes),
            extra=list(self.extra),
        )


class PuzzleSession:
    """
    Scripted replay of a puzzle's solution.

    Unlike a GameSession, no piece rules are checked: a move is accepted if and only if it is the next scripted move.
    """

    def __init__(
        self,
        table: Table,
        solution: list[Move],
        scheduler: Scheduler,
        settings: Optional[TutorSettings] = None,
        record: Optional[PuzzleRecord] = None,
    ) -> None:
        self.table = table
        self.scheduler = scheduler
        self.settings = settings or TutorSettings()
        self.record = record
        self.hint_used = False
        self.last_rejection: Optional[RejectReason] = None
        self._solution = list(solution)
        self._current_step = 0
        self._reply_pending = False
        # bumped whenever the solution is replaced, so replies scheduled for the old one do nothing
        self._generation = 0

    # --- CREATION ---
    @classmethod
    def from_record(
        cls,
        record: PuzzleRecord,
        scheduler: Scheduler,
        sink: Optional[EventSink] = None,
        settings: Optional[TutorSettings] = None,
    ) -> Self:
        """Load the position and play the opponent's first move straight away."""
        settings = settings or TutorSettings()
        state = FENState.from_fen(record.fen)
        table = Table(
            board=Board.from_fen(state.position),
            side_to_move=state.side_to_move,
            sink=sink or NullSink(),
            capture_particles=settings.capture_particles,
        )
        _LOGGER.debug(
            "New puzzle %s, first move goes to %s:\n%s",
            record.puzzle_id,
            state.side_to_move.name,
            table.board.render(),
        )
        puzzle = cls(table, record.moves, scheduler, settings, record)
        puzzle._play_opponent_move()
        table.announce_side()
        return puzzle

    @classmethod
    def from_csv(
        cls,
        line: str,
        scheduler: Scheduler,
        sink: Optional[EventSink] = None,
        settings: Optional[TutorSettings] = None,
    ) -> Self:
        """Raises MalformedPuzzleRecordError before anything is set up if the line cannot be parsed."""
        return cls.from_record(PuzzleRecord.from_csv(line), scheduler, sink, settings)

    @classmethod
    def from_position(
        cls,
        matrix: Grid,
        solution: list[Move],
        scheduler: Scheduler,
        sink: Optional[EventSink] = None,
        settings: Optional[TutorSettings] = None,
        side_to_move: Side = Side.WHITE,
    ) -> Self:
        """Start from a raw board. Nothing is played yet: the first guess is compared against solution[0]."""
        settings = settings or TutorSettings()
        board = Board.empty()
        board.load_raw(matrix)
        table = Table(
            board=board,
            side_to_move=side_to_move,
            sink=sink or NullSink(),
            capture_particles=settings.capture_particles,
        )
        return cls(table, solution, scheduler, settings)

    def set_solution_moves(self, solution: list[Move]) -> None:
        self._solution = list(solution)
        self._current_step = 0
        self._reply_pending = False
        self._generation += 1

    # --- BOARD SESSION ---
    @property
    def board(self) -> Board:
        return self.table.board

    @property
    def side_to_move(self) -> Side:
        return self.table.side_to_move

    def get_piece(self, square: Square) -> int:
        return self.board.get(square)

    def snapshot(self) -> Grid:
        return self.board.snapshot()

    # --- STATE ---
    @property
    def current_step(self) -> int:
        return self._current_step

    @property
    def total_steps(self) -> int:
        return len(self._solution)

    @property
    def solution(self) -> list[Move]:
        return list(self._solution)

    @property
    def rating(self) -> Optional[int]:
        return self.record.rating if self.record else None

    @property
    def reply_pending(self) -> bool:
        return self._reply_pending

    def is_solved(self) -> bool:
        return self._current_step >= len(self._solution)

    def peek_next_move(self) -> Move:
        if self.is_solved():
            raise PuzzleStateError("Puzzle is solved: there is no next move.")
        return self._solution[self._current_step]

    # --- PLAY ---
    def make_guess(self, from_square: Square, to_square: Square) -> GuessResult:
        """
        Compare the guess against the next scripted move.
        -----

        correct and last move --> solved
        correct otherwise --> the opponent's reply gets scheduled. Until it has been played, every guess is rejected.
        """
        if self.is_solved():
            return self._reject(RejectReason.PUZZLE_SOLVED)

        if self._reply_pending:
            return self._reject(RejectReason.REPLY_PENDING)

        expected = self._solution[self._current_step]
        if Move(from_square, to_square) != expected:
            _LOGGER.debug("Wrong move. Expected: %s", expected)
            return self._reject(RejectReason.WRONG_MOVE)

        self.last_rejection = None
        self.table.apply_unconditionally(expected)
        self._current_step += 1
        _LOGGER.debug("Correct move, step %s of %s", self._current_step, self.total_steps)

        if self.is_solved():
            _LOGGER.info("Beat the puzzle %s", self.record.puzzle_id if self.record else "")
            self.table.sink.notify(PuzzleSolved())
            return GuessResult.SOLVED

        self._reply_pending = True
        self.scheduler.schedule(
            self.settings.opponent_reply_delay_ms,
            run_callback(self._reply, self._generation),
        )
        return GuessResult.CORRECT

    def _reject(self, reason: RejectReason) -> GuessResult:
        self.last_rejection = reason
        return GuessResult.INCORRECT

    def _reply(self, generation: int) -> None:
        if generation != self._generation:
            _LOGGER.debug("Dropping the reply scheduled for a replaced solution")
            return
        self._reply_pending = False
        self._play_opponent_move()

    def _play_opponent_move(self) -> None:
        """Play the scripted move at the cursor and advance it, in one go."""
        move = self._solution[self._current_step]
        _LOGGER.debug("Opponent will move %s", move)
        self.table.apply_unconditionally(move)
        self._current_step += 1

    # --- HINTS ---
    def request_hint(self) -> Optional[HintSingle]:
        """Reveal which piece to move."""
        move = self._hinted_move()
        if move is None:
            return None
        hint = HintSingle(move.from_square)
        self.table.sink.notify(hint)
        return hint

    def request_hint_move(self) -> Optional[HintPair]:
        """Reveal the whole move."""
        move = self._hinted_move()
        if move is None:
            return None
        hint = HintPair(move.from_square, move.to_square)
        self.table.sink.notify(hint)
        return hint

    def _hinted_move(self) -> Optional[Move]:
        """
        The player's next move, or None when there is nothing to reveal.

        Asking after the puzzle is solved still counts as using a hint. While the opponent's reply is pending,
        the next scripted move is the opponent's own: nothing is revealed and the hint does not count.
        """
        if self._reply_pending:
            return None
        self.hint_used = True
        if self.is_solved():
            return None
        return self._solution[self._current_step]
