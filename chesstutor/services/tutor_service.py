"""Orchestration between the requests of the UI, the domain sessions, and the persistence layer."""

import logging
from typing import Optional

from chesstutor.api.models import (
    BoardResponse,
    GuessResponse,
    HintResponse,
    MoveRequest,
    MoveResponse,
    NewGameRequest,
    NewPuzzleRequest,
    PuzzleResponse,
)
from chesstutor.chess.board import Board
from chesstutor.chess.events import (
    DetachableSink,
    Event,
    EventBus,
    EventSink,
    PuzzleSolved,
)
from chesstutor.chess.game import GameSession
from chesstutor.chess.moves import Moved, Rejected
from chesstutor.chess.puzzle import PuzzleRecord, PuzzleSession
from chesstutor.chess.scheduling import Scheduler
from chesstutor.chess.scoring import puzzle_elo_change
from chesstutor.chess.solution import SolutionPlayer
from chesstutor.chess.square import Square
from chesstutor.chess.table import BoardSession
from chesstutor.core.config import TutorSettings
from chesstutor.core.exceptions import RepositoryError, SessionError
from chesstutor.core.models import AttemptModel
from chesstutor.db.repository import PuzzleRepository

_LOGGER = logging.getLogger(__name__)


class TutorService:
    """
    At most one standard game and one puzzle are 'current'. Starting one mode drops the other,
    so the two never share a board.
    """

    def __init__(
        self,
        repository: PuzzleRepository,
        scheduler: Scheduler,
        settings: Optional[TutorSettings] = None,
        sink: Optional[EventSink] = None,
    ) -> None:
        self.repo = repository
        self.scheduler = scheduler
        self.settings = settings or TutorSettings()
        self.events = EventBus()
        if sink is not None:
            self.events.subscribe(sink.notify)
        self.events.subscribe(self._on_event)

        self.current_game: Optional[GameSession] = None
        self.current_puzzle: Optional[PuzzleSession] = None
        self.solution_player: Optional[SolutionPlayer] = None
        self.last_attempt: Optional[AttemptModel] = None
        self._session_sink: Optional[DetachableSink] = None

    @property
    def player_rating(self) -> int:
        rating = self.repo.latest_rating()
        return self.settings.starting_elo if rating is None else rating

    # -- STANDARD GAME --
    def start_game(self, request: NewGameRequest) -> BoardResponse:
        sink = self._new_session_sink()
        self.current_puzzle = None
        self.solution_player = None
        self.current_game = (
            GameSession.from_fen(request.starting_fen, sink, self.settings)
            if request.starting_fen
            else GameSession.new_game(sink, self.settings)
        )
        return self._board_response(self.current_game)

    def move(self, request: MoveRequest) -> MoveResponse:
        game = self._require_game()
        outcome = game.move_piece(
            Square.from_algebraic(request.from_square),
            Square.from_algebraic(request.to_square),
        )
        response = MoveResponse(
            state=self._board_response(game),
            moved=isinstance(outcome, Moved),
        )
        if isinstance(outcome, Moved):
            response.captured = outcome.captured
            response.king_taken = outcome.king_taken
        elif isinstance(outcome, Rejected):
            response.reason = outcome.reason
        return response

    # -- PUZZLES --
    def start_puzzle(self, request: NewPuzzleRequest) -> PuzzleResponse:
        model = (
            self.repo.get_puzzle(request.puzzle_id)
            if request.puzzle_id
            else self.repo.random_puzzle()
        )
        if model is None:
            raise RepositoryError(
                f"Puzzle with puzzle_id={request.puzzle_id!r} not found."
                if request.puzzle_id
                else "No playable puzzle available."
            )

        record = PuzzleRecord.from_model(model)
        self.current_game = None
        self.solution_player = None
        self.last_attempt = None
        self.current_puzzle = PuzzleSession.from_record(
            record, self.scheduler, self._new_session_sink(), self.settings
        )
        return self._puzzle_response(self.current_puzzle)

    def guess(self, request: MoveRequest) -> GuessResponse:
        puzzle = self._require_puzzle()
        result = puzzle.make_guess(
            Square.from_algebraic(request.from_square),
            Square.from_algebraic(request.to_square),
        )
        response = GuessResponse(
            result=result,
            current_step=puzzle.current_step,
            solved=puzzle.is_solved(),
            reason=puzzle.last_rejection,
        )
        if puzzle.is_solved() and self.last_attempt is not None:
            response.elo_change = self.last_attempt.elo_change
            response.rating = self.last_attempt.rating_after
        return response

    def hint(self) -> HintResponse:
        hint = self._require_puzzle().request_hint()
        if hint is None:
            return HintResponse()
        return HintResponse(from_square=hint.square.to_algebraic())

    def hint_move(self) -> HintResponse:
        hint = self._require_puzzle().request_hint_move()
        if hint is None:
            return HintResponse()
        return HintResponse(
            from_square=hint.from_square.to_algebraic(),
            to_square=hint.to_square.to_algebraic(),
        )

    def play_solution(self) -> None:
        """Let the puzzle play itself out. Scored as a puzzle solved with help."""
        puzzle = self._require_puzzle()
        if self.solution_player is None:
            self.solution_player = SolutionPlayer(puzzle, self.scheduler, self.settings)
        self.solution_player.start()

    def puzzle_state(self) -> PuzzleResponse:
        return self._puzzle_response(self._require_puzzle())

    # -- SHARED --
    def board(self) -> BoardResponse:
        session: Optional[BoardSession] = self.current_puzzle or self.current_game
        if session is None:
            raise SessionError("No game or puzzle in progress.")
        return self._board_response(session)

    # -- Internal helpers --
    def _on_event(self, event: Event) -> None:
        if not isinstance(event, PuzzleSolved) or self.current_puzzle is None:
            return
        # every puzzle is scored once
        if self.current_puzzle.is_solved() and self.last_attempt is None:
            self._score_puzzle(self.current_puzzle)

    def _score_puzzle(self, puzzle: PuzzleSession) -> None:
        if puzzle.record is None:
            return
        rating = self.player_rating
        earned = puzzle_elo_change(rating, puzzle, self.settings.elo_k_factor)
        attempt = AttemptModel(
            puzzle_id=puzzle.record.puzzle_id,
            hint_used=puzzle.hint_used,
            elo_change=earned,
            rating_after=rating + earned,
        )
        self.repo.record_attempt(attempt)
        self.last_attempt = attempt
        _LOGGER.info(
            "Solved puzzle %s: %+d Elo (total %s)",
            attempt.puzzle_id,
            earned,
            attempt.rating_after,
        )

    def _new_session_sink(self) -> DetachableSink:
        """The replaced session keeps its scheduled calls, but nothing it does reaches the listeners anymore."""
        if self._session_sink is not None:
            self._session_sink.detach()
        self._session_sink = DetachableSink(self.events)
        return self._session_sink

    def _require_game(self) -> GameSession:
        if self.current_game is None:
            raise SessionError("No game in progress. Start a game first.")
        return self.current_game

    def _require_puzzle(self) -> PuzzleSession:
        if self.current_puzzle is None:
            raise SessionError("No puzzle in progress. Start a puzzle first.")
        return self.current_puzzle

    def _board_response(self, session: BoardSession) -> BoardResponse:
        snapshot = session.snapshot()
        return BoardResponse(
            board=snapshot,
            side_to_move=session.side_to_move,
            fen=Board(snapshot).to_fen(),
        )

    def _puzzle_response(self, puzzle: PuzzleSession) -> PuzzleResponse:
        # only puzzles created from a record reach the service
        assert puzzle.record is not None
        return PuzzleResponse(
            puzzle_id=puzzle.record.puzzle_id,
            rating=puzzle.record.rating,
            themes=puzzle.record.themes,
            current_step=puzzle.current_step,
            total_steps=puzzle.total_steps,
            state=self._board_response(puzzle),
        )
