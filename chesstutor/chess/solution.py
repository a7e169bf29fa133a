"""
Playing out the solution of a puzzle, one move at a time.

Every step: show the next move as a hint, play it a moment later, pause, repeat.
The player's moves go through `make_guess` like any other guess, so the opponent replies are scheduled by the puzzle itself.
"""

import logging
from typing import Optional

from chesstutor.chess.events import HintPair, SolutionFinished
from chesstutor.chess.moves import Move
from chesstutor.chess.puzzle import PuzzleSession
from chesstutor.chess.scheduling import Scheduler, run_callback
from chesstutor.core.config import TutorSettings
from chesstutor.core.shared_types import GuessResult

_LOGGER = logging.getLogger(__name__)


class SolutionPlayer:
    def __init__(
        self,
        puzzle: PuzzleSession,
        scheduler: Scheduler,
        settings: Optional[TutorSettings] = None,
    ) -> None:
        self.puzzle = puzzle
        self.scheduler = scheduler
        self.settings = settings or TutorSettings()
        self.running = False

    def start(self) -> None:
        if self.running:
            return
        self.running = True
        # being shown the solution counts as using a hint
        self.puzzle.hint_used = True
        self._step()

    def _step(self) -> None:
        if self.puzzle.is_solved():
            self.scheduler.schedule(self.settings.solution_finish_delay_ms, self._finish)
            return

        if self.puzzle.reply_pending:
            # the opponent has not answered yet: look again after a short pause
            self.scheduler.schedule(self.settings.solution_pause_ms, self._step)
            return

        move = self.puzzle.peek_next_move()
        self.puzzle.table.sink.notify(HintPair(move.from_square, move.to_square))
        self.scheduler.schedule(
            self.settings.solution_step_delay_ms, run_callback(self._play, move)
        )

    def _play(self, move: Move) -> None:
        result = self.puzzle.make_guess(move.from_square, move.to_square)
        if result == GuessResult.INCORRECT:
            _LOGGER.warning(
                "Solution move %s was not accepted: %s", move, self.puzzle.last_rejection
            )
        self.scheduler.schedule(self.settings.solution_pause_ms, self._step)

    def _finish(self) -> None:
        self.running = False
        self.puzzle.table.sink.notify(SolutionFinished())
