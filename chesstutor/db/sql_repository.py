"""Implementation of (Puzzle)Repository using SQLAlchemy"""

import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from chesstutor.chess.puzzle import is_valid_puzzle_line
from chesstutor.core.models import AttemptModel, PuzzleId, PuzzleModel
from chesstutor.db.schema import DBAttempt, DBPuzzle

_LOGGER = logging.getLogger(__name__)


class SQLPuzzleRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_puzzle(self, puzzle_id: PuzzleId) -> PuzzleModel | None:
        """Get puzzle by ID, if record exists."""
        puzzle_db = self._fetch_puzzle(puzzle_id)
        if puzzle_db:
            return self._to_model(puzzle_db)
        return None

    def add_puzzles(self, puzzles: list[PuzzleModel]) -> int:
        """Store new puzzles. Puzzles whose ID is already known are skipped."""
        added = 0
        for puzzle in puzzles:
            if self._fetch_puzzle(puzzle.puzzle_id) is not None:
                _LOGGER.debug("Puzzle %s already stored", puzzle.puzzle_id)
                continue
            self.db.add(self._to_db(puzzle))
            added += 1
        self.db.commit()
        return added

    def random_puzzle(self) -> PuzzleModel | None:
        query = (
            select(DBPuzzle)
            .where(DBPuzzle.is_playable.is_(True))
            .order_by(func.random())
            .limit(1)
        )
        puzzle_db = self.db.scalar(query)
        return self._to_model(puzzle_db) if puzzle_db else None

    def record_attempt(self, attempt: AttemptModel) -> None:
        self.db.add(
            DBAttempt(
                puzzle_id=attempt.puzzle_id,
                hint_used=attempt.hint_used,
                elo_change=attempt.elo_change,
                rating_after=attempt.rating_after,
            )
        )
        self.db.commit()

    def latest_rating(self) -> int | None:
        query = select(DBAttempt.rating_after).order_by(DBAttempt.id.desc()).limit(1)
        return self.db.scalar(query)

    def _fetch_puzzle(self, puzzle_id: PuzzleId) -> DBPuzzle | None:
        query = select(DBPuzzle).where(DBPuzzle.id == puzzle_id)
        return self.db.scalar(query)

    def _to_db(self, puzzle: PuzzleModel) -> DBPuzzle:
        return DBPuzzle(
            id=puzzle.puzzle_id,
            fen=puzzle.fen,
            moves=puzzle.moves,
            rating=puzzle.rating,
            rating_deviation=puzzle.rating_deviation,
            popularity=puzzle.popularity,
            play_count=puzzle.play_count,
            themes=puzzle.themes,
            extra=puzzle.extra,
            is_playable=is_valid_puzzle_line(puzzle.to_csv()),
        )

    def _to_model(self, puzzle_db: DBPuzzle) -> PuzzleModel:
        """Convert SQLAlchemy model to data transfer model."""
        return PuzzleModel(
            puzzle_id=puzzle_db.id,
            fen=puzzle_db.fen,
            moves=puzzle_db.moves,
            rating=puzzle_db.rating,
            rating_deviation=puzzle_db.rating_deviation,
            popularity=puzzle_db.popularity,
            play_count=puzzle_db.play_count,
            themes=puzzle_db.themes,
            extra=list(puzzle_db.extra),
        )
